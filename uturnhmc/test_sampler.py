"""
Tests for the HMC sampling driver.
"""
import logging
import numpy as np
import pytest

from uturnhmc.datatypes import ParameterState, SamplerConfig
from uturnhmc.density import JaxDensity
from uturnhmc.target import gen_gaussian
from uturnhmc.sampler import HMCSampler, extract_positions, compute_accept_rate
from uturnhmc.metrics import cov, maxdiagdiff
from uturnhmc.rng import RNG
from uturnhmc.testing import NaNDensity


def gaussian_sampler(dim: int, cov_matrix=None, **config) -> HMCSampler:
    log_prob = gen_gaussian(dim=dim, cov=cov_matrix)
    return HMCSampler(JaxDensity(log_prob, dim), SamplerConfig(**config))


def test_initialize_satisfies_invariant():
    dim = 3
    sampler = gaussian_sampler(dim, τ=0.1)
    params = sampler.initialize(RNG(seed=0))
    state = ParameterState.from_array(params)

    assert params.shape == (2 * dim + 1,)
    assert np.isclose(state.potential, 0.5 * np.dot(state.q, state.q))
    assert np.all(state.p != 0.0)
    assert not np.shares_memory(params, sampler.lf.pq)


def test_initialize_at_position():
    sampler = gaussian_sampler(2, τ=0.1)
    params = sampler.initialize(RNG(seed=0), position=[1.0, -2.0])
    state = ParameterState.from_array(params)

    assert np.array_equal(state.q, [1.0, -2.0])
    assert np.isclose(state.potential, 2.5)

    with pytest.raises(ValueError):
        sampler.initialize(RNG(seed=0), position=[1.0])


def test_step_updates_in_place():
    sampler = gaussian_sampler(2, τ=0.1, N=10)
    rng = RNG(seed=2)
    params = sampler.initialize(rng)
    before = params.copy()

    a = sampler.step(params, rng)
    assert a <= 0.0
    assert not np.array_equal(params[:2], before[:2])
    state = ParameterState.from_array(params)
    assert np.isclose(state.potential, 0.5 * np.dot(state.q, state.q))


def test_rejection_preserves_position():
    """NaN gradients: momentum is redrawn, q and the potential stay put"""
    dim = 2
    sampler = HMCSampler(NaNDensity(dim), SamplerConfig(τ=0.1, N=5))
    params = np.array([0.0, 0.0, 0.4, -1.1, 0.7])
    rng = RNG(seed=9)

    for _ in range(5):
        p_before = params[:dim].copy()
        a = sampler.step(params, rng)
        assert a == -np.inf
        assert np.array_equal(params[dim:], [0.4, -1.1, 0.7])
        assert not np.array_equal(params[:dim], p_before)


def test_try_stepping_does_not_touch_params():
    sampler = gaussian_sampler(2, τ=0.5)
    params = sampler.initialize(RNG(seed=1))
    before = params.copy()

    assert sampler.try_stepping(params) <= 0.0
    assert sampler.try_stepping(params, τ=0.01) <= 0.0
    assert np.array_equal(params, before)


def test_longest_batch_uses_config():
    sampler = gaussian_sampler(2, τ=0.2, l0=3, k=7)
    rng = RNG(seed=4)
    params = sampler.initialize(rng)
    out = sampler.longest_batch(params, rng)

    assert len(out.lengths) == 7
    assert len(sampler.longest_batch(params, rng, k=2).lengths) == 2


def test_same_seed_same_chain():
    outputs = []
    for _ in range(2):
        sampler = gaussian_sampler(2, τ=0.2, N=5)
        rng = RNG(seed=123)
        params = sampler.initialize(rng)
        outputs.append(sampler.run_chain(params, 20, rng))

    assert np.array_equal(outputs[0].samples, outputs[1].samples)
    assert np.array_equal(outputs[0].log_accept, outputs[1].log_accept)


def test_chain_recovers_covariance():
    dim = 2
    Σ = np.array([[1.0, 0.5], [0.5, 2.0]])
    sampler = gaussian_sampler(dim, cov_matrix=Σ, τ=0.2, N=8)
    rng = RNG(seed=2026)
    params = sampler.initialize(rng)

    output = sampler.run_chain(params, 1500, rng)
    samples = extract_positions(output)
    print(f"Accept rate: {output.accept_rate:.3f}")
    print(f"Sample cov:\n{cov(samples)}")

    assert samples.shape == (1500, dim)
    assert output.accept_rate == compute_accept_rate(output)
    assert output.accept_rate > 0.8
    assert np.all(np.abs(np.mean(samples, axis=0)) < 0.25)
    assert maxdiagdiff(cov(samples), Σ) < 0.4


def test_all_rejecting_chain_warns(caplog):
    sampler = HMCSampler(NaNDensity(1), SamplerConfig(τ=0.1, N=2))
    params = np.array([0.0, 0.5, 1.0])

    with caplog.at_level(logging.WARNING, logger="uturnhmc.sampler"):
        output = sampler.run_chain(params, 4, RNG(seed=0))

    assert output.accept_rate == 0.0
    assert np.all(output.samples == 0.5)
    assert "rejected all 4 proposals" in caplog.text


def test_try_stepping_between_steps_leaves_chain_unchanged():
    """try_stepping reuses the working buffer; the next step reloads it"""
    outputs = []
    for try_first in (False, True):
        sampler = gaussian_sampler(2, τ=0.2, N=6)
        rng = RNG(seed=31)
        params = sampler.initialize(rng)
        if try_first:
            sampler.try_stepping(params, τ=0.9)
        sampler.step(params, rng)
        outputs.append(params)

    assert np.array_equal(outputs[0], outputs[1])
