"""
Description:
    HMC sampling driver: fixed-length transitions and longest batch.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import logging
import numpy as np
from typing import Tuple

from uturnhmc.datatypes import (
    DensityFunction, SamplerConfig, SamplerOutput, BatchOutput, ParameterState
)
from uturnhmc.integrator import LeapFrog, draw_momentum
from uturnhmc.acceptance import log_acceptance_prob, metropolis_accept
from uturnhmc.rng import RNG
from uturnhmc import uturn

logger = logging.getLogger(__name__)


class HMCSampler:
    """
    Single-chain HMC driver.

    Owns one LeapFrog (and so one working buffer). Params arrays passed
    in and returned are the caller's; the working buffer never escapes.
    For several chains, build one HMCSampler and one RNG per chain.
    """

    def __init__(self, density: DensityFunction, config: SamplerConfig):
        self.lf = LeapFrog(density)
        self.dim = self.lf.dim
        self.config = config

    def initialize(self, rng: RNG, position: np.ndarray = None) -> np.ndarray:
        """
        Fresh params array whose potential matches its q.

        Args:
            rng: Random source
            position: Initial q; drawn from N(0, I) if None

        Returns:
            New array [p, q, U(q)] with p ~ N(0, I)
        """
        pq = self.lf.pq
        pq.fill(0.0)
        if position is None:
            pq[self.dim:2 * self.dim] = rng.standard_normal(self.dim)
        else:
            position = np.asarray(position, dtype=np.float64)
            if position.shape != (self.dim,):
                raise ValueError(
                    f"expected position of shape ({self.dim},), got {position.shape}"
                )
            pq[self.dim:2 * self.dim] = position
        self.lf.sync_density()
        array = self.lf.snapshot()
        draw_momentum(array, self.dim, rng)
        return array

    def _step(self, params, rng, n_steps, τ) -> Tuple[float, bool]:
        draw_momentum(params, self.dim, rng)
        self.lf.load(params)
        self.lf.steps(n_steps, τ)
        a = log_acceptance_prob(params, self.lf.pq, self.dim)
        accepted = metropolis_accept(a, rng)
        if accepted:
            self.lf.store(params)
        return a, accepted

    def step(
        self,
        params: np.ndarray,
        rng: RNG,
        n_steps: int = None,
        τ: float = None
    ) -> float:
        """
        Single fixed-length HMC transition on params, in place.

        p in params is always replaced by the fresh draw; q and the
        potential only change if the proposal is accepted.

        Returns:
            Log acceptance probability of the proposal
        """
        n_steps = self.config.N if n_steps is None else n_steps
        τ = self.config.τ if τ is None else τ
        a, _ = self._step(params, rng, n_steps, τ)
        return a

    def try_stepping(self, params: np.ndarray, τ: float = None) -> float:
        """Log acceptance probability of one step at τ; params untouched"""
        return self.lf.try_stepping(params, self.config.τ if τ is None else τ)

    def longest_batch(
        self,
        params: np.ndarray,
        rng: RNG,
        l0: int = None,
        k: int = None,
        τ: float = None
    ) -> BatchOutput:
        """Empirical distribution of u-turn lengths at τ, see uturn.longest_batch"""
        return uturn.longest_batch(
            self.lf,
            params,
            self.config.l0 if l0 is None else l0,
            self.config.k if k is None else k,
            self.config.τ if τ is None else τ,
            rng,
            self.config.max_steps,
        )

    def run_chain(
        self,
        params: np.ndarray,
        n_samples: int,
        rng: RNG
    ) -> SamplerOutput:
        """
        Run n_samples fixed-length transitions from params.

        Args:
            params: Initial state, e.g. from initialize(); updated in place
            n_samples: Number of transitions
            rng: Random source

        Returns:
            SamplerOutput with one position per transition
        """
        samples = np.zeros((n_samples, self.dim))
        log_accept = np.zeros(n_samples)
        accepted = np.zeros(n_samples, dtype=bool)
        for i in range(n_samples):
            log_accept[i], accepted[i] = self._step(
                params, rng, self.config.N, self.config.τ
            )
            samples[i] = ParameterState.from_array(params).q

        accept_rate = float(np.mean(accepted)) if n_samples else float("nan")
        logger.debug(
            "chain of %d samples at τ=%g N=%d: accept rate %.3f",
            n_samples, self.config.τ, self.config.N, accept_rate,
        )
        if n_samples and not accepted.any():
            logger.warning("chain at τ=%g rejected all %d proposals",
                           self.config.τ, n_samples)
        return SamplerOutput(samples=samples, log_accept=log_accept,
                             accepted=accepted, accept_rate=accept_rate)


def extract_positions(output: SamplerOutput) -> np.ndarray:
    """
    Extract position samples from sampler output.

    Returns:
        (n_samples, dim) array of positions
    """
    return output.samples


def compute_accept_rate(output: SamplerOutput) -> float:
    """
    Compute acceptance rate from sampler output.

    Returns:
        Acceptance rate in [0, 1]
    """
    return float(np.mean(output.accepted))
