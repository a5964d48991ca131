"""
Description:
    Dynamic trajectory lengths: u-turn search and the longest batch.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1

Longest batch (empirical HMC): for a fixed τ, count the leapfrog steps
taken before the trajectory starts heading back toward its start. The
empirical distribution of those counts is what a step size policy reads.
"""
import logging
import numpy as np
from typing import Tuple

from uturnhmc.datatypes import BatchOutput
from uturnhmc.integrator import LeapFrog, draw_momentum
from uturnhmc.acceptance import log_acceptance_prob, metropolis_accept
from uturnhmc.rng import RNG

logger = logging.getLogger(__name__)


def is_uturn(initial_q: np.ndarray, array: np.ndarray, dim: int) -> bool:
    """
    (q - q0) . p < 0 means the trajectory is heading back.

    NaN (diverged trajectory) counts as a u-turn.
    """
    with np.errstate(over="ignore", invalid="ignore"):
        out = float(np.dot(array[dim:2 * dim] - initial_q, array[:dim]))
    if np.isnan(out):
        return True
    return out < 0


def _search(lf: LeapFrog, l0: int, τ: float, max_steps: int) -> Tuple[int, bool]:
    if max_steps < 1:
        raise ValueError(f"max_steps must be >= 1, got {max_steps}")
    init_q = lf.variables(lf.pq)
    checkpoint = None
    l = 0
    turned = is_uturn(init_q, lf.pq, lf.dim)
    while not turned and l < max_steps:
        l += 1
        lf.steps(1, τ)
        if l == l0:
            checkpoint = lf.snapshot()
        turned = is_uturn(init_q, lf.pq, lf.dim)
    if checkpoint is not None:
        lf.load(checkpoint)
    return l, not turned


def longest_step(
        lf: LeapFrog,
        l0: int,
        τ: float,
        max_steps: int = 1000
) -> int:
    """
    Number of single leapfrog steps from the working buffer until a u-turn.

    The buffer is checkpointed at step l0; on return it holds that
    checkpoint, or the final state if the u-turn came before step l0.
    The search stops after max_steps steps even without a u-turn.

    Returns:
        l, the number of steps taken
    """
    l, _ = _search(lf, l0, τ, max_steps)
    return l


def _longest_batch_step(lf, l0, params, τ, rng, max_steps):
    draw_momentum(params, lf.dim, rng)
    lf.load(params)
    l, capped = _search(lf, l0, τ, max_steps)
    if capped:
        logger.warning(
            "u-turn search hit max_steps=%d at τ=%g; rejecting", max_steps, τ
        )
        return params.copy(), l, False, True
    if l < l0:
        lf.steps(l0 - l, τ)
    a = log_acceptance_prob(params, lf.pq, lf.dim)
    if metropolis_accept(a, rng):
        return lf.snapshot(), l, True, False
    return params.copy(), l, False, False


def longest_batch_step(
        lf: LeapFrog,
        l0: int,
        params: np.ndarray,
        τ: float,
        rng: RNG,
        max_steps: int = 1000
) -> Tuple[np.ndarray, int]:
    """
    Single step of the longest batch algorithm.

    Draws fresh momentum into params, searches for the u-turn length l,
    completes the trajectory to l0 steps when l < l0 and makes a
    Metropolis decision against params.

    Args:
        lf: Integrator owning the working buffer
        l0: Target trajectory length
        params: Current chain state; its momentum is overwritten
        τ: Step size
        rng: Random source
        max_steps: Cap on the u-turn search

    Returns:
        (state, l) - state is a copy of the proposal if accepted, else of
        params; l is reported either way
    """
    state, l, _, _ = _longest_batch_step(lf, l0, params, τ, rng, max_steps)
    return state, l


def longest_batch(
        lf: LeapFrog,
        params: np.ndarray,
        l0: int,
        k: int,
        τ: float,
        rng: RNG,
        max_steps: int = 1000
) -> BatchOutput:
    """
    Run k longest batch steps, each fed the previous state.

    Returns:
        BatchOutput with the k observed lengths and the final state
    """
    if k < 0:
        raise ValueError(f"batch size must be >= 0, got {k}")
    state = params.copy()
    lengths = np.zeros(k, dtype=int)
    n_accepted = 0
    n_capped = 0
    for i in range(k):
        state, l, accepted, capped = _longest_batch_step(
            lf, l0, state, τ, rng, max_steps
        )
        lengths[i] = l
        n_accepted += accepted
        n_capped += capped

    if k > 0:
        logger.debug(
            "longest batch τ=%g l0=%d k=%d: mean length %.2f, %d accepted, %d capped",
            τ, l0, k, lengths.mean(), n_accepted, n_capped,
        )
        if n_accepted == 0:
            logger.warning("longest batch at τ=%g rejected all %d proposals", τ, k)
    return BatchOutput(lengths=lengths, params=state,
                       n_accepted=n_accepted, n_capped=n_capped)

