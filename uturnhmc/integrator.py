"""
Description:
    In-place leapfrog integrator over the flat params buffer.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import numpy as np
from uturnhmc.datatypes import DensityFunction, potential_index, buffer_size
from uturnhmc.density import gradient_vector
from uturnhmc.acceptance import log_acceptance_prob

class LeapFrog:
    """
    Leapfrog integrator owning one working buffer per chain.

    Does p-first. A trajectory of l steps is

        half p, full q, (full p, full q) x (l-1), half p

    The potential slot of the buffer is rewritten after every change of q,
    so it always matches -log π(q). Callers only see copies of the buffer.
    """

    def __init__(self, density: DensityFunction):
        self.density = density
        self.dim = density.dimension
        self.potential_index = potential_index(self.dim)
        self.pq = np.zeros(buffer_size(self.dim)) # working buffer [p, q, U]
        self.q_buf = np.zeros(self.dim) # scratch handed to the density

    # Primitives
    def new_qs(self, τ: float) -> None:
        """Full position step: q += τ p"""
        n = self.dim
        with np.errstate(over="ignore", invalid="ignore"):
            self.pq[n:2 * n] += τ * self.pq[:n]

    def full_ps(self, τ: float) -> None:
        """Momentum step: p += τ ∂ log π/∂q at the current q"""
        self.copy_qs_and_update_density()
        with np.errstate(over="ignore", invalid="ignore"):
            self.pq[:self.dim] += τ * gradient_vector(self.density)

    def sync_density(self) -> None:
        """Refresh the oracle at q and store U(q) = -log π(q)"""
        self.copy_qs_and_update_density()
        self.pq[self.potential_index] = -self.density.density()

    def copy_qs_and_update_density(self) -> None:
        np.copyto(self.q_buf, self.pq[self.dim:2 * self.dim])
        self.density.update(self.q_buf)

    # Composite steps
    def initial_half_then_full_step(self, τ: float) -> None:
        self.full_ps(τ / 2.0)
        self.new_qs(τ)
        self.sync_density()

    def two_full_steps(self, τ: float) -> None:
        self.full_ps(τ)
        self.new_qs(τ)
        self.sync_density()

    def final_half_step(self, τ: float) -> None:
        self.full_ps(τ / 2.0)
        self.sync_density()

    def steps(self, l: int, τ: float) -> None:
        """
        Perform l leapfrog steps on the working buffer in place.

        Args:
            l: Number of leapfrog steps (>= 1)
            τ: Step size
        """
        if l < 1:
            raise ValueError(f"trajectory length must be >= 1, got {l}")
        self.initial_half_then_full_step(τ)
        for _ in range(l - 1):
            self.two_full_steps(τ)
        self.final_half_step(τ)

    # Buffer copies
    def load(self, params: np.ndarray) -> None:
        """Copy params into the working buffer"""
        if params.shape != self.pq.shape:
            raise ValueError(
                f"expected params of shape {self.pq.shape}, got {params.shape}"
            )
        np.copyto(self.pq, params)

    def store(self, params: np.ndarray) -> None:
        """Copy the working buffer into params"""
        np.copyto(params, self.pq)

    def snapshot(self) -> np.ndarray:
        return self.pq.copy()

    def variables(self, array: np.ndarray) -> np.ndarray:
        """Copy of q out of a params array"""
        return array[self.dim:2 * self.dim].copy()

    def integrate(self, params: np.ndarray, l: int, τ: float) -> np.ndarray:
        """
        Pure l-step trajectory from params.

        Returns:
            New params array; params itself is not modified
        """
        self.load(params)
        self.steps(l, τ)
        return self.snapshot()

    def try_stepping(self, params: np.ndarray, τ: float) -> float:
        """
        Log acceptance probability of a single step at this τ,
        without resampling p or modifying params.

        Runs on the working buffer, not a separate scratch copy: whatever
        pq held before is overwritten. Every trajectory starts with load(),
        so no chain state is lost.
        """
        self.load(params)
        self.initial_half_then_full_step(τ)
        self.final_half_step(τ)
        return log_acceptance_prob(params, self.pq, self.dim)

def draw_momentum(array: np.ndarray, dim: int, rng) -> None:
    """
    Resample momentum from standard Gaussian, in place.

    Keeps position q and the potential, resamples p ~ N(0, I)
    """
    array[:dim] = rng.standard_normal(dim)
