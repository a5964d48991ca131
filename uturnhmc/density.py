"""
Description:
    Log-density oracles consumed by the leapfrog integrator.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import jax
import jax.numpy as jnp
import numpy as np
from uturnhmc.datatypes import DensityFunction, LogDensity

# Reversibility checks need double precision
jax.config.update("jax_enable_x64", True)


class JaxDensity:
    """
    DensityFunction backed by a JAX-traceable log-density.

    For standard HMC the potential is U(q) = -log π(q), so the integrator
    reads density() = log π(q) and gradient(i) = ∂ log π/∂q_i and flips
    the sign itself.
    """

    def __init__(self, log_prob: LogDensity, dimension: int):
        if dimension < 1:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.dimension = dimension
        self.log_prob = log_prob
        self._value_and_grad = jax.jit(jax.value_and_grad(log_prob))
        self._density = None
        self._gradient = None

    def update(self, position) -> None:
        q = jnp.asarray(position, dtype=jnp.float64)
        if q.shape != (self.dimension,):
            raise ValueError(
                f"expected position of shape ({self.dimension},), got {q.shape}"
            )
        value, grad = self._value_and_grad(q)
        self._density = float(value)
        self._gradient = np.asarray(grad, dtype=np.float64)

    def density(self) -> float:
        if self._density is None:
            raise RuntimeError("density() read before the first update()")
        return self._density

    def gradient(self, i: int) -> float:
        if self._gradient is None:
            raise RuntimeError("gradient() read before the first update()")
        return float(self._gradient[i])


def gradient_vector(density: DensityFunction) -> np.ndarray:
    """All n cached partials ∂ log π/∂q_i as a flat array"""
    return np.fromiter(
        (density.gradient(i) for i in range(density.dimension)),
        dtype=np.float64,
        count=density.dimension,
    )
