"""
Description:
    Core data structures for the u-turn HMC sampler.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1

All modules import from here to ensure type consistency and avoid indexing bugs.

Params layout (flat array of length 2n+1):
    array[0:n]   == p  (momentum)
    array[n:2n]  == q  (position)
    array[2n]    == potential = -log π(q)
"""
from typing import NamedTuple, Callable, Protocol, Sequence
import numpy as np
import jax.numpy as jnp


def potential_index(dim: int) -> int:
    return 2 * dim


def buffer_size(dim: int) -> int:
    return 2 * dim + 1


class ParameterState(NamedTuple):
    """View over a flat params array [p, q, potential]"""
    array: np.ndarray

    @property
    def dim(self) -> int:
        """Dimension of configuration space"""
        return (self.array.shape[0] - 1) // 2

    @property
    def p(self) -> np.ndarray: # momentum (view)
        return self.array[:self.dim]

    @property
    def q(self) -> np.ndarray: # position (view)
        return self.array[self.dim:2 * self.dim]

    @property
    def potential(self) -> float:
        return float(self.array[potential_index(self.dim)])

    def to_array(self) -> np.ndarray:
        """Independent copy of the flat array"""
        return self.array.copy()

    @classmethod
    def from_array(cls, arr: np.ndarray):
        """Wrap a flat array [p, q, potential]; does not copy"""
        if arr.ndim != 1 or arr.shape[0] % 2 != 1:
            raise ValueError(
                f"params array must be 1-d with odd length 2n+1, got shape {arr.shape}"
            )
        return cls(array=arr)

    @classmethod
    def zeros(cls, dim: int):
        if dim < 1:
            raise ValueError(f"dimension must be positive, got {dim}")
        return cls(array=np.zeros(buffer_size(dim)))


class SamplerConfig(NamedTuple):
    """Configuration for the u-turn HMC sampler"""
    τ: float # leapfrog step size
    N: int = 1 # trajectory length for fixed-length steps
    l0: int = 1 # target length for the longest batch search
    k: int = 1 # number of longest batch steps per batch
    max_steps: int = 1000 # cap on a single u-turn search


class SamplerOutput(NamedTuple):
    samples: np.ndarray # (n_samples, dim) - positions only
    log_accept: np.ndarray # log acceptance probabilities
    accepted: np.ndarray # (n_samples,) bool
    accept_rate: float


class BatchOutput(NamedTuple):
    """Result of a longest batch run"""
    lengths: np.ndarray # (k,) steps until u-turn
    params: np.ndarray # final chain state
    n_accepted: int
    n_capped: int # searches stopped at max_steps


class DensityFunction(Protocol):
    """
    Stateful log-density oracle.

    update(q) recomputes and caches log π(q) and ∂ log π/∂q_i;
    density() and gradient(i) read that cache.
    """
    dimension: int

    def update(self, position: Sequence[float]) -> None: ...

    def density(self) -> float: ...

    def gradient(self, i: int) -> float: ...


# Type aliases for clarity
Array = jnp.ndarray
LogDensity = Callable[[Array], float]
PrecisionMatrix = Array
