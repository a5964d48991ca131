"""
Description:
    Explicit pseudorandom source threaded through every sampler call.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import jax
import jax.random as jr
import numpy as np


class RNG:
    """
    Stateful wrapper over a JAX key.

    Every draw splits off a fresh subkey, so a fixed seed reproduces
    the same sequence of draws.
    """

    def __init__(self, seed: int = 0, key: jax.Array = None):
        self.key = jr.PRNGKey(seed) if key is None else key

    def _next_key(self) -> jax.Array:
        self.key, subkey = jr.split(self.key)
        return subkey

    def standard_uniform(self) -> float:
        """U ~ Uniform[0, 1)"""
        return float(jr.uniform(self._next_key(), shape=()))

    def standard_normal(self, size: int = None):
        """Standard normal deviate, or a float64 array of `size` of them"""
        if size is None:
            return float(jr.normal(self._next_key(), shape=()))
        return np.asarray(jr.normal(self._next_key(), shape=(size,)), dtype=np.float64)

    def spawn(self) -> "RNG":
        """Independent stream, e.g. one per chain"""
        return RNG(key=self._next_key())
