"""
Description:
    Metropolis accept/reject for Hamiltonian proposals.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import numpy as np
from uturnhmc.datatypes import potential_index
from uturnhmc.rng import RNG

def kinetic(array: np.ndarray, dim: int) -> float:
    """
    K(p) = 0.5 * p.T @ p

    Identity mass matrix. A Euclidean (p.T @ M^{-1} @ p) or Riemannian
    (p.T @ M(q)^{-1} @ p) metric would replace this term.
    """
    p = array[:dim]
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.dot(p, p)) / 2.0

def log_acceptance_prob(
        from_array: np.ndarray,
        to_array: np.ndarray,
        dim: int
) -> float:
    """
    log min(1, exp(-ΔH)) with ΔH = H(to) - H(from)

    A NaN ΔH (diverged trajectory) gives log(0) = -inf, i.e. always reject.
    """
    i = potential_index(dim)
    with np.errstate(over="ignore", invalid="ignore"):
        delta_H = (kinetic(to_array, dim) + to_array[i]
                   - kinetic(from_array, dim) - from_array[i])
    if np.isnan(delta_H):
        return -np.inf
    return float(min(-delta_H, 0.0))

def metropolis_accept(log_prob: float, rng: RNG) -> bool:
    """Draw u ~ U[0,1) and accept iff log(u) < log_prob"""
    u = rng.standard_uniform()
    with np.errstate(divide="ignore"):
        return bool(np.log(u) < log_prob)
