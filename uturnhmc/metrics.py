"""
Description:
    MCMC diagnostics and metrics.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import numpy as np
from typing import Dict

def cov(X: np.ndarray) -> np.ndarray:
    """Sample covariance of (n_samples, dim) draws"""
    Xμ = np.mean(X, axis=0)
    n = X.shape[0]
    return (X - Xμ).T @ (X - Xμ) / (n - 1)

def maxdiagdiff(X: np.ndarray, Y: np.ndarray) -> float:
    """Largest absolute difference between the diagonals of X and Y"""
    x = np.diag(X)
    y = np.diag(Y)
    return float(np.max(np.abs(x - y)))

def length_summary(lengths) -> Dict[str, float]:
    """Summary of u-turn lengths from a longest batch"""
    lengths = np.asarray(lengths)
    if lengths.size == 0:
        nan = float("nan")
        return {"mean": nan, "median": nan, "min": nan, "max": nan}
    return {
        "mean": float(np.mean(lengths)),
        "median": float(np.median(lengths)),
        "min": float(np.min(lengths)),
        "max": float(np.max(lengths)),
    }
