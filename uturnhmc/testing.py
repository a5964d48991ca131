"""
Description:
    Shared helpers for the test modules.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import numpy as np
from uturnhmc.integrator import LeapFrog


class NaNDensity:
    """Pathological oracle: every value is NaN"""

    def __init__(self, dimension: int):
        self.dimension = dimension

    def update(self, position) -> None:
        pass

    def density(self) -> float:
        return float("nan")

    def gradient(self, i: int) -> float:
        return float("nan")


def make_params(lf: LeapFrog, q, p) -> np.ndarray:
    """Params array [p, q, U(q)] with a synced potential"""
    lf.pq.fill(0.0)
    lf.pq[lf.dim:2 * lf.dim] = q
    lf.sync_density()
    params = lf.snapshot()
    params[:lf.dim] = p
    return params
