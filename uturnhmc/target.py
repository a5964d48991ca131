"""
Description:
    Target log-density generators.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-18
Last Modified: 2026-10-18
Version: 0.1
"""
import jax.numpy as jnp
from uturnhmc.datatypes import LogDensity, PrecisionMatrix

def gen_gaussian(
        dim: int = 2,
        precision_matrix: PrecisionMatrix = None,
        cov: jnp.ndarray = None
) -> LogDensity:
    if precision_matrix is not None and cov is not None:
        raise ValueError(
            "Please supply either a precision_matrix or a cov, not both"
        )

    if precision_matrix is None and cov is not None:
        precision_matrix = jnp.linalg.inv(cov)

    if precision_matrix is None and cov is None:
        precision_matrix = jnp.eye(dim)
    precision_matrix = jnp.asarray(precision_matrix)

    def log_prob(q: jnp.ndarray) -> float:
        """Gaussian log density (unnormalized)"""
        return -0.5 * jnp.dot(q, precision_matrix @ q)

    return log_prob

def gen_perturb_precision(
        dim: int = 2,
        perturbation: float = 0.05
) -> PrecisionMatrix:
    prec = jnp.diag(jnp.ones(dim))
    prec += perturbation * jnp.diag(jnp.ones(dim-1), k=-1 )
    prec += perturbation * jnp.diag(jnp.ones(dim-1), k=1 )
    return prec
