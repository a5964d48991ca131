"""
Description:
    Hamiltonian Monte Carlo with u-turn trajectory lengths over a
    black-box log-density oracle.
    USE THE CORRECT ENVIRONMENT:  HMC-Research
"""
from uturnhmc.datatypes import (
    ParameterState, SamplerConfig, SamplerOutput, BatchOutput, DensityFunction
)
from uturnhmc.density import JaxDensity
from uturnhmc.rng import RNG
from uturnhmc.integrator import LeapFrog
from uturnhmc.acceptance import kinetic, log_acceptance_prob
from uturnhmc.uturn import is_uturn, longest_step, longest_batch_step, longest_batch
from uturnhmc.sampler import HMCSampler

__all__ = [
    "ParameterState", "SamplerConfig", "SamplerOutput", "BatchOutput",
    "DensityFunction", "JaxDensity", "RNG", "LeapFrog", "kinetic",
    "log_acceptance_prob", "is_uturn", "longest_step", "longest_batch_step",
    "longest_batch", "HMCSampler",
]
