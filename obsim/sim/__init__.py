"""
Noise samplers used to perturb simulated observations.

Modules:
    noise_functions: Constant, Gaussian, scipy.stats and pink noise functions
"""

from obsim.sim.noise_functions import (
    create_constant_noise_function,
    create_distribution_noise_function,
    create_gaussian_noise_function,
    create_gaussian_vector_noise_function,
    create_pink_noise_function,
)

__all__ = [
    "create_constant_noise_function",
    "create_distribution_noise_function",
    "create_gaussian_noise_function",
    "create_gaussian_vector_noise_function",
    "create_pink_noise_function",
]
