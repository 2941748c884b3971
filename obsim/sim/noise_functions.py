"""
Noise samplers for perturbing simulated observations.

Each factory returns a callable of time, ready to be passed to the noise
injection entry points of obsim.observations.noise:
    - Scalar samplers (time -> float): constant, Gaussian, any scipy.stats
      distribution (frozen, or frozen from parameters), and time-correlated 1/f (pink) noise
    - Vector sampler (time -> array): Gaussian with per-channel std

Random samplers draw from a numpy Generator; pass a seeded generator for
reproducible noise.

The pink noise sampler uses FFT shaping (amplitude ~ 1/sqrt(f), so that
PSD ~ 1/f) on a uniform grid covering the requested times, and linearly
interpolates between grid points.

Author: Navigation Engineering Team
Date: October 2026
"""

from typing import Callable, Optional, Sequence

import numpy as np
from scipy import stats


def create_constant_noise_function(value: float) -> Callable[[float], float]:
    """
    Noise function returning the same value at every time.

    Example:
        >>> noise = create_constant_noise_function(0.1)
        >>> noise(42.0)
        0.1
    """
    value = float(value)

    def noise_function(time: float) -> float:
        return value

    return noise_function


def create_gaussian_noise_function(
    std: float,
    mean: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Callable[[float], float]:
    """
    White Gaussian noise function.

    Args:
        std: Standard deviation (must be >= 0).
        mean: Mean value (bias) of the noise.
        rng: Random number generator. If None, uses np.random.default_rng().

    Returns:
        Scalar noise function of time; the time argument is ignored.

    Raises:
        ValueError: If std < 0.
    """
    if std < 0:
        raise ValueError(f"std must be >= 0, got {std}")
    if rng is None:
        rng = np.random.default_rng()

    def noise_function(time: float) -> float:
        return float(rng.normal(mean, std))

    return noise_function


def create_distribution_noise_function(
    distribution,
    rng: Optional[np.random.Generator] = None,
    **parameters,
) -> Callable[[float], float]:
    """
    Noise function drawing from a scipy.stats distribution.

    Args:
        distribution: Frozen distribution, e.g. stats.laplace(scale=0.5), or a
                      distribution such as stats.t that is frozen with
                      `parameters`.
        rng: Random number generator. If None, uses np.random.default_rng().
        **parameters: Shape, loc and scale parameters used to freeze an
                      unfrozen distribution.

    Returns:
        Scalar noise function of time; the time argument is ignored.

    Raises:
        TypeError: If `distribution` has no rvs() method, or if `parameters`
            are given for an already frozen distribution.

    Example:
        >>> noise = create_distribution_noise_function(
        ...     stats.t, df=3, scale=0.2, rng=np.random.default_rng(1)
        ... )
    """
    if isinstance(distribution, (stats.rv_continuous, stats.rv_discrete)):
        distribution = distribution(**parameters)
    elif parameters:
        raise TypeError(
            f"parameters {sorted(parameters)} given for an already frozen distribution"
        )
    if not hasattr(distribution, "rvs"):
        raise TypeError(f"distribution must provide rvs(), got {type(distribution).__name__}")
    if rng is None:
        rng = np.random.default_rng()

    def noise_function(time: float) -> float:
        return float(distribution.rvs(random_state=rng))

    return noise_function


def create_gaussian_vector_noise_function(
    stds: Sequence[float],
    rng: Optional[np.random.Generator] = None,
) -> Callable[[float], np.ndarray]:
    """
    White Gaussian vector noise with a standard deviation per channel.

    Useful for observables whose channels have different accuracies, e.g.
    right ascension and declination.

    Args:
        stds: Standard deviation per channel, shape (size,).
        rng: Random number generator. If None, uses np.random.default_rng().

    Returns:
        Vector noise function of time, returning shape (size,).
    """
    stds = np.asarray(stds, dtype=float)
    if stds.ndim != 1 or len(stds) == 0:
        raise ValueError(f"stds must be a non-empty 1D array, got shape {stds.shape}")
    if np.any(stds < 0):
        raise ValueError(f"stds must be >= 0, got {stds}")
    if rng is None:
        rng = np.random.default_rng()

    def noise_function(time: float) -> np.ndarray:
        return rng.standard_normal(len(stds)) * stds

    return noise_function


def _pink_noise_sequence(
    n_samples: int,
    fs: float,
    rng: np.random.Generator,
    fmin: Optional[float] = None,
) -> np.ndarray:
    """Zero-mean, unit-std 1/f noise of length n_samples sampled at fs."""
    if n_samples < 2:
        return np.zeros(n_samples)

    freqs = np.fft.rfftfreq(n_samples, d=1.0 / fs)
    if fmin is None:
        fmin = fs / n_samples

    # |X(f)| ~ 1/sqrt(f), floored at fmin to avoid the f=0 divergence
    shape = 1.0 / np.sqrt(np.maximum(freqs, fmin))
    spectrum = (rng.standard_normal(len(freqs)) + 1j * rng.standard_normal(len(freqs))) * shape
    spectrum[0] = 0.0
    if n_samples % 2 == 0:
        spectrum[-1] = spectrum[-1].real

    x = np.fft.irfft(spectrum, n=n_samples)
    x -= np.mean(x)
    std = np.std(x)
    if std > 0:
        x /= std
    return x


def create_pink_noise_function(
    times: Sequence[float],
    std: float,
    rng: Optional[np.random.Generator] = None,
    grid_interval: Optional[float] = None,
) -> Callable[[float], float]:
    """
    Time-correlated 1/f (pink) noise function.

    A pink noise realization is generated once on a uniform grid spanning
    [min(times), max(times)] and linearly interpolated at query times.
    Queries outside the span return the nearest end value.

    Args:
        times: Times at which the noise will be queried (any order).
        std: Standard deviation of the realization.
        rng: Random number generator. If None, uses np.random.default_rng().
        grid_interval: Grid spacing. Defaults to the smallest positive gap
                       between the sorted unique times.

    Returns:
        Scalar noise function of time.

    Raises:
        ValueError: If times is empty, std < 0 or grid_interval <= 0.
    """
    times = np.unique(np.asarray(times, dtype=float))
    if len(times) == 0:
        raise ValueError("times must not be empty")
    if std < 0:
        raise ValueError(f"std must be >= 0, got {std}")
    if rng is None:
        rng = np.random.default_rng()

    if len(times) == 1:
        value = float(rng.standard_normal() * std)
        return create_constant_noise_function(value)

    if grid_interval is None:
        grid_interval = float(np.min(np.diff(times)))
    if grid_interval <= 0:
        raise ValueError(f"grid_interval must be > 0, got {grid_interval}")

    n_samples = int(np.ceil((times[-1] - times[0]) / grid_interval)) + 1
    grid = times[0] + grid_interval * np.arange(n_samples)
    realization = _pink_noise_sequence(n_samples, 1.0 / grid_interval, rng) * std

    def noise_function(time: float) -> float:
        return float(np.interp(time, grid, realization))

    return noise_function
