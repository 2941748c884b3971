"""
Noise injection for simulated observations.

Noise can be specified at four levels of granularity, all normalized to one
canonical form before use:

    canonical:       observable type -> link ends -> (time -> vector)
    per link:        observable type -> link ends -> (time -> scalar)
    per observable:  observable type -> (time -> scalar)
    global:          (time -> scalar)

Scalar noise functions are expanded to vectors by filling every channel of
the observable with its own call to the scalar function (identically and
independently distributed channels). Per-observable and global noise are
then broadcast over every link ends present in the time-settings map.

The adapters below each produce the next more canonical shape and are
composed by the simulate_observations_with_*_noise entry points.

Author: Navigation Engineering Team
Date: October 2026
"""

import dataclasses
from functools import partial
from typing import Callable, Dict, Mapping

import numpy as np

from obsim.observations.errors import (
    InconsistentNoiseSizeError,
    InconsistentSampleCountError,
    MissingObservableNoiseError,
)
from obsim.observations.models import ObservationSimulator
from obsim.observations.simulate import (
    ObservationsMap,
    TimeSettingsMap,
    simulate_observations,
)
from obsim.observations.types import LinkEnds, ObservableType, get_observable_size


NoiseFunction = Callable[[float], np.ndarray]
ScalarNoiseFunction = Callable[[float], float]
NoiseFunctionMap = Mapping[ObservableType, Mapping[LinkEnds, NoiseFunction]]


def iid_noise_vector(
    noise_function: ScalarNoiseFunction, observation_size: int, time: float
) -> np.ndarray:
    """
    Noise vector with each channel drawn from a separate scalar call.

    Args:
        noise_function: Scalar noise function of time.
        observation_size: Number of channels.
        time: Evaluation time.

    Returns:
        Noise vector, shape (observation_size,).
    """
    return np.array([noise_function(time) for _ in range(observation_size)], dtype=float)


def create_iid_noise_function(
    noise_function: ScalarNoiseFunction, observation_size: int
) -> NoiseFunction:
    """Wrap a scalar noise function as a time -> vector noise function."""
    return partial(iid_noise_vector, noise_function, observation_size)


def expand_link_noise_functions(
    noise_functions: Mapping[ObservableType, Mapping[LinkEnds, ScalarNoiseFunction]],
) -> Dict[ObservableType, Dict[LinkEnds, NoiseFunction]]:
    """Expand per-link scalar noise functions to canonical vector form."""
    return {
        observable_type: {
            link_ends: create_iid_noise_function(
                noise_function, get_observable_size(observable_type)
            )
            for link_ends, noise_function in link_noise_functions.items()
        }
        for observable_type, link_noise_functions in noise_functions.items()
    }


def expand_observable_noise_functions(
    noise_functions: Mapping[ObservableType, ScalarNoiseFunction],
) -> Dict[ObservableType, NoiseFunction]:
    """Expand per-observable scalar noise functions to vector form."""
    return {
        observable_type: create_iid_noise_function(
            noise_function, get_observable_size(observable_type)
        )
        for observable_type, noise_function in noise_functions.items()
    }


def broadcast_observable_noise_functions(
    observations_to_simulate: TimeSettingsMap,
    noise_functions: Mapping[ObservableType, NoiseFunction],
) -> Dict[ObservableType, Dict[LinkEnds, NoiseFunction]]:
    """
    Use each observable's noise function for all of its simulated link ends.

    Raises:
        MissingObservableNoiseError: If an observable type to simulate has
            no noise function.
    """
    full_noise_functions: Dict[ObservableType, Dict[LinkEnds, NoiseFunction]] = {}
    for observable_type, link_end_settings in observations_to_simulate.items():
        noise_function = noise_functions.get(observable_type)
        if noise_function is None:
            raise MissingObservableNoiseError(
                f"No noise function defined for observable {observable_type.name}"
            )
        full_noise_functions[observable_type] = {
            link_ends: noise_function for link_ends in link_end_settings
        }
    return full_noise_functions


def broadcast_global_noise_function(
    observations_to_simulate: TimeSettingsMap,
    noise_function: ScalarNoiseFunction,
) -> Dict[ObservableType, ScalarNoiseFunction]:
    """Use one scalar noise function for every observable type to simulate."""
    return {observable_type: noise_function for observable_type in observations_to_simulate}


def simulate_observations_with_noise(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
    noise_functions: NoiseFunctionMap,
) -> ObservationsMap:
    """
    Simulate observations and add noise from per-link vector noise functions.

    The noise function of each (observable type, link ends) pair is
    evaluated once per observation time and added to that sample. The
    returned sets are new objects; the times are shared with the noise-free
    simulation.

    Args:
        observations_to_simulate: Nested time-settings map (see
            simulate_observations).
        observation_simulators: Simulator per observable type.
        noise_functions: observable type -> link ends -> (time -> vector).

    Returns:
        Nested map observable type -> link ends -> noisy ObservationSet.

    Raises:
        InconsistentSampleCountError: If a noise-free set does not hold
            len(times) * observable size values.
        MissingObservableNoiseError: If a simulated pair has no noise function.
        InconsistentNoiseSizeError: If a noise function returns a vector
            whose length is not the observable size, at any sample.

    Example:
        >>> noisy = simulate_observations_with_noise(
        ...     settings_map, simulators,
        ...     {ObservableType.ONE_WAY_RANGE: {link_ends: lambda t: np.array([0.1])}},
        ... )
    """
    noise_free_observations = simulate_observations(observations_to_simulate, observation_simulators)

    noisy_observations: ObservationsMap = {}
    for observable_type, link_end_observations in noise_free_observations.items():
        observable_size = get_observable_size(observable_type)
        noisy_observations[observable_type] = {}

        for link_ends, observation_set in link_end_observations.items():
            times = observation_set.times
            if len(times) * observable_size != len(observation_set.values):
                raise InconsistentSampleCountError(
                    f"Cannot add noise to {observable_type.name} observations of "
                    f"{link_ends!r}: {len(observation_set.values)} values for "
                    f"{len(times)} times of size {observable_size}"
                )

            noise_function = noise_functions.get(observable_type, {}).get(link_ends)
            if noise_function is None:
                raise MissingObservableNoiseError(
                    f"No noise function defined for {observable_type.name} "
                    f"observations of {link_ends!r}"
                )

            noisy_values = np.array(observation_set.values, dtype=float)
            for i, time in enumerate(times):
                noise = np.asarray(noise_function(time), dtype=float).reshape(-1)
                if noise.shape != (observable_size,):
                    raise InconsistentNoiseSizeError(
                        f"Noise function for {observable_type.name} observations of "
                        f"{link_ends!r} returned {len(noise)} values at t={time}, "
                        f"expected {observable_size}"
                    )
                noisy_values[i * observable_size:(i + 1) * observable_size] += noise

            noisy_observations[observable_type][link_ends] = dataclasses.replace(
                observation_set, values=noisy_values
            )

    return noisy_observations


def simulate_observations_with_link_noise(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
    noise_functions: Mapping[ObservableType, Mapping[LinkEnds, ScalarNoiseFunction]],
) -> ObservationsMap:
    """Simulate noisy observations with a scalar noise function per link ends."""
    return simulate_observations_with_noise(
        observations_to_simulate,
        observation_simulators,
        expand_link_noise_functions(noise_functions),
    )


def simulate_observations_with_observable_vector_noise(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
    noise_functions: Mapping[ObservableType, NoiseFunction],
) -> ObservationsMap:
    """Simulate noisy observations with a vector noise function per observable."""
    return simulate_observations_with_noise(
        observations_to_simulate,
        observation_simulators,
        broadcast_observable_noise_functions(observations_to_simulate, noise_functions),
    )


def simulate_observations_with_observable_noise(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
    noise_functions: Mapping[ObservableType, ScalarNoiseFunction],
) -> ObservationsMap:
    """Simulate noisy observations with a scalar noise function per observable."""
    return simulate_observations_with_observable_vector_noise(
        observations_to_simulate,
        observation_simulators,
        expand_observable_noise_functions(noise_functions),
    )


def simulate_observations_with_global_noise(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
    noise_function: ScalarNoiseFunction,
) -> ObservationsMap:
    """Simulate noisy observations with one scalar noise function for everything."""
    return simulate_observations_with_observable_noise(
        observations_to_simulate,
        observation_simulators,
        broadcast_global_noise_function(observations_to_simulate, noise_function),
    )
