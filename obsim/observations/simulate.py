"""
Noise-free observation simulation.

Provides:
- ObservationSet: simulated values, times and reference link end of one
  (observable type, link ends) pair
- simulate_single_observation_set: evaluate one model on one time setting
- simulate_observations: evaluate every (observable type, link ends) entry
  of a nested time-settings map

The observation size is only known once the link ends are resolved, so the
aggregate simulation dispatches on the reported size to a width-specific
evaluation path. Only sizes 1, 2 and 3 are supported.

Author: Navigation Engineering Team
Date: October 2026
"""

import warnings
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from obsim.observations.errors import (
    MissingSimulatorError,
    ModelSizeMismatchError,
    NullModelError,
    UnsupportedDimensionError,
)
from obsim.observations.models import ObservationModel, ObservationSimulator
from obsim.observations.time_settings import (
    IntervalObservationSimulationTimeSettings,
    ObservationSimulationTimeSettings,
    TabulatedObservationSimulationTimeSettings,
    create_observation_simulation_time_settings_map,
)
from obsim.observations.types import LinkEndType, LinkEnds, ObservableType


@dataclass(frozen=True)
class ObservationSet:
    """
    Simulated observations of one (observable type, link ends) pair.

    Attributes:
        values: Observation vectors stacked in time order, shape (N * size,).
                Read-only.
        times: Observation times, shape (N,), in generation order.
        reference_link_end: Link end at which `times` are valid.

    Example:
        >>> observation_set.values
        array([0., 2., 4.])
        >>> observation_set.as_matrix(1)
        array([[0.],
               [2.],
               [4.]])
    """

    values: np.ndarray
    times: Tuple[float, ...]
    reference_link_end: LinkEndType

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float).reshape(-1)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "times", tuple(self.times))

    @property
    def n_samples(self) -> int:
        """Number of observation times."""
        return len(self.times)

    def as_matrix(self, observation_size: int) -> np.ndarray:
        """Return the values as an (N, observation_size) view."""
        return self.values.reshape(self.n_samples, observation_size)


ObservationsMap = Dict[ObservableType, Dict[LinkEnds, ObservationSet]]

TimeSettingsMap = Mapping[
    ObservableType,
    Mapping[LinkEnds, Union[ObservationSimulationTimeSettings, Tuple[Sequence[float], LinkEndType]]],
]


def _get_simulation_times(
    settings: ObservationSimulationTimeSettings,
) -> Optional[Tuple[float, ...]]:
    """Times to simulate for a settings object, None for unhandled variants."""
    if isinstance(settings, TabulatedObservationSimulationTimeSettings):
        return settings.simulation_times
    elif isinstance(settings, IntervalObservationSimulationTimeSettings):
        return settings.simulation_times
    return None


def simulate_single_observation_set(
    settings: ObservationSimulationTimeSettings,
    observation_model: ObservationModel,
) -> ObservationSet:
    """
    Simulate observations of one model at the times defined by `settings`.

    Args:
        settings: Simulation time settings.
        observation_model: Model evaluated at each time.

    Returns:
        ObservationSet with the stacked observation vectors, the times in
        generation order and the settings' reference link end. An
        unrecognised settings type gives an empty set and a RuntimeWarning.

    Raises:
        ModelSizeMismatchError: If the model returns a vector whose shape
            is not (observation_model.size,).
    """
    reference_link_end = settings.reference_link_end
    times = _get_simulation_times(settings)
    if times is None:
        warnings.warn(
            f"Simulation time settings of type {type(settings).__name__} are not "
            f"supported; returning an empty observation set",
            RuntimeWarning,
        )
        return ObservationSet(np.zeros(0), (), reference_link_end)

    size = observation_model.size
    values = np.zeros(len(times) * size)
    for i, time in enumerate(times):
        observation = np.asarray(
            observation_model.compute_observations(time, reference_link_end), dtype=float
        )
        if observation.shape != (size,):
            raise ModelSizeMismatchError(
                f"{observation_model!r} returned shape {observation.shape} at t={time}, "
                f"expected ({size},)"
            )
        values[i * size:(i + 1) * size] = observation

    return ObservationSet(values, times, reference_link_end)


def simulate_single_observation_set_from_simulator(
    settings: ObservationSimulationTimeSettings,
    observation_simulator: Optional[ObservationSimulator],
    link_ends: LinkEnds,
) -> ObservationSet:
    """
    Simulate observations of the model a simulator holds for `link_ends`.

    Raises:
        NullModelError: If the simulator is None or has no model for
            `link_ends`. Checked before any evaluation.
    """
    if observation_simulator is None:
        raise NullModelError("Cannot simulate observation set: observation simulator is None")

    observation_model = observation_simulator.get_observation_model(link_ends)
    if observation_model is None:
        raise NullModelError(
            f"No {observation_simulator.observable_type.name} observation model "
            f"registered for {link_ends!r}"
        )
    return simulate_single_observation_set(settings, observation_model)


def _fixed_size_simulation(
    size: int,
) -> Callable[[ObservationSimulationTimeSettings, ObservationSimulator, LinkEnds], ObservationSet]:
    """Build the evaluation path for observations of exactly `size` channels."""

    def simulate(
        settings: ObservationSimulationTimeSettings,
        observation_simulator: ObservationSimulator,
        link_ends: LinkEnds,
    ) -> ObservationSet:
        observation_model = observation_simulator.get_observation_model(link_ends)
        if observation_model is None:
            raise NullModelError(
                f"No {observation_simulator.observable_type.name} observation model "
                f"registered for {link_ends!r}"
            )
        if observation_model.size != size:
            raise ModelSizeMismatchError(
                f"{observation_model!r} has size {observation_model.size}, "
                f"cannot be simulated as size {size}"
            )
        return simulate_single_observation_set(settings, observation_model)

    simulate.__name__ = f"simulate_size_{size}_observations"
    return simulate


_SIZE_SPECIFIC_SIMULATIONS = {
    1: _fixed_size_simulation(1),
    2: _fixed_size_simulation(2),
    3: _fixed_size_simulation(3),
}


def _as_time_settings_map(
    observations_to_simulate: TimeSettingsMap,
) -> Mapping[ObservableType, Mapping[LinkEnds, ObservationSimulationTimeSettings]]:
    """Convert (times, reference link end) entries into tabulated settings."""
    settings_map = {}
    for observable_type, link_end_settings in observations_to_simulate.items():
        table = {
            link_ends: settings
            for link_ends, settings in link_end_settings.items()
            if not isinstance(settings, ObservationSimulationTimeSettings)
        }
        converted = create_observation_simulation_time_settings_map({observable_type: table})
        settings_map[observable_type] = {
            link_ends: converted[observable_type].get(link_ends, settings)
            for link_ends, settings in link_end_settings.items()
        }
    return settings_map


def simulate_observations(
    observations_to_simulate: TimeSettingsMap,
    observation_simulators: Mapping[ObservableType, ObservationSimulator],
) -> ObservationsMap:
    """
    Simulate noise-free observations for every requested observable and link.

    Args:
        observations_to_simulate: Nested map observable type -> link ends ->
            time settings. A table of (times, reference link end) pairs is
            accepted as well and converted to tabulated settings first.
        observation_simulators: Simulator per observable type.

    Returns:
        Nested map observable type -> link ends -> ObservationSet, in the
        iteration order of `observations_to_simulate`.

    Raises:
        MissingSimulatorError: If an observable type has no simulator.
        UnsupportedDimensionError: If a simulator reports a size other
            than 1, 2 or 3.
        NullModelError: If a simulator has no model for requested link ends.

    Example:
        >>> observations = simulate_observations(
        ...     {ObservableType.ONE_WAY_RANGE: {link_ends: settings}},
        ...     {ObservableType.ONE_WAY_RANGE: range_simulator},
        ... )
        >>> observations[ObservableType.ONE_WAY_RANGE][link_ends].values
    """
    settings_map = _as_time_settings_map(observations_to_simulate)

    observations: ObservationsMap = {}
    for observable_type, link_end_settings in settings_map.items():
        observation_simulator = observation_simulators.get(observable_type)
        if observation_simulator is None:
            raise MissingSimulatorError(
                f"No observation simulator for observable {observable_type.name}"
            )

        observations[observable_type] = {}
        for link_ends, settings in link_end_settings.items():
            size = observation_simulator.get_observation_size(link_ends)
            simulate = _SIZE_SPECIFIC_SIMULATIONS.get(size)
            if simulate is None:
                raise UnsupportedDimensionError(
                    f"Simulation of observations not implemented for size {size} "
                    f"({observable_type.name}, {link_ends!r})"
                )
            observations[observable_type][link_ends] = simulate(
                settings, observation_simulator, link_ends
            )

    return observations
