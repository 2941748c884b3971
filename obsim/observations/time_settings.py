"""
Settings describing the epochs at which observations are simulated.

A settings object carries the reference link end (the participant whose
clock defines the observation time) and enough information to generate an
ordered list of simulation times:
    - TabulatedObservationSimulationTimeSettings: explicit list of times
    - IntervalObservationSimulationTimeSettings: regular grid between two epochs

Tabulated times are returned verbatim: no sorting, no de-duplication.

Author: Navigation Engineering Team
Date: October 2026
"""

import math
import warnings
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Tuple

from obsim.observations.types import LinkEndType, LinkEnds, ObservableType


@dataclass(frozen=True)
class ObservationSimulationTimeSettings:
    """
    Base settings for observation simulation times.

    Only the reference link end is defined here; subclasses define how the
    times themselves are obtained.

    Attributes:
        reference_link_end: Link end whose time is the observation time.
    """

    reference_link_end: LinkEndType

    def __post_init__(self) -> None:
        if not isinstance(self.reference_link_end, LinkEndType):
            raise TypeError(
                f"reference_link_end must be a LinkEndType, got {self.reference_link_end!r}"
            )


@dataclass(frozen=True)
class TabulatedObservationSimulationTimeSettings(ObservationSimulationTimeSettings):
    """
    Simulation times given as an explicit list.

    Attributes:
        reference_link_end: Link end whose time is the observation time.
        simulation_times: Times at which to simulate, kept in input order.

    Example:
        >>> settings = TabulatedObservationSimulationTimeSettings(
        ...     LinkEndType.RECEIVER, [0.0, 60.0, 120.0]
        ... )
        >>> settings.simulation_times
        (0.0, 60.0, 120.0)
    """

    simulation_times: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "simulation_times", tuple(self.simulation_times))
        if not self.simulation_times:
            warnings.warn(
                "Tabulated simulation times are empty; no observations will be simulated",
                UserWarning,
            )


@dataclass(frozen=True)
class IntervalObservationSimulationTimeSettings(ObservationSimulationTimeSettings):
    """
    Simulation times on a regular grid.

    Times are start_time + k * interval for k = 0, 1, ... up to and
    including end_time (within a relative tolerance of 1e-9 intervals).

    Attributes:
        reference_link_end: Link end whose time is the observation time.
        start_time: First simulation time.
        end_time: Last admissible simulation time.
        interval: Spacing between consecutive times (must be > 0).
    """

    start_time: float = 0.0
    end_time: float = 0.0
    interval: float = 1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.interval > 0:
            raise ValueError(f"interval must be > 0, got {self.interval}")
        if self.end_time < self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) must not precede start_time ({self.start_time})"
            )

    @property
    def simulation_times(self) -> Tuple[float, ...]:
        """Generated simulation times, increasing."""
        n_steps = math.floor((self.end_time - self.start_time) / self.interval + 1e-9)
        return tuple(self.start_time + k * self.interval for k in range(n_steps + 1))


def create_observation_simulation_time_settings_map(
    observations_to_simulate: Mapping[
        ObservableType, Mapping[LinkEnds, Tuple[Sequence[float], LinkEndType]]
    ],
) -> Dict[ObservableType, Dict[LinkEnds, ObservationSimulationTimeSettings]]:
    """
    Convert a table of (times, reference link end) into tabulated settings.

    Args:
        observations_to_simulate: Nested map
            observable type -> link ends -> (times, reference link end).

    Returns:
        Nested map observable type -> link ends -> tabulated time settings,
        with the same key order as the input.

    Example:
        >>> table = {ObservableType.ONE_WAY_RANGE: {link_ends: ([0.0, 1.0], LinkEndType.RECEIVER)}}
        >>> settings = create_observation_simulation_time_settings_map(table)
    """
    settings_map: Dict[ObservableType, Dict[LinkEnds, ObservationSimulationTimeSettings]] = {}
    for observable_type, link_end_table in observations_to_simulate.items():
        settings_map[observable_type] = {}
        for link_ends, (times, reference_link_end) in link_end_table.items():
            settings_map[observable_type][link_ends] = TabulatedObservationSimulationTimeSettings(
                reference_link_end, times
            )
    return settings_map
