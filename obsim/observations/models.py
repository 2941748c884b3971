"""
Observation models and per-observable model registries.

Provides:
- ObservationModel: abstract measurement function h(t) for one link geometry
- FunctionObservationModel: wraps a user callable as an observation model
- OneWayRangeModel, OneWayDopplerModel, AngularPositionModel,
  PositionObservationModel: instantaneous geometric models driven by
  state functions (no light-time or relativistic corrections)
- ObservationSimulator: registry of models for one observable type

State functions map a time to a Cartesian state [x, y, z, vx, vy, vz]
(velocity components are only needed by OneWayDopplerModel).

Author: Navigation Engineering Team
Date: October 2026
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Mapping, Optional, Sequence

import numpy as np

from obsim.observations.types import (
    LinkEndType,
    LinkEnds,
    ObservableType,
    get_observable_size,
)


StateFunction = Callable[[float], np.ndarray]


class ObservationModel(ABC):
    """Abstract base class for observation models.

    A model is bound to one observable type and one link-end set, and
    returns a vector of the observable's fixed size for a given time.
    """

    def __init__(self, observable_type: ObservableType, link_ends: LinkEnds):
        """
        Initialize observation model.

        Args:
            observable_type: Observable computed by this model.
            link_ends: Link geometry this model evaluates.
        """
        self.observable_type = observable_type
        self.link_ends = link_ends
        self.size = get_observable_size(observable_type)

    @abstractmethod
    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        """
        Compute the observation at a given time.

        Args:
            time: Observation time, valid at the reference link end.
            link_end_type: Link end whose clock defines `time`.

        Returns:
            Observation vector, shape (size,).
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.observable_type.name}, {self.link_ends!r})"


class FunctionObservationModel(ObservationModel):
    """
    Observation model backed by a plain callable.

    Example:
        >>> model = FunctionObservationModel(
        ...     ObservableType.ONE_WAY_RANGE, link_ends,
        ...     lambda t, link_end_type: np.array([2.0 * t])
        ... )
        >>> model.compute_observations(1.5, LinkEndType.RECEIVER)
        array([3.])
    """

    def __init__(
        self,
        observable_type: ObservableType,
        link_ends: LinkEnds,
        function: Callable[[float, LinkEndType], np.ndarray],
    ):
        super().__init__(observable_type, link_ends)
        self.function = function

    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        return np.atleast_1d(np.asarray(self.function(time, link_end_type), dtype=float))


class _GeometricObservationModel(ObservationModel):
    """Shared state-function handling for geometric models."""

    required_link_ends: Sequence[LinkEndType] = ()

    def __init__(
        self,
        observable_type: ObservableType,
        link_ends: LinkEnds,
        state_functions: Mapping[LinkEndType, StateFunction],
    ):
        super().__init__(observable_type, link_ends)
        for role in self.required_link_ends:
            if role not in link_ends:
                raise ValueError(
                    f"{type(self).__name__} requires a {role.name.lower()} link end, "
                    f"got {link_ends!r}"
                )
            if role not in state_functions:
                raise ValueError(
                    f"{type(self).__name__} requires a state function for "
                    f"{role.name.lower()}"
                )
        self.state_functions = dict(state_functions)

    def _state(self, role: LinkEndType, time: float) -> np.ndarray:
        state = np.asarray(self.state_functions[role](time), dtype=float)
        if state.ndim != 1 or len(state) < 3:
            raise ValueError(
                f"State of {role.name.lower()} must be 1D with at least 3 components, "
                f"got shape {state.shape}"
            )
        return state


class OneWayRangeModel(_GeometricObservationModel):
    """
    One-way range between transmitter and receiver.

    Measurement: z = ||r_rx(t) - r_tx(t)||

    Both positions are evaluated at the same time (instantaneous geometry).
    """

    required_link_ends = (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)

    def __init__(self, link_ends: LinkEnds, state_functions: Mapping[LinkEndType, StateFunction]):
        super().__init__(ObservableType.ONE_WAY_RANGE, link_ends, state_functions)

    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        r_tx = self._state(LinkEndType.TRANSMITTER, time)[:3]
        r_rx = self._state(LinkEndType.RECEIVER, time)[:3]
        return np.array([np.linalg.norm(r_rx - r_tx)])


class OneWayDopplerModel(_GeometricObservationModel):
    """
    One-way range rate between transmitter and receiver.

    Measurement: z = (r_rx - r_tx) . (v_rx - v_tx) / ||r_rx - r_tx||

    States must include velocity components [x, y, z, vx, vy, vz].
    """

    required_link_ends = (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)

    def __init__(self, link_ends: LinkEnds, state_functions: Mapping[LinkEndType, StateFunction]):
        super().__init__(ObservableType.ONE_WAY_DOPPLER, link_ends, state_functions)

    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        state_tx = self._state(LinkEndType.TRANSMITTER, time)
        state_rx = self._state(LinkEndType.RECEIVER, time)
        if len(state_tx) < 6 or len(state_rx) < 6:
            raise ValueError("Doppler observations require 6-component states")

        relative_position = state_rx[:3] - state_tx[:3]
        relative_velocity = state_rx[3:6] - state_tx[3:6]
        distance = np.linalg.norm(relative_position)
        if distance < 1e-12:
            # Line of sight undefined at zero separation
            return np.array([0.0])
        return np.array([relative_position @ relative_velocity / distance])


class AngularPositionModel(_GeometricObservationModel):
    """
    Angular position of the transmitter as seen from the receiver.

    Measurements:
    - Right ascension: alpha = atan2(dy, dx)
    - Declination: delta = asin(dz / ||d||)
    where d = r_tx - r_rx.
    """

    required_link_ends = (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)

    def __init__(self, link_ends: LinkEnds, state_functions: Mapping[LinkEndType, StateFunction]):
        super().__init__(ObservableType.ANGULAR_POSITION, link_ends, state_functions)

    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        d = self._state(LinkEndType.TRANSMITTER, time)[:3] - self._state(LinkEndType.RECEIVER, time)[:3]
        distance = np.linalg.norm(d)
        if distance < 1e-12:
            raise ValueError("Angular position undefined for coincident link ends")
        right_ascension = np.arctan2(d[1], d[0])
        declination = np.arcsin(np.clip(d[2] / distance, -1.0, 1.0))
        return np.array([right_ascension, declination])


class PositionObservationModel(_GeometricObservationModel):
    """
    Direct Cartesian position of the observed body.

    Measurement: z = r_obs(t)
    """

    required_link_ends = (LinkEndType.OBSERVED_BODY,)

    def __init__(self, link_ends: LinkEnds, state_functions: Mapping[LinkEndType, StateFunction]):
        super().__init__(ObservableType.POSITION_OBSERVABLE, link_ends, state_functions)

    def compute_observations(self, time: float, link_end_type: LinkEndType) -> np.ndarray:
        return self._state(LinkEndType.OBSERVED_BODY, time)[:3].copy()


class ObservationSimulator:
    """
    Registry of observation models for a single observable type.

    Example:
        >>> simulator = ObservationSimulator(
        ...     ObservableType.ONE_WAY_RANGE, {link_ends: range_model}
        ... )
        >>> simulator.get_observation_size(link_ends)
        1
    """

    def __init__(
        self,
        observable_type: ObservableType,
        observation_models: Mapping[LinkEnds, ObservationModel],
    ):
        """
        Initialize observation simulator.

        Args:
            observable_type: Observable simulated by all registered models.
            observation_models: Models keyed by the link ends they evaluate.

        Raises:
            ValueError: If a model is bound to another observable type or
                to link ends different from its key.
        """
        self.observable_type = observable_type
        self.observation_size = get_observable_size(observable_type)

        for link_ends, model in observation_models.items():
            if model.observable_type != observable_type:
                raise ValueError(
                    f"Model for {link_ends!r} computes {model.observable_type.name}, "
                    f"expected {observable_type.name}"
                )
            if model.link_ends != link_ends:
                raise ValueError(
                    f"Model registered under {link_ends!r} is bound to {model.link_ends!r}"
                )
        self._observation_models: Dict[LinkEnds, ObservationModel] = dict(observation_models)

    @property
    def link_ends(self):
        """Link ends with a registered model, in registration order."""
        return tuple(self._observation_models)

    def get_observation_model(self, link_ends: LinkEnds) -> Optional[ObservationModel]:
        """Return the model registered for `link_ends`, or None."""
        return self._observation_models.get(link_ends)

    def get_observation_size(self, link_ends: LinkEnds) -> int:
        """Return the observation size for `link_ends` (the catalog size)."""
        return self.observation_size

    def __repr__(self) -> str:
        return (
            f"ObservationSimulator({self.observable_type.name}, "
            f"{len(self._observation_models)} link ends)"
        )
