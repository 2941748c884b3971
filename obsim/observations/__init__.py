"""
Observation simulation module.

Submodules:
    types: Observable types, size catalog and link ends
    errors: Errors raised by the simulation pipeline
    time_settings: Epochs at which observations are simulated
    models: Observation models and per-observable simulators
    simulate: Noise-free single-set and aggregate simulation
    noise: Noise normalization and noisy simulation
"""

from obsim.observations.errors import (
    InconsistentNoiseSizeError,
    InconsistentSampleCountError,
    MissingObservableNoiseError,
    MissingSimulatorError,
    ModelSizeMismatchError,
    NullModelError,
    ObservationSimulationError,
    UnsupportedDimensionError,
)
from obsim.observations.models import (
    AngularPositionModel,
    FunctionObservationModel,
    ObservationModel,
    ObservationSimulator,
    OneWayDopplerModel,
    OneWayRangeModel,
    PositionObservationModel,
)
from obsim.observations.noise import (
    broadcast_global_noise_function,
    broadcast_observable_noise_functions,
    create_iid_noise_function,
    expand_link_noise_functions,
    expand_observable_noise_functions,
    iid_noise_vector,
    simulate_observations_with_global_noise,
    simulate_observations_with_link_noise,
    simulate_observations_with_noise,
    simulate_observations_with_observable_noise,
    simulate_observations_with_observable_vector_noise,
)
from obsim.observations.simulate import (
    ObservationSet,
    simulate_observations,
    simulate_single_observation_set,
    simulate_single_observation_set_from_simulator,
)
from obsim.observations.time_settings import (
    IntervalObservationSimulationTimeSettings,
    ObservationSimulationTimeSettings,
    TabulatedObservationSimulationTimeSettings,
    create_observation_simulation_time_settings_map,
)
from obsim.observations.types import (
    OBSERVABLE_SIZES,
    LinkEndId,
    LinkEndType,
    LinkEnds,
    ObservableType,
    get_observable_size,
)

__all__ = [
    # Types
    "ObservableType",
    "OBSERVABLE_SIZES",
    "get_observable_size",
    "LinkEndType",
    "LinkEndId",
    "LinkEnds",
    # Errors
    "ObservationSimulationError",
    "NullModelError",
    "MissingSimulatorError",
    "UnsupportedDimensionError",
    "ModelSizeMismatchError",
    "MissingObservableNoiseError",
    "InconsistentSampleCountError",
    "InconsistentNoiseSizeError",
    # Time settings
    "ObservationSimulationTimeSettings",
    "TabulatedObservationSimulationTimeSettings",
    "IntervalObservationSimulationTimeSettings",
    "create_observation_simulation_time_settings_map",
    # Models
    "ObservationModel",
    "FunctionObservationModel",
    "OneWayRangeModel",
    "OneWayDopplerModel",
    "AngularPositionModel",
    "PositionObservationModel",
    "ObservationSimulator",
    # Simulation
    "ObservationSet",
    "simulate_single_observation_set",
    "simulate_single_observation_set_from_simulator",
    "simulate_observations",
    # Noise
    "iid_noise_vector",
    "create_iid_noise_function",
    "expand_link_noise_functions",
    "expand_observable_noise_functions",
    "broadcast_observable_noise_functions",
    "broadcast_global_noise_function",
    "simulate_observations_with_noise",
    "simulate_observations_with_link_noise",
    "simulate_observations_with_observable_noise",
    "simulate_observations_with_observable_vector_noise",
    "simulate_observations_with_global_noise",
]
