"""Errors raised by the observation simulation pipeline.

Every error aborts the aggregate call that raised it; no partial results
are returned. Each class also derives from the closest builtin so callers
catching LookupError or ValueError keep working.

Author: Navigation Engineering Team
Date: October 2026
"""


class ObservationSimulationError(RuntimeError):
    """Base class for observation simulation failures."""


class NullModelError(ObservationSimulationError, LookupError):
    """No observation model is registered for the requested link ends."""


class MissingSimulatorError(ObservationSimulationError, LookupError):
    """An observable type to simulate has no observation simulator."""


class UnsupportedDimensionError(ObservationSimulationError, ValueError):
    """An observation size outside the supported set {1, 2, 3}."""


class ModelSizeMismatchError(ObservationSimulationError, ValueError):
    """A model's output size disagrees with the size it was dispatched for."""


class MissingObservableNoiseError(ObservationSimulationError, LookupError):
    """No noise function is defined for a simulated observable (or link ends)."""


class InconsistentSampleCountError(ObservationSimulationError, ValueError):
    """Number of observation values is not number of times * observable size."""


class InconsistentNoiseSizeError(ObservationSimulationError, ValueError):
    """A noise function returned a vector of the wrong size."""
