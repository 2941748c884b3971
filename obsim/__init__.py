"""Observation simulation for tracking and navigation studies.

This package contains the components that turn a description of *when* to
measure, *which* link geometry measures, and *which* model evaluates the
measurement into synthetic observation datasets:
- observations: Link ends, time settings, models, simulators and noise injection
- sim: Noise samplers used to perturb simulated observations
"""

__version__ = "0.1.0"
