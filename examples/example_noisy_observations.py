"""
Simulation of Noisy Tracking Observations.

This script simulates range, range-rate, angular position and position
observations of a spacecraft on a circular orbit, tracked from a ground
station on a rotating body, and perturbs them with noise at different
levels of granularity.

Can run with:
    - Default preset: python example_noisy_observations.py
    - Another preset: python example_noisy_observations.py --preset pink_range
    - Compare presets: python example_noisy_observations.py --compare

Demonstrates:
    - Tabulated and interval simulation time settings
    - Aggregate simulation over several observables and link ends
    - Per-observable and per-link noise specifications

Date: October 2026
"""

import argparse
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from obsim.observations import (
    AngularPositionModel,
    IntervalObservationSimulationTimeSettings,
    LinkEndType,
    LinkEnds,
    ObservableType,
    ObservationSimulator,
    OneWayDopplerModel,
    OneWayRangeModel,
    PositionObservationModel,
    TabulatedObservationSimulationTimeSettings,
    get_observable_size,
    simulate_observations,
    simulate_observations_with_link_noise,
    simulate_observations_with_observable_noise,
)
from obsim.sim import (
    create_gaussian_noise_function,
    create_pink_noise_function,
)


# ============================================================================
# PRESET CONFIGURATIONS
# ============================================================================

PRESETS = {
    'baseline': {
        'description': 'White noise on every observable',
        'range_std_m': 1.0,
        'range_rate_std_m_s': 1e-3,
        'angle_std_rad': 1e-5,
        'position_std_m': 10.0,
        'pink_range': False,
    },
    'pink_range': {
        'description': 'Time-correlated (1/f) range noise, white elsewhere',
        'range_std_m': 5.0,
        'range_rate_std_m_s': 1e-3,
        'angle_std_rad': 1e-5,
        'position_std_m': 10.0,
        'pink_range': True,
    },
    'precise': {
        'description': 'Low noise levels',
        'range_std_m': 0.05,
        'range_rate_std_m_s': 1e-5,
        'angle_std_rad': 1e-7,
        'position_std_m': 0.5,
        'pink_range': False,
    },
}

BODY_RADIUS_M = 6.378e6
BODY_ROTATION_RAD_S = 7.292115e-5
ORBIT_RADIUS_M = 7.0e6
GM_M3_S2 = 3.986004418e14


# ============================================================================
# SCENARIO
# ============================================================================

def spacecraft_state(t: float) -> np.ndarray:
    """Circular equatorial orbit state [x, y, z, vx, vy, vz]."""
    n = np.sqrt(GM_M3_S2 / ORBIT_RADIUS_M**3)
    angle = n * t
    r = ORBIT_RADIUS_M
    return np.array([
        r * np.cos(angle), r * np.sin(angle), 0.0,
        -r * n * np.sin(angle), r * n * np.cos(angle), 0.0,
    ])


def station_state(longitude_rad: float):
    """State function of an equatorial station on the rotating body."""

    def state(t: float) -> np.ndarray:
        angle = longitude_rad + BODY_ROTATION_RAD_S * t
        r = BODY_RADIUS_M
        w = BODY_ROTATION_RAD_S
        return np.array([
            r * np.cos(angle), r * np.sin(angle), 0.0,
            -r * w * np.sin(angle), r * w * np.cos(angle), 0.0,
        ])

    return state


def build_scenario(duration: float, interval: float):
    """Build time settings and simulators for two stations and one spacecraft.

    Returns:
        Tuple of (settings_map, simulators, link_ends) where link_ends maps
        a short name to each LinkEnds used.
    """
    link_ends = {
        'station_a': LinkEnds.from_dict({
            LinkEndType.TRANSMITTER: 'Spacecraft',
            LinkEndType.RECEIVER: ('Earth', 'Station-A'),
        }),
        'station_b': LinkEnds.from_dict({
            LinkEndType.TRANSMITTER: 'Spacecraft',
            LinkEndType.RECEIVER: ('Earth', 'Station-B'),
        }),
        'gnss': LinkEnds.from_dict({LinkEndType.OBSERVED_BODY: 'Spacecraft'}),
    }
    states = {
        'station_a': {
            LinkEndType.TRANSMITTER: spacecraft_state,
            LinkEndType.RECEIVER: station_state(0.0),
        },
        'station_b': {
            LinkEndType.TRANSMITTER: spacecraft_state,
            LinkEndType.RECEIVER: station_state(np.deg2rad(20.0)),
        },
    }

    interval_settings = IntervalObservationSimulationTimeSettings(
        LinkEndType.RECEIVER, start_time=0.0, end_time=duration, interval=interval
    )
    # Station B only tracks the second half of the pass
    half_pass = np.arange(duration / 2.0, duration, interval)
    settings_map = {
        ObservableType.ONE_WAY_RANGE: {
            link_ends['station_a']: interval_settings,
            link_ends['station_b']: TabulatedObservationSimulationTimeSettings(
                LinkEndType.RECEIVER, half_pass
            ),
        },
        ObservableType.ONE_WAY_DOPPLER: {link_ends['station_a']: interval_settings},
        ObservableType.ANGULAR_POSITION: {link_ends['station_a']: interval_settings},
        ObservableType.POSITION_OBSERVABLE: {
            link_ends['gnss']: IntervalObservationSimulationTimeSettings(
                LinkEndType.OBSERVED_BODY, start_time=0.0, end_time=duration, interval=10.0 * interval
            ),
        },
    }

    simulators = {
        ObservableType.ONE_WAY_RANGE: ObservationSimulator(ObservableType.ONE_WAY_RANGE, {
            link_ends[name]: OneWayRangeModel(link_ends[name], states[name])
            for name in ('station_a', 'station_b')
        }),
        ObservableType.ONE_WAY_DOPPLER: ObservationSimulator(ObservableType.ONE_WAY_DOPPLER, {
            link_ends['station_a']: OneWayDopplerModel(link_ends['station_a'], states['station_a']),
        }),
        ObservableType.ANGULAR_POSITION: ObservationSimulator(ObservableType.ANGULAR_POSITION, {
            link_ends['station_a']: AngularPositionModel(link_ends['station_a'], states['station_a']),
        }),
        ObservableType.POSITION_OBSERVABLE: ObservationSimulator(ObservableType.POSITION_OBSERVABLE, {
            link_ends['gnss']: PositionObservationModel(
                link_ends['gnss'], {LinkEndType.OBSERVED_BODY: spacecraft_state}
            ),
        }),
    }
    return settings_map, simulators, link_ends


# ============================================================================
# SIMULATION
# ============================================================================

def run_preset(preset: Dict, settings_map, simulators, link_ends, seed: int) -> Dict:
    """Simulate noise-free and noisy observations for one preset.

    Returns:
        Dictionary with 'noise_free', 'noisy' observations and per-observable
        residual RMS.
    """
    rng = np.random.default_rng(seed)

    noise_free = simulate_observations(settings_map, simulators)

    if preset['pink_range']:
        # Per-link noise: correlated range noise, one realization per station
        noise_functions = {
            ObservableType.ONE_WAY_RANGE: {
                link: create_pink_noise_function(
                    settings_map[ObservableType.ONE_WAY_RANGE][link].simulation_times,
                    preset['range_std_m'], rng=rng,
                )
                for link in settings_map[ObservableType.ONE_WAY_RANGE]
            },
            ObservableType.ONE_WAY_DOPPLER: {
                link_ends['station_a']: create_gaussian_noise_function(preset['range_rate_std_m_s'], rng=rng),
            },
            ObservableType.ANGULAR_POSITION: {
                link_ends['station_a']: create_gaussian_noise_function(preset['angle_std_rad'], rng=rng),
            },
            ObservableType.POSITION_OBSERVABLE: {
                link_ends['gnss']: create_gaussian_noise_function(preset['position_std_m'], rng=rng),
            },
        }
        noisy = simulate_observations_with_link_noise(settings_map, simulators, noise_functions)
    else:
        noisy = simulate_observations_with_observable_noise(settings_map, simulators, {
            ObservableType.ONE_WAY_RANGE: create_gaussian_noise_function(preset['range_std_m'], rng=rng),
            ObservableType.ONE_WAY_DOPPLER: create_gaussian_noise_function(preset['range_rate_std_m_s'], rng=rng),
            ObservableType.ANGULAR_POSITION: create_gaussian_noise_function(preset['angle_std_rad'], rng=rng),
            ObservableType.POSITION_OBSERVABLE: create_gaussian_noise_function(preset['position_std_m'], rng=rng),
        })

    rms = {}
    for observable_type, link_observations in noisy.items():
        residuals = np.concatenate([
            observation_set.values - noise_free[observable_type][link].values
            for link, observation_set in link_observations.items()
        ])
        rms[observable_type] = float(np.sqrt(np.mean(residuals**2)))

    return {'noise_free': noise_free, 'noisy': noisy, 'rms': rms}


def plot_residuals(result: Dict, title: str) -> None:
    """Plot noisy minus noise-free residuals for each observable."""
    noisy = result['noisy']
    noise_free = result['noise_free']

    fig, axes = plt.subplots(len(noisy), 1, figsize=(10, 2.5 * len(noisy)), sharex=True)
    for ax, (observable_type, link_observations) in zip(np.atleast_1d(axes), noisy.items()):
        size = get_observable_size(observable_type)
        for link, observation_set in link_observations.items():
            residuals = (
                observation_set.as_matrix(size)
                - noise_free[observable_type][link].as_matrix(size)
            )
            for channel in range(size):
                ax.plot(observation_set.times, residuals[:, channel], '.', markersize=2,
                        label=f"{link!r} [{channel}]")
        ax.set_ylabel(observable_type.name)
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=6, loc='upper right')
    np.atleast_1d(axes)[-1].set_xlabel('Time [s]')
    fig.suptitle(title)
    fig.tight_layout()
    plt.show()


def main():
    parser = argparse.ArgumentParser(description='Simulate noisy tracking observations')
    parser.add_argument('--preset', choices=sorted(PRESETS), default='baseline',
                        help='Noise preset (default: baseline)')
    parser.add_argument('--seed', type=int, default=42, help='Random seed (default: 42)')
    parser.add_argument('--duration', type=float, default=3600.0,
                        help='Simulated span in seconds (default: 3600)')
    parser.add_argument('--interval', type=float, default=10.0,
                        help='Observation interval in seconds (default: 10)')
    parser.add_argument('--compare', action='store_true', help='Run all presets and compare')
    parser.add_argument('--no-plot', action='store_true', help='Skip plotting')
    args = parser.parse_args()

    settings_map, simulators, link_ends = build_scenario(args.duration, args.interval)

    print(f"\n{'='*70}")
    print("Noisy Observation Simulation")
    print(f"{'='*70}")
    for observable_type, link_settings in settings_map.items():
        for link, settings in link_settings.items():
            print(f"  {observable_type.name:<22} {link!r}: {len(settings.simulation_times)} epochs")

    preset_names = sorted(PRESETS) if args.compare else [args.preset]
    results = {}
    for name in tqdm(preset_names, desc='Presets', disable=len(preset_names) == 1):
        results[name] = run_preset(PRESETS[name], settings_map, simulators, link_ends, args.seed)

    print(f"\n{'Preset':<12} " + " ".join(f"{t.name:>22}" for t in settings_map))
    print('-' * (13 + 23 * len(settings_map)))
    for name, result in results.items():
        print(f"{name:<12} " + " ".join(f"{result['rms'][t]:>22.3e}" for t in settings_map))

    if not args.no_plot:
        name = preset_names[0]
        plot_residuals(results[name], f"Residuals ({name}: {PRESETS[name]['description']})")


if __name__ == "__main__":
    main()
