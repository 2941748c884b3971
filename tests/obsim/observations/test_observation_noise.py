"""
Unit tests for obsim/observations/noise.py.

Tests cover:
    - Scalar to vector noise expansion and broadcasting adapters
    - Noise addition per sample
    - Equivalence of the four noise granularities
    - Sample count and noise size consistency checks
"""

import unittest

import numpy as np
import pytest

from obsim.observations import (
    FunctionObservationModel,
    InconsistentNoiseSizeError,
    InconsistentSampleCountError,
    LinkEndType,
    LinkEnds,
    MissingObservableNoiseError,
    ObservableType,
    ObservationSimulator,
    TabulatedObservationSimulationTimeSettings,
    broadcast_global_noise_function,
    broadcast_observable_noise_functions,
    create_iid_noise_function,
    expand_link_noise_functions,
    expand_observable_noise_functions,
    get_observable_size,
    simulate_observations,
    simulate_observations_with_global_noise,
    simulate_observations_with_link_noise,
    simulate_observations_with_noise,
    simulate_observations_with_observable_noise,
    simulate_observations_with_observable_vector_noise,
)


LINK = LinkEnds.from_dict({LinkEndType.TRANSMITTER: "Mars", LinkEndType.RECEIVER: "Earth"})
OTHER_LINK = LinkEnds.from_dict({LinkEndType.TRANSMITTER: "Moon", LinkEndType.RECEIVER: "Earth"})
TIMES = [0.0, 1.0, 2.0]


def tabulated(times=TIMES):
    return TabulatedObservationSimulationTimeSettings(LinkEndType.RECEIVER, times)


def linear_model(observable_type, link_ends):
    size = get_observable_size(observable_type)
    return FunctionObservationModel(
        observable_type, link_ends, lambda t, r: 2.0 * t + np.arange(size)
    )


def build_scenario():
    """Two observables (sizes 1 and 2), range observed over two links."""
    settings_map = {
        ObservableType.ONE_WAY_RANGE: {LINK: tabulated(), OTHER_LINK: tabulated([5.0, 6.0])},
        ObservableType.ANGULAR_POSITION: {LINK: tabulated()},
    }
    simulators = {
        ObservableType.ONE_WAY_RANGE: ObservationSimulator(
            ObservableType.ONE_WAY_RANGE,
            {
                LINK: linear_model(ObservableType.ONE_WAY_RANGE, LINK),
                OTHER_LINK: linear_model(ObservableType.ONE_WAY_RANGE, OTHER_LINK),
            },
        ),
        ObservableType.ANGULAR_POSITION: ObservationSimulator(
            ObservableType.ANGULAR_POSITION,
            {LINK: linear_model(ObservableType.ANGULAR_POSITION, LINK)},
        ),
    }
    return settings_map, simulators


def zero_noise(time):
    return 0.0


class TestNoiseAdapters(unittest.TestCase):
    """Test suite for the noise normalization adapters."""

    def test_iid_noise_function_fills_channels(self) -> None:
        noise = create_iid_noise_function(lambda t: t + 0.5, 3)

        np.testing.assert_array_equal(noise(1.0), [1.5, 1.5, 1.5])

    def test_iid_noise_calls_once_per_channel(self) -> None:
        """Each channel gets its own draw from the scalar function."""
        draws = iter([1.0, 2.0])
        noise = create_iid_noise_function(lambda t: next(draws), 2)

        np.testing.assert_array_equal(noise(0.0), [1.0, 2.0])

    def test_expand_link_noise(self) -> None:
        expanded = expand_link_noise_functions({
            ObservableType.ANGULAR_POSITION: {LINK: lambda t: 0.1},
        })

        np.testing.assert_array_equal(expanded[ObservableType.ANGULAR_POSITION][LINK](3.0), [0.1, 0.1])

    def test_expand_observable_noise(self) -> None:
        expanded = expand_observable_noise_functions({
            ObservableType.POSITION_OBSERVABLE: lambda t: -1.0,
        })

        self.assertEqual(expanded[ObservableType.POSITION_OBSERVABLE](0.0).shape, (3,))

    def test_broadcast_over_link_ends(self) -> None:
        settings_map, _ = build_scenario()
        range_noise = lambda t: np.array([1.0])
        angle_noise = lambda t: np.array([2.0, 3.0])

        full = broadcast_observable_noise_functions(settings_map, {
            ObservableType.ONE_WAY_RANGE: range_noise,
            ObservableType.ANGULAR_POSITION: angle_noise,
        })

        self.assertIs(full[ObservableType.ONE_WAY_RANGE][LINK], range_noise)
        self.assertIs(full[ObservableType.ONE_WAY_RANGE][OTHER_LINK], range_noise)
        self.assertEqual(list(full[ObservableType.ANGULAR_POSITION]), [LINK])

    def test_broadcast_missing_observable(self) -> None:
        settings_map, _ = build_scenario()

        with pytest.raises(MissingObservableNoiseError, match="ANGULAR_POSITION"):
            broadcast_observable_noise_functions(settings_map, {
                ObservableType.ONE_WAY_RANGE: lambda t: np.array([1.0]),
            })

    def test_broadcast_global(self) -> None:
        settings_map, _ = build_scenario()

        per_observable = broadcast_global_noise_function(settings_map, zero_noise)

        self.assertEqual(
            list(per_observable),
            [ObservableType.ONE_WAY_RANGE, ObservableType.ANGULAR_POSITION],
        )
        self.assertTrue(all(f is zero_noise for f in per_observable.values()))


class TestSimulateObservationsWithNoise:
    """Test suite for the canonical noisy simulation."""

    def test_concrete_scenario(self):
        """Model 2t at [0, 1, 2] plus constant 0.1 noise gives [0.1, 2.1, 4.1]."""
        settings_map = {ObservableType.ONE_WAY_RANGE: {LINK: tabulated()}}
        simulators = {
            ObservableType.ONE_WAY_RANGE: ObservationSimulator(
                ObservableType.ONE_WAY_RANGE,
                {LINK: linear_model(ObservableType.ONE_WAY_RANGE, LINK)},
            )
        }

        noise_free = simulate_observations(settings_map, simulators)
        noisy = simulate_observations_with_noise(
            settings_map, simulators,
            {ObservableType.ONE_WAY_RANGE: {LINK: lambda t: np.array([0.1])}},
        )

        np.testing.assert_array_equal(noise_free[ObservableType.ONE_WAY_RANGE][LINK].values, [0.0, 2.0, 4.0])
        np.testing.assert_allclose(noisy[ObservableType.ONE_WAY_RANGE][LINK].values, [0.1, 2.1, 4.1])

    def test_noise_is_sample_local(self):
        """Each sample block is perturbed by the noise at its own time."""
        settings_map, simulators = build_scenario()
        noise_functions = {
            ObservableType.ONE_WAY_RANGE: {
                LINK: lambda t: np.array([t / 10.0]),
                OTHER_LINK: lambda t: np.array([-t]),
            },
            ObservableType.ANGULAR_POSITION: {LINK: lambda t: np.array([t, -2.0 * t])},
        }

        noise_free = simulate_observations(settings_map, simulators)
        noisy = simulate_observations_with_noise(settings_map, simulators, noise_functions)

        for observable_type, link_observations in noisy.items():
            size = get_observable_size(observable_type)
            for link_ends, observation_set in link_observations.items():
                reference = noise_free[observable_type][link_ends]
                difference = observation_set.as_matrix(size) - reference.as_matrix(size)
                for i, time in enumerate(observation_set.times):
                    np.testing.assert_allclose(
                        difference[i], noise_functions[observable_type][link_ends](time)
                    )

    def test_times_and_reference_carried_through(self):
        settings_map, simulators = build_scenario()
        noise_free = simulate_observations(settings_map, simulators)

        noisy = simulate_observations_with_global_noise(settings_map, simulators, lambda t: 1.0)

        result = noisy[ObservableType.ONE_WAY_RANGE][OTHER_LINK]
        assert result.times == (5.0, 6.0)
        assert result.times == noise_free[ObservableType.ONE_WAY_RANGE][OTHER_LINK].times
        assert result.reference_link_end == LinkEndType.RECEIVER

    def test_wrong_noise_size(self):
        settings_map, simulators = build_scenario()
        noise_functions = {
            ObservableType.ONE_WAY_RANGE: {
                LINK: lambda t: np.array([0.0]),
                OTHER_LINK: lambda t: np.array([0.0]),
            },
            ObservableType.ANGULAR_POSITION: {LINK: lambda t: np.array([0.0])},
        }

        with pytest.raises(InconsistentNoiseSizeError, match="expected 2"):
            simulate_observations_with_noise(settings_map, simulators, noise_functions)

    def test_noise_evaluated_once_per_sample(self):
        """Checking the noise size does not draw an extra sample."""
        settings_map = {ObservableType.ONE_WAY_RANGE: {LINK: tabulated()}}
        simulators = {
            ObservableType.ONE_WAY_RANGE: ObservationSimulator(
                ObservableType.ONE_WAY_RANGE,
                {LINK: linear_model(ObservableType.ONE_WAY_RANGE, LINK)},
            )
        }
        calls = []

        def noise(time):
            calls.append(time)
            return np.array([0.5])

        simulate_observations_with_noise(
            settings_map, simulators, {ObservableType.ONE_WAY_RANGE: {LINK: noise}}
        )

        # Evaluated exactly once per sample
        assert calls == TIMES

    def test_wrong_noise_size_on_later_sample(self):
        """A short vector after the first sample is not broadcast across channels."""
        settings_map = {ObservableType.ANGULAR_POSITION: {LINK: tabulated()}}
        simulators = {
            ObservableType.ANGULAR_POSITION: ObservationSimulator(
                ObservableType.ANGULAR_POSITION,
                {LINK: linear_model(ObservableType.ANGULAR_POSITION, LINK)},
            )
        }

        def noise(time):
            return np.zeros(2) if time == 0.0 else np.array([5.0])

        with pytest.raises(InconsistentNoiseSizeError, match="t=1.0, expected 2"):
            simulate_observations_with_noise(
                settings_map, simulators, {ObservableType.ANGULAR_POSITION: {LINK: noise}}
            )

    def test_zero_noise_on_negative_zero(self):
        """Zero noise keeps negative-zero values equal, though not their sign bit."""
        settings_map = {ObservableType.ONE_WAY_RANGE: {LINK: tabulated([0.0])}}
        simulators = {
            ObservableType.ONE_WAY_RANGE: ObservationSimulator(
                ObservableType.ONE_WAY_RANGE,
                {LINK: FunctionObservationModel(
                    ObservableType.ONE_WAY_RANGE, LINK, lambda t, r: [-1.0 * t]
                )},
            )
        }

        noise_free = simulate_observations(settings_map, simulators)
        noisy = simulate_observations_with_global_noise(settings_map, simulators, zero_noise)

        values = noisy[ObservableType.ONE_WAY_RANGE][LINK].values
        assert np.signbit(noise_free[ObservableType.ONE_WAY_RANGE][LINK].values[0])
        np.testing.assert_array_equal(values, noise_free[ObservableType.ONE_WAY_RANGE][LINK].values)
        assert not np.signbit(values[0])

    def test_missing_pair_noise(self):
        settings_map, simulators = build_scenario()
        noise_functions = {
            ObservableType.ONE_WAY_RANGE: {LINK: lambda t: np.array([0.0])},
            ObservableType.ANGULAR_POSITION: {LINK: lambda t: np.zeros(2)},
        }

        with pytest.raises(MissingObservableNoiseError):
            simulate_observations_with_noise(settings_map, simulators, noise_functions)

    def test_inconsistent_sample_count(self):
        """A simulator reporting another size than the catalog is caught."""

        class PairSimulator(ObservationSimulator):
            def get_observation_size(self, link_ends):
                return 2

        # Range model (catalog size 1) that returns two channels per sample
        model = FunctionObservationModel(
            ObservableType.ONE_WAY_RANGE, LINK, lambda t, r: np.array([t, t])
        )
        model.size = 2
        simulators = {
            ObservableType.ONE_WAY_RANGE: PairSimulator(ObservableType.ONE_WAY_RANGE, {LINK: model})
        }
        settings_map = {ObservableType.ONE_WAY_RANGE: {LINK: tabulated()}}

        with pytest.raises(InconsistentSampleCountError, match="6 values for 3 times"):
            simulate_observations_with_global_noise(settings_map, simulators, zero_noise)

    def test_noise_free_result_not_modified(self):
        settings_map, simulators = build_scenario()
        noise_free_before = simulate_observations(settings_map, simulators)

        simulate_observations_with_global_noise(settings_map, simulators, lambda t: 100.0)
        noise_free_after = simulate_observations(settings_map, simulators)

        np.testing.assert_array_equal(
            noise_free_before[ObservableType.ANGULAR_POSITION][LINK].values,
            noise_free_after[ObservableType.ANGULAR_POSITION][LINK].values,
        )


class TestNoiseGranularityEquivalence:
    """Zero noise through any entry point reproduces the noise-free result."""

    def _assert_identical(self, noisy, noise_free):
        assert list(noisy) == list(noise_free)
        for observable_type, link_observations in noise_free.items():
            assert list(noisy[observable_type]) == list(link_observations)
            for link_ends, reference in link_observations.items():
                np.testing.assert_array_equal(noisy[observable_type][link_ends].values, reference.values)
                assert noisy[observable_type][link_ends].times == reference.times

    def test_all_entry_points(self):
        settings_map, simulators = build_scenario()
        noise_free = simulate_observations(settings_map, simulators)

        canonical = {
            observable_type: {
                link_ends: lambda t, size=get_observable_size(observable_type): np.zeros(size)
                for link_ends in link_settings
            }
            for observable_type, link_settings in settings_map.items()
        }
        per_link = {
            observable_type: {link_ends: zero_noise for link_ends in link_settings}
            for observable_type, link_settings in settings_map.items()
        }
        per_observable = {observable_type: zero_noise for observable_type in settings_map}
        per_observable_vector = {
            ObservableType.ONE_WAY_RANGE: lambda t: np.zeros(1),
            ObservableType.ANGULAR_POSITION: lambda t: np.zeros(2),
        }

        results = [
            simulate_observations_with_noise(settings_map, simulators, canonical),
            simulate_observations_with_link_noise(settings_map, simulators, per_link),
            simulate_observations_with_observable_noise(settings_map, simulators, per_observable),
            simulate_observations_with_observable_vector_noise(
                settings_map, simulators, per_observable_vector
            ),
            simulate_observations_with_global_noise(settings_map, simulators, zero_noise),
        ]

        for noisy in results:
            self._assert_identical(noisy, noise_free)

    def test_observable_noise_missing_type(self):
        settings_map, simulators = build_scenario()

        with pytest.raises(MissingObservableNoiseError):
            simulate_observations_with_observable_noise(
                settings_map, simulators, {ObservableType.ONE_WAY_RANGE: zero_noise}
            )

    def test_constant_global_noise_in_every_channel(self):
        settings_map, simulators = build_scenario()
        noise_free = simulate_observations(settings_map, simulators)

        noisy = simulate_observations_with_global_noise(settings_map, simulators, lambda t: 0.5)

        np.testing.assert_allclose(
            noisy[ObservableType.ANGULAR_POSITION][LINK].values,
            noise_free[ObservableType.ANGULAR_POSITION][LINK].values + 0.5,
        )


if __name__ == "__main__":
    unittest.main()
