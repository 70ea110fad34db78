"""
Tests for the step detection core.
"""

import math

import numpy as np
import pytest

from pedometer import DetectorConfig, DetectorState, SensorSample, magnitude, process_sample
from pedometer import step_detector


def feed(samples, state):
    """Run samples through the detector, returning final state and step timestamps."""
    step_times = []
    for sample in samples:
        state, step = process_sample(sample, state)
        if step:
            step_times.append(sample.timestamp_ms)
    return state, step_times


def test_magnitude():
    assert magnitude(3.0, 4.0, 0.0) == pytest.approx(5.0)
    assert magnitude(0.0, 0.0, 0.0) == 0.0


def test_threshold_crossing_is_deterministic():
    """Magnitudes [0.5, 2.0] at [0, 400] ms cross 1.2 on the second sample."""
    state = DetectorState(threshold=1.2)

    state, step = process_sample(SensorSample(0.5, 0.0, 0.0, 0), state)
    assert not step
    assert state.magnitude_ema == pytest.approx(0.05)
    assert state.prev_diff == pytest.approx(0.45)
    assert state.step_count == 0

    state, step = process_sample(SensorSample(2.0, 0.0, 0.0, 400), state)
    assert step
    assert state.magnitude_ema == pytest.approx(0.245)
    assert state.prev_diff == pytest.approx(1.755)
    assert state.step_count == 1
    assert state.last_step_timestamp_ms == 400


def test_input_state_is_not_mutated():
    state = DetectorState(threshold=1.2)
    new_state, _ = process_sample(SensorSample(0.0, 0.0, 9.81, 1000), state)

    assert state == DetectorState(threshold=1.2)
    assert new_state is not state


def test_large_first_reading_counts_without_warmup():
    """No warm-up: gravity on the first sample already looks like a crossing."""
    _, step = process_sample(SensorSample(0.0, 0.0, 9.81, 1000), DetectorState())
    assert step

    # Same reading at t=0 falls inside the debounce window of lastStep=0
    _, step = process_sample(SensorSample(0.0, 0.0, 9.81, 0), DetectorState())
    assert not step


@pytest.mark.parametrize("timestamp, expected", [
    (1200, False),
    (1300, False),  # exactly the interval is not enough
    (1301, True),
])
def test_debounce_interval(timestamp, expected):
    state = DetectorState(last_step_timestamp_ms=1000, step_count=3, threshold=1.2)
    new_state, step = process_sample(SensorSample(0.0, 0.0, 5.0, timestamp), state)

    assert step is expected
    assert new_state.step_count == (4 if expected else 3)


def test_requires_rising_edge():
    """Staying above the threshold does not count again."""
    state = DetectorState(prev_diff=2.0, threshold=1.2)
    new_state, step = process_sample(SensorSample(0.0, 0.0, 5.0, 5000), state)

    assert not step
    assert new_state.prev_diff == pytest.approx(4.5)


def test_prev_diff_updated_without_step():
    state = DetectorState(magnitude_ema=1.0, prev_diff=0.3, threshold=1.2)
    new_state, step = process_sample(SensorSample(1.0, 0.0, 0.0, 100), state)

    assert not step
    assert new_state.magnitude_ema == pytest.approx(1.0)
    assert new_state.prev_diff == pytest.approx(0.0)


def test_current_threshold_is_used():
    sample = SensorSample(0.0, 0.0, 3.0, 1000)  # diff = 2.7

    _, step_high = process_sample(sample, DetectorState(threshold=4.0))
    _, step_low = process_sample(sample, DetectorState(threshold=2.0))

    assert not step_high
    assert step_low


def test_reset_keeps_threshold():
    state = DetectorState(
        magnitude_ema=9.0, prev_diff=0.4, last_step_timestamp_ms=7000,
        step_count=12, threshold=2.5
    )
    assert state.reset() == DetectorState(threshold=2.5)


def test_step_count_monotonic_and_debounced():
    """Random walk-like input: counts never decrease, steps are >300 ms apart."""
    rng = np.random.default_rng(42)
    t = np.arange(3000) * 16  # ~60 Hz
    z = 9.81 + 3.0 * np.sin(2 * np.pi * 1.8 * t / 1000.0) + rng.normal(0, 1.0, t.size)

    state = DetectorState(threshold=1.2)
    counts = []
    step_times = []
    for ts, az in zip(t, z):
        state, step = process_sample(SensorSample(0.0, 0.0, float(az), int(ts)), state)
        counts.append(state.step_count)
        if step:
            step_times.append(int(ts))

    assert all(b >= a for a, b in zip(counts, counts[1:]))
    assert len(step_times) > 0
    assert all(t2 - t1 > 300 for t1, t2 in zip(step_times, step_times[1:]))
    assert state.step_count == len(step_times)


def test_non_finite_input_does_not_raise():
    state, step = process_sample(SensorSample(float('nan'), 0.0, 0.0, 1000), DetectorState())

    assert not step
    assert math.isnan(state.magnitude_ema)


def test_walking_signal_counts_cadence():
    """10 s at 1.8 steps/s should give close to 18 steps."""
    fs = 60
    samples = []
    for i in range(10 * fs):
        t = i / fs
        az = 9.81 + 3.0 * math.sin(2 * math.pi * 1.8 * t)
        samples.append(SensorSample(0.0, 0.0, az, int(round(t * 1000))))

    state, step_times = feed(samples, DetectorState(threshold=1.2))

    assert 15 <= state.step_count <= 19


def test_smoothing_and_debounce_are_fixed():
    assert step_detector.EMA_ALPHA == 0.1
    assert step_detector.MIN_STEP_INTERVAL_MS == 300
    assert not hasattr(DetectorConfig(), 'EMA_ALPHA')
    assert not hasattr(DetectorConfig(), 'MIN_STEP_INTERVAL_MS')
