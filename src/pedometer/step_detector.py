"""Real-time step detection from accelerometer magnitude."""

import math
from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple

from .config import DetectorConfig


_DEFAULTS = DetectorConfig()

# Fixed detector constants
EMA_ALPHA = 0.1  # Smoothing factor for the magnitude EMA
MIN_STEP_INTERVAL_MS = 300  # Debounce between accepted steps


class SensorSample(NamedTuple):
    """One accelerometer reading (m/s^2) with its timestamp in milliseconds."""
    ax: float
    ay: float
    az: float
    timestamp_ms: int


@dataclass(frozen=True)
class DetectorState:
    """
    Smoothing and step-counting state for one session.

    The threshold lives on the state rather than on a shared class attribute
    so that independent sessions never see each other's slider value.
    """
    magnitude_ema: float = 0.0
    prev_diff: float = 0.0
    last_step_timestamp_ms: int = 0
    step_count: int = 0
    threshold: float = _DEFAULTS.DEFAULT_THRESHOLD

    def reset(self) -> "DetectorState":
        """Return a zeroed state that keeps the current threshold."""
        return DetectorState(threshold=self.threshold)


def magnitude(ax: float, ay: float, az: float) -> float:
    """Euclidean norm of the acceleration vector."""
    return math.sqrt(ax * ax + ay * ay + az * az)


def process_sample(
    sample: SensorSample,
    state: DetectorState
) -> Tuple[DetectorState, bool]:
    """
    Process a new sample and return the updated state.

    A step is a rising edge of ``magnitude - ema`` through the threshold,
    accepted only if more than MIN_STEP_INTERVAL_MS has passed since the
    previous step. There is no warm-up: the EMA starts at zero, so a large
    first reading can register as a step.

    Non-finite inputs are not filtered and propagate into the state.

    Args:
        sample: Incoming accelerometer reading
        state: Current detector state (read, never mutated)

    Returns:
        Tuple of (new_state, step_detected)
    """
    m = magnitude(sample.ax, sample.ay, sample.az)

    ema = (1 - EMA_ALPHA) * state.magnitude_ema + EMA_ALPHA * m
    diff = m - ema

    # Current threshold is read every call so slider changes apply mid-session
    threshold = state.threshold
    step_detected = (
        state.prev_diff <= threshold
        and diff > threshold
        and sample.timestamp_ms - state.last_step_timestamp_ms > MIN_STEP_INTERVAL_MS
    )

    if step_detected:
        new_state = replace(
            state,
            magnitude_ema=ema,
            prev_diff=diff,
            last_step_timestamp_ms=sample.timestamp_ms,
            step_count=state.step_count + 1,
        )
    else:
        new_state = replace(state, magnitude_ema=ema, prev_diff=diff)

    return new_state, step_detected
