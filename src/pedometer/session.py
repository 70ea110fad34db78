"""Pedometer session: owns the detector state and wires it to a motion source."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from .config import DetectorConfig
from .history_buffer import HistoryBuffer
from .motion_source import MotionPermissionError, MotionSource, wall_clock_ms
from .step_detector import DetectorState, SensorSample, magnitude, process_sample
from .ui_throttle import UiThrottle


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UiSnapshot:
    """Everything the screen needs to draw one frame."""
    x: float
    y: float
    z: float
    m: float
    steps: int
    elapsed_sec: int
    running: bool
    threshold: float
    history: Tuple[float, ...]


@dataclass
class SessionClock:
    """Start time of the current session, for the elapsed-seconds readout."""
    start_timestamp_ms: int = 0

    def elapsed_seconds(self, now_ms: int) -> int:
        return max(0, (now_ms - self.start_timestamp_ms) // 1000)


class PedometerSession:
    """
    Thin adapter around the pure step detector.

    Holds the mutable state cell, forwards every sample from the motion
    source through ``process_sample``, keeps the chart history and publishes
    throttled snapshots to ``on_snapshot``. All calls are expected on one
    event loop; there is no locking.
    """

    def __init__(
        self,
        source: MotionSource,
        config: Optional[DetectorConfig] = None,
        on_snapshot: Optional[Callable[[UiSnapshot], None]] = None,
        threshold: Optional[float] = None,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        """
        Initialize the session.

        Args:
            source: Motion sample source
            config: Detector configuration (defaults to DetectorConfig())
            on_snapshot: Called with a UiSnapshot whenever the display should refresh
            threshold: Initial crossing threshold, defaults to config value
            clock: Millisecond clock used for the session start time
        """
        self.source = source
        self.config = config or DetectorConfig()
        self.on_snapshot = on_snapshot
        self.clock = clock

        self.state = DetectorState(
            threshold=self._clamp_threshold(
                threshold if threshold is not None else self.config.DEFAULT_THRESHOLD
            )
        )
        self.history = HistoryBuffer(self.config.MAX_HISTORY_POINTS)
        self.throttle = UiThrottle(self.config.UI_UPDATE_INTERVAL_MS)
        self.session_clock = SessionClock()

        self.running = False
        self.generation = 0
        self._starting = False

        # Last published readouts
        self.x = self.y = self.z = self.m = 0.0
        self.elapsed_sec = 0

    @property
    def step_count(self) -> int:
        return self.state.step_count

    @property
    def threshold(self) -> float:
        return self.state.threshold

    def _clamp_threshold(self, value: float) -> float:
        return min(max(float(value), self.config.THRESHOLD_MIN), self.config.THRESHOLD_MAX)

    async def start(self) -> bool:
        """
        Request permission and begin processing samples.

        A no-op while running or while an earlier start is still waiting on
        permission. If stop() is called before permission resolves, the
        late result is discarded and no callback is registered.

        Returns:
            True if this call started the session

        Raises:
            MotionPermissionError: If the source refuses access
        """
        if self.running or self._starting:
            logger.info("Session already running, ignoring start()")
            return False

        self.generation += 1
        generation = self.generation
        self._starting = True
        try:
            await self.source.request_permission()
        except MotionPermissionError as e:
            logger.warning("Motion permission denied: %s", e)
            raise
        finally:
            if generation == self.generation:
                self._starting = False

        if generation != self.generation:
            logger.info("Permission resolved after stop(), discarding stale start")
            return False

        self.session_clock = SessionClock(self.clock())
        self.state = self.state.reset()
        self.history.clear()
        self.throttle.reset()
        self.elapsed_sec = 0
        self.running = True

        try:
            self.source.start(self.on_sample)
        except Exception:
            self.running = False
            raise
        logger.info("Session started (threshold=%.1f)", self.threshold)
        self._publish()
        return True

    def resume(self) -> bool:
        """
        Re-register with the source after its delivery loop went away.

        Used when the hosting event loop is replaced while the session is
        still running (e.g. a UI rerun). Counters are kept.

        Returns:
            True if delivery was restarted
        """
        if not self.running or self.source.is_active:
            return False
        self.source.start(self.on_sample)
        logger.info("Session resumed at %d steps", self.step_count)
        return True

    def on_sample(self, ax: float, ay: float, az: float, timestamp_ms: int) -> bool:
        """
        Process one reading from the motion source.

        Detection and history see every sample; only the readout refresh
        is throttled.

        Returns:
            True if a step was detected on this sample
        """
        if not self.running:
            return False

        sample = SensorSample(float(ax), float(ay), float(az), int(timestamp_ms))
        self.state, step_detected = process_sample(sample, self.state)

        m = magnitude(sample.ax, sample.ay, sample.az)
        self.history.append(m)

        if step_detected:
            logger.debug("Step %d at %d ms", self.state.step_count, sample.timestamp_ms)

        if self.throttle.should_publish(sample.timestamp_ms):
            self.x, self.y, self.z, self.m = sample.ax, sample.ay, sample.az, m
            self.elapsed_sec = self.session_clock.elapsed_seconds(sample.timestamp_ms)
            self._publish()

        return step_detected

    def stop(self):
        """Deregister from the source and freeze the current state."""
        self.generation += 1
        self._starting = False
        self.source.stop()
        if self.running:
            self.running = False
            logger.info("Session stopped at %d steps", self.step_count)
            self._publish()

    def reset(self):
        """Zero counters, readouts and history; running state and threshold are kept."""
        self.state = self.state.reset()
        self.x = self.y = self.z = self.m = 0.0
        self.elapsed_sec = 0
        self.history.clear()
        logger.info("Session reset")
        self._publish()

    def set_threshold(self, value: float) -> float:
        """
        Change the crossing threshold; applies from the next sample.

        Returns:
            The threshold actually stored (clamped to the slider range)
        """
        threshold = self._clamp_threshold(value)
        self.state = replace(self.state, threshold=threshold)
        return threshold

    def snapshot(self) -> UiSnapshot:
        return UiSnapshot(
            x=self.x,
            y=self.y,
            z=self.z,
            m=self.m,
            steps=self.state.step_count,
            elapsed_sec=self.elapsed_sec,
            running=self.running,
            threshold=self.state.threshold,
            history=self.history.values(),
        )

    def close(self):
        """Release the motion source (screen disposed)."""
        self.stop()

    def _publish(self):
        if self.on_snapshot is not None:
            self.on_snapshot(self.snapshot())
