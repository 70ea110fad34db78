"""
Motion sample sources feeding the pedometer session.

A source delivers ``(ax, ay, az, timestamp_ms)`` readings to a single
registered callback, in order, from the running asyncio event loop:

1. Synthetic walk generated with NumPy (demo and tests)
2. Replay of a recorded parquet/CSV file loaded with Polars

Timestamps are restamped onto the wall-clock base captured when delivery
starts, keeping the recorded spacing between samples.
"""

import asyncio
import logging
import time
from typing import Callable, Iterator, Optional, Protocol, runtime_checkable

import numpy as np

from .config import SourceConfig
from .data_loader import AccelDataLoader
from .step_detector import SensorSample


logger = logging.getLogger(__name__)

SampleCallback = Callable[[float, float, float, int], None]


def wall_clock_ms() -> int:
    """Current wall-clock time in integer milliseconds."""
    return int(time.time() * 1000)


class MotionPermissionError(Exception):
    """Access to motion data was refused or the source is unavailable."""


@runtime_checkable
class MotionSource(Protocol):
    """Shape of a motion sample source, as consumed by PedometerSession."""

    async def request_permission(self) -> None: ...

    def start(self, on_sample: SampleCallback) -> None: ...

    def stop(self) -> None: ...

    @property
    def is_active(self) -> bool: ...


class PacedMotionSource:
    """
    Base class delivering samples from an iterator at their recorded pace.

    Subclasses implement ``_iter_samples``. Pacing is scaled by ``speed``;
    ``speed=None`` delivers as fast as the event loop allows.
    """

    def __init__(self, speed: Optional[float] = 1.0, clock: Callable[[], int] = wall_clock_ms):
        self.speed = speed
        self.clock = clock
        self._callback: Optional[SampleCallback] = None
        self._task: Optional[asyncio.Task] = None
        self._iterator: Optional[Iterator[SensorSample]] = None
        self.samples_delivered = 0

    async def request_permission(self) -> None:
        """Grant access; subclasses may refuse with MotionPermissionError."""

    def _iter_samples(self) -> Iterator[SensorSample]:
        raise NotImplementedError

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def error(self) -> Optional[BaseException]:
        """Exception that ended the last delivery run, if it failed."""
        task = self._task
        if task is None or not task.done() or task.cancelled():
            return None
        return task.exception()

    def start(self, on_sample: SampleCallback) -> None:
        """
        Register the callback and begin delivery on the running event loop.

        Calling start while already active is ignored. After the hosting loop
        went away without stop(), start resumes where delivery left off.
        """
        if self.is_active:
            logger.warning("%s already started, ignoring start()", type(self).__name__)
            return
        self._callback = on_sample
        if self._iterator is None:
            self._iterator = self._iter_samples()
            self.samples_delivered = 0
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Deregister the callback and cancel delivery."""
        self._callback = None
        self._iterator = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait_finished(self) -> None:
        """Wait until the current delivery run ends (data exhausted or stopped)."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        started_at = loop.time()
        base_ms = self.clock()
        first_ts = None

        for sample in self._iterator:
            if first_ts is None:
                first_ts = sample.timestamp_ms
            offset_ms = sample.timestamp_ms - first_ts

            if self.speed:
                # Sleep against the absolute schedule so rendering overhead doesn't accumulate
                target = started_at + offset_ms / 1000.0 / self.speed
                await asyncio.sleep(max(0.0, target - loop.time()))
            else:
                await asyncio.sleep(0)

            callback = self._callback
            if callback is None:
                break
            callback(sample.ax, sample.ay, sample.az, base_ms + offset_ms)
            self.samples_delivered += 1
        else:
            self._iterator = None
            logger.info("%s finished after %d samples", type(self).__name__, self.samples_delivered)


class SyntheticMotionSource(PacedMotionSource):
    """
    Generates a walking-like accelerometer signal.

    Vertical axis: gravity plus a sinusoidal bounce at the step cadence;
    all axes get gaussian noise. Deterministic for a given seed.
    """

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        duration_s: Optional[float] = None,
        cadence_hz: Optional[float] = None,
        amplitude: Optional[float] = None,
        noise: Optional[float] = None,
        seed: Optional[int] = None,
        permission_granted: bool = True,
        permission_delay: float = 0.0,
        speed: Optional[float] = 1.0,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        """
        Initialize the synthetic source.

        Args:
            config: Source configuration (defaults to SourceConfig())
            duration_s: Length of the generated walk, None for endless
            cadence_hz: Steps per second, defaults to config value
            amplitude: Peak bounce in m/s^2, defaults to config value
            noise: Noise standard deviation, defaults to config value
            seed: Random seed, defaults to config value
            permission_granted: False makes request_permission() fail
            permission_delay: Seconds request_permission() waits before resolving
            speed: Playback speed multiplier, None for unpaced delivery
            clock: Millisecond clock used for timestamp restamping
        """
        super().__init__(speed=speed, clock=clock)
        self.config = config or SourceConfig()
        self.duration_s = duration_s
        self.cadence_hz = cadence_hz if cadence_hz is not None else self.config.SYNTHETIC_CADENCE_HZ
        self.amplitude = amplitude if amplitude is not None else self.config.SYNTHETIC_AMPLITUDE
        self.noise = noise if noise is not None else self.config.SYNTHETIC_NOISE
        self.seed = seed if seed is not None else self.config.SYNTHETIC_SEED
        self.permission_granted = permission_granted
        self.permission_delay = permission_delay

    async def request_permission(self) -> None:
        if self.permission_delay > 0:
            await asyncio.sleep(self.permission_delay)
        if not self.permission_granted:
            raise MotionPermissionError("Motion sensor permission denied")

    def samples(self) -> Iterator[SensorSample]:
        """
        Yield generated samples with timestamps starting at 0 ms.

        Returns:
            Iterator of SensorSample
        """
        fs = self.config.SAMPLING_RATE
        rng = np.random.default_rng(self.seed)
        n_total = None if self.duration_s is None else int(self.duration_s * fs)

        i = 0
        while n_total is None or i < n_total:
            t = i / fs
            noise = rng.normal(0.0, self.noise, 3) if self.noise > 0 else np.zeros(3)
            bounce = self.amplitude * np.sin(2 * np.pi * self.cadence_hz * t)
            yield SensorSample(
                float(noise[0]),
                float(noise[1]),
                float(self.config.GRAVITY + bounce + noise[2]),
                int(round(t * 1000)),
            )
            i += 1

    def _iter_samples(self) -> Iterator[SensorSample]:
        return self.samples()


class ReplayMotionSource(PacedMotionSource):
    """Replays a recorded accelerometer file."""

    def __init__(
        self,
        recording: str,
        loader: Optional[AccelDataLoader] = None,
        config: Optional[SourceConfig] = None,
        speed: Optional[float] = 1.0,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        """
        Initialize the replay source.

        Args:
            recording: Recording name (stem) inside the loader's data directory
            loader: Data loader, defaults to one over config.DATA_DIR
            config: Source configuration (defaults to SourceConfig())
            speed: Playback speed multiplier, None for unpaced delivery
            clock: Millisecond clock used for timestamp restamping
        """
        super().__init__(speed=speed, clock=clock)
        self.config = config or SourceConfig()
        self.loader = loader or AccelDataLoader(self.config.DATA_DIR)
        self.recording = recording
        self.data = None

    async def request_permission(self) -> None:
        """
        Load the recording; an unreadable file counts as refused access.

        Raises:
            MotionPermissionError: If the recording is missing or malformed
        """
        try:
            self.data = await asyncio.to_thread(self.loader.load_recording, self.recording)
        except (FileNotFoundError, ValueError) as e:
            raise MotionPermissionError(str(e)) from e
        logger.info("Loaded recording %s (%d samples)", self.recording, len(self.data))

    def start(self, on_sample: SampleCallback) -> None:
        if self.data is None:
            raise MotionPermissionError("request_permission() must succeed before start()")
        super().start(on_sample)

    def _iter_samples(self) -> Iterator[SensorSample]:
        return self.loader.iter_samples(self.data)
