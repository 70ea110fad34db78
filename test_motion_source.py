"""
Tests for the synthetic and replay motion sources.
"""

import asyncio

import numpy as np
import polars as pl
import pytest

from pedometer import (
    AccelDataLoader,
    MotionPermissionError,
    MotionSource,
    PedometerSession,
    ReplayMotionSource,
    SourceConfig,
    SyntheticMotionSource,
)


def test_sources_match_protocol():
    assert isinstance(SyntheticMotionSource(), MotionSource)
    assert isinstance(ReplayMotionSource("walk"), MotionSource)


def test_synthetic_samples_are_deterministic():
    first = list(SyntheticMotionSource(duration_s=1.0).samples())
    second = list(SyntheticMotionSource(duration_s=1.0).samples())

    assert len(first) == SourceConfig().SAMPLING_RATE
    assert first == second
    assert [s.timestamp_ms for s in first[:3]] == [0, 17, 33]


def test_synthetic_signal_bounces_around_gravity():
    samples = list(SyntheticMotionSource(duration_s=5.0, noise=0.0).samples())
    az = np.array([s.az for s in samples])

    assert az.mean() == pytest.approx(9.81, abs=0.1)
    assert az.max() == pytest.approx(9.81 + 3.0, abs=0.05)
    assert all(s.ax == 0.0 and s.ay == 0.0 for s in samples)


def test_synthetic_permission_denied():
    source = SyntheticMotionSource(permission_granted=False)

    with pytest.raises(MotionPermissionError):
        asyncio.run(source.request_permission())


def test_delivery_in_order_on_wall_clock_base():
    source = SyntheticMotionSource(duration_s=0.5, speed=None, clock=lambda: 50_000)
    received = []

    async def scenario():
        await source.request_permission()
        source.start(lambda ax, ay, az, t: received.append(t))
        await source.wait_finished()

    asyncio.run(scenario())

    assert len(received) == 30
    assert received[0] == 50_000
    assert received == sorted(received)
    assert not source.is_active


def test_stop_prevents_further_callbacks():
    source = SyntheticMotionSource(speed=None)  # endless
    received = []

    def on_sample(ax, ay, az, t):
        received.append(t)
        if len(received) == 5:
            source.stop()

    async def scenario():
        source.start(on_sample)
        for _ in range(20):
            await asyncio.sleep(0)

    asyncio.run(scenario())

    assert len(received) == 5
    assert not source.is_active


def test_second_start_while_active_is_ignored():
    source = SyntheticMotionSource(duration_s=0.5, speed=None)
    first, second = [], []

    async def scenario():
        source.start(lambda *args: first.append(args))
        source.start(lambda *args: second.append(args))
        await source.wait_finished()

    asyncio.run(scenario())

    assert len(first) == 30
    assert second == []


def test_paced_delivery_waits_for_schedule():
    source = SyntheticMotionSource(duration_s=0.2, speed=1.0)
    received = []

    async def scenario():
        loop = asyncio.get_running_loop()
        started = loop.time()
        source.start(lambda *args: received.append(args))
        await source.wait_finished()
        return loop.time() - started

    elapsed = asyncio.run(scenario())

    assert len(received) == 12
    assert elapsed >= 0.15


def test_session_resumes_after_loop_replaced():
    source = SyntheticMotionSource(duration_s=1.0, speed=None, clock=lambda: 0)
    session = PedometerSession(source, clock=lambda: 0)

    async def first_run():
        await session.start()
        for _ in range(5):
            await asyncio.sleep(0)

    asyncio.run(first_run())

    # The loop that hosted delivery is gone, the session is still marked running
    assert session.running
    assert not source.is_active
    delivered_before = source.samples_delivered

    async def second_run():
        assert session.resume()
        await source.wait_finished()

    asyncio.run(second_run())

    assert delivered_before < source.samples_delivered
    assert 59 <= source.samples_delivered <= 60


@pytest.fixture
def recording_dir(tmp_path):
    pl.DataFrame({
        'timestamp_ms': [1000, 1020, 1040],
        'ax': [0.1, 0.2, 0.3],
        'ay': [0.0, 0.0, 0.0],
        'az': [9.8, 9.9, 10.0],
    }).write_csv(tmp_path / "walk.csv")
    return tmp_path


def test_replay_delivers_recording(recording_dir):
    source = ReplayMotionSource(
        "walk", loader=AccelDataLoader(recording_dir), speed=None, clock=lambda: 7000
    )
    received = []

    async def scenario():
        await source.request_permission()
        source.start(lambda ax, ay, az, t: received.append((ax, az, t)))
        await source.wait_finished()

    asyncio.run(scenario())

    assert received == [(0.1, 9.8, 7000), (0.2, 9.9, 7020), (0.3, 10.0, 7040)]


def test_replay_missing_recording_is_refused(tmp_path):
    source = ReplayMotionSource("nope", loader=AccelDataLoader(tmp_path))

    with pytest.raises(MotionPermissionError):
        asyncio.run(source.request_permission())


def test_replay_start_requires_permission(recording_dir):
    source = ReplayMotionSource("walk", loader=AccelDataLoader(recording_dir))

    with pytest.raises(MotionPermissionError):
        source.start(lambda *args: None)


def test_replay_blank_cells_are_refused(tmp_path):
    (tmp_path / "gappy.csv").write_text("timestamp_ms,ax,ay,az\n0,,0.0,9.81\n")
    source = ReplayMotionSource("gappy", loader=AccelDataLoader(tmp_path))

    with pytest.raises(MotionPermissionError, match="empty cells"):
        asyncio.run(source.request_permission())


def test_failed_delivery_is_reported():
    source = SyntheticMotionSource(duration_s=1.0, speed=None)
    received = []

    def on_sample(ax, ay, az, t):
        if len(received) == 3:
            raise RuntimeError("sample handler broke")
        received.append(t)

    async def scenario():
        source.start(on_sample)
        with pytest.raises(RuntimeError, match="sample handler broke"):
            await source.wait_finished()
        return source.error

    error = asyncio.run(scenario())

    assert isinstance(error, RuntimeError)
    assert len(received) == 3
    assert not source.is_active


def test_clean_delivery_has_no_error():
    source = SyntheticMotionSource(duration_s=0.1, speed=None)

    async def scenario():
        source.start(lambda *args: None)
        await source.wait_finished()

    asyncio.run(scenario())

    assert source.error is None
