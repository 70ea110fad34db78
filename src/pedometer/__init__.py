"""Step counting from accelerometer streams with a live chart."""

from .config import DetectorConfig, SourceConfig, UIConfig
from .step_detector import SensorSample, DetectorState, magnitude, process_sample
from .history_buffer import HistoryBuffer
from .ui_throttle import UiThrottle
from .data_loader import AccelDataLoader
from .motion_source import (
    MotionSource,
    MotionPermissionError,
    SyntheticMotionSource,
    ReplayMotionSource,
)
from .session import PedometerSession, UiSnapshot, SessionClock
from .chart_renderer import ChartRenderer
from .ui_components import PedometerUI, SYNTHETIC_SOURCE
from .readouts import (
    format_readout_value,
    format_threshold,
    snapshot_readouts,
    display_readouts,
    display_empty_readouts,
)


__all__ = [
    'DetectorConfig',
    'SourceConfig',
    'UIConfig',
    'SensorSample',
    'DetectorState',
    'magnitude',
    'process_sample',
    'HistoryBuffer',
    'UiThrottle',
    'AccelDataLoader',
    'MotionSource',
    'MotionPermissionError',
    'SyntheticMotionSource',
    'ReplayMotionSource',
    'PedometerSession',
    'UiSnapshot',
    'SessionClock',
    'ChartRenderer',
    'PedometerUI',
    'SYNTHETIC_SOURCE',
    'format_readout_value',
    'format_threshold',
    'snapshot_readouts',
    'display_readouts',
    'display_empty_readouts',
]
