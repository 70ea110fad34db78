"""Configuration settings for the pedometer application."""

from pathlib import Path
from dataclasses import dataclass, field


@dataclass
class DetectorConfig:
    """History size, readout throttle and threshold slider settings."""

    MAX_HISTORY_POINTS: int = 200  # Magnitude values kept for the chart
    UI_UPDATE_INTERVAL_MS: int = 33  # ~30 readout refreshes per second

    # User-tunable threshold (slider)
    DEFAULT_THRESHOLD: float = 1.2
    THRESHOLD_MIN: float = 0.2
    THRESHOLD_MAX: float = 4.0
    THRESHOLD_STEP: float = 0.1


@dataclass
class SourceConfig:
    """Configuration for replayed and synthetic motion sources."""

    DATA_DIR: Path = Path("data/recordings")
    SAMPLING_RATE: int = 60  # Hz
    DEFAULT_SPEED: float = 1  # Playback speed multiplier (1 = real-time)

    # Synthetic walk
    GRAVITY: float = 9.81  # m/s^2
    SYNTHETIC_CADENCE_HZ: float = 1.8  # Steps per second
    SYNTHETIC_AMPLITUDE: float = 3.0  # Peak vertical bounce (m/s^2)
    SYNTHETIC_NOISE: float = 0.15  # Std of gaussian noise per axis
    SYNTHETIC_SEED: int = 7


@dataclass
class UIConfig:
    """Configuration for UI elements and styling."""

    PAGE_TITLE: str = "Pedometer"
    CHART_HEIGHT: int = 160
    CHART_WIDTH: int = 600  # Used for pixel scaling outside the browser
    CHART_LINE_WIDTH: float = 2.0
    CHART_LINE_COLOR: str = '#2a9d8f'  # Teal
    CHART_BORDER_COLOR: str = '#333333'
    CHART_MARGIN: dict = field(default_factory=lambda: dict(l=10, r=10, t=10, b=10))
    READOUT_DECIMALS: int = 2
    POLL_INTERVAL: float = 0.05  # seconds between screen refreshes while streaming
