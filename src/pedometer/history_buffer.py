"""Rolling magnitude history for the live chart."""

from collections import deque
from typing import Iterable, Optional, Tuple

from .config import DetectorConfig


class HistoryBuffer:
    """
    Keeps the most recent magnitude values, oldest first.

    Appending beyond capacity drops exactly one value from the front.
    Used only for charting.
    """

    def __init__(self, max_points: Optional[int] = None, values: Iterable[float] = ()):
        """
        Initialize the history buffer.

        Args:
            max_points: Capacity, defaults to DetectorConfig.MAX_HISTORY_POINTS
            values: Optional initial values (only the newest max_points are kept)
        """
        self.max_points = (
            max_points
            if max_points is not None
            else DetectorConfig().MAX_HISTORY_POINTS
        )
        self._values = deque(values, maxlen=self.max_points)

    def append(self, value: float) -> "HistoryBuffer":
        """Push a value, evicting the oldest one when full."""
        self._values.append(value)
        return self

    def clear(self) -> "HistoryBuffer":
        """Drop all values."""
        self._values.clear()
        return self

    def values(self) -> Tuple[float, ...]:
        """Read-only copy of the buffered values, oldest first."""
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __repr__(self) -> str:
        return f"HistoryBuffer(len={len(self)}, max_points={self.max_points})"
