"""Rate limiting of readout refreshes."""

from typing import Optional

from .config import DetectorConfig


class UiThrottle:
    """
    Decides per sample whether a new display snapshot should be published.

    Only the numeric readouts are throttled; step detection and history
    appends still see every sample.
    """

    def __init__(self, min_interval_ms: Optional[int] = None):
        self.min_interval_ms = (
            min_interval_ms
            if min_interval_ms is not None
            else DetectorConfig().UI_UPDATE_INTERVAL_MS
        )
        self.last_published_ms: Optional[int] = None

    def should_publish(self, now_ms: int) -> bool:
        """
        Return True (and remember now_ms) if enough time has passed.

        The first call after construction or reset always publishes.
        """
        if (
            self.last_published_ms is None
            or now_ms - self.last_published_ms >= self.min_interval_ms
        ):
            self.last_published_ms = now_ms
            return True
        return False

    def reset(self):
        """Forget the last publish time."""
        self.last_published_ms = None
