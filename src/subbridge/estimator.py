"""Translation time estimates from a fixed throughput calibration."""

import logging

from .models import TimeCalibration

logger = logging.getLogger(__name__)


class TimeEstimator:
    """Predict how long the backend needs for a number of subtitles.

    The calibration is measured once by timing 100 subtitles in each mode and
    is expected to be updated as the backend changes.
    """

    def __init__(self, calibration: TimeCalibration | None = None):
        self.calibration = calibration or TimeCalibration()

    def estimate(self, count: int, fast_mode: bool = False) -> float:
        """Estimated translation time in seconds."""
        per_100 = self.calibration.seconds_per_100(fast_mode)
        seconds = (count / 100) * per_100
        logger.info(
            "Estimate: %d subtitles will take ~%.1fs (%ss per 100)", count, seconds, per_100
        )
        return seconds
