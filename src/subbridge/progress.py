"""Simulated translation progress.

The backend gives no feedback until the translated file comes back, so the
progress shown to the user is derived from elapsed time and the estimated
duration. The 0-100 range is split into phases: upload (0-10), translation
(10-95) and finalization (95-100). Only a finished request reaches 100.
"""

import logging
import math

from .models import ProgressState

logger = logging.getLogger(__name__)

UPLOAD_DONE = 10.0
CEILING = 95.0
TRANSLATION_SPAN = CEILING - UPLOAD_DONE
FINALIZING_FROM = 90.0

# Share of the work assumed done when the estimate runs out
ASSUMED_DONE = 0.85
SAFETY_MARGIN = 1.2


def max_increase(progress: float) -> float:
    """Largest step the bar may take in one tick at this level."""
    if progress > 80:
        return 0.5
    if progress > 60:
        return 1.0
    return 2.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ProgressSimulator:
    """Time-based progress for one translation request.

    Args:
        total: Number of subtitles being translated
        estimated_duration: Predicted translation time in seconds
        start_time: Clock reading when translation started
    """

    def __init__(self, total: int, estimated_duration: float, start_time: float):
        self.total = max(0, int(total))
        self.estimated_duration = estimated_duration
        self.start_time = start_time
        self.last_progress = UPLOAD_DONE
        self.recalibrations = 0

    def _recalibrate(self, elapsed: float) -> None:
        # Pretend 85% is done now and extrapolate the per-subtitle rate
        units = max(self.total, 1)
        rate = elapsed / (units * ASSUMED_DONE)
        revised = units * rate * SAFETY_MARGIN
        if revised > self.estimated_duration:
            self.estimated_duration = revised
            self.recalibrations += 1
            logger.info(
                "Adjusted estimate: %.1fs after %.1fs elapsed", revised, elapsed
            )

    def _raw_percent(self, elapsed: float) -> float:
        duration = self.estimated_duration
        if not duration > 0 or math.isinf(duration):
            return TRANSLATION_SPAN
        return min(TRANSLATION_SPAN, (elapsed / duration) * TRANSLATION_SPAN)

    def tick(self, now: float) -> ProgressState:
        """Advance the simulation to ``now`` and return the state to show."""
        elapsed = now - self.start_time
        if not elapsed > 0:
            elapsed = 0.0

        if elapsed > self.estimated_duration and self.last_progress < CEILING:
            self._recalibrate(elapsed)

        target = min(CEILING, UPLOAD_DONE + self._raw_percent(elapsed))
        smoothed = max(self.last_progress, target)
        step = min(smoothed - self.last_progress, max_increase(smoothed))
        final = min(CEILING, self.last_progress + step)
        self.last_progress = final

        current = math.floor((final - UPLOAD_DONE) / TRANSLATION_SPAN * self.total)
        current = max(0, min(self.total, current))

        remaining = (CEILING - final) / TRANSLATION_SPAN * self.estimated_duration
        if not remaining > 0 or math.isinf(remaining):
            remaining = 0.0

        if final < FINALIZING_FROM:
            message = f"Translating subtitles... ({current}/{self.total})"
        else:
            message = "Almost done, finalizing..."

        return ProgressState(
            progress=round_half_up(final),
            current=current,
            total=self.total,
            estimated_time_remaining=remaining,
            message=message,
        )

    def complete(self) -> ProgressState:
        """Terminal state for a successful request."""
        return completed_state(self.total)


def completed_state(total: int) -> ProgressState:
    return ProgressState(
        progress=100,
        current=total,
        total=total,
        estimated_time_remaining=0.0,
        message="Translation complete!",
        complete=True,
    )


def stage_for(progress: int) -> str:
    """Name of the phase a progress value falls in."""
    if progress < UPLOAD_DONE:
        return "upload"
    if progress < CEILING:
        return "translation"
    if progress < 100:
        return "finalize"
    return "complete"


def format_time_remaining(seconds: float) -> str | None:
    """Format a time estimate for display, rounded to avoid false precision.

    Returns None when there is nothing meaningful to show.
    """
    if not seconds or seconds <= 0:
        return None
    if seconds < 10:
        return "< 10s"
    if seconds < 60:
        return f"~{math.ceil(seconds / 5) * 5}s"

    minutes = int(seconds // 60)
    rest = math.ceil((seconds % 60) / 10) * 10
    if rest == 60:
        return f"~{minutes + 1}m"
    if rest == 0:
        return f"~{minutes}m"
    return f"~{minutes}m {rest}s"
