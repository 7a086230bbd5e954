"""Send a subtitle file for translation while reporting simulated progress."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable

from .client import BackendClient
from .errors import TransferCancelled, TransferError, UnexpectedError
from .estimator import TimeEstimator
from .models import ProgressState, Settings
from .progress import ProgressSimulator
from .srt import count_subtitles, read_srt_text

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressState], None]

UPLOAD_PROGRESS = 5


class RequestSession:
    """State owned by one in-flight translation request."""

    def __init__(self, simulator: ProgressSimulator):
        self.simulator = simulator
        self.timer: asyncio.Task | None = None
        self.request: asyncio.Task | None = None
        self.closed = False

    @property
    def total(self) -> int:
        return self.simulator.total

    @property
    def start_time(self) -> float:
        return self.simulator.start_time

    def stop_timer(self) -> None:
        if self.timer is not None and not self.timer.done():
            self.timer.cancel()

    def close(self) -> None:
        """Stop ticking and abandon the request. Safe to call repeatedly."""
        self.closed = True
        self.stop_timer()
        if self.request is not None and not self.request.done():
            self.request.cancel()

    def tasks(self) -> list[asyncio.Task]:
        return [task for task in (self.timer, self.request) if task is not None]


class Transfer:
    """Runs one translation at a time.

    Starting a new run, or calling reset(), ends the previous session; its
    progress updates are dropped even if a tick was already scheduled.

    Args:
        client: Backend used to translate
        estimator: Converts subtitle counts to expected durations
        tick_interval: Seconds between progress updates
        clock: Monotonic time source in seconds
    """

    def __init__(
        self,
        client: BackendClient,
        estimator: TimeEstimator | None = None,
        tick_interval: float = 0.3,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.estimator = estimator or TimeEstimator()
        self.tick_interval = tick_interval
        self.clock = clock
        self._session: RequestSession | None = None

    @property
    def active(self) -> bool:
        return self._session is not None

    def reset(self) -> None:
        """End the current session, if any."""
        session, self._session = self._session, None
        if session is not None:
            session.close()

    def _emit(
        self, session: RequestSession, state: ProgressState, on_progress: ProgressCallback
    ) -> None:
        if session is self._session and not session.closed:
            on_progress(state)

    async def _tick(self, session: RequestSession, on_progress: ProgressCallback) -> None:
        while not session.closed:
            await asyncio.sleep(self.tick_interval)
            if session.closed or session is not self._session:
                return
            state = session.simulator.tick(self.clock())
            try:
                self._emit(session, state, on_progress)
            except Exception:
                logger.exception("Progress callback failed, no further updates")
                return

    async def _settle(self, session: RequestSession) -> None:
        session.close()
        if self._session is session:
            self._session = None
        await asyncio.gather(*session.tasks(), return_exceptions=True)

    async def run(
        self, path: str | Path, settings: Settings, on_progress: ProgressCallback
    ) -> str:
        """Translate a subtitle file.

        Args:
            path: SRT file to translate
            settings: Batch size and quality mode
            on_progress: Called with each progress update

        Returns:
            The translated SRT document

        Raises:
            TransferError: Classified failure, safe to show to the user
        """
        path = Path(path)
        try:
            content = read_srt_text(path)
        except OSError as e:
            raise UnexpectedError(f"Cannot read {path}: {e.strerror or e}") from e
        return await self.run_text(content, path.name, settings, on_progress)

    async def run_text(
        self,
        content: str,
        filename: str,
        settings: Settings,
        on_progress: ProgressCallback,
    ) -> str:
        """Translate subtitle text already in memory. See run()."""
        total = count_subtitles(content)
        estimated = self.estimator.estimate(total, settings.fast_mode)
        logger.info("Estimated %d subtitles in %s", total, filename)

        self.reset()
        session = RequestSession(ProgressSimulator(total, estimated, self.clock()))
        self._session = session

        try:
            self._emit(
                session,
                ProgressState(
                    progress=UPLOAD_PROGRESS,
                    current=0,
                    total=total,
                    estimated_time_remaining=estimated,
                    message="Uploading file...",
                ),
                on_progress,
            )
            session.timer = asyncio.create_task(self._tick(session, on_progress))
            session.request = asyncio.create_task(
                self.client.translate(content, filename, settings)
            )

            try:
                translated = await session.request
            except asyncio.CancelledError:
                if session.closed:
                    raise TransferCancelled("Translation cancelled") from None
                raise
            session.stop_timer()
            if session.closed:
                raise TransferCancelled("Translation cancelled")

            actual = self.clock() - session.start_time
            if total:
                logger.info(
                    "Actual translation time: %.1fs (%.3fs per subtitle)",
                    actual,
                    actual / total,
                )
            try:
                self._emit(session, session.simulator.complete(), on_progress)
            except Exception:
                logger.exception("Progress callback failed on completion")
            return translated
        except TransferCancelled:
            logger.info("Translation of %s cancelled", filename)
            raise
        except TransferError as e:
            logger.error("Translation error: %s", e)
            raise
        except Exception as e:
            logger.exception("Unexpected translation error")
            raise UnexpectedError(str(e) or "An unexpected error occurred") from e
        finally:
            await self._settle(session)
