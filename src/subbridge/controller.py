"""File selection and translation state for a user interface."""

from pathlib import Path
from typing import Callable

from .errors import TransferCancelled, TransferError
from .models import ProgressState, Settings
from .transfer import Transfer

IDLE = ProgressState(progress=0, current=0, total=0, estimated_time_remaining=0)


class TranslationController:
    """Tracks the selected file, progress, result and error for one screen.

    Args:
        transfer: Runs the translations
        on_progress: Optional listener for progress updates
        output_prefix: Prepended to the file name when saving the result
    """

    def __init__(
        self,
        transfer: Transfer,
        on_progress: Callable[[ProgressState], None] | None = None,
        output_prefix: str = "sinhala_",
    ):
        self.transfer = transfer
        self.on_progress = on_progress
        self.output_prefix = output_prefix
        self.file: Path | None = None
        self.progress = IDLE
        self.translated: str | None = None
        self.error: str | None = None
        self.translating = False
        self._generation = 0

    def select_file(self, path: str | Path) -> None:
        """Choose a new file, abandoning any translation in progress."""
        self.transfer.reset()
        self.file = Path(path)
        self._clear()

    def reset(self) -> None:
        """Forget the file and stop any translation in progress."""
        self.transfer.reset()
        self.file = None
        self._clear()

    def _clear(self) -> None:
        self._generation += 1
        self.translating = False
        self.translated = None
        self.error = None
        self.progress = IDLE

    def _update(self, state: ProgressState) -> None:
        self.progress = state
        if self.on_progress:
            self.on_progress(state)

    async def start_translate(self, settings: Settings) -> str:
        """Translate the selected file.

        Returns:
            The translated SRT document

        Raises:
            RuntimeError: If no file is selected
            TransferError: If the translation failed
        """
        if self.file is None:
            raise RuntimeError("No subtitle file selected")

        self._generation += 1
        generation = self._generation
        self.translating = True
        self.error = None
        self.progress = ProgressState(
            progress=0, current=0, total=0, estimated_time_remaining=0, message="Starting..."
        )
        try:
            translated = await self.transfer.run(self.file, settings, self._update)
        except TransferCancelled:
            raise
        except TransferError as e:
            if generation == self._generation:
                self.error = str(e)
            raise
        finally:
            if generation == self._generation:
                self.translating = False
        if generation == self._generation:
            self.translated = translated
        return translated

    def output_path(self, directory: str | Path | None = None) -> Path:
        """Where the translated file should be saved."""
        if self.file is None:
            raise RuntimeError("No subtitle file selected")
        directory = Path(directory) if directory else self.file.parent
        return directory / f"{self.output_prefix}{self.file.name}"

    def save(self, path: str | Path | None = None) -> Path:
        """Write the translated document to disk."""
        if self.translated is None:
            raise RuntimeError("Nothing to save, translate a file first")
        path = Path(path) if path else self.output_path()
        path.write_text(self.translated, encoding="utf-8")
        return path
