"""Data models for subbridge."""

from pydantic import BaseModel, Field, field_validator

BATCH_SIZES = (8, 16, 24, 32)


class CueBlock(BaseModel):
    """A single subtitle block: index line, timing line and text lines."""

    index: str
    timing: str
    lines: list[str]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class Settings(BaseModel):
    """Translation options chosen by the user."""

    batch_size: int = 32
    fast_mode: bool = False

    @field_validator("batch_size")
    @classmethod
    def _check_batch_size(cls, value: int) -> int:
        if value not in BATCH_SIZES:
            raise ValueError(f"batch_size must be one of {BATCH_SIZES}, got {value}")
        return value

    def to_form(self) -> dict[str, str]:
        """Form fields sent alongside the uploaded file."""
        return {
            "batch_size": str(self.batch_size),
            "fast_mode": "true" if self.fast_mode else "false",
        }


class TimeCalibration(BaseModel):
    """Measured seconds needed to translate 100 subtitles, per mode."""

    seconds_per_100_normal: float = Field(default=1.2, gt=0)
    seconds_per_100_fast: float = Field(default=15.0, gt=0)

    def seconds_per_100(self, fast_mode: bool) -> float:
        return self.seconds_per_100_fast if fast_mode else self.seconds_per_100_normal


class ProgressState(BaseModel):
    """One progress update delivered to the UI."""

    progress: int = Field(ge=0, le=100)
    current: int = Field(ge=0)
    total: int = Field(ge=0)
    estimated_time_remaining: float = Field(ge=0)
    message: str = ""
    complete: bool = False
