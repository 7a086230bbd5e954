"""Configuration management via environment variables."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .models import TimeCalibration


@dataclass
class Config:
    """Application configuration loaded from environment."""

    api_url: str = "http://localhost:7860"
    timeout: float = 600.0
    tick_interval: float = 0.3
    seconds_per_100_normal: float = 1.2
    seconds_per_100_fast: float = 15.0
    output_prefix: str = "sinhala_"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        load_dotenv()
        return cls(
            api_url=os.getenv("SUBBRIDGE_API_URL", "http://localhost:7860"),
            timeout=float(os.getenv("SUBBRIDGE_TIMEOUT", "600")),
            tick_interval=float(os.getenv("SUBBRIDGE_TICK_INTERVAL", "0.3")),
            seconds_per_100_normal=float(
                os.getenv("SUBBRIDGE_SECONDS_PER_100_NORMAL", "1.2")
            ),
            seconds_per_100_fast=float(
                os.getenv("SUBBRIDGE_SECONDS_PER_100_FAST", "15")
            ),
            output_prefix=os.getenv("SUBBRIDGE_OUTPUT_PREFIX", "sinhala_"),
        )

    def has_api_url(self) -> bool:
        """Check if a backend URL is configured."""
        return bool(self.api_url and self.api_url.strip())

    def calibration(self) -> TimeCalibration:
        """Build the validated time calibration."""
        return TimeCalibration(
            seconds_per_100_normal=self.seconds_per_100_normal,
            seconds_per_100_fast=self.seconds_per_100_fast,
        )
