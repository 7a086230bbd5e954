import pytest
from pydantic import ValidationError

from subbridge.config import Config
from subbridge.models import Settings

ENV_VARS = (
    "SUBBRIDGE_API_URL",
    "SUBBRIDGE_TIMEOUT",
    "SUBBRIDGE_TICK_INTERVAL",
    "SUBBRIDGE_SECONDS_PER_100_NORMAL",
    "SUBBRIDGE_SECONDS_PER_100_FAST",
    "SUBBRIDGE_OUTPUT_PREFIX",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config.from_env()
    assert config.api_url == "http://localhost:7860"
    assert config.timeout == 600
    assert config.tick_interval == pytest.approx(0.3)
    assert config.output_prefix == "sinhala_"
    calibration = config.calibration()
    assert calibration.seconds_per_100_normal == pytest.approx(1.2)
    assert calibration.seconds_per_100_fast == pytest.approx(15)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SUBBRIDGE_API_URL", "https://example.hf.space")
    monkeypatch.setenv("SUBBRIDGE_TIMEOUT", "90")
    monkeypatch.setenv("SUBBRIDGE_SECONDS_PER_100_NORMAL", "25")
    monkeypatch.setenv("SUBBRIDGE_SECONDS_PER_100_FAST", "8.5")

    config = Config.from_env()

    assert config.api_url == "https://example.hf.space"
    assert config.timeout == 90
    assert config.calibration().seconds_per_100(False) == 25
    assert config.calibration().seconds_per_100(True) == 8.5


def test_has_api_url():
    assert Config().has_api_url()
    assert not Config(api_url="  ").has_api_url()


def test_bad_calibration_is_rejected():
    with pytest.raises(ValidationError):
        Config(seconds_per_100_fast=0).calibration()


def test_settings_validation():
    assert Settings().batch_size == 32
    assert Settings(batch_size=16, fast_mode=True).to_form() == {
        "batch_size": "16",
        "fast_mode": "true",
    }
    with pytest.raises(ValidationError):
        Settings(batch_size=12)
    with pytest.raises(ValidationError):
        Settings(batch_size=40)
