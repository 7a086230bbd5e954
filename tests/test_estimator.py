import pytest
from pydantic import ValidationError

from subbridge.estimator import TimeEstimator
from subbridge.models import TimeCalibration


def test_estimate_uses_mode_calibration():
    estimator = TimeEstimator(
        TimeCalibration(seconds_per_100_normal=1.2, seconds_per_100_fast=15)
    )
    assert estimator.estimate(500) == pytest.approx(6.0)
    assert estimator.estimate(500, fast_mode=True) == pytest.approx(75.0)


def test_estimate_is_linear():
    estimator = TimeEstimator()
    assert estimator.estimate(200, False) == pytest.approx(2 * estimator.estimate(100, False))
    assert estimator.estimate(0, True) == 0


def test_modes_differ_when_calibration_differs():
    estimator = TimeEstimator(
        TimeCalibration(seconds_per_100_normal=10, seconds_per_100_fast=4)
    )
    assert estimator.estimate(250, True) != estimator.estimate(250, False)


def test_calibration_is_injected():
    fixed = TimeEstimator(TimeCalibration(seconds_per_100_normal=100, seconds_per_100_fast=100))
    assert fixed.estimate(1) == pytest.approx(1.0)
    assert fixed.estimate(1, True) == pytest.approx(1.0)


@pytest.mark.parametrize("value", [0, -1.5])
def test_calibration_must_be_positive(value):
    with pytest.raises(ValidationError):
        TimeCalibration(seconds_per_100_normal=value)
    with pytest.raises(ValidationError):
        TimeCalibration(seconds_per_100_fast=value)
