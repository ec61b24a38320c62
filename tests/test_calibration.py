import pytest

from core.calibration import CalibrationCapture
from domain.enums import CalibrationStep


def test_two_pose_capture_produces_means():
    capture = CalibrationCapture(samples_per_pose=2)
    capture.start()
    assert capture.step is CalibrationStep.STRAIGHT

    assert capture.feed((2700, 1650, 1850, 2110, 2125)) is None
    assert capture.progress == pytest.approx(0.5)
    assert capture.feed((2702, 1651, 1850, 2110, 2126)) is None
    assert capture.step is CalibrationStep.BENT

    assert capture.feed((2200, 1300, 1480, 1640, 1720)) is None
    calibration = capture.feed((2204, 1300, 1480, 1642, 1720))

    assert calibration.straight_baseline == (2701, 1650, 1850, 2110, 2126)
    assert calibration.bent_max == (2202, 1300, 1480, 1641, 1720)
    assert capture.step is CalibrationStep.DONE
    assert not capture.is_capturing


def test_samples_ignored_when_idle_or_wrong_width():
    capture = CalibrationCapture(samples_per_pose=1)
    assert capture.feed((1, 2, 3, 4, 5)) is None
    assert capture.step is CalibrationStep.IDLE

    capture.start()
    assert capture.feed((1, 2, 3)) is None
    assert capture.step is CalibrationStep.STRAIGHT


def test_bent_pose_requires_straight_first():
    capture = CalibrationCapture()
    with pytest.raises(ValueError):
        capture.start(CalibrationStep.BENT)
    with pytest.raises(ValueError):
        capture.start(CalibrationStep.DONE)


def test_reset_discards_progress():
    capture = CalibrationCapture(samples_per_pose=1)
    capture.start()
    capture.feed((2700, 1650, 1850, 2110, 2125))
    capture.reset()
    assert capture.step is CalibrationStep.IDLE
    with pytest.raises(ValueError):
        capture.start(CalibrationStep.BENT)


def test_rejects_empty_pose():
    with pytest.raises(ValueError):
        CalibrationCapture(samples_per_pose=0)
