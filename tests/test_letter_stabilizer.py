import pytest

from core.letter_stabilizer import LetterStabilizer
from domain.enums import Framing

from conftest import make_prediction


def _feed(stabilizer, letters, confidence=0.9):
    committed = []
    for letter in letters:
        result = stabilizer.offer(make_prediction(letter, confidence), Framing.ROLLING)
        if result is not None:
            committed.append(result)
    return committed


def test_held_sign_commits_once():
    assert _feed(LetterStabilizer(stability_threshold=4), "AAAAB") == ["A"]


def test_streak_restarts_on_letter_change():
    assert _feed(LetterStabilizer(stability_threshold=4), "AABBBB") == ["B"]


def test_long_hold_does_not_repeat():
    assert _feed(LetterStabilizer(stability_threshold=4), "A" * 12) == ["A"]


def test_same_letter_again_after_a_change():
    assert _feed(LetterStabilizer(stability_threshold=2), "AABAA") == ["A", "A"]


def test_low_confidence_delays_commit_until_confident():
    stabilizer = LetterStabilizer(stability_threshold=4, min_confidence=0.6)
    assert _feed(stabilizer, "AAAA", confidence=0.5) == []
    assert stabilizer.tracker.consecutive_count == 4
    assert not stabilizer.tracker.consumed
    assert _feed(stabilizer, "A", confidence=0.7) == ["A"]


def test_reset_forgets_streak():
    stabilizer = LetterStabilizer(stability_threshold=3)
    _feed(stabilizer, "AA")
    stabilizer.reset()
    assert stabilizer.tracker.last_letter == ""
    assert _feed(stabilizer, "A") == []


def test_immediate_policy_respects_threshold():
    stabilizer = LetterStabilizer(min_confidence=0.6)
    assert stabilizer.offer(make_prediction("B", 0.6), Framing.BATCH) == "B"
    assert stabilizer.offer(make_prediction("B", 0.59), Framing.BATCH) is None


def test_driven_observation_commits_regardless_of_confidence():
    stabilizer = LetterStabilizer(min_confidence=0.9)
    assert stabilizer.offer(make_prediction("C", 0.1), Framing.BATCH, driven=True) == "C"


def test_threshold_is_mutable_and_validated():
    stabilizer = LetterStabilizer(min_confidence=0.6)
    stabilizer.min_confidence = 0.95
    assert stabilizer.offer(make_prediction("D", 0.9), Framing.BATCH) is None
    with pytest.raises(ValueError):
        stabilizer.min_confidence = 1.5
    with pytest.raises(ValueError):
        LetterStabilizer(stability_threshold=0)
