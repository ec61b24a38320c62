import asyncio

import pytest

from core.simulator import SyntheticGlove
from utils.constants import ASL_PATTERNS


def test_letters_cover_patterns():
    glove = SyntheticGlove(lambda sample: None)
    assert glove.letters == "".join(sorted(ASL_PATTERNS))
    assert "U" not in glove.letters


def test_sample_stays_near_pattern():
    glove = SyntheticGlove(lambda sample: None, noise=0.015, seed=1)
    for _ in range(50):
        sample = glove.sample("A")
        assert len(sample) == 5
        for value, target in zip(sample, ASL_PATTERNS["A"]):
            assert 0.0 <= value <= 1.0
            assert abs(value - target) <= 0.015 + 1e-4


def test_seeded_gloves_agree():
    first = SyntheticGlove(lambda sample: None, seed=42)
    second = SyntheticGlove(lambda sample: None, seed=42)
    assert [first.sample("B") for _ in range(5)] == [second.sample("B") for _ in range(5)]


def test_select_rejects_unknown_letter():
    glove = SyntheticGlove(lambda sample: None)
    with pytest.raises(ValueError):
        glove.select("Z")
    glove.select("c")
    assert glove.letter == "C"


async def test_run_emits_only_while_a_letter_is_held():
    received = []
    glove = SyntheticGlove(received.append, rate_hz=1000.0)
    task = glove.start()
    await asyncio.sleep(0.02)
    assert received == []

    glove.select("Y")
    await asyncio.sleep(0.02)
    glove.stop()
    await task

    assert received
    assert glove.sample_count == len(received)
    assert not glove.is_running
    assert glove.letter is None


async def test_stop_before_first_tick_ends_run():
    glove = SyntheticGlove(lambda sample: None, rate_hz=1000.0)
    task = glove.start()
    glove.stop()
    await asyncio.wait_for(task, timeout=1.0)
    assert not glove.is_running


async def test_run_without_start_returns_immediately():
    received = []
    glove = SyntheticGlove(received.append, rate_hz=1000.0)
    glove.select("A")
    await asyncio.wait_for(glove.run(), timeout=1.0)
    assert received == []
