import random

import pytest

from rainbowtree.relay import PacingGenerator


def test_default_threshold_delays_about_one_line_in_ten():
    pacing = PacingGenerator(random.Random(1234))
    draws = 10_000

    delayed = sum(1 for _ in range(draws) if pacing.next_delay() is not None)

    assert 0.08 <= delayed / draws <= 0.12


def test_delays_are_5ms_steps_between_5_and_95():
    pacing = PacingGenerator(random.Random(99))

    values = {pacing.delay_millis() for _ in range(5_000)}

    assert values <= set(range(5, 100, 5))
    assert 5 in values
    assert 95 in values


def test_zero_threshold_never_delays():
    pacing = PacingGenerator(random.Random(7), threshold=0)

    assert all(pacing.next_delay() is None for _ in range(2_000))


def test_top_threshold_always_delays():
    pacing = PacingGenerator(random.Random(7), threshold=999)

    assert all(pacing.next_delay() is not None for _ in range(2_000))


@pytest.mark.parametrize("threshold", [-1, 1000])
def test_threshold_out_of_range(threshold):
    with pytest.raises(ValueError, match="threshold"):
        PacingGenerator(threshold=threshold)


def test_same_seed_same_sequence():
    first = PacingGenerator(random.Random(42))
    second = PacingGenerator(random.Random(42))

    assert [first.next_delay() for _ in range(200)] == [
        second.next_delay() for _ in range(200)
    ]
