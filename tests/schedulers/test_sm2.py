from datetime import datetime
import pytest
from astronote.errors import ArithmeticOverflowError
from astronote.schedulers.sm2 import SuperMemo2

NOW = datetime(2023, 4, 5, 6, 7, 8)


def test_defaults():
    sm2 = SuperMemo2()
    assert sm2.repetition_count == 0
    assert sm2.interval_days == 0
    assert sm2.easiness_factor == 2.5


def test_1st_repetition():
    for quality in range(0, 7):
        sm2 = SuperMemo2()
        assert sm2.advance(quality, NOW) == datetime(2023, 4, 6, 6, 7, 8)
        assert sm2.interval_days == 1
        assert sm2.repetition_count == 1
        assert sm2.easiness_factor == 2.5


def test_2nd_repetition():
    for quality in range(0, 7):
        sm2 = SuperMemo2(repetition_count=1, interval_days=0, easiness_factor=2.5)
        assert sm2.advance(quality, NOW) == datetime(2023, 4, 11, 6, 7, 8)
        assert sm2.interval_days == 6
        assert sm2.repetition_count == 2


def test_3rd_repetition():
    easiness_factors = [0.0, 0.5, 1.0, 1.3, 1.5, 2.5, 3.0]
    expected_intervals = [
        [1] * len(easiness_factors),
        [1] * len(easiness_factors),
        [1] * len(easiness_factors),
        [8, 8, 8, 8, 9, 15, 18],
        [8, 8, 8, 8, 9, 15, 18],
        [8, 8, 8, 9, 10, 16, 19],
        [8, 8, 8, 9, 10, 16, 19],
    ]
    for quality, expected_row in enumerate(expected_intervals):
        for ef, expected in zip(easiness_factors, expected_row):
            sm2 = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=ef)
            sm2.advance(quality, NOW)
            assert sm2.interval_days == expected, f'quality {quality}, easiness factor {ef}'


def test_easiness_update():
    sm2 = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    assert sm2.advance(4, NOW) == datetime(2023, 4, 20, 6, 7, 8)
    assert sm2.easiness_factor == 2.5
    assert sm2.interval_days == 15
    assert sm2.repetition_count == 4


def test_lapse_restarts_cycle():
    for quality in range(0, 3):
        sm2 = SuperMemo2(repetition_count=5, interval_days=40, easiness_factor=2.0)
        assert sm2.advance(quality, NOW) == datetime(2023, 4, 6, 6, 7, 8)
        assert sm2.interval_days == 1
        assert sm2.repetition_count == 1
        assert sm2.easiness_factor == 2.0
        sm2.advance(quality, NOW)
        assert sm2.interval_days == 6


def test_easiness_floor():
    sm2 = SuperMemo2()
    for quality in [5, 3, 3, 3, 4, 3, 0, 3, 3, 3, 3, 3, 6, 3, 3, 3, 3]:
        sm2.advance(quality, NOW)
        assert sm2.easiness_factor >= 1.3
    assert sm2.easiness_factor == 1.3


def test_quality_is_clamped():
    high = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    high.advance(100, NOW)
    assert high == SuperMemo2(repetition_count=4, interval_days=16, easiness_factor=2.6)
    low = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    low.advance(-5, NOW)
    assert low.interval_days == 1


def test_quality_must_be_integer():
    with pytest.raises(ValueError):
        SuperMemo2().advance('4', NOW)
    with pytest.raises(ValueError):
        SuperMemo2().advance(4.0, NOW)


def test_preview_does_not_change_state():
    sm2 = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    for quality in range(0, 7):
        expected = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5).advance(quality, NOW)
        assert sm2.preview(quality, NOW) == expected
    assert sm2 == SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)


def test_time_of_day_kept():
    now = datetime(2023, 4, 5, 23, 59, 59, 999999)
    assert SuperMemo2().advance(5, now) == datetime(2023, 4, 6, 23, 59, 59, 999999)


def test_overflow():
    sm2 = SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    with pytest.raises(ArithmeticOverflowError):
        sm2.advance(5, datetime(9999, 12, 25))
    assert sm2 == SuperMemo2(repetition_count=3, interval_days=6, easiness_factor=2.5)
    with pytest.raises(ArithmeticOverflowError):
        SuperMemo2(repetition_count=3, interval_days=10 ** 12, easiness_factor=2.5).preview(5, NOW)


def test_state_round_trip():
    sm2 = SuperMemo2(repetition_count=7, interval_days=123, easiness_factor=1.9)
    assert SuperMemo2.from_state(sm2.state()) == sm2
