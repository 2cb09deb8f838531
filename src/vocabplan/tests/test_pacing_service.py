"""Tests for pacing calculation."""
import math

import pytest

from vocabplan.services.pacing_service import calculate_pacing, units_for

OFFSETS = [1, 2, 4, 7, 15]


def test_scenario_units_and_days():
    """120 words at 50 per day is 3 units and an 18 day plan."""
    pacing = calculate_pacing(120, 50, OFFSETS)
    assert pacing.units_count == 3
    assert pacing.learning_days == 3
    assert pacing.total_days == 18
    assert pacing.warnings == ()


@pytest.mark.parametrize("total_words", [1, 19, 20, 21, 99, 100, 101, 1000])
@pytest.mark.parametrize("words_per_day", [1, 7, 20, 50])
def test_units_count_is_ceiling(total_words, words_per_day):
    """Units count is the ceiling of total / per day."""
    pacing = calculate_pacing(total_words, words_per_day, OFFSETS)
    assert pacing.units_count == math.ceil(total_words / words_per_day)
    assert pacing.total_days == pacing.units_count + max(OFFSETS)


def test_empty_book():
    """An empty book has no units but still a well defined horizon."""
    pacing = calculate_pacing(0, 20, OFFSETS)
    assert pacing.units_count == 0
    assert pacing.total_days == 15
    assert pacing.warnings == ()


def test_zero_pace_is_clamped():
    """A pace of zero is clamped to one word a day with a warning."""
    pacing = calculate_pacing(30, 0, OFFSETS)
    assert pacing.words_per_day == 1
    assert pacing.units_count == 30
    assert [w.field for w in pacing.warnings] == ["words_per_day"]


def test_negative_pace_is_clamped():
    pacing = calculate_pacing(5, -3, OFFSETS)
    assert pacing.words_per_day == 1
    assert pacing.units_count == 5
    assert pacing.warnings[0].value == -3


@pytest.mark.parametrize("total_words", [-10, float("nan"), None, "many"])
def test_invalid_totals_count_as_zero(total_words):
    """Negative or non-numeric totals give an empty plan, not an error."""
    pacing = calculate_pacing(total_words, 20, OFFSETS)
    assert pacing.units_count == 0
    assert pacing.total_days == 15
    assert [w.field for w in pacing.warnings] == ["total_words"]


def test_fractional_pace_is_cut_with_warning():
    pacing = calculate_pacing(10, 2.5, OFFSETS)
    assert pacing.words_per_day == 2
    assert pacing.units_count == 5
    assert [w.field for w in pacing.warnings] == ["words_per_day"]
    assert pacing.warnings[0].value == 2.5


def test_fractional_pace_below_one_is_clamped_once():
    pacing = calculate_pacing(3, 0.5, OFFSETS)
    assert pacing.words_per_day == 1
    assert [w.message for w in pacing.warnings] == ["Words per day must be positive, using 1"]


def test_fractional_total_is_cut_with_warning():
    pacing = calculate_pacing(10.7, 5, OFFSETS)
    assert pacing.total_words == 10
    assert pacing.units_count == 2
    assert [w.field for w in pacing.warnings] == ["total_words"]


def test_whole_floats_need_no_warning():
    pacing = calculate_pacing(40.0, 20.0, OFFSETS)
    assert (pacing.total_words, pacing.words_per_day) == (40, 20)
    assert pacing.warnings == ()


def test_default_offsets_are_used():
    pacing = calculate_pacing(40, 20)
    assert pacing.total_days == 2 + 15


def test_custom_offsets_set_horizon():
    pacing = calculate_pacing(40, 20, [1, 3, 9])
    assert pacing.total_days == 11


def test_units_for_uses_integer_ceiling():
    assert units_for(10**18 + 1, 10**18) == 2
    assert units_for(0, 5) == 0


if __name__ == "__main__":
    pytest.main([__file__])
