"""Tests for configuration settings."""
import pytest

from vocabplan.config import (
    REVIEW_OFFSETS,
    ScheduleSettings,
    Settings,
    parse_offsets,
    settings,
)


def test_settings_defaults():
    """Test default settings values."""
    assert settings.schedule.review_offsets == [1, 2, 4, 7, 15]
    assert settings.schedule.default_words_per_day == 20
    assert settings.schedule.minimum_display_days == 0
    assert settings.schedule.infer_lower_rounds is True
    assert settings.monitoring.enabled is False


def test_parse_offsets():
    """Test parsing comma separated offsets."""
    assert parse_offsets("1, 3,7") == [1, 3, 7]
    assert parse_offsets("") == REVIEW_OFFSETS
    assert parse_offsets(None) == REVIEW_OFFSETS


@pytest.mark.parametrize(
    "offsets",
    [[], [0, 1], [-1, 2], [1, 1, 2], [4, 2]],
)
def test_validate_rejects_bad_offsets(offsets):
    """Test that invalid review offsets fail validation."""
    test_settings = Settings(schedule=ScheduleSettings(review_offsets=offsets))
    with pytest.raises(ValueError):
        test_settings.validate()


def test_validate_rejects_bad_pace():
    """Test that a non-positive default pace fails validation."""
    test_settings = Settings(schedule=ScheduleSettings(default_words_per_day=0))
    with pytest.raises(ValueError):
        test_settings.validate()


def test_settings_from_env(monkeypatch):
    """Test that schedule settings can be overridden by environment variables."""
    monkeypatch.setenv("REVIEW_OFFSETS", "1,3,9")
    schedule = ScheduleSettings()
    assert schedule.review_offsets == [1, 3, 9]


if __name__ == "__main__":
    pytest.main([__file__])
