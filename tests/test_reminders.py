"""Tests for next-reminder scheduling."""

import random
from datetime import datetime

import pytest

from moodpatterns.engine.reminders import next_reminder
from moodpatterns.models.checkin import FixedTime, ReminderConfig, ScheduleType

# 2026-02-14 is a Saturday
SATURDAY = datetime(2026, 2, 14)


def _random_config(**overrides) -> ReminderConfig:
    return ReminderConfig(enabled=True, schedule_type=ScheduleType.RANDOM, **overrides)


def _fixed_config(times) -> ReminderConfig:
    return ReminderConfig(enabled=True, schedule_type=ScheduleType.FIXED, fixed_times=times)


class TestDisabled:
    def test_disabled_returns_none(self):
        assert next_reminder(ReminderConfig(enabled=False), SATURDAY) is None


# ═══════════════════════════════════════════════════════════════════════════
# Fixed schedule
# ═══════════════════════════════════════════════════════════════════════════


class TestFixed:
    def test_next_time_later_today(self):
        cfg = _fixed_config([FixedTime("1", 9, 0), FixedTime("2", 21, 0)])
        assert next_reminder(cfg, SATURDAY.replace(hour=10, minute=15)) == SATURDAY.replace(hour=21)

    def test_rolls_to_first_time_tomorrow(self):
        cfg = _fixed_config([FixedTime("1", 21, 0), FixedTime("2", 9, 30)])
        result = next_reminder(cfg, SATURDAY.replace(hour=22))
        assert result == datetime(2026, 2, 15, 9, 30)

    def test_time_equal_to_now_is_not_next(self):
        cfg = _fixed_config([FixedTime("1", 9, 0), FixedTime("2", 21, 0)])
        assert next_reminder(cfg, SATURDAY.replace(hour=9)) == SATURDAY.replace(hour=21)

    def test_disabled_times_skipped(self):
        cfg = _fixed_config([FixedTime("1", 12, 0, enabled=False), FixedTime("2", 18, 0)])
        assert next_reminder(cfg, SATURDAY.replace(hour=10)) == SATURDAY.replace(hour=18)

    def test_no_enabled_times(self):
        cfg = _fixed_config([FixedTime("1", 12, 0, enabled=False)])
        assert next_reminder(cfg, SATURDAY) is None


# ═══════════════════════════════════════════════════════════════════════════
# Random schedule
# ═══════════════════════════════════════════════════════════════════════════


class TestRandom:
    @pytest.mark.parametrize("seed", range(10))
    def test_within_frequency_inside_window(self, seed):
        now = SATURDAY.replace(hour=10)
        result = next_reminder(_random_config(), now, random.Random(seed))
        assert SATURDAY.replace(hour=12) <= result <= SATURDAY.replace(hour=14)

    @pytest.mark.parametrize("seed", range(10))
    def test_past_window_end_moves_to_next_morning(self, seed):
        result = next_reminder(_random_config(), SATURDAY.replace(hour=19), random.Random(seed))
        assert result.date() == datetime(2026, 2, 15).date()
        assert 9 <= result.hour < 10

    @pytest.mark.parametrize("seed", range(10))
    def test_before_window_start_moves_to_start(self, seed):
        result = next_reminder(_random_config(), SATURDAY.replace(hour=3), random.Random(seed))
        assert result.date() == SATURDAY.date()
        assert 9 <= result.hour < 10

    def test_skips_to_active_day(self):
        # only Mondays (0 = Sunday)
        result = next_reminder(_random_config(days=[1]), SATURDAY.replace(hour=10), random.Random(3))
        assert result.date() == datetime(2026, 2, 16).date()
        assert 9 <= result.hour < 10

    def test_no_active_days_still_returns_a_time(self):
        result = next_reminder(_random_config(days=[]), SATURDAY.replace(hour=10), random.Random(1))
        assert result > SATURDAY

    def test_deterministic_with_seed(self):
        cfg = _random_config()
        now = SATURDAY.replace(hour=10)
        assert next_reminder(cfg, now, random.Random(5)) == next_reminder(cfg, now, random.Random(5))
