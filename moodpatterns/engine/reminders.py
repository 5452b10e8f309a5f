"""Next check-in reminder time.

Pure function of (config, now, rng).  The caller persists the result
(see ``CheckInStore.set_next_reminder``) and calls again after each
check-in or settings change.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional

from moodpatterns.models.checkin import ReminderConfig, ScheduleType

MAX_DAY_LOOKAHEAD = 8
JITTER_SECONDS = 60 * 60


def _js_weekday(dt: datetime) -> int:
    return (dt.weekday() + 1) % 7


def _start_of_window(day: datetime, start_hour: int, rng: random.Random) -> datetime:
    # Up to an hour of jitter so reminders do not become predictable
    base = day.replace(hour=start_hour, minute=0, second=0, microsecond=0)
    return base + timedelta(seconds=rng.random() * JITTER_SECONDS)


def _next_fixed(config: ReminderConfig, now: datetime) -> Optional[datetime]:
    enabled = sorted((t for t in config.fixed_times if t.enabled), key=lambda t: t.minute_of_day)
    if not enabled:
        return None

    current = now.hour * 60 + now.minute
    target = now.replace(second=0, microsecond=0)
    later_today = next((t for t in enabled if t.minute_of_day > current), None)
    if later_today is not None:
        return target.replace(hour=later_today.hour, minute=later_today.minute)
    first = enabled[0]
    return (target + timedelta(days=1)).replace(hour=first.hour, minute=first.minute)


def _next_random(config: ReminderConfig, now: datetime, rng: random.Random) -> datetime:
    freq_seconds = config.frequency_hours * 60 * 60
    delay = rng.uniform(freq_seconds / 2, freq_seconds)
    candidate = now + timedelta(seconds=delay)

    start, end = config.window_start_hour, config.window_end_hour
    if candidate.hour >= end:
        candidate = _start_of_window(candidate + timedelta(days=1), start, rng)
    elif candidate.hour < start:
        candidate = _start_of_window(candidate, start, rng)

    for _ in range(MAX_DAY_LOOKAHEAD):
        if _js_weekday(candidate) in config.days:
            break
        candidate = _start_of_window(candidate + timedelta(days=1), start, rng)
    return candidate


def next_reminder(
    config: ReminderConfig,
    now: datetime,
    rng: Optional[random.Random] = None,
) -> Optional[datetime]:
    """When the next reminder should fire, in the same clock as ``now``.

    Returns None when reminders are off or fixed mode has no enabled
    times.  ``days`` uses 0 = Sunday.
    """
    if not config.enabled:
        return None
    if config.schedule_type == ScheduleType.FIXED:
        return _next_fixed(config, now)
    return _next_random(config, now, rng or random.Random())
