"""Time-series aggregation: daily trend buckets, weekday and hour heatmaps.

All calendar math uses the wall-clock time the check-in was recorded in
(``timestamp - timezone_offset``) so results do not depend on the
machine running the analysis.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable

from moodpatterns.engine.vad import DEFAULT_INTENSITY
from moodpatterns.models.checkin import CheckIn
from moodpatterns.models.insights import TrendPoint

logger = logging.getLogger(__name__)

MIN_INTENSITY = 1
MAX_INTENSITY = 3
SINGLE_ENTRY_BAND = 0.1

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
TIME_BLOCKS = ["Night", "Mrng", "Aftn", "Eve"]


def local_datetime(check_in: CheckIn) -> datetime:
    """Wall-clock time the check-in was recorded in, carried in UTC fields."""
    return datetime.fromtimestamp(check_in.local_timestamp / 1000, tz=timezone.utc)


def _weekday_index(dt: datetime) -> int:
    # Python: Mon=0 … Sun=6; charts: Sun=0 … Sat=6
    return (dt.weekday() + 1) % 7


def _time_block(hour: int) -> int:
    if hour < 6:
        return 0
    if hour < 12:
        return 1
    if hour < 18:
        return 2
    return 3


def trend_series(check_ins: Iterable[CheckIn]) -> list[TrendPoint]:
    """One point per local calendar day, oldest day first.

    Missing intensity counts as 2.  A scale mean only averages the
    entries that reported that scale.  A day with a single entry gets a
    synthetic ±0.1 intensity band (clamped to 1..3) so a volatility
    envelope always has something to draw.
    """
    ordered = sorted(check_ins, key=lambda c: c.timestamp)

    intensities: dict[str, list[int]] = {}
    scale_sums: dict[str, dict[str, float]] = {}
    scale_counts: dict[str, dict[str, int]] = {}
    labels: dict[str, str] = {}

    for c in ordered:
        dt = local_datetime(c)
        key = dt.date().isoformat()
        if key not in intensities:
            intensities[key] = []
            scale_sums[key] = defaultdict(float)
            scale_counts[key] = defaultdict(int)
            labels[key] = f"{dt.month}/{dt.day}"

        intensities[key].append(c.intensity or DEFAULT_INTENSITY)
        for scale_id, value in c.scale_values.items():
            if value is None:
                continue
            scale_sums[key][scale_id] += value
            scale_counts[key][scale_id] += 1

    series: list[TrendPoint] = []
    for key in sorted(intensities):
        values = intensities[key]
        mean = sum(values) / len(values)
        if len(values) > 1:
            band = (float(min(values)), float(max(values)))
        else:
            band = (
                round(max(MIN_INTENSITY, mean - SINGLE_ENTRY_BAND), 2),
                round(min(MAX_INTENSITY, mean + SINGLE_ENTRY_BAND), 2),
            )
        series.append(TrendPoint(
            date=key,
            label=labels[key],
            mean_intensity=round(mean, 1),
            intensity_range=band,
            mean_scale_values={
                sid: round(total / scale_counts[key][sid], 1)
                for sid, total in sorted(scale_sums[key].items())
            },
            count=len(values),
        ))

    logger.debug("trend_series: %d check-ins → %d days", len(ordered), len(series))
    return series


def weekday_counts(check_ins: Iterable[CheckIn]) -> list[dict]:
    """Check-ins per weekday, Sunday first."""
    counts = [0] * 7
    for c in check_ins:
        counts[_weekday_index(local_datetime(c))] += 1
    return [{"name": day, "count": counts[i]} for i, day in enumerate(WEEKDAYS)]


def heatmap(check_ins: Iterable[CheckIn]) -> dict:
    """7 x 4 grid of check-in counts (weekday x time-of-day block)."""
    grid = [[0] * len(TIME_BLOCKS) for _ in WEEKDAYS]
    max_heat = 1
    for c in check_ins:
        dt = local_datetime(c)
        day, block = _weekday_index(dt), _time_block(dt.hour)
        grid[day][block] += 1
        max_heat = max(max_heat, grid[day][block])
    return {"grid": grid, "max": max_heat, "labels": list(TIME_BLOCKS), "days": list(WEEKDAYS)}
