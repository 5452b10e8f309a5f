"""Shared test fixtures for the Mood Patterns test suite."""

from datetime import datetime, timezone

import fakeredis
import pytest

from moodpatterns.models.checkin import CheckIn, EmotionSelection

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# 2026-02-02T00:00:00Z, a Monday
BASE_TS = int(datetime(2026, 2, 2, tzinfo=timezone.utc).timestamp() * 1000)


# ── Redis ────────────────────────────────────────────────────────────────

@pytest.fixture
def r():
    """Fresh, isolated fakeredis instance per test (decode_responses=True like production)."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


# ── Check-in Factories ──────────────────────────────────────────────────

def build_checkin(
    node_id: str = "happy",
    at: int = BASE_TS,
    tags=(),
    intensity=None,
    scale_values=None,
    checkin_id: str | None = None,
    timezone_offset: int = 0,
) -> CheckIn:
    return CheckIn(
        id=checkin_id or f"c-{node_id}-{at}",
        timestamp=at,
        timezone_offset=timezone_offset,
        emotions=[EmotionSelection(node_id=node_id, is_primary=True)],
        intensity=intensity,
        scale_values=dict(scale_values or {}),
        tags=list(tags),
        created_at=at,
    )


@pytest.fixture
def make_checkin():
    """Factory fixture that creates CheckIn instances with sensible defaults.

    Usage:
        c = make_checkin("angry_mad_furious", at=BASE_TS + HOUR_MS, tags=["work"])
    """
    counter = 0

    def _factory(node_id: str = "happy", at: int | None = None, **overrides):
        nonlocal counter
        counter += 1
        if at is None:
            at = BASE_TS + counter * DAY_MS
        overrides.setdefault("checkin_id", f"test-checkin-{counter}")
        return build_checkin(node_id, at, **overrides)

    return _factory
