"""Tests for Pearson scale correlation and mood stability."""

import random

import pytest

from conftest import BASE_TS, HOUR_MS, build_checkin
from moodpatterns.engine.correlation import correlate, pearson, stability
from moodpatterns.engine.taxonomy import DEFAULT_SCALES


def _scaled(values: list[dict]):
    return [
        build_checkin(at=BASE_TS + i * HOUR_MS, scale_values=v, checkin_id=f"s{i}")
        for i, v in enumerate(values)
    ]


# ═══════════════════════════════════════════════════════════════════════════
# Correlation
# ═══════════════════════════════════════════════════════════════════════════


class TestCorrelate:
    def test_not_enough_data(self):
        result = correlate(_scaled([{"energy": i, "focus": i} for i in range(4)]), "energy", "focus")
        assert result.r == 0
        assert result.message == "Not enough data"
        assert result.points == []

    def test_empty(self):
        result = correlate([], "energy", "focus")
        assert result.r == 0
        assert result.points == []

    def test_perfect_positive(self):
        data = _scaled([{"energy": v, "focus": v} for v in [1, 2, 3, 4, 5]])
        result = correlate(data, "energy", "focus", DEFAULT_SCALES)
        assert result.r == pytest.approx(1.0)
        assert result.message == "Energy increases with Focus"

    def test_perfect_negative(self):
        data = _scaled([{"stress": 6 - v, "energy": v} for v in [1, 2, 3, 4, 5]])
        result = correlate(data, "stress", "energy", DEFAULT_SCALES)
        assert result.r == pytest.approx(-1.0)
        assert result.message == "Stress drains your Energy"

    def test_zero_variance_short_circuits(self):
        data = _scaled([{"energy": 3, "focus": v} for v in [1, 2, 3, 4, 5]])
        result = correlate(data, "energy", "focus")
        assert result.r == 0
        assert result.message == "No correlation"

    def test_missing_values_are_excluded_not_defaulted(self):
        data = _scaled(
            [{"energy": v, "focus": v} for v in [1, 2, 3, 4]]
            + [{"energy": 5}, {"focus": 1}, {}]
        )
        result = correlate(data, "energy", "focus")
        assert result.message == "Not enough data"

    def test_bubbles_merge_identical_points(self):
        data = _scaled([{"energy": 3, "focus": 3}] * 3 + [{"energy": 1, "focus": 1}, {"energy": 5, "focus": 5}])
        result = correlate(data, "energy", "focus")
        by_xy = {(p.x, p.y): p.z for p in result.points}
        assert by_xy == {(1, 1): 1, (3, 3): 3, (5, 5): 1}

    def test_opaque_custom_scale_ids(self):
        data = _scaled([{"sleep_quality": v, "mood_x": v * 2} for v in range(1, 7)])
        result = correlate(data, "sleep_quality", "mood_x")
        assert result.r == pytest.approx(1.0)
        assert result.message == "sleep_quality increases with mood_x"

    def test_r_stays_within_bounds(self):
        rng = random.Random(42)
        for _ in range(50):
            data = _scaled([{"a": rng.randint(1, 5), "b": rng.randint(1, 5)} for _ in range(rng.randint(5, 30))])
            r = correlate(data, "a", "b").r
            assert -1.0 <= r <= 1.0

    def test_pearson_helper_on_empty(self):
        assert pearson([]) == 0.0


# ═══════════════════════════════════════════════════════════════════════════
# Stability
# ═══════════════════════════════════════════════════════════════════════════


def _series(node_ids):
    return [build_checkin(n, at=BASE_TS + i * HOUR_MS, checkin_id=f"v{i}") for i, n in enumerate(node_ids)]


class TestStability:
    def test_calculating_below_five(self):
        result = stability(_series(["happy"] * 4))
        assert (result.score, result.label, result.volatility) == (50, "Calculating...", 0.0)

    def test_empty(self):
        assert stability([]).label == "Calculating..."

    def test_constant_valence_is_very_stable(self):
        result = stability(_series(["happy_content_joyful"] * 6))
        assert result.score == 100
        assert result.label == "Very Stable"
        assert result.volatility == 0.0

    def test_swinging_valence_is_high_volatility(self):
        result = stability(_series(["happy", "sad"] * 5))
        assert result.volatility == pytest.approx(0.75)
        assert result.score == 0
        assert result.label == "High Volatility"

    def test_mostly_positive_is_steady(self):
        # valence std-dev 0.18 → (1 - 0.27) * 100
        result = stability(_series(["happy"] * 4 + ["surprised"]))
        assert result.score == 73
        assert result.label == "Steady"
        assert result.volatility == pytest.approx(0.18)

    def test_intensity_does_not_affect_valence(self):
        calm = stability(_series(["happy"] * 5))
        items = _series(["happy"] * 5)
        for c in items:
            c.intensity = 3
        assert stability(items) == calm
