"""Tests for clinical-mode velocity and compliance."""

import math

import pytest

from conftest import BASE_TS, DAY_MS, HOUR_MS, build_checkin
from moodpatterns.engine.clinical import clinical_metrics


class TestClinicalMetrics:
    def test_needs_two_checkins(self):
        result = clinical_metrics([build_checkin()], days_active=1, now=BASE_TS)
        assert (result.velocity, result.compliance, result.data_integrity) == (0.0, 0, "Low")

    def test_velocity_is_vad_distance_per_day(self):
        items = [
            build_checkin("happy", at=BASE_TS, checkin_id="a"),
            build_checkin("sad", at=BASE_TS + HOUR_MS, checkin_id="b"),
        ]
        expected = math.sqrt(1.5 ** 2 + 0.6 ** 2 + 1.3 ** 2) / 2
        result = clinical_metrics(items, days_active=2, now=BASE_TS + DAY_MS)
        assert result.velocity == pytest.approx(round(expected, 2))

    def test_velocity_uses_time_order(self):
        items = [
            build_checkin("happy", at=BASE_TS + 2 * HOUR_MS, checkin_id="c"),
            build_checkin("happy", at=BASE_TS, checkin_id="a"),
            build_checkin("sad", at=BASE_TS + HOUR_MS, checkin_id="b"),
        ]
        one_leg = math.sqrt(1.5 ** 2 + 0.6 ** 2 + 1.3 ** 2)
        result = clinical_metrics(items, days_active=1, now=BASE_TS + DAY_MS)
        assert result.velocity == pytest.approx(round(2 * one_leg, 2))

    def test_zero_days_active_treated_as_one(self):
        items = [build_checkin("happy", at=BASE_TS, checkin_id="a"),
                 build_checkin("happy", at=BASE_TS + HOUR_MS, checkin_id="b")]
        assert clinical_metrics(items, days_active=0, now=BASE_TS + HOUR_MS).velocity == 0.0

    def test_sparse_logging_is_low_integrity(self):
        items = [build_checkin(at=BASE_TS + d * DAY_MS, checkin_id=f"d{d}") for d in (0, 4, 8)]
        result = clinical_metrics(items, days_active=10, now=BASE_TS + 10 * DAY_MS)
        assert result.compliance == 30
        assert result.data_integrity == "Low"

    def test_half_the_days_is_moderate(self):
        items = [build_checkin(at=BASE_TS + d * DAY_MS, checkin_id=f"d{d}") for d in range(0, 10, 2)]
        result = clinical_metrics(items, days_active=10, now=BASE_TS + 10 * DAY_MS)
        assert result.compliance == 50
        assert result.data_integrity == "Moderate"

    def test_daily_logging_is_high_integrity(self):
        items = [build_checkin(at=BASE_TS + d * DAY_MS, checkin_id=f"d{d}") for d in range(10)]
        result = clinical_metrics(items, days_active=10, now=BASE_TS + 10 * DAY_MS)
        assert result.compliance == 100
        assert result.data_integrity == "High"

    def test_compliance_capped_at_100(self):
        items = [build_checkin(at=BASE_TS + d * DAY_MS, checkin_id=f"d{d}") for d in range(3)]
        result = clinical_metrics(items, days_active=1, now=BASE_TS + HOUR_MS)
        assert result.compliance == 100
