"""Tests for the emotional granularity score."""

import pytest

from conftest import BASE_TS, HOUR_MS, build_checkin
from moodpatterns.engine.granularity import LOW_MESSAGE, granularity


def _many(node_ids):
    return [build_checkin(n, at=BASE_TS + i * HOUR_MS, checkin_id=f"g{i}") for i, n in enumerate(node_ids)]


class TestGranularity:
    def test_no_data(self):
        result = granularity([])
        assert (result.score, result.level, result.message) == (0, "Low", "No data yet.")

    def test_all_leaves_is_maximum(self):
        result = granularity(_many(["angry_mad_furious", "happy_playful_cheeky"]))
        assert result.score == 100
        assert result.level == "Very High"

    def test_all_roots_is_minimum(self):
        result = granularity(_many(["angry", "happy", "sad"]))
        assert result.score == 0
        assert result.level == "Low"
        assert result.message == LOW_MESSAGE

    def test_middle_ring_is_moderate(self):
        # exactly 50 does not clear the "High" threshold
        result = granularity(_many(["sad_lonely", "bad_tired"]))
        assert result.score == 50
        assert result.level == "Moderate"

    def test_mixed_leaf_and_middle(self):
        result = granularity(_many(["sad_lonely_isolated", "sad_lonely"]))
        assert result.score == 75
        assert result.level == "High"

    def test_unknown_emotions_are_skipped(self):
        result = granularity(_many(["deleted_node", "angry_mad_furious"]))
        assert result.score == 100

    def test_only_unknown_emotions(self):
        result = granularity(_many(["deleted_node"]))
        assert result.score == 0
        assert result.message == LOW_MESSAGE

    @pytest.mark.parametrize("nodes", [
        ["happy"] * 3 + ["happy_content_free"],
        ["fearful_anxious", "fearful", "fearful_anxious_worried"],
        ["bad_stressed_out_of_control"] * 7 + ["bad"],
    ])
    def test_score_is_bounded(self, nodes):
        assert 0 <= granularity(_many(nodes)).score <= 100
