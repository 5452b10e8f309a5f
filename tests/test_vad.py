"""Tests for the VAD dimensional mapper."""

import pytest

from conftest import BASE_TS, HOUR_MS, build_checkin
from moodpatterns.engine.vad import to_vad, vad_series
from moodpatterns.models.checkin import CheckIn, EmotionSelection


class TestToVad:
    def test_missing_intensity_is_unmodulated(self):
        point = to_vad(build_checkin("angry_mad_furious", intensity=None))
        assert point.arousal == pytest.approx(0.75)
        assert point.valence == pytest.approx(-0.55)
        assert point.dominance == pytest.approx(0.55)

    def test_intensity_scales_arousal_only(self):
        low = to_vad(build_checkin("happy", intensity=1))
        high = to_vad(build_checkin("happy", intensity=3))
        assert low.arousal == pytest.approx(0.125, abs=0.01)
        assert high.arousal == pytest.approx(0.375, abs=0.01)
        assert low.valence == high.valence == pytest.approx(0.85)
        assert low.dominance == high.dominance == pytest.approx(0.75)

    def test_arousal_not_clamped(self):
        point = to_vad(build_checkin("surprised_excited_eager", intensity=3))
        assert point.arousal == pytest.approx(1.275, abs=0.01)
        assert point.arousal > 1.0

    def test_label_is_selected_leaf(self):
        assert to_vad(build_checkin("happy_playful_cheeky")).label == "Cheeky"

    def test_unknown_emotion_is_zero_vector(self):
        point = to_vad(build_checkin("deleted_node", intensity=3))
        assert (point.valence, point.arousal, point.dominance) == (0.0, 0.0, 0.0)
        assert point.label == "Unknown"

    def test_no_primary_is_zero_vector(self):
        c = CheckIn(id="x", timestamp=BASE_TS, emotions=[EmotionSelection("happy")])
        point = to_vad(c)
        assert point.label == "Unknown"
        assert point.valence == 0.0


class TestVadSeries:
    def test_sorted_oldest_first(self):
        later = build_checkin("sad", at=BASE_TS + HOUR_MS, checkin_id="later")
        earlier = build_checkin("happy", at=BASE_TS, checkin_id="earlier")
        points = vad_series([later, earlier])
        assert [p.id for p in points] == ["earlier", "later"]

    def test_input_not_mutated(self):
        items = [build_checkin("sad", at=BASE_TS + HOUR_MS), build_checkin("happy", at=BASE_TS)]
        ids = [c.id for c in items]
        vad_series(items)
        assert [c.id for c in items] == ids

    def test_empty(self):
        assert vad_series([]) == []
