"""Tests for the dominant-mood summary."""

from conftest import BASE_TS, HOUR_MS, build_checkin
from moodpatterns.engine.summary import dominant_mood
from moodpatterns.models.checkin import CheckIn, EmotionSelection


class TestDominantMood:
    def test_most_frequent_root_across_depths(self):
        items = [
            build_checkin("angry_mad_furious", at=BASE_TS),
            build_checkin("angry", at=BASE_TS + HOUR_MS),
            build_checkin("happy", at=BASE_TS + 2 * HOUR_MS),
        ]
        root = dominant_mood(items)
        assert root.id == "angry"
        assert root.label == "Angry"
        assert root.parent_id is None

    def test_tie_goes_to_most_recent_root(self):
        items = [
            build_checkin("sad", at=BASE_TS + 3 * HOUR_MS),
            build_checkin("happy", at=BASE_TS),
            build_checkin("happy_content", at=BASE_TS + 2 * HOUR_MS),
            build_checkin("sad_lonely", at=BASE_TS + HOUR_MS),
        ]
        assert dominant_mood(items).id == "sad"
        assert dominant_mood(list(reversed(items))).id == "sad"

    def test_empty_journal(self):
        assert dominant_mood([]) is None

    def test_unresolvable_primaries_are_ignored(self):
        items = [
            build_checkin("deleted_node", at=BASE_TS),
            build_checkin("deleted_node", at=BASE_TS + HOUR_MS),
            build_checkin("fearful", at=BASE_TS + 2 * HOUR_MS),
        ]
        assert dominant_mood(items).id == "fearful"

    def test_nothing_resolvable(self):
        no_primary = CheckIn(id="n", timestamp=BASE_TS, emotions=[EmotionSelection("happy")])
        assert dominant_mood([no_primary, build_checkin("deleted_node")]) is None
