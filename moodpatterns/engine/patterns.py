"""Pattern mining: statistical lift between context tags and emotions.

Two passes over the time-ordered journal:

1. Concurrent lift   P(emotion | tag on the same check-in) / P(emotion)
2. Predictive lift   P(emotion | tag on any check-in in the previous 12h) / P(emotion)

The predictive pass approximates Granger-style "X tends to precede Y";
it is a hedged signal, not validated causality, and the generated
wording says so.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from moodpatterns.engine.taxonomy import (
    DEFAULT_TAXONOMY,
    NEGATIVE_ROOTS,
    Taxonomy,
    tag_lookup,
)
from moodpatterns.models.checkin import CheckIn, ContextTag
from moodpatterns.models.insights import Pattern, PatternType, Sentiment

logger = logging.getLogger(__name__)

MIN_CHECKINS = 5
MIN_TAG_COUNT = 3
MIN_JOINT_COUNT = 2
LIFT_THRESHOLD = 1.3
HIGH_CONFIDENCE = 0.6
LAG_WINDOW_MS = 12 * 60 * 60 * 1000
MAX_PATTERNS = 10

ARCHIVED_TAG_LABEL = "Archived Tag"


@dataclass
class JointCount:
    count: int = 0
    root_id: str = ""


@dataclass
class _Tally:
    """Tag → root-label → joint count, plus per-tag marginals."""
    joint: dict[str, dict[str, JointCount]] = field(default_factory=dict)
    tag_counts: Counter = field(default_factory=Counter)

    def add(self, tag_id: str, root_label: str, root_id: str) -> None:
        self.tag_counts[tag_id] += 1
        per_emotion = self.joint.setdefault(tag_id, {})
        jc = per_emotion.setdefault(root_label, JointCount(root_id=root_id))
        jc.count += 1


# ═══════════════════════════════════════════════════════════════════════════
# Wording
# ═══════════════════════════════════════════════════════════════════════════

def _predictive_text(tag: str, emotion: str, ratio: float, negative: bool) -> tuple[str, str]:
    if ratio > HIGH_CONFIDENCE:
        message = f"It seems '{tag}' is often followed by {emotion} later in the day."
    else:
        message = f"We noticed a potential link between '{tag}' and feeling {emotion} within 12 hours."
    if negative:
        advice = ("Transparency: This correlation is based on a 12-hour predictive window. "
                  "Reflect if this matches your experience.")
    else:
        advice = f"Observation: This pattern suggests '{tag}' might set a positive tone for your day."
    return message, advice


def _concurrent_text(tag: str, emotion: str, lift: float, negative: bool) -> tuple[str, str]:
    message = (f"When tagged with '{tag}', reports of {emotion} are "
               f"{lift:.1f}x more likely compared to your average.")
    if negative:
        advice = "Reflection: Consider if this context consistently influences your mood in this way."
    else:
        advice = "Insight: This context appears strongly associated with positive well-being for you."
    return message, advice


# ═══════════════════════════════════════════════════════════════════════════
# Mining
# ═══════════════════════════════════════════════════════════════════════════

def _emit(
    tally: _Tally,
    emotion_counts: Counter,
    total: int,
    pattern_type: str,
    tags: dict[str, ContextTag],
) -> list[Pattern]:
    found: list[Pattern] = []
    for tag_id, per_emotion in tally.joint.items():
        tag_count = tally.tag_counts[tag_id]
        if tag_count < MIN_TAG_COUNT:
            continue

        tag = tags.get(tag_id)
        tag_label = tag.label if tag else ARCHIVED_TAG_LABEL

        for emotion, jc in per_emotion.items():
            ratio = jc.count / tag_count
            lift = ratio / (emotion_counts[emotion] / total)
            if lift <= LIFT_THRESHOLD or jc.count < MIN_JOINT_COUNT:
                continue

            negative = jc.root_id in NEGATIVE_ROOTS
            if pattern_type == PatternType.PREDICTIVE:
                message, advice = _predictive_text(tag_label, emotion, ratio, negative)
            else:
                message, advice = _concurrent_text(tag_label, emotion, lift, negative)

            found.append(Pattern(
                type=pattern_type,
                trigger=tag_label,
                emotion=emotion,
                lift=lift,
                confidence=round(min(100.0, ratio * 100), 1),
                message=message,
                advice=advice,
                sentiment=Sentiment.NEGATIVE if negative else Sentiment.POSITIVE,
                support=jc.count,
                tag_count=tag_count,
                time_lag="< 12h" if pattern_type == PatternType.PREDICTIVE else None,
            ))
    return found


def mine_patterns(
    check_ins: Sequence[CheckIn],
    tags: Sequence[ContextTag] = (),
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> list[Pattern]:
    """Rank up to 10 tag → emotion patterns.

    ``tags`` are the user's custom tags; built-in tags are always known.
    Tag ids that no longer resolve are reported as "Archived Tag".
    Predictive patterns rank before concurrent ones, then by lift; a
    (trigger, emotion) pair appears at most once.  Since every deleted
    tag shares the "Archived Tag" trigger, two deleted tags linked to the
    same emotion collapse into a single pattern (the first in rank order).
    """
    if len(check_ins) < MIN_CHECKINS:
        return []

    ordered = sorted(check_ins, key=lambda c: c.timestamp)
    total = len(ordered)
    emotion_counts: Counter = Counter()
    concurrent = _Tally()
    temporal = _Tally()

    for idx, c in enumerate(ordered):
        primary = c.primary
        root = taxonomy.get_root(primary.node_id) if primary else None
        if root is None:
            continue

        emotion_counts[root.label] += 1

        for tag_id in c.tags:
            concurrent.add(tag_id, root.label, root.id)

        # Every earlier check-in within the window contributes its tags
        for i in range(idx - 1, -1, -1):
            prev = ordered[i]
            if c.timestamp - prev.timestamp > LAG_WINDOW_MS:
                break
            for tag_id in prev.tags:
                temporal.add(tag_id, root.label, root.id)

    lookup = tag_lookup(tags)
    patterns = _emit(concurrent, emotion_counts, total, PatternType.CONCURRENT, lookup)
    patterns += _emit(temporal, emotion_counts, total, PatternType.PREDICTIVE, lookup)

    patterns.sort(key=lambda p: (p.type != PatternType.PREDICTIVE, -p.lift))

    unique: list[Pattern] = []
    seen: set[tuple[str, str]] = set()
    for p in patterns:
        key = (p.trigger, p.emotion)
        if key in seen:
            continue
        seen.add(key)
        unique.append(p)

    logger.debug("mine_patterns: %d check-ins, %d candidates, %d unique",
                 total, len(patterns), len(unique))
    return unique[:MAX_PATTERNS]
