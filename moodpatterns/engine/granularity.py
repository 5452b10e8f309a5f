"""Emotional granularity: how specific the user's emotion labels are.

Picking an outer-ring leaf ("Furious") scores higher than a root
("Angry").  Root = 1 point, middle = 2, leaf = 3; the mean maps linearly
onto 0-100.
"""

from __future__ import annotations

from typing import Sequence

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from moodpatterns.models.checkin import CheckIn
from moodpatterns.models.insights import GranularityScore

LEVELS = [
    (80, "Very High", "Excellent! You are identifying nuanced emotions with high precision."),
    (50, "High", "Great job. You often look beyond the surface level emotions."),
    (20, "Moderate", "Good start. Try to tap the outer rings of the wheel more often."),
]
LOW_MESSAGE = "Try to drill down deeper into the wheel to identify specific feelings."


def granularity(
    check_ins: Sequence[CheckIn],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> GranularityScore:
    if not check_ins:
        return GranularityScore(score=0, level="Low", message="No data yet.")

    points: list[int] = []
    for c in check_ins:
        primary = c.primary
        if primary is None:
            continue
        depth = taxonomy.get_depth(primary.node_id)
        if depth < 0:
            continue
        points.append(depth + 1)

    if not points:
        return GranularityScore(score=0, level="Low", message=LOW_MESSAGE)

    average = sum(points) / len(points)
    score = max(0.0, min(100.0, (average - 1) / 2 * 100))

    for threshold, level, message in LEVELS:
        if score > threshold:
            return GranularityScore(score=round(score), level=level, message=message)
    return GranularityScore(score=round(score), level="Low", message=LOW_MESSAGE)
