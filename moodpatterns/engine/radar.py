"""Radar profile: average scale values per root emotion.

Unlike ``trend_series``, a scale the check-in did not report counts as
that scale's default value here, so every spoke has a value.
"""

from __future__ import annotations

from typing import Sequence

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from moodpatterns.models.checkin import CheckIn, Scale

MAX_EMOTIONS = 5
FULL_MARK = 5


def radar_profile(
    check_ins: Sequence[CheckIn],
    scales: Sequence[Scale],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> list[dict]:
    """One point per root emotion (first five seen, oldest first).

    ``scales`` is the active scale set; it may be empty.
    """
    sums: dict[str, dict[str, float]] = {}
    counts: dict[str, int] = {}

    for c in sorted(check_ins, key=lambda c: c.timestamp):
        primary = c.primary
        root = taxonomy.get_root(primary.node_id) if primary else None
        if root is None:
            continue
        per_scale = sums.setdefault(root.label, {s.id: 0.0 for s in scales})
        counts[root.label] = counts.get(root.label, 0) + 1
        for s in scales:
            value = c.scale_values.get(s.id)
            per_scale[s.id] += s.default_value if value is None else value

    profile = []
    for emotion, per_scale in sums.items():
        point: dict = {"emotion": emotion, "full_mark": FULL_MARK}
        for s in scales:
            point[s.label] = round(per_scale[s.id] / counts[emotion], 1)
        profile.append(point)
    return profile[:MAX_EMOTIONS]
