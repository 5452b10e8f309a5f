"""Dimensional mapper: categorical emotions → Valence-Arousal-Dominance.

Only arousal is modulated by the reported intensity (1 → 0.5x, 2 → 1.0x,
3 → 1.5x).  Arousal is not clamped after scaling, so a high-arousal root
at intensity 3 can exceed 1.0.
"""

from __future__ import annotations

from typing import Iterable

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, ROOT_VAD_MAP, Taxonomy
from moodpatterns.models.checkin import CheckIn
from moodpatterns.models.insights import VADPoint, VADVector

DEFAULT_INTENSITY = 2
UNKNOWN_LABEL = "Unknown"
ZERO_VECTOR = VADVector(0.0, 0.0, 0.0)


def intensity_modifier(intensity: int | None) -> float:
    return (intensity or DEFAULT_INTENSITY) / 2


def to_vad(check_in: CheckIn, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> VADPoint:
    """Project one check-in into VAD space.

    An unresolvable primary emotion yields the zero vector labelled
    "Unknown".
    """
    vector = ZERO_VECTOR
    label = UNKNOWN_LABEL

    primary = check_in.primary
    if primary is not None:
        path = taxonomy.get_path(primary.node_id)
        if path:
            label = path[-1].label
            vector = ROOT_VAD_MAP.get(path[0].id, ZERO_VECTOR)

    return VADPoint(
        id=check_in.id,
        timestamp=check_in.timestamp,
        valence=vector.valence,
        arousal=round(vector.arousal * intensity_modifier(check_in.intensity), 2),
        dominance=vector.dominance,
        label=label,
    )


def vad_series(
    check_ins: Iterable[CheckIn],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> list[VADPoint]:
    """VAD points for every check-in, oldest first."""
    points = [to_vad(c, taxonomy) for c in check_ins]
    points.sort(key=lambda p: p.timestamp)
    return points
