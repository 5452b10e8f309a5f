"""Journal summary: the dominant mood."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, EmotionNode, Taxonomy
from moodpatterns.models.checkin import CheckIn


def dominant_mood(
    check_ins: Sequence[CheckIn],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> Optional[EmotionNode]:
    """Root emotion chosen most often as a primary, or None.

    Check-ins whose primary does not resolve are ignored.  On a tie the
    root logged most recently wins.
    """
    counts: Counter = Counter()
    roots: dict[str, EmotionNode] = {}
    # Newest first: Counter keeps first-insertion order, which breaks ties
    for c in sorted(check_ins, key=lambda c: c.timestamp, reverse=True):
        primary = c.primary
        root = taxonomy.get_root(primary.node_id) if primary else None
        if root is None:
            continue
        counts[root.id] += 1
        roots.setdefault(root.id, root)

    if not counts:
        return None
    root_id, _ = counts.most_common(1)[0]
    return roots[root_id]
