"""Emotion taxonomy (the Feelings Wheel) and static lookup tables.

The wheel is a fixed three-ring tree: 7 root categories, a middle ring
and an outer ring.  ``build_taxonomy`` turns the branch tables below
into an immutable ``Taxonomy`` once at import time; every analytics
function receives it as an argument.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from moodpatterns.models.checkin import ContextTag, Scale
from moodpatterns.models.insights import VADVector

CENTRE, MIDDLE, OUTER = 0, 1, 2


@dataclass(frozen=True)
class EmotionNode:
    id: str
    label: str
    parent_id: Optional[str]
    depth: int              # 0 root, 1 mid, 2 leaf


# ═══════════════════════════════════════════════════════════════════════════
# Wheel data
# ═══════════════════════════════════════════════════════════════════════════

# root id → (root label, [(middle label, [outer labels])])
WHEEL: dict[str, tuple[str, list[tuple[str, list[str]]]]] = {
    "happy": ("Happy", [
        ("Playful", ["Aroused", "Cheeky"]),
        ("Content", ["Free", "Joyful"]),
        ("Interested", ["Curious", "Inquisitive"]),
        ("Proud", ["Successful", "Confident"]),
        ("Accepted", ["Respected", "Valued"]),
        ("Powerful", ["Courageous", "Creative"]),
        ("Peaceful", ["Loving", "Thankful"]),
        ("Trusting", ["Sensitive", "Intimate"]),
        ("Optimistic", ["Hopeful", "Inspired"]),
    ]),
    "sad": ("Sad", [
        ("Lonely", ["Abandoned", "Isolated"]),
        ("Vulnerable", ["Victimised", "Fragile"]),
        ("Despair", ["Grief", "Helpless"]),
        ("Guilty", ["Regretful", "Ashamed"]),
        ("Hurt", ["Embarrassed", "Disappointed"]),
        ("Depressed", ["Inferior", "Empty"]),
        ("Ashamed", ["Remorseful", "Guilty"]),
    ]),
    "angry": ("Angry", [
        ("Let down", ["Betrayed", "Resentful"]),
        ("Humiliated", ["Disrespected", "Ridiculed"]),
        ("Bitter", ["Indignant", "Violated"]),
        ("Mad", ["Furious", "Angry"]),
        ("Aggressive", ["Provoked", "Hostile"]),
        ("Frustrated", ["Infuriated", "Annoyed"]),
        ("Distant", ["Withdrawn", "Numb"]),
        ("Critical", ["Skeptical", "Dismissive"]),
    ]),
    "fearful": ("Fearful", [
        ("Scared", ["Helpless", "Frightened"]),
        ("Anxious", ["Overwhelmed", "Worried"]),
        ("Insecure", ["Inadequate", "Inferior"]),
        ("Weak", ["Worthless", "Insignificant"]),
        ("Rejected", ["Excluded", "Persecuted"]),
        ("Threatened", ["Nervous", "Exposed"]),
    ]),
    "disgusted": ("Disgusted", [
        ("Disapproving", ["Disappointed", "Awful"]),
        ("Disappointed", ["Appalled", "Horrified"]),
        ("Awful", ["Nauseated", "Revolted"]),
        ("Repelled", ["Disgusted", "Horrified"]),
    ]),
    "surprised": ("Surprised", [
        ("Startled", ["Shocked", "Dismayed"]),
        ("Confused", ["Disillusioned", "Perplexed"]),
        ("Amazed", ["Astonished", "Awe"]),
        ("Excited", ["Eager", "Energetic"]),
    ]),
    "bad": ("Bad", [
        ("Bored", ["Indifferent", "Apathetic"]),
        ("Busy", ["Pressured", "Rushed"]),
        ("Stressed", ["Overwhelmed", "Out of control"]),
        ("Tired", ["Sleepy", "Unfocused"]),
    ]),
}

# Valence-Arousal-Dominance per root, each in [-1, 1]
# (approximated from Warriner et al., 2013).
ROOT_VAD_MAP: Mapping[str, VADVector] = MappingProxyType({
    "happy": VADVector(valence=0.85, arousal=0.25, dominance=0.75),
    "sad": VADVector(valence=-0.65, arousal=-0.35, dominance=-0.55),
    "angry": VADVector(valence=-0.55, arousal=0.75, dominance=0.55),
    "fearful": VADVector(valence=-0.65, arousal=0.65, dominance=-0.65),
    "disgusted": VADVector(valence=-0.6, arousal=0.35, dominance=0.1),
    "surprised": VADVector(valence=0.4, arousal=0.85, dominance=-0.1),
    "bad": VADVector(valence=-0.4, arousal=-0.2, dominance=-0.2),
})

NEGATIVE_ROOTS = frozenset({"sad", "angry", "fearful", "bad", "disgusted"})

DEFAULT_TAGS: tuple[ContextTag, ...] = (
    ContextTag("family", "people", "Family"),
    ContextTag("friends", "people", "Friends"),
    ContextTag("partner", "people", "Partner"),
    ContextTag("alone", "people", "Alone"),
    ContextTag("colleagues", "people", "Colleagues"),
    ContextTag("home", "place", "Home"),
    ContextTag("work", "place", "Work"),
    ContextTag("transit", "place", "Transit"),
    ContextTag("nature", "place", "Nature"),
    ContextTag("public", "place", "Public"),
    ContextTag("exercise", "activity", "Exercise"),
    ContextTag("relaxing", "activity", "Relaxing"),
    ContextTag("working", "activity", "Working"),
    ContextTag("eating", "activity", "Eating"),
    ContextTag("social_media", "activity", "Social Media"),
    ContextTag("chores", "activity", "Chores"),
    ContextTag("good_sleep", "sleep", "Good Sleep"),
    ContextTag("bad_sleep", "sleep", "Bad Sleep"),
    ContextTag("sunny", "weather", "Sunny"),
    ContextTag("rainy", "weather", "Rainy"),
)

DEFAULT_SCALES: tuple[Scale, ...] = (
    Scale("energy", "Energy", 1, 5, 1, 3, min_label="Drained", max_label="Hyper"),
    Scale("stress", "Stress", 1, 5, 1, 1, min_label="Calm", max_label="Panicked"),
    Scale("focus", "Focus", 1, 5, 1, 3, min_label="Scattered", max_label="Laser"),
)


# ═══════════════════════════════════════════════════════════════════════════
# Taxonomy
# ═══════════════════════════════════════════════════════════════════════════

def _slug(label: str) -> str:
    return re.sub(r"\s+", "_", label.lower())


@dataclass(frozen=True)
class Taxonomy:
    """Read-only id → node map with path helpers."""

    nodes: Mapping[str, EmotionNode]

    def get(self, node_id: str) -> Optional[EmotionNode]:
        return self.nodes.get(node_id)

    def get_path(self, node_id: str) -> list[EmotionNode]:
        """Nodes from root to ``node_id`` inclusive; empty if unknown."""
        path: list[EmotionNode] = []
        current = self.nodes.get(node_id)
        # Bounded walk so a malformed table with a cycle cannot hang
        while current is not None and len(path) <= len(self.nodes):
            path.insert(0, current)
            if current.parent_id is None:
                break
            current = self.nodes.get(current.parent_id)
        return path

    def get_depth(self, node_id: str) -> int:
        """0 for a root, 2 for a leaf, -1 for an unknown id."""
        return len(self.get_path(node_id)) - 1

    def get_root(self, node_id: str) -> Optional[EmotionNode]:
        path = self.get_path(node_id)
        return path[0] if path else None

    def get_children(self, parent_id: Optional[str]) -> list[EmotionNode]:
        return [n for n in self.nodes.values() if n.parent_id == parent_id]

    @property
    def roots(self) -> list[EmotionNode]:
        return self.get_children(None)


def build_taxonomy(
    wheel: Mapping[str, tuple[str, Sequence[tuple[str, Sequence[str]]]]] = WHEEL,
) -> Taxonomy:
    """Build the immutable node map from a wheel table.

    Ids are derived from the labels: ``happy``, ``happy_playful``,
    ``happy_playful_cheeky``.  Leaf ids include the middle id, so a label
    repeated in two branches (e.g. "Guilty") still gets a unique id.
    """
    nodes: dict[str, EmotionNode] = {}
    for root_id, (root_label, branches) in wheel.items():
        nodes[root_id] = EmotionNode(root_id, root_label, None, CENTRE)
        for mid_label, outer in branches:
            mid_id = f"{root_id}_{_slug(mid_label)}"
            nodes[mid_id] = EmotionNode(mid_id, mid_label, root_id, MIDDLE)
            for leaf_label in outer:
                leaf_id = f"{mid_id}_{_slug(leaf_label)}"
                nodes[leaf_id] = EmotionNode(leaf_id, leaf_label, mid_id, OUTER)
    return Taxonomy(MappingProxyType(nodes))


DEFAULT_TAXONOMY: Taxonomy = build_taxonomy()


def tag_lookup(custom_tags: Sequence[ContextTag] = ()) -> dict[str, ContextTag]:
    """Default tags overlaid with user-created ones, keyed by id."""
    lookup = {t.id: t for t in DEFAULT_TAGS}
    lookup.update({t.id: t for t in custom_tags})
    return lookup
