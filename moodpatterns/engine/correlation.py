"""Correlation & stability engine.

- ``correlate``: Pearson r between two user scales, with bubble-chart points.
- ``stability``: Emotional Volatility Index over the VAD valence axis.
"""

from __future__ import annotations

import logging
import math
import statistics
from collections import Counter
from typing import Sequence

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from moodpatterns.engine.vad import vad_series
from moodpatterns.models.checkin import CheckIn, Scale
from moodpatterns.models.insights import MoodStability, ScaleCorrelation, ScatterPoint

logger = logging.getLogger(__name__)

MIN_CORRELATION_POINTS = 5
STRONG_CORRELATION = 0.5

MIN_STABILITY_CHECKINS = 5
# Empirical calibration: a valence std-dev of ~0.67 maps to a score of 0.
VOLATILITY_MULTIPLIER = 1.5


# ═══════════════════════════════════════════════════════════════════════════
# Pearson correlation
# ═══════════════════════════════════════════════════════════════════════════

def pearson(pairs: Sequence[tuple[float, float]]) -> float:
    """Pearson r; 0.0 when either side has zero variance."""
    n = len(pairs)
    if n == 0:
        return 0.0
    sum_x = sum(x for x, _ in pairs)
    sum_y = sum(y for _, y in pairs)
    sum_xy = sum(x * y for x, y in pairs)
    sum_x2 = sum(x * x for x, _ in pairs)
    sum_y2 = sum(y * y for _, y in pairs)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if spread <= 0:
        return 0.0
    r = numerator / math.sqrt(spread)
    return max(-1.0, min(1.0, r))


def correlate(
    check_ins: Sequence[CheckIn],
    scale_a: str,
    scale_b: str,
    scales: Sequence[Scale] = (),
) -> ScaleCorrelation:
    """Correlate two scales over check-ins that reported both.

    Scale ids are opaque; ``scales`` only supplies display labels for
    the message.  Fewer than 5 qualifying check-ins → r = 0.
    """
    labels = {s.id: s.label for s in scales}
    label_a = labels.get(scale_a, scale_a)
    label_b = labels.get(scale_b, scale_b)

    pairs: list[tuple[float, float]] = []
    for c in check_ins:
        a = c.scale_values.get(scale_a)
        b = c.scale_values.get(scale_b)
        if a is None or b is None:
            continue
        pairs.append((a, b))

    if len(pairs) < MIN_CORRELATION_POINTS:
        logger.debug("correlate(%s, %s): %d points, need %d",
                     scale_a, scale_b, len(pairs), MIN_CORRELATION_POINTS)
        return ScaleCorrelation(scale_a, scale_b, 0.0, "Not enough data", [])

    r = pearson(pairs)

    if r > STRONG_CORRELATION:
        message = f"{label_a} increases with {label_b}"
    elif r < -STRONG_CORRELATION:
        message = f"{label_a} drains your {label_b}"
    else:
        message = "No correlation"

    bubbles = Counter(pairs)
    points = [ScatterPoint(x, y, count) for (x, y), count in sorted(bubbles.items())]

    return ScaleCorrelation(scale_a, scale_b, round(r, 2), message, points)


# ═══════════════════════════════════════════════════════════════════════════
# Mood stability
# ═══════════════════════════════════════════════════════════════════════════

def _stability_label(score: float) -> str:
    if score > 80:
        return "Very Stable"
    if score > 60:
        return "Steady"
    if score < 30:
        return "High Volatility"
    return "Variable"


def stability(
    check_ins: Sequence[CheckIn],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> MoodStability:
    """Score 0-100 from the population std-dev of valence.

    Every check-in counts individually, however many fall on one day.
    """
    if len(check_ins) < MIN_STABILITY_CHECKINS:
        return MoodStability(score=50, label="Calculating...", volatility=0.0)

    valences = [p.valence for p in vad_series(check_ins, taxonomy)]
    std_dev = statistics.pstdev(valences)
    score = max(0.0, min(100.0, (1 - std_dev * VOLATILITY_MULTIPLIER) * 100))

    return MoodStability(
        score=round(score),
        label=_stability_label(score),
        volatility=round(std_dev, 2),
    )
