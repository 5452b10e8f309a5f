"""Clinical-mode metrics: affective velocity and logging compliance."""

from __future__ import annotations

import logging
import math
import time
from typing import Optional, Sequence

from moodpatterns.engine.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from moodpatterns.engine.trends import local_datetime
from moodpatterns.engine.vad import vad_series
from moodpatterns.models.checkin import CheckIn
from moodpatterns.models.insights import ClinicalMetrics

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


def _integrity(compliance: int) -> str:
    if compliance > 70:
        return "High"
    if compliance > 40:
        return "Moderate"
    return "Low"


def clinical_metrics(
    check_ins: Sequence[CheckIn],
    days_active: int,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    now: Optional[int] = None,
) -> ClinicalMetrics:
    """Velocity and compliance for the journal.

    Args:
        days_active: days since the first check-in, as shown to the user.
        now: epoch ms used as the end of the compliance span.  Defaults
            to the current time; pass a fixed value for reproducible output.
    """
    if len(check_ins) < 2:
        return ClinicalMetrics(velocity=0.0, compliance=0, data_integrity="Low")

    now = int(time.time() * 1000) if now is None else now

    # 1. Affective velocity: Euclidean distance travelled in VAD space per day
    points = vad_series(check_ins, taxonomy)
    distance = sum(
        math.dist(
            (prev.valence, prev.arousal, prev.dominance),
            (curr.valence, curr.arousal, curr.dominance),
        )
        for prev, curr in zip(points, points[1:])
    )
    velocity = distance / max(1, days_active)

    # 2. Compliance: share of days since the first log that have a log
    first = min(c.timestamp for c in check_ins)
    span_days = max(1, math.ceil((now - first) / DAY_MS))
    logged_days = {local_datetime(c).date() for c in check_ins}
    compliance = min(100, round(len(logged_days) / span_days * 100))

    logger.debug("clinical_metrics: %d logged days over %d-day span", len(logged_days), span_days)
    return ClinicalMetrics(
        velocity=round(velocity, 2),
        compliance=compliance,
        data_integrity=_integrity(compliance),
    )
