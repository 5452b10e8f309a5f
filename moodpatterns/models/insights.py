"""Derived analytic views returned by the engine.

Plain data only, ready for a charting layer to render.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional


class PatternType:
    CONCURRENT = "concurrent"
    PREDICTIVE = "predictive"   # temporal lag, Granger-lite


class Sentiment:
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class VADVector:
    valence: float
    arousal: float
    dominance: float


@dataclass(frozen=True)
class VADPoint:
    id: str
    timestamp: int
    valence: float
    arousal: float
    dominance: float
    label: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TrendPoint:
    date: str                            # ISO local date, YYYY-MM-DD
    label: str                           # short M/D label for chart axes
    mean_intensity: float
    intensity_range: tuple[float, float]
    mean_scale_values: dict[str, float] = field(default_factory=dict)
    count: int = 0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["intensity_range"] = list(self.intensity_range)
        return d


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    z: int      # number of check-ins at this (x, y)


@dataclass
class ScaleCorrelation:
    scale_x: str
    scale_y: str
    r: float                     # Pearson, -1..1
    message: str
    points: list[ScatterPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MoodStability:
    score: int          # 0-100, 100 = very stable
    label: str
    volatility: float   # population std-dev of valence

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Pattern:
    type: str               # PatternType
    trigger: str            # tag label
    emotion: str            # root emotion label
    lift: float             # P(emotion | tag) / P(emotion)
    confidence: float       # P(emotion | tag) as a percentage
    message: str
    advice: str
    sentiment: str          # Sentiment
    support: int            # joint count
    tag_count: int
    time_lag: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GranularityScore:
    score: int      # 0-100
    level: str      # Low | Moderate | High | Very High
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ClinicalMetrics:
    velocity: float         # VAD distance travelled per active day
    compliance: int         # % of days since first log that have a log
    data_integrity: str     # High | Moderate | Low

    def to_dict(self) -> dict:
        return asdict(self)
