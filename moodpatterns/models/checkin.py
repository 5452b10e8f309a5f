"""Journal records: check-ins, context tags, scales and app settings.

Plain dataclasses with dict codecs.  ``from_dict`` accepts both the
snake_case keys written by ``to_dict`` and the camelCase keys used by the
browser app's JSON exports, so old backups can be imported as-is.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


# camelCase (browser export) → snake_case (dataclass field)
_ALIASES = {
    "timezoneOffset": "timezone_offset",
    "scaleValues": "scale_values",
    "createdAt": "created_at",
    "modifiedAt": "modified_at",
    "nodeId": "node_id",
    "isPrimary": "is_primary",
    "ringIndex": "ring_index",
    "pathId": "path_id",
    "isUserCreated": "is_user_created",
    "minLabel": "min_label",
    "maxLabel": "max_label",
    "defaultValue": "default_value",
    "scheduleType": "schedule_type",
    "windowStartHour": "window_start_hour",
    "windowEndHour": "window_end_hour",
    "frequencyHours": "frequency_hours",
    "fixedTimes": "fixed_times",
    "userName": "user_name",
    "hasCompletedOnboarding": "has_completed_onboarding",
    "insightsUnlocked": "insights_unlocked",
    "clinicalModeEnabled": "clinical_mode_enabled",
    "highContrast": "high_contrast",
    "reducedMotion": "reduced_motion",
    "hapticsEnabled": "haptics_enabled",
    "defaultInputMode": "default_input_mode",
    "enabledScales": "enabled_scales",
    "customScales": "custom_scales",
    "tagOrder": "tag_order",
    "sortTagsByUsage": "sort_tags_by_usage",
    "showGamification": "show_gamification",
}


def _normalize(cls, data: dict) -> dict:
    """Map aliases to field names and drop unknown keys."""
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__} record must be an object, got {type(data).__name__}")
    out = {}
    for k, v in data.items():
        name = _ALIASES.get(k, k)
        if name in cls.__dataclass_fields__:
            out[name] = v
    return out


def _build(cls, data: dict):
    try:
        return cls(**data)
    except TypeError as exc:
        raise ValueError(f"invalid {cls.__name__} record: {exc}") from exc


# ── Field coercion ───────────────────────────────────────────────────────
# Each helper raises ValueError for a value of the wrong type.

def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _to_optional_int(name: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return _to_int(name, value)


def _to_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _to_str(name: str, value: Any, default: str = "") -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _to_bool(name: str, value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


# ═══════════════════════════════════════════════════════════════════════════
# Check-ins
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EmotionSelection:
    """One emotion picked on the wheel; exactly one per check-in is primary."""
    node_id: str
    is_primary: bool = False
    ring_index: Optional[int] = None   # 0 centre, 1 middle, 2 outer
    path_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> EmotionSelection:
        data = _normalize(cls, data)
        node_id = _to_str("node_id", data.get("node_id"))
        if not node_id:
            raise ValueError("emotion selection has no node_id")
        return cls(
            node_id=node_id,
            is_primary=_to_bool("is_primary", data.get("is_primary")),
            ring_index=_to_optional_int("ring_index", data.get("ring_index")),
            path_id=_to_str("path_id", data.get("path_id")),
        )


@dataclass
class CheckIn:
    id: str
    timestamp: int                      # epoch ms, user-editable
    emotions: list[EmotionSelection] = field(default_factory=list)
    timezone_offset: int = 0            # minutes, UTC - local (JS convention)
    note: str = ""
    intensity: Optional[int] = None     # 1-3
    scale_values: dict[str, float] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    created_at: int = field(default_factory=_now_ms)
    modified_at: Optional[int] = None

    @property
    def primary(self) -> Optional[EmotionSelection]:
        for e in self.emotions:
            if e.is_primary:
                return e
        return None

    @property
    def local_timestamp(self) -> int:
        """Timestamp shifted into the wall-clock time it was recorded in."""
        return self.timestamp - self.timezone_offset * 60_000

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> CheckIn:
        """Build a check-in, coercing every field to its declared type.

        Raises ValueError for a record with no id or timestamp, or with a
        field that cannot be coerced (``intensity: "high"``, a non-numeric
        scale value, a non-list ``tags``).  A null ``note``,
        ``timezone_offset`` or ``created_at`` falls back to its default.
        """
        data = _normalize(cls, data)

        raw_id = data.get("id")
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            raw_id = str(raw_id)
        checkin_id = _to_str("id", raw_id)
        if not checkin_id:
            raise ValueError("check-in record has no id")

        if data.get("timestamp") in (None, ""):
            raise ValueError(f"check-in {checkin_id} has no timestamp")
        timestamp = _to_int("timestamp", data["timestamp"])

        intensity = _to_optional_int("intensity", data.get("intensity"))
        if intensity is not None and not 1 <= intensity <= 3:
            raise ValueError(f"intensity must be 1-3, got {intensity}")

        emotions = data.get("emotions") or []
        if not isinstance(emotions, list):
            raise ValueError("emotions must be a list")

        scale_values = data.get("scale_values") or {}
        if not isinstance(scale_values, dict):
            raise ValueError("scale_values must be an object")

        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError("tags must be a list")

        created_at = data.get("created_at")
        return cls(
            id=checkin_id,
            timestamp=timestamp,
            emotions=[
                e if isinstance(e, EmotionSelection) else EmotionSelection.from_dict(e)
                for e in emotions
            ],
            timezone_offset=_to_optional_int("timezone_offset", data.get("timezone_offset")) or 0,
            note=_to_str("note", data.get("note")),
            intensity=intensity,
            scale_values={
                _to_str("scale id", k): _to_number(f"scale value {k!r}", v)
                for k, v in scale_values.items()
                if v is not None
            },
            tags=[_to_str("tag id", t) for t in tags],
            created_at=timestamp if created_at in (None, "") else _to_int("created_at", created_at),
            modified_at=_to_optional_int("modified_at", data.get("modified_at")),
        )


# ═══════════════════════════════════════════════════════════════════════════
# Configuration objects
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ContextTag:
    id: str
    category: str       # people | place | activity | sleep | weather
    label: str
    icon: str = ""
    is_user_created: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ContextTag:
        data = _normalize(cls, data)
        for name in ("id", "category", "label"):
            if not _to_str(name, data.get(name)):
                raise ValueError(f"tag record has no {name}")
        return cls(
            id=data["id"],
            category=data["category"],
            label=data["label"],
            icon=_to_str("icon", data.get("icon")),
            is_user_created=_to_bool("is_user_created", data.get("is_user_created")),
        )


@dataclass(frozen=True)
class Scale:
    id: str
    label: str
    min: float = 1
    max: float = 5
    step: float = 1
    default_value: float = 3
    min_label: str = ""
    max_label: str = ""
    is_user_created: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Scale:
        data = {k: v for k, v in _normalize(cls, data).items() if v is not None}
        for name in ("min", "max", "step", "default_value"):
            if name in data:
                data[name] = _to_number(name, data[name])
        return _build(cls, data)


class ScheduleType(str, Enum):
    RANDOM = "RANDOM"
    FIXED = "FIXED"


@dataclass
class FixedTime:
    id: str
    hour: int
    minute: int
    enabled: bool = True

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    @classmethod
    def from_dict(cls, data: dict) -> FixedTime:
        data = _normalize(cls, data)
        return cls(
            id=str(data.get("id", "")),
            hour=_to_int("hour", data.get("hour")),
            minute=_to_int("minute", data.get("minute", 0)),
            enabled=_to_bool("enabled", data.get("enabled"), default=True),
        )


@dataclass
class ReminderConfig:
    enabled: bool = False
    schedule_type: ScheduleType = ScheduleType.RANDOM
    window_start_hour: int = 9
    window_end_hour: int = 21
    frequency_hours: float = 4
    fixed_times: list[FixedTime] = field(default_factory=lambda: [
        FixedTime("1", 9, 0),
        FixedTime("2", 21, 0),
    ])
    days: list[int] = field(default_factory=lambda: [0, 1, 2, 3, 4, 5, 6])  # 0=Sun

    def to_dict(self) -> dict:
        d = asdict(self)
        d["schedule_type"] = self.schedule_type.value
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ReminderConfig:
        data = _normalize(cls, data)
        if "schedule_type" in data:
            data["schedule_type"] = ScheduleType(data["schedule_type"])
        for name in ("window_start_hour", "window_end_hour"):
            if name in data:
                data[name] = _to_int(name, data[name])
        if "frequency_hours" in data:
            data["frequency_hours"] = _to_number("frequency_hours", data["frequency_hours"])
        if "days" in data:
            if not isinstance(data["days"], list):
                raise ValueError("days must be a list")
            data["days"] = [_to_int("day", d) for d in data["days"]]
        if "fixed_times" in data:
            if not isinstance(data["fixed_times"], list):
                raise ValueError("fixed_times must be a list")
            data["fixed_times"] = [
                t if isinstance(t, FixedTime) else FixedTime.from_dict(t)
                for t in data["fixed_times"]
            ]
        return _build(cls, data)


@dataclass
class AppSettings:
    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    user_name: str = ""
    has_completed_onboarding: bool = False
    insights_unlocked: bool = False
    clinical_mode_enabled: bool = False
    high_contrast: bool = False
    reduced_motion: bool = False
    haptics_enabled: bool = True
    default_input_mode: str = "WHEEL"
    theme: str = "original"
    enabled_scales: list[str] = field(default_factory=lambda: ["energy", "stress", "focus"])
    custom_scales: list[Scale] = field(default_factory=list)
    tag_order: list[str] = field(default_factory=list)
    sort_tags_by_usage: bool = False
    show_gamification: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        d["reminders"] = self.reminders.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Build settings from a partial dict; missing keys keep defaults."""
        data = _normalize(cls, data)
        if isinstance(data.get("reminders"), dict):
            merged = ReminderConfig().to_dict()
            merged.update(_normalize(ReminderConfig, data["reminders"]))
            data["reminders"] = ReminderConfig.from_dict(merged)
        elif data.get("reminders") is not None and not isinstance(data["reminders"], ReminderConfig):
            raise ValueError("reminders must be an object")
        if "custom_scales" in data:
            data["custom_scales"] = [
                s if isinstance(s, Scale) else Scale.from_dict(s)
                for s in data["custom_scales"] or []
            ]
        # Explicit nulls in stored settings fall back to defaults
        data = {k: v for k, v in data.items() if v is not None}
        return _build(cls, data)
