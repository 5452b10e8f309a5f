"""Redis-backed journal store.

Check-ins live in one hash each, indexed by a sorted set scored on
timestamp so oldest/newest lookups never load the whole journal.
Custom tags share one hash; settings and the next reminder time are
plain string keys.

Every function takes an optional client so tests can pass fakeredis.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import redis

from moodpatterns.config.settings import EXPORT_VERSION, KEY_PREFIX, REDIS_URL
from moodpatterns.models.checkin import AppSettings, CheckIn, ContextTag

logger = logging.getLogger(__name__)

CHECKIN_PREFIX = f"{KEY_PREFIX}:checkin:"
TIMESTAMP_INDEX = f"{KEY_PREFIX}:checkins:by_ts"
TAGS_KEY = f"{KEY_PREFIX}:custom_tags"
SETTINGS_KEY = f"{KEY_PREFIX}:settings"
NEXT_REMINDER_KEY = f"{KEY_PREFIX}:next_reminder"


class InvalidImportError(ValueError):
    """Raised when an import payload cannot be parsed or has the wrong shape."""


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


# ── Hash codec ───────────────────────────────────────────────────────────

def _to_hash(check_in: CheckIn) -> dict[str, Any]:
    d = check_in.to_dict()
    d["emotions"] = json.dumps(d["emotions"])
    d["scale_values"] = json.dumps(d["scale_values"])
    d["tags"] = json.dumps(d["tags"])
    # Redis hashes cannot hold None
    d["intensity"] = "" if check_in.intensity is None else check_in.intensity
    d["modified_at"] = "" if check_in.modified_at is None else check_in.modified_at
    return d


def _from_hash(data: dict[str, str]) -> CheckIn:
    """Decode a stored hash; numeric strings are coerced by ``CheckIn.from_dict``."""
    data = dict(data)
    for json_field in ("emotions", "scale_values", "tags"):
        if isinstance(data.get(json_field), str):
            data[json_field] = json.loads(data[json_field])
    return CheckIn.from_dict(data)


# ═══════════════════════════════════════════════════════════════════════════
# Check-ins
# ═══════════════════════════════════════════════════════════════════════════

def save_checkin(check_in: CheckIn, r: redis.Redis | None = None) -> None:
    """Insert or overwrite a check-in by id."""
    r = r or _get_redis()
    pipe = r.pipeline()
    key = f"{CHECKIN_PREFIX}{check_in.id}"
    pipe.delete(key)
    pipe.hset(key, mapping=_to_hash(check_in))
    pipe.zadd(TIMESTAMP_INDEX, {check_in.id: check_in.timestamp})
    pipe.execute()


def get_checkin(checkin_id: str, r: redis.Redis | None = None) -> Optional[CheckIn]:
    r = r or _get_redis()
    data = r.hgetall(f"{CHECKIN_PREFIX}{checkin_id}")
    if not data:
        return None
    return _from_hash(data)


def delete_checkin(checkin_id: str, r: redis.Redis | None = None) -> bool:
    """Remove a check-in.  Returns False if it did not exist."""
    r = r or _get_redis()
    pipe = r.pipeline()
    pipe.delete(f"{CHECKIN_PREFIX}{checkin_id}")
    pipe.zrem(TIMESTAMP_INDEX, checkin_id)
    deleted, _ = pipe.execute()
    return bool(deleted)


def _load_many(ids: list[str], r: redis.Redis) -> list[CheckIn]:
    if not ids:
        return []
    pipe = r.pipeline(transaction=False)
    for cid in ids:
        pipe.hgetall(f"{CHECKIN_PREFIX}{cid}")
    results = []
    for cid, data in zip(ids, pipe.execute()):
        if not data:
            logger.warning("Index references missing check-in %s", cid)
            continue
        try:
            results.append(_from_hash(data))
        except ValueError as exc:
            logger.warning("Skipping unreadable check-in %s: %s", cid, exc)
    return results


def get_all_checkins(r: redis.Redis | None = None) -> list[CheckIn]:
    """Every check-in, newest first."""
    r = r or _get_redis()
    return _load_many(r.zrevrange(TIMESTAMP_INDEX, 0, -1), r)


def get_recent_checkins(limit: int = 5, r: redis.Redis | None = None) -> list[CheckIn]:
    r = r or _get_redis()
    if limit <= 0:
        return []
    return _load_many(r.zrevrange(TIMESTAMP_INDEX, 0, limit - 1), r)


def get_oldest_checkin(r: redis.Redis | None = None) -> Optional[CheckIn]:
    r = r or _get_redis()
    found = _load_many(r.zrange(TIMESTAMP_INDEX, 0, 0), r)
    return found[0] if found else None


def count_checkins(r: redis.Redis | None = None) -> int:
    r = r or _get_redis()
    return r.zcard(TIMESTAMP_INDEX)


# ═══════════════════════════════════════════════════════════════════════════
# Custom tags & settings
# ═══════════════════════════════════════════════════════════════════════════

def save_custom_tag(tag: ContextTag, r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    r.hset(TAGS_KEY, tag.id, json.dumps(tag.to_dict()))


def get_custom_tags(r: redis.Redis | None = None) -> list[ContextTag]:
    r = r or _get_redis()
    raw = r.hgetall(TAGS_KEY)
    return [ContextTag.from_dict(json.loads(raw[k])) for k in sorted(raw)]


def delete_custom_tag(tag_id: str, r: redis.Redis | None = None) -> bool:
    """Delete a tag definition.  Check-ins keep the now-orphaned id."""
    r = r or _get_redis()
    return bool(r.hdel(TAGS_KEY, tag_id))


def get_settings(r: redis.Redis | None = None) -> AppSettings:
    """Stored settings merged over defaults."""
    r = r or _get_redis()
    raw = r.get(SETTINGS_KEY)
    if not raw:
        return AppSettings()
    return AppSettings.from_dict(json.loads(raw))


def save_settings(settings: AppSettings, r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    r.set(SETTINGS_KEY, json.dumps(settings.to_dict()))


# ── Reminder state ───────────────────────────────────────────────────────

def get_next_reminder(r: redis.Redis | None = None) -> Optional[int]:
    r = r or _get_redis()
    raw = r.get(NEXT_REMINDER_KEY)
    return int(raw) if raw else None


def set_next_reminder(epoch_ms: Optional[int], r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    if epoch_ms is None:
        r.delete(NEXT_REMINDER_KEY)
    else:
        r.set(NEXT_REMINDER_KEY, int(epoch_ms))


# ═══════════════════════════════════════════════════════════════════════════
# Bulk operations
# ═══════════════════════════════════════════════════════════════════════════

def clear_data(r: redis.Redis | None = None) -> None:
    """Delete every key the store owns."""
    r = r or _get_redis()
    keys = list(r.scan_iter(f"{CHECKIN_PREFIX}*"))
    keys += [TIMESTAMP_INDEX, TAGS_KEY, SETTINGS_KEY, NEXT_REMINDER_KEY]
    r.delete(*keys)
    logger.info("Cleared journal store (%d keys)", len(keys))


def export_data(r: redis.Redis | None = None) -> str:
    """Full backup as pretty-printed JSON with a version tag."""
    r = r or _get_redis()
    check_ins = get_all_checkins(r)
    tags = get_custom_tags(r)
    payload = {
        "version": EXPORT_VERSION,
        "timestamp": int(time.time() * 1000),
        "checkIns": [c.to_dict() for c in check_ins],
        "settings": get_settings(r).to_dict(),
        "customTags": [t.to_dict() for t in tags],
    }
    logger.info("Exported %d check-ins, %d custom tags", len(check_ins), len(tags))
    return json.dumps(payload, indent=2)


def import_data(json_string: str, r: redis.Redis | None = None) -> dict[str, Any]:
    """Restore a backup, upserting records by id.

    Existing records not in the backup are kept.  Malformed individual
    records are skipped with a warning.  A payload with the wrong overall
    shape, or with invalid settings, raises ``InvalidImportError`` before
    anything is written.
    """
    r = r or _get_redis()
    try:
        data = json.loads(json_string)
    except (json.JSONDecodeError, TypeError) as exc:
        raise InvalidImportError("Invalid data format") from exc
    if not isinstance(data, dict):
        raise InvalidImportError("Invalid data format")
    if "checkIns" in data and not isinstance(data["checkIns"], list):
        raise InvalidImportError("Invalid checkIns format")
    if "customTags" in data and not isinstance(data["customTags"], list):
        raise InvalidImportError("Invalid customTags format")
    if data.get("settings") is not None and not isinstance(data["settings"], dict):
        raise InvalidImportError("Invalid settings format")

    skipped = 0

    # Parse everything first so a rejected payload writes nothing
    check_ins: list[CheckIn] = []
    for item in data.get("checkIns") or []:
        try:
            check_ins.append(CheckIn.from_dict(item))
        except ValueError as exc:
            logger.warning("Skipping malformed check-in in import: %s", exc)
            skipped += 1

    tags: list[ContextTag] = []
    for item in data.get("customTags") or []:
        try:
            tags.append(ContextTag.from_dict(item))
        except ValueError as exc:
            logger.warning("Skipping malformed tag in import: %s", exc)
            skipped += 1

    settings: Optional[AppSettings] = None
    if data.get("settings") is not None:
        try:
            settings = AppSettings.from_dict(data["settings"])
        except ValueError as exc:
            raise InvalidImportError("Invalid settings format") from exc

    for check_in in check_ins:
        save_checkin(check_in, r)
    for tag in tags:
        save_custom_tag(tag, r)
    if settings is not None:
        save_settings(settings, r)

    imported = {
        "check_ins": len(check_ins),
        "custom_tags": len(tags),
        "settings": settings is not None,
        "skipped": skipped,
    }
    logger.info("Imported %d check-ins, %d custom tags (%d skipped)",
                imported["check_ins"], imported["custom_tags"], imported["skipped"])
    return imported
