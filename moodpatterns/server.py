"""FastAPI server exposing the journal store and the analytics engine.

REST endpoints for check-in CRUD, tags, settings, backup/restore,
reminder state and one read-only endpoint per insight.  Every insight
is recomputed from a fresh snapshot of the journal on each request.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

import redis
from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from moodpatterns.config.settings import CORS_ORIGINS, REDIS_URL
from moodpatterns.engine.clinical import clinical_metrics
from moodpatterns.engine.correlation import correlate, stability
from moodpatterns.engine.granularity import granularity
from moodpatterns.engine.patterns import mine_patterns
from moodpatterns.engine.radar import radar_profile
from moodpatterns.engine.reminders import next_reminder
from moodpatterns.engine.summary import dominant_mood
from moodpatterns.engine.taxonomy import DEFAULT_SCALES, DEFAULT_TAXONOMY, DEFAULT_TAGS
from moodpatterns.engine.trends import heatmap, trend_series, weekday_counts
from moodpatterns.engine.vad import vad_series
from moodpatterns.models.checkin import AppSettings, CheckIn, ContextTag, EmotionSelection, Scale
from moodpatterns.store import checkin_store as store

logger = logging.getLogger(__name__)

app = FastAPI(title="Mood Patterns", description="Private mood journal with pattern insights")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

DAY_MS = 24 * 60 * 60 * 1000


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _active_scales(settings: AppSettings) -> list[Scale]:
    all_scales = [*DEFAULT_SCALES, *settings.custom_scales]
    return [s for s in all_scales if s.id in settings.enabled_scales]


def _reschedule_reminder(settings: AppSettings, r: redis.Redis) -> Optional[int]:
    """Compute and persist the next reminder; clears it when disabled."""
    fire_at = next_reminder(settings.reminders, datetime.now())
    epoch_ms = int(fire_at.timestamp() * 1000) if fire_at else None
    store.set_next_reminder(epoch_ms, r)
    return epoch_ms


# ── Health ───────────────────────────────────────────────────────────────

@app.get("/api/health")
async def health():
    r = _get_redis()
    try:
        r.ping()
        redis_ok = True
        count = store.count_checkins(r)
    except redis.ConnectionError:
        redis_ok = False
        count = None
    return {"status": "ok", "redis": redis_ok, "check_ins": count}


# ── Check-ins ────────────────────────────────────────────────────────────

class EmotionSelectionBody(BaseModel):
    node_id: str
    is_primary: bool = False
    ring_index: Optional[int] = None
    path_id: Optional[str] = None


class CheckInRequest(BaseModel):
    id: Optional[str] = None
    timestamp: Optional[int] = None
    timezone_offset: int = 0
    emotions: list[EmotionSelectionBody] = Field(min_length=1)
    note: str = ""
    intensity: Optional[int] = Field(default=None, ge=1, le=3)
    scale_values: dict[str, float] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


@app.get("/api/checkins")
async def list_checkins(limit: Optional[int] = Query(default=None, ge=1)):
    r = _get_redis()
    check_ins = store.get_recent_checkins(limit, r) if limit else store.get_all_checkins(r)
    return {"check_ins": [c.to_dict() for c in check_ins]}


@app.get("/api/checkins/{checkin_id}")
async def get_checkin(checkin_id: str):
    check_in = store.get_checkin(checkin_id, _get_redis())
    if check_in is None:
        raise HTTPException(status_code=404, detail=f"Check-in {checkin_id} not found")
    return check_in.to_dict()


@app.post("/api/checkins")
async def save_checkin(req: CheckInRequest):
    """Create a check-in, or re-save an existing one by id (an edit)."""
    primaries = sum(1 for e in req.emotions if e.is_primary)
    if primaries != 1:
        raise HTTPException(status_code=400, detail="Exactly one emotion must be primary")

    r = _get_redis()
    now = _now_ms()
    existing = store.get_checkin(req.id, r) if req.id else None
    # An edit keeps the path id of every emotion it re-selects
    previous_paths = {e.node_id: e.path_id for e in existing.emotions} if existing else {}

    check_in = CheckIn(
        id=req.id or str(uuid4()),
        timestamp=req.timestamp if req.timestamp is not None else now,
        timezone_offset=req.timezone_offset,
        emotions=[
            EmotionSelection(
                node_id=e.node_id,
                is_primary=e.is_primary,
                ring_index=e.ring_index,
                path_id=e.path_id or previous_paths.get(e.node_id) or str(uuid4()),
            )
            for e in req.emotions
        ],
        note=req.note,
        intensity=req.intensity,
        scale_values=dict(req.scale_values),
        tags=list(req.tags),
        created_at=existing.created_at if existing else now,
        modified_at=now if existing else None,
    )
    store.save_checkin(check_in, r)
    logger.info("Saved check-in %s (%s)", check_in.id, "edit" if existing else "new")

    settings = store.get_settings(r)
    if settings.reminders.enabled:
        _reschedule_reminder(settings, r)
    return check_in.to_dict()


@app.delete("/api/checkins/{checkin_id}")
async def delete_checkin(checkin_id: str):
    if not store.delete_checkin(checkin_id, _get_redis()):
        raise HTTPException(status_code=404, detail=f"Check-in {checkin_id} not found")
    logger.info("Deleted check-in %s", checkin_id)
    return {"deleted": checkin_id}


# ── Tags ─────────────────────────────────────────────────────────────────

class TagRequest(BaseModel):
    id: Optional[str] = None
    category: str
    label: str
    icon: str = ""


@app.get("/api/tags")
async def list_tags():
    custom = store.get_custom_tags(_get_redis())
    return {"tags": [t.to_dict() for t in (*DEFAULT_TAGS, *custom)]}


@app.post("/api/tags")
async def create_tag(req: TagRequest):
    tag = ContextTag(
        id=req.id or f"custom_{uuid4().hex[:8]}",
        category=req.category,
        label=req.label,
        icon=req.icon,
        is_user_created=True,
    )
    store.save_custom_tag(tag, _get_redis())
    return tag.to_dict()


@app.delete("/api/tags/{tag_id}")
async def delete_tag(tag_id: str):
    if not store.delete_custom_tag(tag_id, _get_redis()):
        raise HTTPException(status_code=404, detail=f"Custom tag {tag_id} not found")
    return {"deleted": tag_id}


# ── Settings & reminders ─────────────────────────────────────────────────

@app.get("/api/settings")
async def get_settings():
    return store.get_settings(_get_redis()).to_dict()


@app.put("/api/settings")
async def update_settings(patch: dict[str, Any]):
    """Merge a partial settings object over the stored one."""
    r = _get_redis()
    current = store.get_settings(r).to_dict()
    reminders = patch.pop("reminders", None)
    current.update(patch)
    if isinstance(reminders, dict):
        current["reminders"].update(reminders)
    try:
        settings = AppSettings.from_dict(current)
    except (ValueError, TypeError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid settings: {exc}")
    store.save_settings(settings, r)
    _reschedule_reminder(settings, r)
    return settings.to_dict()


@app.get("/api/reminders/next")
async def get_next_reminder():
    fire_at = store.get_next_reminder(_get_redis())
    return {"next": fire_at, "due": fire_at is not None and _now_ms() >= fire_at}


@app.post("/api/reminders/reschedule")
async def reschedule_reminder():
    r = _get_redis()
    return {"next": _reschedule_reminder(store.get_settings(r), r)}


# ── Backup ───────────────────────────────────────────────────────────────

@app.get("/api/export")
async def export_data():
    return Response(content=store.export_data(_get_redis()), media_type="application/json")


@app.post("/api/import")
async def import_data(request: Request):
    body = (await request.body()).decode("utf-8", errors="replace")
    try:
        result = store.import_data(body, _get_redis())
    except store.InvalidImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return result


@app.delete("/api/data")
async def clear_data():
    store.clear_data(_get_redis())
    return {"cleared": True}


# ── Insights ─────────────────────────────────────────────────────────────

@app.get("/api/insights/trends")
async def insights_trends():
    check_ins = store.get_all_checkins(_get_redis())
    return {"trends": [p.to_dict() for p in trend_series(check_ins)]}


@app.get("/api/insights/vad")
async def insights_vad():
    check_ins = store.get_all_checkins(_get_redis())
    return {"points": [p.to_dict() for p in vad_series(check_ins, DEFAULT_TAXONOMY)]}


@app.get("/api/insights/stability")
async def insights_stability():
    check_ins = store.get_all_checkins(_get_redis())
    return stability(check_ins, DEFAULT_TAXONOMY).to_dict()


@app.get("/api/insights/correlation")
async def insights_correlation(x: str = Query(...), y: str = Query(...)):
    r = _get_redis()
    check_ins = store.get_all_checkins(r)
    settings = store.get_settings(r)
    scales = [*DEFAULT_SCALES, *settings.custom_scales]
    return correlate(check_ins, x, y, scales).to_dict()


@app.get("/api/insights/patterns")
async def insights_patterns():
    r = _get_redis()
    check_ins = store.get_all_checkins(r)
    tags = store.get_custom_tags(r)
    return {"patterns": [p.to_dict() for p in mine_patterns(check_ins, tags, DEFAULT_TAXONOMY)]}


@app.get("/api/insights/granularity")
async def insights_granularity():
    check_ins = store.get_all_checkins(_get_redis())
    return granularity(check_ins, DEFAULT_TAXONOMY).to_dict()


@app.get("/api/insights/clinical")
async def insights_clinical():
    r = _get_redis()
    check_ins = store.get_all_checkins(r)
    now = _now_ms()
    oldest = store.get_oldest_checkin(r)
    days_active = math.ceil(abs(now - oldest.timestamp) / DAY_MS) if oldest else 0
    return clinical_metrics(check_ins, days_active, DEFAULT_TAXONOMY, now=now).to_dict()


@app.get("/api/insights/radar")
async def insights_radar():
    r = _get_redis()
    check_ins = store.get_all_checkins(r)
    scales = _active_scales(store.get_settings(r))
    return {
        "radar": radar_profile(check_ins, scales, DEFAULT_TAXONOMY),
        "scales": [s.to_dict() for s in scales],
    }


@app.get("/api/insights/dominant")
async def insights_dominant():
    root = dominant_mood(store.get_all_checkins(_get_redis()), DEFAULT_TAXONOMY)
    if root is None:
        return {"dominant": None}
    return {"dominant": {"id": root.id, "label": root.label}}


@app.get("/api/insights/weekday")
async def insights_weekday():
    return {"weekdays": weekday_counts(store.get_all_checkins(_get_redis()))}


@app.get("/api/insights/heatmap")
async def insights_heatmap():
    return heatmap(store.get_all_checkins(_get_redis()))


@app.get("/api/taxonomy")
async def get_taxonomy():
    return {
        "nodes": [
            {"id": n.id, "label": n.label, "parent_id": n.parent_id, "depth": n.depth}
            for n in DEFAULT_TAXONOMY.nodes.values()
        ]
    }
