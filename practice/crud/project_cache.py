# File: /practice/crud/project_cache.py | Version: 1.0 | Title: Projects Listing Snapshot Cache
"""
Last known-good `/api/projects` response per user and listing parameters.

Every live listing overwrites its snapshot; `/api/projects/cached` serves it
(flagged stale past `PROJECTS_CACHE_STALE_SECONDS`) so the page can render
before the live listing arrives.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, UTC
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from practice.core.config import settings
from practice.models.view import ProjectListSnapshot
from practice.projects_page.predicates import as_utc
from practice.schemas.core_entities import CachedProjectsOut

log = logging.getLogger(__name__)


def cache_key(
    view_key: str,
    show_archived: bool,
    show_completed_regardless: bool,
    due_date: Optional[str],
) -> str:
    return f"{view_key}|{int(show_archived)}|{int(show_completed_regardless)}|{due_date or ''}"


def get_snapshot(db: Session, user_id: str, key: str) -> Optional[ProjectListSnapshot]:
    return db.query(ProjectListSnapshot).filter_by(user_id=user_id, cache_key=key).first()


def store_snapshot(
    db: Session,
    user_id: str,
    key: str,
    projects: List[Dict[str, Any]],
    stage_stats: Dict[str, int],
) -> ProjectListSnapshot:
    snap = get_snapshot(db, user_id, key)
    if snap is None:
        snap = ProjectListSnapshot(user_id=user_id, cache_key=key)
        db.add(snap)
    snap.projects = projects
    snap.stage_stats = stage_stats
    snap.cached_at = datetime.now(UTC)
    db.commit()
    db.refresh(snap)
    log.debug("stored projects snapshot %s for user %s (%d rows)", key, user_id, len(projects))
    return snap


def read_cached(db: Session, user_id: str, key: str, now: Optional[datetime] = None) -> CachedProjectsOut:
    snap = get_snapshot(db, user_id, key)
    if snap is None:
        return CachedProjectsOut()
    now = now or datetime.now(UTC)
    # SQLite hands back naive datetimes
    cached_at = as_utc(snap.cached_at)
    stale_at = cached_at + timedelta(seconds=settings.PROJECTS_CACHE_STALE_SECONDS)
    return CachedProjectsOut(
        projects=snap.projects,
        stage_stats=snap.stage_stats,
        from_cache=True,
        cached_at=cached_at,
        is_stale=now >= stale_at,
        stale_at=stale_at,
    )
