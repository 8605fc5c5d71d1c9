"""Persistence helpers for the TTL-based API response cache."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from models import Base, CacheEntry


class CacheTTL:
    """Time-to-live per kind of cached response."""

    MATCHES = timedelta(minutes=5)
    MATCH_DETAIL = timedelta(hours=24)
    HEROES = timedelta(days=7)
    PLAYER = timedelta(minutes=10)


@dataclass(frozen=True)
class CacheStats:
    total_entries: int
    valid_entries: int
    total_size_kb: int


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def ensure_cache_schema(engine: Engine) -> None:
    """Create the cache table and indexes if they do not exist."""
    Base.metadata.create_all(engine, tables=[CacheEntry.__table__])


def get_cached_payload(session: Session, key: str, *, now: datetime | None = None) -> Any | None:
    """Return the cached payload, deleting and ignoring it once expired."""
    now = now or utc_now()
    entry = session.get(CacheEntry, key)
    if entry is None:
        return None
    if now > entry.expires_at:
        session.delete(entry)
        session.flush()
        return None
    return entry.payload


def store_payload(
    session: Session,
    key: str,
    payload: Any,
    ttl: timedelta,
    *,
    now: datetime | None = None,
) -> CacheEntry:
    """Create or replace one cache entry."""
    now = now or utc_now()
    entry = session.get(CacheEntry, key)
    if entry is None:
        entry = CacheEntry(key=key, payload=payload, expires_at=now + ttl, created_at=now)
        session.add(entry)
    else:
        entry.payload = payload
        entry.expires_at = now + ttl
        entry.created_at = now
    session.flush()
    return entry


def delete_expired_entries(session: Session, *, now: datetime | None = None) -> int:
    now = now or utc_now()
    result = session.execute(delete(CacheEntry).where(CacheEntry.expires_at < now))
    return int(result.rowcount or 0)


def delete_all_entries(session: Session) -> int:
    result = session.execute(delete(CacheEntry))
    return int(result.rowcount or 0)


def cache_stats(session: Session, *, now: datetime | None = None) -> CacheStats:
    """Count entries and estimate the stored payload size."""
    now = now or utc_now()
    total = int(session.scalar(select(func.count()).select_from(CacheEntry)) or 0)
    valid = int(
        session.scalar(
            select(func.count()).select_from(CacheEntry).where(CacheEntry.expires_at > now)
        )
        or 0
    )
    total_size = sum(
        len(json.dumps(payload)) for payload in session.scalars(select(CacheEntry.payload))
    )
    return CacheStats(
        total_entries=total,
        valid_entries=valid,
        total_size_kb=round(total_size / 1024),
    )
