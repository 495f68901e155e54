from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo
import logging

from ..config import get_settings
from ..db import get_optional_db, ServerAnalyticsEvent
from ..auth import get_current_session
from ..schemas.stats import StatsResponse
from ..services.timeline import EventRecord, aggregate, normalize, window_start

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])
settings = get_settings()


@lru_cache()
def dashboard_timezone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def fetch_events(db: Session, since: datetime) -> list[EventRecord]:
    """Analytics events created at or after `since`."""
    rows = (
        db.query(ServerAnalyticsEvent)
        .filter(ServerAnalyticsEvent.created_at >= since)
        .order_by(ServerAnalyticsEvent.created_at)
        .all()
    )
    return [
        EventRecord(created_at=row.created_at, event_type=row.event_type, event_data=row.event_data)
        for row in rows
    ]


MAX_DAYS = 366


def parse_days(raw: Optional[str]) -> int:
    """Window length from the `days` query value.

    Missing, zero or non-numeric values fall back to the default window.
    Negative or oversized windows are rejected.
    """
    try:
        days = int(raw) if raw else 0
    except ValueError:
        days = 0
    if not days:
        return settings.default_stats_days
    if days < 0 or days > MAX_DAYS:
        raise HTTPException(status_code=422, detail=f"days must be between 1 and {MAX_DAYS}")
    return days


@router.get("", response_model=StatsResponse)
async def get_stats(
    days: Optional[str] = Query(None),
    db: Optional[Session] = Depends(get_optional_db),
    session: Optional[str] = Depends(get_current_session),
):
    """Event totals and the chart timeline for the last `days` days.

    Never fails on upstream trouble: without events the timeline is still
    returned, zero-filled, so the chart stays renderable.
    """
    days = parse_days(days)
    tz = dashboard_timezone(settings.dashboard_timezone)
    now = datetime.now(tz)
    since = window_start(days, now=now, tz=tz)

    events: list[EventRecord] = []
    if db is None:
        logger.warning("Database not configured, returning an empty timeline")
    else:
        try:
            events = fetch_events(db, since)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching analytics events: {e}")

    totals, total = aggregate(events)
    timeline = normalize(events, days, now=now, tz=tz)

    return StatsResponse(
        **totals.as_dict(),
        timeline=timeline,
        total=total,
    )
