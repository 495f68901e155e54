"""
Timeline Normalizer - dense, gap-free analytics timelines.

The event store only holds the days on which something happened. The chart
needs one point per day (or per minute for the single-day view), so missing
steps are filled with zero-valued buckets here.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Iterable, Optional

from ..schemas.stats import TimelineBucket

logger = logging.getLogger(__name__)

COUNTER_EVENTS = (
    "wipe_created",
    "ticket_created",
    "tournament_role_created",
    "channel_deleted",
)
MEMBER_COUNT_EVENT = "member_count"
EVENT_TYPES = COUNTER_EVENTS + (MEMBER_COUNT_EVENT,)


@dataclass
class EventRecord:
    """One analytics event as read from the event store."""

    created_at: datetime
    event_type: str
    event_data: Optional[dict[str, Any]] = None


@dataclass
class EventCounts:
    """Per-type totals for a bucket or for a whole range."""

    wipe_created: int = 0
    ticket_created: int = 0
    tournament_role_created: int = 0
    channel_deleted: int = 0
    member_count: int = 0

    def add(self, event: EventRecord) -> bool:
        """Fold one event in. Returns False for unknown event types."""
        if event.event_type in COUNTER_EVENTS:
            setattr(self, event.event_type, getattr(self, event.event_type) + 1)
            return True
        if event.event_type == MEMBER_COUNT_EVENT:
            # running max, the member count is a gauge not a counter
            self.member_count = max(self.member_count, member_count_of(event.event_data))
            return True
        return False

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_bucket(self, key: str) -> TimelineBucket:
        return TimelineBucket(date=key, **self.as_dict())


def member_count_of(event_data: Optional[dict[str, Any]]) -> int:
    """Extract the `count` payload of a member_count event (0 when absent)."""
    if not isinstance(event_data, dict):
        return 0
    value = event_data.get("count") or 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Non-numeric member count payload: {value!r}")
        return 0


def local_day(instant: datetime, tz: tzinfo) -> date:
    """Calendar day of an instant in the dashboard timezone.

    Naive datetimes are treated as UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz).date()


def _local_now(now: Optional[datetime], tz: tzinfo) -> datetime:
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def window_start(range_days: int, now: Optional[datetime] = None, tz: tzinfo = timezone.utc) -> datetime:
    """First instant of the window covered by `range_days`.

    Midnight (local) of `today - (range_days - 1)`; for a single day this is
    the start of today.
    """
    if range_days < 1:
        raise ValueError(f"range_days must be >= 1, got {range_days}")
    today = _local_now(now, tz).date()
    first = today - timedelta(days=range_days - 1)
    return datetime.combine(first, time.min, tzinfo=tz)


def aggregate(events: Iterable[EventRecord]) -> tuple[EventCounts, int]:
    """Raw totals across all events, independent of bucket granularity.

    Returns the counts and the number of events seen (unknown types included).
    """
    totals = EventCounts()
    seen = 0
    for event in events:
        seen += 1
        if not totals.add(event):
            logger.debug(f"Ignoring unknown event type {event.event_type!r}")
    return totals, seen


def normalize(
    events: Iterable[EventRecord],
    range_days: int,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> list[TimelineBucket]:
    """Build the dense timeline for the chart.

    Args:
        events: Events in any order; may be empty
        range_days: Days to cover, ending today (inclusive)
        now: Current instant, defaults to the wall clock
        tz: Calendar used to assign events to days

    Returns:
        One bucket per day in ascending order, or for `range_days == 1` one
        bucket per minute since local midnight with today's totals stamped
        onto the last one. The source data is day-granular, so the single-day
        view is an approximation rather than a real intraday breakdown.
    """
    if range_days < 1:
        raise ValueError(f"range_days must be >= 1, got {range_days}")

    now = _local_now(now, tz)
    today = now.date()

    by_day: dict[date, EventCounts] = {}
    for event in events:
        day_counts = by_day.setdefault(local_day(event.created_at, tz), EventCounts())
        if not day_counts.add(event):
            logger.debug(f"Ignoring unknown event type {event.event_type!r}")

    if range_days == 1:
        # step in elapsed time so DST transitions neither repeat nor skip minutes
        start = datetime.combine(today, time.min, tzinfo=tz).astimezone(timezone.utc)
        minutes = (now.astimezone(timezone.utc) - start) // timedelta(minutes=1)
        empty = EventCounts()
        timeline = [
            empty.to_bucket(
                (start + timedelta(minutes=i)).astimezone(tz).isoformat(timespec="minutes")
            )
            for i in range(minutes + 1)
        ]
        todays = by_day.get(today)
        if todays is not None:
            timeline[-1] = todays.to_bucket(timeline[-1].date)
        return timeline

    first = today - timedelta(days=range_days - 1)
    timeline = []
    for offset in range(range_days):
        day = first + timedelta(days=offset)
        day_counts = by_day.get(day) or EventCounts()
        timeline.append(day_counts.to_bucket(day.isoformat()))
    return timeline
