from pydantic import BaseModel
from typing import List


class TimelineBucket(BaseModel):
    """Single point on the analytics chart.

    `date` is `YYYY-MM-DD` for daily buckets and an ISO datetime truncated
    to the minute for the single-day view.
    """
    date: str
    wipe_created: int = 0
    ticket_created: int = 0
    tournament_role_created: int = 0
    channel_deleted: int = 0
    member_count: int = 0


class StatsResponse(BaseModel):
    """Dashboard statistics for the requested range."""
    wipe_created: int = 0
    ticket_created: int = 0
    tournament_role_created: int = 0
    channel_deleted: int = 0
    member_count: int = 0
    timeline: List[TimelineBucket]
    total: int = 0
