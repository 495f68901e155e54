from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AutoDeleteChannelResponse(BaseModel):
    """A channel scheduled for deletion with its countdown."""
    id: int
    guild_id: Optional[str] = None
    channel_id: str
    channel_type: Optional[str] = None
    status: str
    delete_at: datetime
    created_at: Optional[datetime] = None
    time_left_seconds: int

    class Config:
        from_attributes = True
