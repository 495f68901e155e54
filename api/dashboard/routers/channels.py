from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
from typing import List, Optional
import logging

from ..db import get_db, AutoDeleteChannel
from ..auth import get_current_session
from ..schemas.channels import AutoDeleteChannelResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auto-delete-channels", tags=["channels"])


def seconds_until(moment: datetime, now: datetime) -> int:
    """Whole seconds from `now` to `moment`, never negative."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return max(0, int((moment - now).total_seconds()))


@router.get("", response_model=List[AutoDeleteChannelResponse])
async def list_auto_delete_channels(
    db: Session = Depends(get_db),
    session: Optional[str] = Depends(get_current_session),
):
    """Active channels scheduled for deletion, soonest first."""
    try:
        channels = (
            db.query(AutoDeleteChannel)
            .filter(AutoDeleteChannel.status == "active")
            .order_by(AutoDeleteChannel.delete_at)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching auto-delete channels: {e}")
        raise HTTPException(status_code=500, detail="Failed to load auto-delete channels")

    now = datetime.now(timezone.utc)
    return [
        AutoDeleteChannelResponse(
            id=ch.id,
            guild_id=ch.guild_id,
            channel_id=ch.channel_id,
            channel_type=ch.channel_type,
            status=ch.status,
            delete_at=ch.delete_at,
            created_at=ch.created_at,
            time_left_seconds=seconds_until(ch.delete_at, now),
        )
        for ch in channels
    ]
