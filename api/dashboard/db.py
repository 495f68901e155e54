from sqlalchemy import create_engine, Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.sql import func
from fastapi import HTTPException, status
from typing import Generator, Optional

from .config import get_settings

settings = get_settings()

engine = (
    create_engine(settings.database_url, pool_pre_ping=True)
    if settings.database_configured
    else None
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# =============================================================================
# Models
# =============================================================================

class ServerAnalyticsEvent(Base):
    """One analytics event written by the Discord bot."""
    __tablename__ = "server_analytics"

    id = Column(Integer, primary_key=True, index=True)
    guild_id = Column(String, nullable=True, index=True)
    event_type = Column(String, nullable=False, index=True)
    event_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class AutoDeleteChannel(Base):
    """A channel the bot will delete once `delete_at` passes."""
    __tablename__ = "auto_delete_channels"

    id = Column(Integer, primary_key=True, index=True)
    guild_id = Column(String, nullable=True)
    channel_id = Column(String, nullable=False, index=True)
    channel_type = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active", index=True)
    delete_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


# =============================================================================
# Database Dependency
# =============================================================================

def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session.

    Raises 503 when no database is configured.
    """
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured"
        )
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_db() -> Generator[Optional[Session], None, None]:
    """Like get_db, but yields None instead of failing when unconfigured."""
    if engine is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
