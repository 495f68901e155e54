from pydantic import BaseModel
from datetime import datetime
from typing import List


class ChangelogEntry(BaseModel):
    """One release in the changelog feed."""
    date: datetime
    views: int = 0
    added: List[str] = []
    fixed: List[str] = []
    changed: List[str] = []


class ChangelogViewResponse(BaseModel):
    success: bool
    views: int
