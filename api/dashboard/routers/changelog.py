from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from ..auth import get_current_session
from ..schemas.changelog import ChangelogEntry, ChangelogViewResponse
from ..services.changelog import ChangelogStore, get_changelog_store

router = APIRouter(prefix="/changelog", tags=["changelog"])


@router.get("", response_model=List[Optional[ChangelogEntry]])
async def get_changelog(
    store: ChangelogStore = Depends(get_changelog_store),
    session: Optional[str] = Depends(get_current_session),
):
    """All grid slots (3 rows x 40 columns), empty ones as null."""
    return store.slots()


@router.post("/{index}/view", response_model=ChangelogViewResponse)
async def record_view(
    index: int,
    store: ChangelogStore = Depends(get_changelog_store),
    session: Optional[str] = Depends(get_current_session),
):
    """Count one view of a changelog entry."""
    try:
        views = store.record_view(index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Changelog entry not found")
    return ChangelogViewResponse(success=True, views=views)
