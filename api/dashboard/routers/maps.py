"""Maps hosting router - .map files kept in object storage, no database."""

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from pathlib import PurePosixPath
from typing import List, Optional
from urllib.parse import quote
import logging

from ..auth import get_current_session
from ..config import get_settings
from ..schemas.maps import MapFile, MapUploadResponse
from ..services.storage import StorageService, StorageError, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maps", tags=["maps"])
settings = get_settings()

ALLOWED_EXTENSION = ".map"


def require_storage() -> StorageService:
    """Dependency returning the storage service, 503 when storage is not configured."""
    service = get_storage_service()
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage not configured"
        )
    return service


def storage_failure(e: StorageError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)


async def find_or_404(storage: StorageService, map_id: str) -> dict:
    try:
        found = await storage.find_map(map_id)
    except StorageError as e:
        raise storage_failure(e)
    if found is None:
        raise HTTPException(status_code=404, detail="Map not found")
    return found


@router.post("/upload", response_model=MapUploadResponse)
async def upload_map(
    map_file: Optional[UploadFile] = File(None, alias="map"),
    storage: StorageService = Depends(require_storage),
    session: Optional[str] = Depends(get_current_session),
):
    """Upload a .map file."""
    if map_file is None or not map_file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if PurePosixPath(map_file.filename).suffix.lower() != ALLOWED_EXTENSION:
        raise HTTPException(status_code=400, detail="Only .map files are allowed")

    content = await map_file.read()
    max_bytes = settings.max_map_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_map_size_mb} MB"
        )

    try:
        stored = await storage.upload_map(content, map_file.filename)
    except StorageError as e:
        raise storage_failure(e)

    return MapUploadResponse(success=True, map=MapFile(**stored))


@router.get("", response_model=List[MapFile])
async def list_maps(
    storage: StorageService = Depends(require_storage),
    session: Optional[str] = Depends(get_current_session),
):
    """Hosted maps, newest first."""
    try:
        maps = await storage.list_maps()
    except StorageError as e:
        raise storage_failure(e)
    return [MapFile(**m) for m in maps]


@router.get("/download/{map_id}")
async def download_map(
    map_id: str,
    storage: StorageService = Depends(require_storage),
    session: Optional[str] = Depends(get_current_session),
):
    """Download a map under its original file name."""
    found = await find_or_404(storage, map_id)
    try:
        content = await storage.download(found["storage_path"])
    except StorageError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="File not found")
        raise storage_failure(e)

    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{quote(found["original_name"])}"',
        }
    )


@router.delete("/{map_id}")
async def delete_map(
    map_id: str,
    storage: StorageService = Depends(require_storage),
    session: Optional[str] = Depends(get_current_session),
):
    """Delete a hosted map."""
    found = await find_or_404(storage, map_id)
    try:
        await storage.delete(found["storage_path"])
    except StorageError as e:
        raise storage_failure(e)
    return {"success": True}
