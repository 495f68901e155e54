from pydantic import BaseModel
from datetime import datetime


class MapFile(BaseModel):
    """A hosted .map file."""
    id: str
    original_name: str
    storage_path: str
    file_size: int
    uploaded_at: datetime


class MapUploadResponse(BaseModel):
    success: bool
    map: MapFile
