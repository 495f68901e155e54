"""
Storage Service - map file hosting on the managed object-storage bucket.

Maps are stored as `<folder>/<uuid><ext>` with the original file name, upload
time and size kept as object metadata, so no database table is needed.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage API answers with an error or cannot be reached."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Storage error {status_code}: {message}")


class StorageService:
    """Client for the storage REST API of the managed backend."""

    LIST_LIMIT = 100
    SEARCH_LIMIT = 1000
    PLACEHOLDER = ".emptyFolderPlaceholder"

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str = "maps",
        folder: str = "maps",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the storage service.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            service_key: API key sent as bearer token
            bucket: Bucket holding the maps
            folder: Folder inside the bucket
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/") + "/storage/v1"
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Storage request {method} {path} failed: {e}")
            raise StorageError(502, f"Storage request failed: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
                message = body.get("message") or body.get("error") or response.text
            except ValueError:
                message = response.text
            logger.warning(f"Storage {method} {path} returned {response.status_code}: {message}")
            raise StorageError(response.status_code, message)

        return response

    def _object_path(self, name: str) -> str:
        return f"{self.folder}/{name}" if self.folder else name

    def to_map_file(self, obj: dict) -> dict[str, Any]:
        """Shape a storage listing entry as a MapFile."""
        name = obj["name"]
        # user metadata comes back under user_metadata on newer storage versions
        meta = {**(obj.get("metadata") or {}), **(obj.get("user_metadata") or {})}
        size = meta.get("fileSize") or meta.get("size") or 0
        return {
            "id": PurePosixPath(name).stem,
            "original_name": meta.get("originalName") or name,
            "storage_path": self._object_path(name),
            "file_size": int(size),
            "uploaded_at": meta.get("uploadedAt") or obj.get("created_at") or datetime.now(timezone.utc).isoformat(),
        }

    async def list_objects(self, limit: int = LIST_LIMIT, search: str = "") -> list[dict]:
        """Files in the maps folder, newest first."""
        payload = {
            "prefix": self.folder,
            "limit": limit,
            "offset": 0,
            "sortBy": {"column": "created_at", "order": "desc"},
        }
        if search:
            payload["search"] = search
        response = await self._request("POST", f"/object/list/{self.bucket}", json=payload)
        return [
            obj for obj in response.json()
            if obj.get("id") is not None and obj.get("name") != self.PLACEHOLDER
        ]

    async def list_maps(self) -> list[dict[str, Any]]:
        return [self.to_map_file(obj) for obj in await self.list_objects()]

    async def find_map(self, map_id: str) -> Optional[dict[str, Any]]:
        """Look up a map by id (the file name without extension)."""
        for obj in await self.list_objects(limit=self.SEARCH_LIMIT, search=map_id):
            if PurePosixPath(obj["name"]).stem == map_id:
                return self.to_map_file(obj)
        return None

    async def upload_map(self, content: bytes, original_name: str) -> dict[str, Any]:
        """Store a new map and return its MapFile record."""
        map_id = str(uuid.uuid4())
        ext = PurePosixPath(original_name).suffix
        storage_path = self._object_path(f"{map_id}{ext}")
        uploaded_at = datetime.now(timezone.utc).isoformat()

        metadata = {
            "originalName": original_name,
            "uploadedAt": uploaded_at,
            "fileSize": str(len(content)),
        }
        await self._request(
            "POST",
            f"/object/{self.bucket}/{storage_path}",
            files={"file": (original_name, content, "application/octet-stream")},
            data={"cacheControl": "3600", "metadata": json.dumps(metadata)},
            headers={"x-upsert": "false"},
        )
        logger.info(f"Uploaded map {original_name} as {storage_path} ({len(content)} bytes)")

        return {
            "id": map_id,
            "original_name": original_name,
            "storage_path": storage_path,
            "file_size": len(content),
            "uploaded_at": uploaded_at,
        }

    async def download(self, storage_path: str) -> bytes:
        response = await self._request("GET", f"/object/{self.bucket}/{storage_path}")
        return response.content

    async def delete(self, storage_path: str) -> None:
        await self._request("DELETE", f"/object/{self.bucket}", json={"prefixes": [storage_path]})
        logger.info(f"Deleted map {storage_path}")


# Singleton instance
_storage_service: Optional[StorageService] = None


def get_storage_service() -> Optional[StorageService]:
    """Get the storage service singleton (None when storage is not configured)."""
    return _storage_service


def init_storage_service(
    base_url: str,
    service_key: str,
    bucket: str = "maps",
    folder: str = "maps",
    timeout: float = 15.0,
):
    """Initialize the storage service singleton."""
    global _storage_service
    _storage_service = StorageService(base_url, service_key, bucket=bucket, folder=folder, timeout=timeout)
    logger.info(f"Storage service initialized for bucket {bucket}")
