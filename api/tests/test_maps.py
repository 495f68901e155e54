import json

import httpx
import pytest

from dashboard.config import get_settings
from dashboard.main import app
from dashboard.routers.maps import require_storage
from dashboard.services.storage import StorageService

MAP_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"

OBJECTS = [
    {"name": ".emptyFolderPlaceholder", "id": "p", "metadata": {"size": 0}},
    {"name": "nested", "id": None, "metadata": None},
    {
        "name": f"{MAP_ID}.map",
        "id": "obj-1",
        "created_at": "2026-03-01T10:00:00Z",
        "metadata": {"size": 2048},
        "user_metadata": {
            "originalName": "de_dust.map",
            "uploadedAt": "2026-03-01T10:00:00+00:00",
            "fileSize": "2048",
        },
    },
    {
        "name": "legacy.map",
        "id": "obj-2",
        "created_at": "2026-02-01T10:00:00Z",
        "metadata": {"size": 10},
    },
]


class FakeStorage:
    """Records requests made against the storage REST API."""

    def __init__(self):
        self.requests = []
        self.deleted = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/storage/v1/object/list/maps":
            body = json.loads(request.content)
            assert body["prefix"] == "maps"
            search = body.get("search", "")
            return httpx.Response(200, json=[o for o in OBJECTS if search in o["name"]])
        if path == f"/storage/v1/object/maps/maps/{MAP_ID}.map" and request.method == "GET":
            return httpx.Response(200, content=b"MAPDATA")
        if path.startswith("/storage/v1/object/maps/maps/") and request.method == "POST":
            return httpx.Response(200, json={"Key": path})
        if path == "/storage/v1/object/maps" and request.method == "DELETE":
            self.deleted.extend(json.loads(request.content)["prefixes"])
            return httpx.Response(200, json=[])
        return httpx.Response(404, json={"message": "Object not found"})


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def storage(fake_storage):
    service = StorageService(
        "https://project.test",
        "service-key",
        transport=httpx.MockTransport(fake_storage),
    )
    app.dependency_overrides[require_storage] = lambda: service
    yield service
    app.dependency_overrides.pop(require_storage, None)


class TestStorageService:
    def test_to_map_file_prefers_user_metadata(self, storage):
        record = storage.to_map_file(OBJECTS[2])

        assert record["id"] == MAP_ID
        assert record["original_name"] == "de_dust.map"
        assert record["storage_path"] == f"maps/{MAP_ID}.map"
        assert record["file_size"] == 2048

    def test_to_map_file_falls_back_to_object_fields(self, storage):
        record = storage.to_map_file(OBJECTS[3])

        assert record["id"] == "legacy"
        assert record["original_name"] == "legacy.map"
        assert record["file_size"] == 10
        assert record["uploaded_at"] == "2026-02-01T10:00:00Z"


def test_not_configured(client):
    assert client.get("/api/maps").status_code == 503


def test_list_maps_skips_placeholders(client, storage):
    response = client.get("/api/maps")

    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == [MAP_ID, "legacy"]


def test_upload_map(client, storage, fake_storage):
    response = client.post(
        "/api/maps/upload",
        files={"map": ("level.map", b"\x00\x01map", "application/octet-stream")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["map"]["original_name"] == "level.map"
    assert data["map"]["file_size"] == 5
    assert data["map"]["storage_path"] == f"maps/{data['map']['id']}.map"

    upload = fake_storage.requests[-1]
    assert upload.headers["x-upsert"] == "false"
    assert upload.headers["Authorization"] == "Bearer service-key"
    assert b'"originalName": "level.map"' in upload.read()


def test_upload_rejects_other_extensions(client, storage, fake_storage):
    response = client.post(
        "/api/maps/upload",
        files={"map": ("level.zip", b"PK", "application/zip")},
    )

    assert response.status_code == 400
    assert fake_storage.requests == []


def test_upload_requires_file(client, storage):
    assert client.post("/api/maps/upload").status_code == 400


def test_upload_size_limit(client, storage, monkeypatch):
    monkeypatch.setattr(get_settings(), "max_map_size_mb", 0)

    response = client.post(
        "/api/maps/upload",
        files={"map": ("big.map", b"x", "application/octet-stream")},
    )
    assert response.status_code == 413


def test_download_uses_original_name(client, storage):
    response = client.get(f"/api/maps/download/{MAP_ID}")

    assert response.status_code == 200
    assert response.content == b"MAPDATA"
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.headers["content-disposition"] == 'attachment; filename="de_dust.map"'


def test_download_unknown_map(client, storage):
    assert client.get("/api/maps/download/missing").status_code == 404


def test_download_missing_object(client, storage):
    # listed but the object itself is gone
    assert client.get("/api/maps/download/legacy").status_code == 404


def test_delete_map(client, storage, fake_storage):
    response = client.delete(f"/api/maps/{MAP_ID}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert fake_storage.deleted == [f"maps/{MAP_ID}.map"]


def test_delete_unknown_map(client, storage, fake_storage):
    assert client.delete("/api/maps/missing").status_code == 404
    assert fake_storage.deleted == []
