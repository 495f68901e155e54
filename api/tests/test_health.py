def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["discord"] is False
    assert data["database"] is False
    assert data["storage"] is False
    assert data["changelog"] is True
    assert "timestamp" in data
