import pytest
from fastapi.testclient import TestClient

from app.main import create_app


@pytest.fixture
def prefixed_client(settings, storage):
    settings = settings.model_copy(update={
        "key_prefixes": ["original/", "derived/"],
        "upload_prefix": "original/",
    })
    with TestClient(create_app(settings, storage)) as c:
        yield c


def test_listing_groups_by_prefix(prefixed_client, storage):
    storage.objects["original/a.png"] = (b"a", "image/png")
    storage.objects["derived/a-thumb.png"] = (b"t", "image/png")
    storage.objects["stray.txt"] = (b"s", "text/plain")

    body = prefixed_client.get("/api/objects").json()

    assert body["success"] is True
    assert [o["Key"] for o in body["groups"]["original/"]] == ["original/a.png"]
    assert [o["Key"] for o in body["groups"]["derived/"]] == ["derived/a-thumb.png"]
    assert sorted(o["Key"] for o in body["objects"]) == ["derived/a-thumb.png", "original/a.png"]
    assert storage.calls == ["list", "list"]


def test_upload_lands_under_upload_prefix(prefixed_client, storage):
    response = prefixed_client.post("/api/objects", files={"file": ("cat.png", b"meow", "image/png")})

    assert response.json()["key"] == "original/cat.png"
    assert "original/cat.png" in storage.objects

    body = prefixed_client.get("/api/objects").json()
    assert [o["Key"] for o in body["groups"]["original/"]] == ["original/cat.png"]
    assert body["groups"]["derived/"] == []
