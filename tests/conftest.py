import io
import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.storage.base import StorageDriver, StorageDriverError, StoredObject


class InMemoryStorage(StorageDriver):
    """Bucket held in a dict; records every call for assertions."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.fail_with = None

    def _check(self, operation):
        self.calls.append(operation)
        if self.fail_with is not None:
            raise StorageDriverError(self.fail_with)

    def list_objects(self, prefix=None):
        self._check("list")
        return [
            {"Key": key, "Size": len(content), "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc)}
            for key, (content, _) in sorted(self.objects.items())
            if not prefix or key.startswith(prefix)
        ]

    def put_object(self, key, content, content_type):
        self._check("put")
        self.objects[key] = (content, content_type)
        return key

    def get_object(self, key):
        self._check("get")
        if key not in self.objects:
            raise StorageDriverError("The specified key does not exist.")
        content, content_type = self.objects[key]
        return StoredObject(key=key, body=io.BytesIO(content),
                            content_type=content_type, content_length=len(content))


@pytest.fixture
def settings(tmp_path):
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    (public_dir / "index.html").write_text("<h1>Objects</h1>")
    return Settings(
        storage_driver="memory",
        temp_dir=str(tmp_path / "temp"),
        public_dir=str(public_dir),
        local_storage_path=str(tmp_path / "storage"),
        chunk_size=4,
    )


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def client(settings, storage):
    with TestClient(create_app(settings, storage)) as c:
        yield c


@pytest.fixture
def temp_files(settings):
    def _list():
        return os.listdir(settings.temp_dir)
    return _list
