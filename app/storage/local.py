import mimetypes
import os
from datetime import datetime, timezone
from app.config import Settings
from app.storage.base import StorageDriver, StorageDriverError, StoredObject


def _raise(error: OSError):
    raise error


class LocalStorage(StorageDriver):
    """Keeps objects as files under LOCAL_STORAGE_PATH/<bucket>/<key>."""

    def __init__(self, settings: Settings):
        self.root = os.path.abspath(os.path.join(settings.local_storage_path, settings.bucket_name))

    def _path(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, key))
        if not path.startswith(self.root + os.sep):
            raise StorageDriverError(f"Invalid object key: {key}")
        return path

    def list_objects(self, prefix=None):
        entries = []
        if not os.path.isdir(self.root):
            return entries
        try:
            for dirpath, _, filenames in os.walk(self.root, onerror=_raise):
                for name in filenames:
                    path = os.path.join(dirpath, name)
                    key = os.path.relpath(path, self.root).replace(os.sep, "/")
                    if prefix and not key.startswith(prefix):
                        continue
                    stat = os.stat(path)
                    entries.append({
                        "Key": key,
                        "Size": stat.st_size,
                        "LastModified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    })
        except OSError as e:
            raise StorageDriverError(str(e)) from e
        return sorted(entries, key=lambda entry: entry["Key"])

    def put_object(self, key: str, content: bytes, content_type: str) -> str:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise StorageDriverError(str(e)) from e
        return key

    def get_object(self, key: str) -> StoredObject:
        path = self._path(key)
        try:
            f = open(path, "rb")
        except OSError as e:
            raise StorageDriverError(f"The specified key does not exist: {key}") from e
        content_type, _ = mimetypes.guess_type(path)
        return StoredObject(
            key=key,
            body=f,
            content_type=content_type or "application/octet-stream",
            content_length=os.fstat(f.fileno()).st_size,
        )
