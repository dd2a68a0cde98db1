from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


class StorageDriverError(Exception):
    """Raised by drivers when the underlying storage call fails."""


@dataclass
class StoredObject:
    key: str
    body: Any
    content_type: str = "application/octet-stream"
    content_length: Optional[int] = None

    def iter_chunks(self, chunk_size: int) -> Iterator[bytes]:
        while True:
            chunk = self.body.read(chunk_size)
            if not chunk:
                break
            yield chunk

    def close(self) -> None:
        self.body.close()
        # urllib3 responses (MinIO) hold a pooled connection
        release = getattr(self.body, "release_conn", None)
        if release is not None:
            release()


class StorageDriver:
    def list_objects(self, prefix: Optional[str] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def put_object(self, key: str, content: bytes, content_type: str) -> str:
        raise NotImplementedError

    def get_object(self, key: str) -> StoredObject:
        raise NotImplementedError
