from io import BytesIO
from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError
from app.config import Settings
from app.storage.base import StorageDriver, StorageDriverError, StoredObject


class MinIOStorage(StorageDriver):
    def __init__(self, settings: Settings):
        # Combine endpoint and port if port is specified
        if settings.minio_port:
            endpoint = f"{settings.minio_endpoint}:{settings.minio_port}"
        else:
            endpoint = settings.minio_endpoint
        self.client = Minio(
            endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure
        )
        self.bucket_name = settings.bucket_name

    def list_objects(self, prefix=None):
        try:
            objects = self.client.list_objects(self.bucket_name, prefix=prefix, recursive=True)
            # Same field names as S3 ListObjectsV2 entries
            return [
                {
                    "Key": obj.object_name,
                    "Size": obj.size,
                    "LastModified": obj.last_modified,
                    "ETag": obj.etag,
                }
                for obj in objects
            ]
        except (MinioException, HTTPError) as e:
            raise StorageDriverError(str(e)) from e

    def put_object(self, key: str, content: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                self.bucket_name,
                key,
                BytesIO(content),
                length=len(content),
                content_type=content_type
            )
        except (MinioException, HTTPError) as e:
            raise StorageDriverError(str(e)) from e
        return key

    def get_object(self, key: str) -> StoredObject:
        try:
            response = self.client.get_object(self.bucket_name, key)
        except (MinioException, HTTPError) as e:
            raise StorageDriverError(str(e)) from e
        length = response.headers.get("Content-Length")
        return StoredObject(
            key=key,
            body=response,
            content_type=response.headers.get("Content-Type") or "application/octet-stream",
            content_length=int(length) if length else None,
        )
