import logging
import os
import shutil
from dataclasses import dataclass
from typing import Iterator, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.errors import NoFileUploaded, StorageFailure
from app.models import ListObjectsResponse
from app.storage.base import StorageDriver, StorageDriverError, StoredObject
from app.utils.files import base_name, cleanup_temp_file, staging_path

logger = logging.getLogger(__name__)


def get_storage(settings: Settings) -> StorageDriver:
    logger.info("Using %s storage (bucket %s)", settings.storage_driver, settings.bucket_name)
    if settings.storage_driver == "minio":
        from app.storage.minio import MinIOStorage
        return MinIOStorage(settings)
    if settings.storage_driver == "s3":
        from app.storage.s3 import S3Storage
        return S3Storage(settings)
    if settings.storage_driver == "local":
        from app.storage.local import LocalStorage
        return LocalStorage(settings)
    raise ValueError(f"Unknown STORAGE_DRIVER: {settings.storage_driver}")


@dataclass
class StagedDownload:
    path: str
    filename: str
    content_type: str
    content_length: int


async def list_objects(storage: StorageDriver, settings: Settings,
                       prefix: Optional[str] = None) -> ListObjectsResponse:
    try:
        if prefix or not settings.key_prefixes:
            objects = await run_in_threadpool(storage.list_objects, prefix)
            return ListObjectsResponse(objects=objects)
        groups = {}
        for key_prefix in settings.key_prefixes:
            groups[key_prefix] = await run_in_threadpool(storage.list_objects, key_prefix)
    except StorageDriverError as e:
        logger.error("Error listing objects: %s", e)
        raise StorageFailure("Failed to list objects", str(e)) from e
    objects = [entry for entries in groups.values() for entry in entries]
    return ListObjectsResponse(objects=objects, groups=groups)


def _stage_upload(upload: UploadFile, path: str) -> bytes:
    upload.file.seek(0)
    with open(path, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    with open(path, "rb") as f:
        return f.read()


async def upload_object(storage: StorageDriver, settings: Settings,
                        upload: Optional[UploadFile]) -> str:
    if upload is None or not upload.filename:
        raise NoFileUploaded()

    key = f"{settings.upload_prefix}{base_name(upload.filename)}"
    content_type = upload.content_type or "application/octet-stream"
    temp_path = staging_path(settings.temp_dir, upload.filename)
    try:
        content = await run_in_threadpool(_stage_upload, upload, temp_path)
        await run_in_threadpool(storage.put_object, key, content, content_type)
    except Exception as e:
        logger.error("Error uploading file %s: %s", key, e)
        raise StorageFailure("Failed to upload file", str(e)) from e
    finally:
        await run_in_threadpool(cleanup_temp_file, temp_path)
        await upload.close()
    logger.info("Uploaded %s (%d bytes)", key, len(content))
    return key


def _write_stream(obj: StoredObject, path: str, chunk_size: int) -> int:
    with open(path, "wb") as out:
        for chunk in obj.iter_chunks(chunk_size):
            out.write(chunk)
    return os.path.getsize(path)


async def stage_download(storage: StorageDriver, settings: Settings, key: str) -> StagedDownload:
    """
    Fetch an object and write it to a fresh staging file.

    Nothing has been sent to the client yet, so every failure here still
    becomes a JSON error. The staging file is removed before raising.
    """
    try:
        obj = await run_in_threadpool(storage.get_object, key)
    except StorageDriverError as e:
        logger.error("Error retrieving object %s: %s", key, e)
        raise StorageFailure("Failed to retrieve object", str(e)) from e

    temp_path = staging_path(settings.temp_dir, key)
    try:
        size = await run_in_threadpool(_write_stream, obj, temp_path, settings.chunk_size)
    except Exception as e:
        logger.error("Error writing to file stream for %s: %s", key, e)
        await run_in_threadpool(cleanup_temp_file, temp_path)
        raise StorageFailure("Failed to retrieve object", str(e)) from e
    finally:
        await run_in_threadpool(obj.close)

    return StagedDownload(
        path=temp_path,
        filename=base_name(key),
        content_type=obj.content_type,
        content_length=size,
    )


def iter_staged_file(path: str, chunk_size: int) -> Iterator[bytes]:
    # Runs to the finally on normal end, read error, and client disconnect
    try:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                yield chunk
    except OSError as e:
        logger.error("Error reading temporary file %s: %s", path, e)
        raise
    finally:
        cleanup_temp_file(path)
