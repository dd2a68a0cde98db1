import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.config import Settings
from app.errors import StorageFailure
from app.models import ErrorResponse, ListObjectsResponse, UploadObjectResponse
from app.services.object_service import (
    iter_staged_file,
    list_objects,
    stage_download,
    upload_object,
)
from app.storage.base import StorageDriver
from app.utils.files import cleanup_temp_file, content_disposition

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageDriver:
    return request.app.state.storage


@router.get(
    "/api/objects",
    response_model=ListObjectsResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def list_objects_route(
    prefix: Optional[str] = None,
    storage: StorageDriver = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return await list_objects(storage, settings, prefix)


@router.post("/api/objects", response_model=UploadObjectResponse, responses=ERROR_RESPONSES)
async def upload_object_route(
    file: Optional[UploadFile] = File(None),
    storage: StorageDriver = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    key = await upload_object(storage, settings, file)
    return UploadObjectResponse(key=key)


@router.get("/api/objects/{key:path}", response_class=StreamingResponse, responses=ERROR_RESPONSES)
async def get_object_route(
    key: str,
    storage: StorageDriver = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    staged = await stage_download(storage, settings, key)
    try:
        return StreamingResponse(
            iter_staged_file(staged.path, settings.chunk_size),
            media_type=staged.content_type,
            headers={
                "Content-Length": str(staged.content_length),
                "Content-Disposition": content_disposition(staged.filename),
            },
            # The generator never runs if sending headers fails
            background=BackgroundTask(cleanup_temp_file, staged.path),
        )
    except Exception as e:
        logger.error("Error preparing response for %s: %s", key, e)
        cleanup_temp_file(staged.path)
        raise StorageFailure("Failed to retrieve object", str(e)) from e


@router.get("/healthz")
async def healthz():
    """Health check endpoint"""
    return {"status": "ok"}
