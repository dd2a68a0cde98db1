import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.config import Settings, load_settings
from app.errors import ObjectGatewayError, gateway_exception_handler
from app.logging_config import setup_logging
from app.services.object_service import get_storage
from app.storage.base import StorageDriver

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageDriver] = None) -> FastAPI:
    settings = settings or load_settings()
    os.makedirs(settings.temp_dir, exist_ok=True)

    app = FastAPI(
        title="Object Gateway",
        description="List, upload and download objects through an object-storage bucket.",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.storage = storage if storage is not None else get_storage(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ObjectGatewayError, gateway_exception_handler)
    app.include_router(router)
    # Mounted last so the API routes win
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True, check_dir=False), name="public")
    return app


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_file, settings.log_level)
    import uvicorn
    logger.info("Server running on http://localhost:%d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
