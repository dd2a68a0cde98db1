from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ObjectGatewayError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class NoFileUploaded(ObjectGatewayError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self):
        super().__init__("No file uploaded")


class StorageFailure(ObjectGatewayError):
    """A storage call or a staging file operation failed."""


async def gateway_exception_handler(request: Request, exc: ObjectGatewayError) -> JSONResponse:
    content = {"success": False, "message": exc.message}
    if exc.error is not None:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content)
