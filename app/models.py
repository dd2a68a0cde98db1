from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class ListObjectsResponse(BaseModel):
    success: bool = True
    objects: List[Dict[str, Any]]
    groups: Optional[Dict[str, List[Dict[str, Any]]]] = None


class UploadObjectResponse(BaseModel):
    success: bool = True
    message: str = "File uploaded successfully"
    key: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
