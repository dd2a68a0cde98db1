import logging
import os
import posixpath
import uuid
from urllib.parse import quote

logger = logging.getLogger(__name__)

# Leaves room for the uuid prefix under the usual 255-byte name limit
MAX_STAGING_NAME_BYTES = 200


def base_name(key: str) -> str:
    """
    Example:
    original/2024/photo.png -> photo.png
    """
    return posixpath.basename(key.replace("\\", "/")) or "object"


def _shorten(name: str, limit: int) -> str:
    if len(name.encode("utf-8")) <= limit:
        return name
    stem, ext = os.path.splitext(name)
    if len(ext.encode("utf-8")) > 16:
        stem, ext = name, ""
    stem = stem.encode("utf-8")[:limit - len(ext.encode("utf-8"))].decode("utf-8", "ignore")
    return stem + ext


def staging_path(temp_dir: str, name: str) -> str:
    # The uuid keeps concurrent requests for the same key apart
    name = _shorten(base_name(name), MAX_STAGING_NAME_BYTES)
    return os.path.join(temp_dir, f"{uuid.uuid4().hex}-{name}")


def content_disposition(filename: str) -> str:
    """
    Attachment header that survives latin-1 header encoding.

    Example:
    照片.png -> attachment; filename="download.png"; filename*=UTF-8''%E7%85%A7%E7%89%87.png
    """
    stem, ext = (
        "".join(c for c in part if 32 <= ord(c) < 127 and c not in '"\\')
        for part in os.path.splitext(filename)
    )
    fallback = (stem if stem.strip() else "download") + ext
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def cleanup_temp_file(path: str) -> None:
    """Delete a staging file; failures are logged, never raised."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.error("Error deleting temporary file %s: %s", path, e)
        return
    logger.debug("Temporary file %s was deleted", path)
