"""Avatar Storage — validates and writes uploaded avatars to the upload directory.

Invariants:
    - Only JPEG, PNG and GIF are accepted; size capped by settings.upload_max_bytes
    - Stored name is avatar-{user_id}-{millis}-{random}{ext}; public URL is /uploads/<name>
    - remove_avatar never raises for a missing file (logs instead)

Design Decisions:
    - Local filesystem served by StaticFiles: single-node deployment, no object store
"""

import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from articlehub.config import get_settings
from articlehub.core.errors import InvalidUploadError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif"},
)
PUBLIC_PREFIX = "/uploads/"


def upload_root() -> Path:
    return Path(get_settings().upload_dir)


async def store_avatar(user_id: int, upload: UploadFile | None) -> str:
    """Persist the upload and return its public URL."""
    if upload is None or not upload.filename:
        raise InvalidUploadError("No file uploaded")
    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError(
            "Unsupported file type. Only JPEG, PNG and GIF are allowed",
        )

    max_bytes = get_settings().upload_max_bytes
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise InvalidUploadError(
            f"File too large (maximum {max_bytes // (1024 * 1024)}MB)",
        )

    suffix = Path(upload.filename).suffix.lower()
    name = f"avatar-{user_id}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"
    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)
    (root / name).write_bytes(data)
    logger.info(f"Stored avatar {name}", extra={"user_id": user_id})
    return PUBLIC_PREFIX + name


def remove_avatar(avatar_url: str | None) -> None:
    """Delete a previously stored avatar file, if it is one of ours."""
    if not avatar_url or not avatar_url.startswith(PUBLIC_PREFIX):
        return
    path = upload_root() / Path(avatar_url[len(PUBLIC_PREFIX):]).name
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning(f"Avatar file already gone: {path}")
    except OSError as e:
        logger.error(f"Failed to delete avatar {path}: {e}")
