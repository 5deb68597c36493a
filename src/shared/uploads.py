"""Saving uploaded files verbatim under the configured upload directory."""

import asyncio
import secrets
import time
from pathlib import Path

import structlog
from fastapi import UploadFile
from protean.exceptions import ValidationError

from settings import get_settings

logger = structlog.get_logger(__name__)

URL_PREFIX = "/uploads"


def _unique_name(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


async def save_upload(upload: UploadFile, folder: str) -> str:
    """Write ``upload`` to ``<upload_dir>/<folder>/`` and return its public URL path."""
    if not upload.filename:
        raise ValidationError({"image": ["No image file uploaded"]})

    target_dir = Path(get_settings().upload_dir) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    name = _unique_name(upload.filename)
    content = await upload.read()
    await asyncio.to_thread((target_dir / name).write_bytes, content)

    logger.info("Stored upload", folder=folder, filename=name, size=len(content))
    return f"{URL_PREFIX}/{folder}/{name}"


def upload_path(url: str | None) -> Path | None:
    """Map a public upload URL back to its file, or ``None`` when it points outside the upload directory."""
    if not url or not url.startswith(f"{URL_PREFIX}/"):
        return None
    root = Path(get_settings().upload_dir).resolve()
    path = (root / url.removeprefix(f"{URL_PREFIX}/")).resolve()
    if not path.is_relative_to(root) or path == root:
        return None
    return path


def delete_upload(url: str | None) -> None:
    """Remove a previously stored upload; anything outside the upload directory is ignored."""
    path = upload_path(url)
    if path is None:
        if url and url.startswith(f"{URL_PREFIX}/"):
            logger.warning("Refused to delete file outside upload directory", url=url)
        return
    if path.is_file():
        path.unlink()
        logger.info("Deleted upload", path=str(path))
