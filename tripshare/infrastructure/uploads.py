"""Trip image uploads, stored on local disk and served under ``/uploads``."""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path

from fastapi import UploadFile

UPLOAD_URL_PREFIX = "/uploads"


async def save_upload(upload: UploadFile, upload_dir: str) -> str:
    """Write *upload* under a random name and return its public URL."""
    suffix = Path(upload.filename or "").suffix.lower()
    filename = f"{uuid.uuid4().hex}{suffix}"
    content = await upload.read()
    await asyncio.to_thread((Path(upload_dir) / filename).write_bytes, content)
    return f"{UPLOAD_URL_PREFIX}/{filename}"


async def discard_upload(url: str, upload_dir: str) -> None:
    """Remove a file previously stored by :func:`save_upload`."""
    filename = url.rsplit("/", 1)[-1]
    await asyncio.to_thread((Path(upload_dir) / filename).unlink, missing_ok=True)
