"""Local-disk store for uploaded images.

Files are written under ``settings.UPLOAD_DIR`` with a generated name and
served back through ``GET /uploads/{filename}``.
"""
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from bandstand.config import settings
from bandstand.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


class BlobStore:
    """Stores uploaded images and hands back the generated filename."""

    def __init__(self, root: str | os.PathLike, max_bytes: int):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def save_image(self, upload: Optional[UploadFile]) -> Optional[str]:
        """Persist an optional image upload; returns its filename or None."""
        if upload is None or not upload.filename:
            return None

        ext = os.path.splitext(upload.filename)[1].lower()
        if ext not in ALLOWED_EXTENSIONS or upload.content_type not in ALLOWED_CONTENT_TYPES:
            raise BadRequestException("Only image files are allowed!")

        data = upload.file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise BadRequestException(f"Image exceeds the {self.max_bytes} byte limit")

        filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / filename).write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", filename, len(data))
        return filename

    def path_for(self, filename: str) -> Path:
        """Resolve a stored filename; anything that is not a plain stored file is NotFound."""
        path = self.root / filename
        if Path(filename).name != filename or filename.startswith(".") or not path.is_file():
            raise NotFoundException("Upload", filename)
        return path

    def delete(self, filename: Optional[str]) -> None:
        if not filename:
            return
        (self.root / filename).unlink(missing_ok=True)
        logger.info("Removed upload %s", filename)


blob_store = BlobStore(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)


def get_blob_store() -> BlobStore:
    return blob_store
