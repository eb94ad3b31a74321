"""
CrisisAI Responder - Image Upload Handling

Validates multipart image uploads before classification. Image content is
never analysed; only the number of accepted files reaches the classifier.

Limits (from settings):
    - at most ``max_upload_files`` files per request
    - each file at most ``max_upload_bytes``
    - content type in ``allowed_image_types``

Files are written to ``upload_dir`` only when ``persist_uploads`` is set.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from fastapi import UploadFile

from crisis_responder.config import Settings
from crisis_responder.core.exceptions import (
    FileTooLargeError,
    TooManyFilesError,
    UnsupportedFileTypeError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    """An accepted upload."""
    name: str
    size: int
    content_type: str


def _storage_name(original_name: str) -> str:
    """Millisecond timestamp prefix keeps stored names unique per request."""
    base = Path(original_name or "upload").name or "upload"
    return f"{int(time.time() * 1000)}-{base}"


def _format_size(num_bytes: int) -> str:
    mib = 1024 * 1024
    if num_bytes >= mib and num_bytes % mib == 0:
        return f"{num_bytes // mib}MB"
    return f"{num_bytes} bytes"


class ImageUploadHandler:
    """Validates (and optionally stores) uploaded image files."""

    def __init__(
        self,
        max_files: int,
        max_bytes: int,
        allowed_types: Sequence[str],
        persist: bool = False,
        upload_dir: str = "./uploads",
    ):
        self._max_files = max_files
        self._max_bytes = max_bytes
        self._allowed_types = {t.lower() for t in allowed_types}
        self._persist = persist
        self._upload_dir = Path(upload_dir)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageUploadHandler":
        return cls(
            max_files=settings.max_upload_files,
            max_bytes=settings.max_upload_bytes,
            allowed_types=settings.allowed_image_types_list,
            persist=settings.persist_uploads,
            upload_dir=settings.upload_dir,
        )

    async def accept(self, files: Sequence[UploadFile]) -> List[StoredUpload]:
        """
        Validate every file and return the accepted uploads.

        Raises:
            TooManyFilesError: More files than allowed
            UnsupportedFileTypeError: A file is not an allowed image type
            FileTooLargeError: A file exceeds the size limit
        """
        if len(files) > self._max_files:
            raise TooManyFilesError(
                f"At most {self._max_files} images may be uploaded per request",
                details={"received": len(files), "limit": self._max_files},
            )

        # Every file is validated before anything is written.
        validated: List[Tuple[str, bytes, str]] = []
        for upload in files:
            content_type = (upload.content_type or "").lower()
            if content_type not in self._allowed_types:
                raise UnsupportedFileTypeError(
                    "Only image files are allowed",
                    details={"filename": upload.filename, "content_type": content_type},
                )

            raw = await upload.read(self._max_bytes + 1)
            if len(raw) > self._max_bytes:
                raise FileTooLargeError(
                    f"File too large (max {_format_size(self._max_bytes)})",
                    details={"filename": upload.filename, "limit": self._max_bytes},
                )

            validated.append((_storage_name(upload.filename), raw, content_type))

        accepted: List[StoredUpload] = []
        for name, raw, content_type in validated:
            if self._persist:
                self._write(name, raw)
            accepted.append(StoredUpload(name=name, size=len(raw), content_type=content_type))

        logger.debug("Accepted %d uploaded image(s)", len(accepted))
        return accepted

    def _write(self, name: str, raw: bytes) -> None:
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        path = self._upload_dir / name
        path.write_bytes(raw)
        logger.info("Stored upload %s (%d bytes)", path, len(raw))
