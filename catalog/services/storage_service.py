"""
Local file storage for uploads and profile pictures.

Uploads are streamed to disk in chunks so a large body is never held in
memory; anything above MAX_UPLOAD_BYTES is discarded and rejected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from catalog.utils.files import ensure_dir, is_safe_stored_name, unique_filename
from catalog.utils.runtime import max_upload_bytes

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class FileTooLargeError(Exception):
    pass


@dataclass(frozen=True)
class StoredFile:
    filename: str
    original_name: str
    content_type: Optional[str]
    size: int
    path: Path


class LocalFileStorage:
    def __init__(self, root: str | Path, max_bytes: Optional[int] = None):
        self.root = Path(root)
        self.max_bytes = max_bytes if max_bytes is not None else max_upload_bytes()

    def resolve(self, filename: str) -> Optional[Path]:
        """Return the on-disk path for a stored name, or None if unsafe/missing."""
        if not is_safe_stored_name(filename):
            return None
        path = self.root / filename
        if not path.is_file():
            return None
        return path

    async def save(self, upload: UploadFile) -> StoredFile:
        ensure_dir(self.root)
        filename = unique_filename(upload.filename)
        target = self.root / filename
        written = 0
        try:
            with open(target, "wb") as fh:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise FileTooLargeError(
                            f"File exceeds the {self.max_bytes} byte upload limit"
                        )
                    fh.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        finally:
            await upload.close()

        logger.info("Stored upload %s (%d bytes)", filename, written)
        return StoredFile(
            filename=filename,
            original_name=upload.filename or filename,
            content_type=upload.content_type,
            size=written,
            path=target,
        )

    def delete(self, filename: Optional[str]) -> bool:
        if not filename or not is_safe_stored_name(filename):
            return False
        path = self.root / filename
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not remove stored file %s: %s", path, e)
            return False
