"""Filename helpers for stored uploads."""
from __future__ import annotations

import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: Optional[str]) -> str:
    """Reduce a client-supplied name to a safe basename."""
    base = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "file"


def unique_filename(filename: Optional[str]) -> str:
    """Prefix a sanitized name with epoch millis and a random number."""
    prefix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{prefix}-{sanitize_filename(filename)}"


def is_safe_stored_name(filename: str) -> bool:
    """Reject names that could escape the upload directory."""
    if not filename or filename in {".", ".."}:
        return False
    if "/" in filename or "\\" in filename or ".." in filename:
        return False
    return True


def ensure_dir(path: str | Path) -> Path:
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory
