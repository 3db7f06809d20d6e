"""Environment helpers shared by the API layer."""

import os
from typing import List


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def emails_enabled() -> bool:
    return _bool_env("SEND_EMAILS", default=True)


def public_domain() -> str:
    return os.getenv("DOMAIN", "http://localhost:3000").rstrip("/")


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def reset_code_ttl_minutes() -> int:
    try:
        return int(os.getenv("RESET_CODE_TTL_MINUTES", "60"))
    except ValueError:
        return 60


def upload_dir() -> str:
    return os.getenv("UPLOAD_DIR", "images")


def profile_image_dir() -> str:
    return os.getenv("PROFILE_IMAGE_DIR", os.path.join(upload_dir(), "profile"))


def max_upload_bytes() -> int:
    try:
        return int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))
    except ValueError:
        return 2 * 1024 * 1024
