import secrets
from datetime import datetime
from pathlib import Path

from app.config import settings

SAFE_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-")
MAX_BASE_LENGTH = 100


def ensure_data_dirs(data_path: Path | None = None) -> Path:
    path = data_path or settings.data_path
    path.mkdir(parents=True, exist_ok=True)
    (path / "documents").mkdir(exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    """Make a storage-safe file name.

    Only the part before the last dot is sanitized and capped at 100
    characters; the extension is reattached unchanged.
    """
    dot = name.rfind(".")
    base, extension = (name, "") if dot == -1 else (name[:dot], name[dot:])
    safe_base = "".join(c if c in SAFE_CHARS else "_" for c in base)
    return safe_base[:MAX_BASE_LENGTH] + extension


def make_storage_key(name: str, now: datetime) -> str:
    """Prefix the sanitized name with a millisecond timestamp and a random token."""
    millis = int(now.timestamp() * 1000)
    return f"{millis}_{secrets.token_hex(4)}_{sanitize_filename(name)}"
