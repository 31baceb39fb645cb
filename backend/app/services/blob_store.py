import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from app.config import settings
from app.errors import NotFoundError, StorageError

logger = logging.getLogger("app.blob_store")


class BlobStore:
    """Object store for document bytes, backed by a directory on local disk.

    Blobs are written once and made read-only; keys are flat file names.
    """

    def __init__(self, root: Path | None = None, public_base: str | None = None):
        self.root = root or settings.blobs_dir
        self.public_base = public_base or f"{settings.public_base_url.rstrip('/')}{settings.api_prefix}/blobs"

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        path = self.root / key
        if path.resolve().parent != self.root.resolve():
            raise StorageError(f"Invalid storage key: {key!r}")
        return path

    def put(self, key: str, data: bytes, content_type: str | None = None) -> dict:
        path = self._path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to overwrite an existing blob
            with open(path, "xb") as f:
                f.write(data)
            os.chmod(path, 0o444)
        except FileExistsError as exc:
            raise StorageError(f"Blob already exists: {key}") from exc
        except OSError as exc:
            raise StorageError(f"Could not store blob {key}: {exc.strerror or exc}") from exc
        logger.debug("Stored blob %s (%d bytes, %s)", key, len(data), content_type)
        return {"key": key}

    def remove(self, keys: list[str]) -> dict:
        removed: list[str] = []
        for key in keys:
            path = self._path_for(key)
            try:
                os.chmod(path, 0o644)
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise StorageError(f"Could not remove blob {key}: {exc.strerror or exc}") from exc
            removed.append(key)
        return {"removed": removed}

    def list(self) -> list[dict]:
        if not self.root.exists():
            return []
        try:
            entries = []
            for path in sorted(self.root.iterdir()):
                if not path.is_file():
                    continue
                stat = path.stat()
                entries.append({
                    "key": path.name,
                    "size": stat.st_size,
                    "createdAt": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
                })
            return entries
        except OSError as exc:
            raise StorageError(f"Could not list blobs: {exc.strerror or exc}") from exc

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/{key}"

    def open(self, key: str) -> Path:
        path = self._path_for(key)
        if not path.is_file():
            raise NotFoundError("File not found")
        return path
