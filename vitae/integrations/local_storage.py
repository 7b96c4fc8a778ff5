from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path

from vitae.ports import BlobNotFound, StorageError, StoredObject

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """Blob storage on the local filesystem, one file per key."""

    def __init__(self, base_path: str, base_url: str):
        self._base = Path(base_path).resolve()
        self._base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self._base / key.lstrip("/")).resolve()
        if self._base not in path.parents:
            raise StorageError(f"Invalid storage key: {key!r}")
        return path

    def url_for(self, key: str) -> str:
        return f"{self._base_url}/{key.lstrip('/')}"

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        path = self._path_for(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as handle:
                handle.write(data)
                tmp = Path(handle.name)
            try:
                tmp.replace(path)
            except OSError:
                tmp.unlink(missing_ok=True)
                raise

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(f"Failed to store {key}: {exc}") from exc
        logger.debug("storage_put key=%s size=%s content_type=%s", key, len(data), content_type)
        return StoredObject(key=key, url=self.url_for(key), size=len(data))

    async def get(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise BlobNotFound(f"No object stored at {key}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc
