"""
Filesystem blob storage for local development.

Dependencies: pathlib, fastapi.concurrency
System role: Development blob storage
"""

from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from spacerag.boundary.storage.base import BlobStorage, StoredObject
from spacerag.core.exceptions import MissingInputError, ValidationError


class LocalBlobStorage(BlobStorage):
    """Stores objects as files under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    def _path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root not in path.parents:
            raise ValidationError(f"Invalid storage key: {key}", field="key")
        return path

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise MissingInputError(f"Object not found in storage: {key}")
        return await run_in_threadpool(path.read_bytes)

    async def put(self, data: bytes, key: str, content_type: str) -> StoredObject:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        await run_in_threadpool(path.write_bytes, data)
        return StoredObject(key=key, url=path.as_uri(), size=len(data), content_type=content_type)

    async def presign(self, key: str, ttl_seconds: int) -> str:
        # Local files have no expiring URLs
        return self._path(key).as_uri()
