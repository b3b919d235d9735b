# folder_share/storage/blob_store.py
# Durable payload storage for shared folders, keyed by share id

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from folder_share.config import Settings
from folder_share.constants import BLOB_NAMESPACE, JSON_CONTENT_TYPE


def blob_key(share_id: str) -> str:
    """Object key of a share payload: `<id>.json`."""
    return f"{share_id}.json"


class BlobStore(Protocol):
    async def put(self, share_id: str, data: bytes) -> None: ...

    async def get(self, share_id: str) -> bytes | None: ...

    async def delete(self, share_id: str) -> None: ...

    async def ping(self) -> bool: ...


class FilesystemBlobStore:
    """Stores each payload as `<root>/folders/<id>.json`.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so readers never see a partial payload.
    """

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root) / BLOB_NAMESPACE

    def _path(self, share_id: str) -> Path:
        path = (self.root / blob_key(share_id)).resolve()
        if path.parent != self.root.resolve():
            raise ValueError(f"Share id escapes blob root: {share_id!r}")
        return path

    def _write(self, share_id: str, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self._path(share_id)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self, share_id: str) -> bytes | None:
        try:
            return self._path(share_id).read_bytes()
        except FileNotFoundError:
            return None

    def _remove(self, share_id: str) -> None:
        self._path(share_id).unlink(missing_ok=True)

    async def put(self, share_id: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, share_id, data)

    async def get(self, share_id: str) -> bytes | None:
        return await asyncio.to_thread(self._read, share_id)

    async def delete(self, share_id: str) -> None:
        await asyncio.to_thread(self._remove, share_id)

    async def ping(self) -> bool:
        def _check() -> bool:
            self.root.mkdir(parents=True, exist_ok=True)
            return os.access(self.root, os.W_OK)
        return await asyncio.to_thread(_check)


class RedisBlobStore:
    """Stores each payload as a hash at `folders/<id>.json` with body + content type."""

    def __init__(self, redis: Any):
        self.redis = redis

    @staticmethod
    def _key(share_id: str) -> str:
        return f"{BLOB_NAMESPACE}/{blob_key(share_id)}"

    async def put(self, share_id: str, data: bytes) -> None:
        await self.redis.hset(
            self._key(share_id),
            mapping={"body": data, "content_type": JSON_CONTENT_TYPE},
        )

    async def get(self, share_id: str) -> bytes | None:
        return await self.redis.hget(self._key(share_id), "body")

    async def delete(self, share_id: str) -> None:
        await self.redis.delete(self._key(share_id))

    async def ping(self) -> bool:
        return bool(await self.redis.ping())


def build_blob_store(settings: Settings) -> BlobStore:
    """Blob store for the configured backend."""
    if settings.BLOB_BACKEND == "redis":
        from folder_share.utils.redis_client import get_redis
        return RedisBlobStore(get_redis())
    return FilesystemBlobStore(settings.BLOB_STORE_PATH)
