# folder_share/services/share_service.py
# Publish / fetch / cleanup of shared folders

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Sequence

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from folder_share.constants import SHARE_RETENTION
from folder_share.middleware.error_handler import (
    DataMissingError,
    IntegrityMismatchError,
    InvalidPayloadError,
    NotFoundOrExpiredError,
    PersistenceError,
)
from folder_share.repositories.share_repository import ShareRepository
from folder_share.schemas.share import ShareRecord
from folder_share.services.integrity import IntegrityVerifier, canonical_payload
from folder_share.storage.blob_store import BlobStore, build_blob_store
from folder_share.utils.logger import log_error, log_exception, log_info

PERSISTENCE_ERRORS = (SQLAlchemyError, RedisError, OSError)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PublishResult:
    id: str
    created: bool


class ShareService:
    """
    Publish and fetch folders.

    Metadata (repository) is the dedup index and carries expiry; the blob
    store holds the payload bytes. Publish writes the blob before the row,
    so a failure in between can only leave an unreferenced blob.
    """

    def __init__(
        self,
        repository: ShareRepository,
        blob_store: BlobStore,
        verifier: IntegrityVerifier,
        clock: Callable[[], datetime] = utc_now,
        retention: timedelta = SHARE_RETENTION,
    ):
        self.repository = repository
        self.blob_store = blob_store
        self.verifier = verifier
        self.clock = clock
        self.retention = retention

    async def publish(self, name: str, worlds: Sequence[Any], submitted_code: str) -> PublishResult:
        try:
            payload = canonical_payload(name, worlds)
        except ValueError:  # lone surrogates, NaN / Infinity
            raise InvalidPayloadError()

        if not self.verifier.verify(submitted_code, payload):
            log_info(f"ShareService.publish: HMAC mismatch for folder name length={len(name)}")
            raise IntegrityMismatchError()

        now = self.clock()
        try:
            existing = await self.repository.find_live_by_hmac(submitted_code, now)
            if existing is not None:
                log_info(f"ShareService.publish: reusing share id={existing.id}")
                return PublishResult(id=existing.id, created=False)

            share_id = str(uuid.uuid4())
            record = ShareRecord(
                id=share_id,
                hmac=submitted_code,
                name=name,
                expiration=now + self.retention,
                created_at=now,
            )
            await self.blob_store.put(share_id, payload)
            await self.repository.insert(record)
        except PERSISTENCE_ERRORS as e:
            log_exception(e, "ShareService.publish")
            raise PersistenceError()

        log_info(f"ShareService.publish: created share id={share_id} worlds={len(worlds)}")
        return PublishResult(id=share_id, created=True)

    async def fetch(self, share_id: str) -> bytes:
        """Stored payload bytes, verbatim. Read-only."""
        try:
            record = await self.repository.get(share_id)
            if record is None or not record.is_live(self.clock()):
                log_info(f"ShareService.fetch: not found/expired id={share_id}")
                raise NotFoundOrExpiredError()

            body = await self.blob_store.get(share_id)
        except PERSISTENCE_ERRORS as e:
            log_exception(e, "ShareService.fetch")
            raise PersistenceError()

        if body is None:
            log_error(f"ShareService.fetch: metadata without blob for id={share_id}")
            raise DataMissingError()
        return body

    async def cleanup_expired(self, batch_size: int = 500) -> int:
        """Delete expired shares: row first, then blob. Returns rows removed."""
        now = self.clock()
        removed = 0
        for share_id in await self.repository.list_expired_ids(now, limit=batch_size):
            try:
                await self.repository.delete(share_id)
                await self.blob_store.delete(share_id)
            except PERSISTENCE_ERRORS as e:
                log_exception(e, f"ShareService.cleanup_expired: id={share_id}")
                continue
            removed += 1
        log_info(f"ShareService.cleanup_expired: removed={removed}")
        return removed


def build_share_service(settings) -> ShareService:
    """Service wired to the configured metadata and blob stores."""
    return ShareService(
        repository=ShareRepository(),
        blob_store=build_blob_store(settings),
        verifier=IntegrityVerifier(settings.HMAC_SECRET.get_secret_value()),
    )
