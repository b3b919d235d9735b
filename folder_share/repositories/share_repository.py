# folder_share/repositories/share_repository.py
# Repository for share metadata (dedup index + expiry lookup)

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, text

from folder_share.db.base import get_session
from folder_share.models.share_table import folders
from folder_share.schemas.share import ShareRecord


def _to_record(row: Any) -> ShareRecord:
    return ShareRecord(
        id=row["id"],
        hmac=row["hmac"],
        name=row["name"],
        expiration=row["expiration"],
        created_at=row["created_at"],
    )


class ShareRepository:
    """Repository for share metadata persistence.

    Expiry is always compared against the caller's `now`, so rows past their
    expiration are invisible here even though nothing deletes them eagerly.
    """

    async def find_live_by_hmac(self, hmac_code: str, now: datetime) -> ShareRecord | None:
        """Newest unexpired record carrying this integrity code."""
        stmt = (
            select(folders)
            .where(folders.c.hmac == hmac_code, folders.c.expiration > now)
            .order_by(folders.c.created_at.desc())
            .limit(1)
        )
        async with get_session() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return _to_record(row) if row else None

    async def get(self, share_id: str) -> ShareRecord | None:
        """Load a record by id regardless of expiry."""
        async with get_session() as session:
            result = await session.execute(select(folders).where(folders.c.id == share_id))
            row = result.mappings().first()
        return _to_record(row) if row else None

    async def insert(self, record: ShareRecord) -> None:
        async with get_session() as session:
            await session.execute(
                folders.insert().values(
                    id=record.id,
                    hmac=record.hmac,
                    name=record.name,
                    expiration=record.expiration,
                    created_at=record.created_at,
                )
            )
            await session.commit()

    async def list_expired_ids(self, now: datetime, limit: int = 500) -> list[str]:
        stmt = (
            select(folders.c.id)
            .where(folders.c.expiration <= now)
            .order_by(folders.c.expiration.asc())
            .limit(limit)
        )
        async with get_session() as session:
            result = await session.execute(stmt)
            return [row[0] for row in result.fetchall()]

    async def delete(self, share_id: str) -> None:
        async with get_session() as session:
            await session.execute(delete(folders).where(folders.c.id == share_id))
            await session.commit()

    async def ping(self) -> bool:
        async with get_session() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar() == 1
