from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from folder_share.constants import MAX_FOLDER_NAME_LENGTH, MAX_WORLDS_PER_FOLDER


class WorldRecord(BaseModel):
    """Structural shape of one shared world.

    Only checked at the edge; the payload is stored exactly as received,
    unknown keys included.
    """
    model_config = ConfigDict(extra="allow")

    id: StrictStr = Field(pattern=r"^(wrld|wld)_[A-Za-z0-9_-]+$")
    name: StrictStr
    imageUrl: StrictStr
    authorName: StrictStr
    authorId: StrictStr
    capacity: StrictInt
    recommendedCapacity: Optional[StrictInt] = None
    favorites: StrictInt
    visits: Optional[StrictInt] = None
    tags: list[StrictStr] = Field(default_factory=list)
    platform: list[StrictStr] = Field(default_factory=list)
    description: StrictStr = ""
    publicationDate: Optional[StrictStr] = None
    updatedAt: Optional[StrictStr] = None


class ShareRequest(BaseModel):
    """Body of POST /api/share/folder."""
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(min_length=1, max_length=MAX_FOLDER_NAME_LENGTH)
    worlds: list[WorldRecord] = Field(max_length=MAX_WORLDS_PER_FOLDER)
    hmac: StrictStr


class ShareResponse(BaseModel):
    id: str


class ErrorResponse(BaseModel):
    error: str


class ShareRecord(BaseModel):
    """One metadata row. Never mutated after insert."""
    model_config = ConfigDict(frozen=True)

    id: str
    hmac: str
    name: str
    expiration: datetime
    created_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expiration
