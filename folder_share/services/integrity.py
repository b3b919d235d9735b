from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any, Sequence

from folder_share.middleware.error_handler import ServerMisconfigurationError


def canonical_payload(name: str, worlds: Sequence[Any]) -> bytes:
    """The single serialization of `{name, worlds}` that gets signed and stored.

    Keys sorted at every level, no whitespace, UTF-8 without escaping, so the
    same logical folder always yields the same bytes.
    """
    return json.dumps(
        {"name": name, "worlds": list(worlds)},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


class IntegrityVerifier:
    """HMAC-SHA256 over canonical payloads with a server-held secret."""

    def __init__(self, secret: str):
        self._key = secret.strip().encode("utf-8")

    def __repr__(self) -> str:
        return "IntegrityVerifier(secret=***)"

    def compute(self, payload: bytes) -> str:
        if not self._key:
            raise ServerMisconfigurationError()
        return hmac.new(self._key, payload, hashlib.sha256).hexdigest()

    def verify(self, code: str, payload: bytes) -> bool:
        # bytes comparison: a non-ASCII str would make compare_digest raise
        return hmac.compare_digest(self.compute(payload).encode("ascii"), code.encode("utf-8", "surrogatepass"))

    def sign(self, name: str, worlds: Sequence[Any]) -> str:
        return self.compute(canonical_payload(name, worlds))
