"""
Client for the folder share API, as used by the desktop app.

Usage:
    client = ShareClient("https://share.example.com", secret=os.environ["HMAC_SECRET"])
    share_id = client.share_folder("My Worlds", worlds)
    folder = client.fetch_folder(share_id)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
from urllib.parse import quote

import requests

from folder_share.constants import PUBLISH_PATH
from folder_share.services.integrity import IntegrityVerifier

TIMEOUT_SECONDS = 10


class ShareClientError(Exception):
    """Non-2xx answer or unreachable service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class SharedFolder:
    name: str
    worlds: list[dict[str, Any]]


class ShareClient:
    def __init__(self, base_url: str, secret: str, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.verifier = IntegrityVerifier(secret)
        self.session = session or requests.Session()

    def _error(self, response: requests.Response) -> ShareClientError:
        try:
            message = response.json().get("error", response.reason)
        except ValueError:
            message = response.text or response.reason
        return ShareClientError(f"{response.status_code}: {message}", response.status_code)

    def share_folder(self, name: str, worlds: Sequence[dict[str, Any]]) -> str:
        """Publish a folder and return its share id (reused if already live)."""
        body = {"name": name, "worlds": list(worlds), "hmac": self.verifier.sign(name, worlds)}
        try:
            response = self.session.post(
                f"{self.base_url}{PUBLISH_PATH}", json=body, timeout=TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            raise ShareClientError(f"Share failed: {type(e).__name__}") from e

        if not response.ok:
            raise self._error(response)
        return response.json()["id"]

    def fetch_folder(self, share_id: str) -> SharedFolder:
        """Download a shared folder for import."""
        try:
            response = self.session.get(
                f"{self.base_url}{PUBLISH_PATH}/{quote(share_id, safe='')}",
                timeout=TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ShareClientError(f"Download failed: {type(e).__name__}") from e

        if not response.ok:
            raise self._error(response)
        data = response.json()
        return SharedFolder(name=data["name"], worlds=data["worlds"])
