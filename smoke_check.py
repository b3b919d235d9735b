#!/usr/bin/env python3
"""
Post-deployment smoke check for the folder share service.
Run after deployment to verify the public endpoints answer as expected.

Usage:
    HMAC_SECRET=... python smoke_check.py [base_url]

    base_url: Optional, defaults to http://127.0.0.1:8787

Examples:
    HMAC_SECRET=dev python smoke_check.py
    HMAC_SECRET=$PROD_SECRET python smoke_check.py https://share.example.com
"""

import os
import sys
import time
from datetime import datetime

import requests

from folder_share.client import ShareClient, ShareClientError

# Configuration
DEFAULT_BASE_URL = "http://127.0.0.1:8787"
TIMEOUT_SECONDS = 10

SAMPLE_WORLDS = [
    {
        "id": "wrld_smoke_check",
        "name": "Smoke Check World",
        "imageUrl": "https://example.invalid/world.png",
        "authorName": "smoke",
        "authorId": "usr_smoke",
        "capacity": 16,
        "favorites": 0,
        "tags": [],
        "platform": ["standalonewindows"],
    }
]


def check_endpoint(
    session: requests.Session,
    name: str,
    method: str,
    url: str,
    expected_status: int = 200,
    expected_error: str | None = None,
    **kwargs,
) -> bool:
    """Check a single endpoint's status (and error body, if given)."""
    try:
        start = time.time()
        response = session.request(method, url, timeout=TIMEOUT_SECONDS, **kwargs)
        elapsed = (time.time() - start) * 1000
    except requests.exceptions.ConnectionError:
        print(f"  ❌ {name}: Connection refused")
        return False
    except requests.exceptions.Timeout:
        print(f"  ❌ {name}: Timeout after {TIMEOUT_SECONDS}s")
        return False

    if response.status_code != expected_status:
        print(f"  ❌ {name}: Expected {expected_status}, got {response.status_code}")
        return False
    if expected_error is not None and response.json().get("error") != expected_error:
        print(f"  ❌ {name}: Expected error {expected_error!r}, got {response.text}")
        return False
    if response.headers.get("Access-Control-Allow-Origin") != "*":
        print(f"  ❌ {name}: CORS headers missing")
        return False

    print(f"  ✅ {name}: {response.status_code} ({elapsed:.0f}ms)")
    return True


def check_round_trip(base_url: str, secret: str) -> bool:
    """Publish the sample folder twice and read it back."""
    client = ShareClient(base_url, secret)
    try:
        share_id = client.share_folder("Smoke Check", SAMPLE_WORLDS)
        again = client.share_folder("Smoke Check", SAMPLE_WORLDS)
        folder = client.fetch_folder(share_id)
    except ShareClientError as e:
        print(f"  ❌ Round trip: {e.message}")
        return False

    if again != share_id:
        print(f"  ❌ Round trip: republish gave {again}, expected {share_id}")
        return False
    if folder.name != "Smoke Check" or folder.worlds != SAMPLE_WORLDS:
        print("  ❌ Round trip: fetched folder differs from published one")
        return False

    print(f"  ✅ Round trip: id {share_id}")
    return True


def run_checks(base_url: str, secret: str) -> bool:
    """Run all smoke checks."""
    print(f"\n{'='*60}")
    print("Folder Share Smoke Check")
    print(f"Base URL: {base_url}")
    print(f"Time: {datetime.now().isoformat()}")
    print(f"{'='*60}\n")

    session = requests.Session()
    folder_url = f"{base_url}/api/share/folder"
    results = []

    # === Health Endpoints ===
    print("Health Endpoints:")
    results.append(check_endpoint(session, "Liveness", "GET", f"{base_url}/health/live"))
    results.append(check_endpoint(session, "Readiness", "GET", f"{base_url}/health/ready"))
    print()

    # === Share API ===
    print("Share API:")
    results.append(check_endpoint(session, "Preflight", "OPTIONS", folder_url, expected_status=204))
    results.append(check_endpoint(
        session, "Wrong content type", "POST", folder_url,
        expected_status=415, expected_error="Invalid content type",
        data="{}", headers={"Content-Type": "text/plain"},
    ))
    results.append(check_endpoint(
        session, "Bad HMAC", "POST", folder_url,
        expected_status=400, expected_error="HMAC mismatch",
        json={"name": "Smoke Check", "worlds": SAMPLE_WORLDS, "hmac": "deadbeef"},
    ))
    results.append(check_endpoint(
        session, "Unknown id", "GET", f"{folder_url}/does-not-exist",
        expected_status=404, expected_error="Not found or expired",
    ))
    results.append(check_endpoint(
        session, "Unknown route", "GET", f"{base_url}/nope",
        expected_status=404, expected_error="Not found",
    ))
    if secret:
        results.append(check_round_trip(base_url, secret))
    else:
        print("  ⚠️  Round trip skipped: HMAC_SECRET not set")
    print()

    # === Summary ===
    passed = sum(results)
    total = len(results)

    print(f"{'='*60}")
    print(f"Results: {passed}/{total} passed")

    if passed == total:
        print("✅ All checks passed!")
        return True
    print(f"❌ {total - passed} check(s) failed")
    return False


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_BASE_URL

    # Remove trailing slash
    base_url = base_url.rstrip("/")

    success = run_checks(base_url, os.environ.get("HMAC_SECRET", ""))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
