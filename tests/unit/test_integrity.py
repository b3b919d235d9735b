# tests/unit/test_integrity.py

import json

import pytest

from folder_share.middleware.error_handler import ServerMisconfigurationError
from folder_share.services.integrity import IntegrityVerifier, canonical_payload


def test_compute_is_deterministic(verifier, secret, worlds):
    payload = canonical_payload("My Worlds", worlds)
    assert verifier.compute(payload) == verifier.compute(payload)
    assert verifier.sign("My Worlds", worlds) == IntegrityVerifier(secret).sign("My Worlds", worlds)


def test_code_is_64_lowercase_hex(verifier, worlds):
    code = verifier.sign("My Worlds", worlds)
    assert len(code) == 64
    assert code == code.lower()
    int(code, 16)


def test_canonical_payload_ignores_key_order(make_world):
    world = make_world()
    reordered = dict(reversed(list(world.items())))
    assert canonical_payload("x", [world]) == canonical_payload("x", [reordered])


def test_canonical_payload_is_compact_utf8():
    payload = canonical_payload("Café ワールド", [])
    assert payload == '{"name":"Café ワールド","worlds":[]}'.encode("utf-8")
    assert json.loads(payload) == {"name": "Café ワールド", "worlds": []}


@pytest.mark.parametrize(
    "name, mutate",
    [
        ("My Worlds!", lambda w: w),
        ("My Worlds", lambda w: w[:1]),
        ("My Worlds", lambda w: [dict(w[0], favorites=w[0]["favorites"] + 1)] + w[1:]),
        ("My Worlds", lambda w: list(reversed(w))),
    ],
)
def test_any_change_to_content_changes_code(verifier, worlds, name, mutate):
    original = verifier.sign("My Worlds", worlds)
    assert verifier.sign(name, mutate(list(worlds))) != original


def test_different_secret_gives_different_code(worlds):
    a = IntegrityVerifier("secret-a").sign("My Worlds", worlds)
    b = IntegrityVerifier("secret-b").sign("My Worlds", worlds)
    assert a != b


def test_verify_accepts_matching_and_rejects_others(verifier, worlds):
    payload = canonical_payload("My Worlds", worlds)
    code = verifier.compute(payload)
    assert verifier.verify(code, payload)
    assert not verifier.verify("deadbeef", payload)
    assert not verifier.verify(code.upper(), payload)
    assert not verifier.verify("ü" * 64, payload)


def test_blank_secret_is_a_server_misconfiguration():
    with pytest.raises(ServerMisconfigurationError):
        IntegrityVerifier("   ").compute(b"{}")


def test_repr_does_not_leak_secret(secret):
    assert secret not in repr(IntegrityVerifier(secret))


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_canonical_payload_refuses_non_finite_numbers(make_world, value):
    with pytest.raises(ValueError):
        canonical_payload("x", [make_world(extra=value)])
