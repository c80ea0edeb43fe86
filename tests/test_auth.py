from __future__ import annotations

import logging

import pytest
from fastapi import HTTPException

from auth import security
from auth.service import TenantResolver

TEST_SECRET = "test-secret-key-for-unit-tests-only-32chars!"


def _resolver(**overrides) -> TenantResolver:
    kwargs = {"enabled": True, "secret": TEST_SECRET, "algorithm": "HS256"}
    kwargs.update(overrides)
    return TenantResolver(**kwargs)


def test_valid_token_resolves_subject() -> None:
    token = security.build_access_token("firebase-uid-1", secret=TEST_SECRET, algorithm="HS256")

    assert _resolver().resolve(token) == "firebase-uid-1"


def test_disabled_auth_uses_default_tenant() -> None:
    resolver = _resolver(enabled=False)

    assert resolver.verification_available is False
    assert resolver.resolve(None) == "default"


def test_missing_secret_degrades_at_startup(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="auth.service"):
        resolver = _resolver(secret="")

    assert resolver.verification_available is False
    assert resolver.resolve("whatever") == "default"
    assert "auth_degraded" in caplog.text


@pytest.mark.parametrize(
    "token",
    [
        None,
        "not-a-jwt",
        security.build_access_token("u1", secret="another-secret-key-that-is-long-enough!!", algorithm="HS256"),
        security.build_access_token("u1", secret=TEST_SECRET, algorithm="HS256", expires_in_s=-60),
    ],
)
def test_rejected_credentials_are_unauthorized(token: str | None) -> None:
    resolver = _resolver()

    with pytest.raises(HTTPException) as excinfo:
        resolver.resolve(token)

    assert excinfo.value.status_code == 401
    # A rejected credential does not switch the resolver off.
    assert resolver.verification_available is True


def test_token_without_subject_is_unauthorized() -> None:
    token = security.build_access_token("", secret=TEST_SECRET, algorithm="HS256")

    with pytest.raises(HTTPException) as excinfo:
        _resolver().resolve(token)
    assert excinfo.value.status_code == 401


def test_broken_verifier_degrades_once(caplog: pytest.LogCaptureFixture) -> None:
    resolver = _resolver(algorithm="NOT-AN-ALGORITHM")
    token = security.build_access_token("u1", secret=TEST_SECRET, algorithm="HS256")

    with caplog.at_level(logging.WARNING, logger="auth.service"):
        assert resolver.resolve(token) == "default"
        assert resolver.verification_available is False
        assert resolver.resolve(token) == "default"

    assert caplog.text.count("auth_degraded") == 1


def test_degrade_is_per_resolver() -> None:
    broken = _resolver(algorithm="NOT-AN-ALGORITHM")
    healthy = _resolver()
    token = security.build_access_token("u1", secret=TEST_SECRET, algorithm="HS256")

    broken.resolve(token)

    assert healthy.resolve(token) == "u1"
