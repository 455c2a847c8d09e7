from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from optifit.domain.entities.user import User
from optifit.domain.exceptions import InvalidTokenError
from optifit.infrastructure.security.token_service import JwtTokenService


SECRET = "unit-test-secret-with-enough-length-for-hs256"
ISSUED_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _user() -> User:
    return User(
        id="user-1",
        email="alice@example.com",
        first_name="Alice",
        last_name="Smith",
        external_provider_id=None,
        location=None,
        phone=None,
        is_active=True,
        created_at=ISSUED_AT,
        updated_at=ISSUED_AT,
    )


def _service(*, now: datetime = ISSUED_AT, secret: str = SECRET) -> JwtTokenService:
    return JwtTokenService(
        jwt_secret=secret,
        access_ttl_minutes=60,
        refresh_ttl_days=7,
        clock=lambda: now,
    )


def test_access_token_round_trip_carries_subject_and_email():
    service = _service()
    token, expires_at = service.issue_access_token(user=_user(), now=ISSUED_AT)

    claims = service.verify(token=token)

    assert claims.sub == "user-1"
    assert claims.email == "alice@example.com"
    assert claims.token_type == "access"
    assert claims.issued_at == ISSUED_AT
    assert claims.expires_at == expires_at == ISSUED_AT + timedelta(hours=1)


def test_refresh_token_lives_for_configured_days():
    service = _service()
    token, expires_at = service.issue_refresh_token(user=_user(), now=ISSUED_AT)

    claims = service.verify(token=token, token_type="refresh")

    assert expires_at == ISSUED_AT + timedelta(days=7)
    assert claims.token_type == "refresh"


def test_tokens_issued_in_the_same_second_are_distinct():
    service = _service()
    first, _ = service.issue_access_token(user=_user(), now=ISSUED_AT)
    second, _ = service.issue_access_token(user=_user(), now=ISSUED_AT)

    assert first != second


def test_token_is_valid_one_second_before_expiry():
    token, expires_at = _service().issue_access_token(user=_user(), now=ISSUED_AT)

    claims = _service(now=expires_at - timedelta(seconds=1)).verify(token=token)

    assert claims.sub == "user-1"


@pytest.mark.parametrize("offset_seconds", [0, 1])
def test_token_is_rejected_at_and_after_expiry(offset_seconds):
    token, expires_at = _service().issue_access_token(user=_user(), now=ISSUED_AT)

    with pytest.raises(InvalidTokenError):
        _service(now=expires_at + timedelta(seconds=offset_seconds)).verify(token=token)


def test_tampered_payload_is_rejected():
    service = _service()
    token, _ = service.issue_access_token(user=_user(), now=ISSUED_AT)
    header, payload, signature = token.split(".")
    forged_payload = jwt.encode(
        {"sub": "admin", "email": "alice@example.com", "type": "access", "iat": 0, "exp": 4102444800},
        "another-secret-with-enough-length-for-hs256",
        algorithm="HS256",
    ).split(".")[1]

    with pytest.raises(InvalidTokenError):
        service.verify(token=f"{header}.{forged_payload}.{signature}")


def test_token_signed_with_another_secret_is_rejected():
    other = _service(secret="another-secret-with-enough-length-for-hs256")
    token, _ = other.issue_access_token(user=_user(), now=ISSUED_AT)

    with pytest.raises(InvalidTokenError):
        _service().verify(token=token)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_tokens_are_rejected(token):
    with pytest.raises(InvalidTokenError):
        _service().verify(token=token)


def test_refresh_token_is_not_accepted_as_access_token():
    service = _service()
    refresh_token, _ = service.issue_refresh_token(user=_user(), now=ISSUED_AT)
    access_token, _ = service.issue_access_token(user=_user(), now=ISSUED_AT)

    with pytest.raises(InvalidTokenError):
        service.verify(token=refresh_token, token_type="access")
    with pytest.raises(InvalidTokenError):
        service.verify(token=access_token, token_type="refresh")


def test_token_without_required_claims_is_rejected():
    token = jwt.encode({"email": "alice@example.com", "type": "access"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        _service().verify(token=token)


def test_decode_reads_claims_without_verifying():
    expired_at = ISSUED_AT + timedelta(days=30)
    token, _ = _service().issue_access_token(user=_user(), now=ISSUED_AT)

    payload = _service(now=expired_at, secret="wrong-secret-with-enough-length-for-hs256").decode(token=token)

    assert payload["sub"] == "user-1"
    assert payload["type"] == "access"


def test_decode_returns_none_for_garbage():
    assert _service().decode(token="garbage") is None


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        JwtTokenService(jwt_secret="", access_ttl_minutes=60, refresh_ttl_days=7)


def test_token_from_issuer_with_clock_ahead_of_real_time_is_accepted():
    issuer_now = datetime.now(timezone.utc) + timedelta(seconds=5)
    token, _ = _service(now=issuer_now).issue_access_token(user=_user(), now=issuer_now)

    claims = _service(now=issuer_now + timedelta(seconds=1)).verify(token=token)

    assert claims.sub == "user-1"
