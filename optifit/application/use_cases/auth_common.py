from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from optifit.application.dto.auth import AuthTokensOutput, AuthUserOutput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.token_port import TokenPort
from optifit.domain.entities.user import User


MIN_PASSWORD_LENGTH = 8
# bcrypt ignores everything past this many bytes.
MAX_PASSWORD_BYTES = 72


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes.")


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        location=user.location,
        phone=user.phone,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def issue_tokens(*, user: User, token_port: TokenPort) -> AuthTokensOutput:
    now = utcnow()
    access_token, access_expires_at = token_port.issue_access_token(user=user, now=now)
    refresh_token, refresh_expires_at = token_port.issue_refresh_token(user=user, now=now)
    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access_token,
        refresh_token=refresh_token,
        access_expires_at=access_expires_at,
        refresh_expires_at=refresh_expires_at,
    )


def record_activity(
    *,
    auth_port: AccountsPort,
    user: User,
    event_type: str,
    user_agent: str | None,
    ip: str | None,
    **extra: Any,
) -> None:
    now = utcnow()
    auth_port.create_activity_log(
        log_id=str(uuid4()),
        user_id=user.id,
        event_type=event_type,
        event_data={
            "timestamp": now.isoformat(),
            "ip": ip,
            "user_agent": user_agent,
            **extra,
        },
        created_at=now,
    )
