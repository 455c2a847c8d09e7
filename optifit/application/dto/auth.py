from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    email: str
    first_name: str
    last_name: str
    location: str | None
    phone: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    password: str
    first_name: str
    last_name: str
    location: str | None = None
    phone: str | None = None
    user_agent: str | None = None
    ip: str | None = None


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str
    user_agent: str | None
    ip: str | None


@dataclass(frozen=True)
class LoginExternalInput:
    external_provider_id: str
    email: str
    given_name: str | None
    family_name: str | None
    user_agent: str | None
    ip: str | None


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    sub: str
    email: str
    token_type: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class ExternalIdentityInfo:
    subject: str
    email: str
    email_verified: bool
    given_name: str | None
    family_name: str | None
