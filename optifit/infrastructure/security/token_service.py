from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

import jwt

from optifit.application.dto.auth import TokenClaims
from optifit.application.ports.token_port import TokenPort
from optifit.domain.entities.user import User
from optifit.domain.exceptions import InternalError, InvalidTokenError


ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenService(TokenPort):
    """Stateless HS256 session tokens.

    Expiry is checked here against ``clock`` rather than by PyJWT, so a token
    is rejected from the exact second ``now >= exp``. Every verification
    failure raises the same ``InvalidTokenError`` message.
    """

    def __init__(
        self,
        *,
        jwt_secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not jwt_secret:
            raise ValueError("jwt_secret is required.")
        self._jwt_secret = jwt_secret
        self._access_ttl = timedelta(minutes=access_ttl_minutes)
        self._refresh_ttl = timedelta(days=refresh_ttl_days)
        self._clock = clock

    def issue_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        return self._issue(user=user, now=now, token_type=ACCESS_TOKEN_TYPE, ttl=self._access_ttl)

    def issue_refresh_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        return self._issue(user=user, now=now, token_type=REFRESH_TOKEN_TYPE, ttl=self._refresh_ttl)

    def verify(self, *, token: str, token_type: str = ACCESS_TOKEN_TYPE) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp", "iat"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid token.") from exc

        subject = payload.get("sub")
        email = payload.get("email")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Invalid token.")
        if not isinstance(email, str):
            raise InvalidTokenError("Invalid token.")
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise InvalidTokenError("Invalid token.")
        if payload.get("type") != token_type:
            raise InvalidTokenError("Invalid token.")
        if self._clock().timestamp() >= expires_at:
            raise InvalidTokenError("Invalid token.")

        return TokenClaims(
            sub=subject,
            email=email,
            token_type=token_type,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )

    def decode(self, *, token: str) -> dict | None:
        # Diagnostics only. Nothing returned here is trusted.
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None

    def _issue(
        self,
        *,
        user: User,
        now: datetime,
        token_type: str,
        ttl: timedelta,
    ) -> tuple[str, datetime]:
        expires_ts = int((now + ttl).timestamp())
        payload = {
            "sub": user.id,
            "email": user.email,
            "type": token_type,
            "jti": uuid4().hex,
            "iat": int(now.timestamp()),
            "exp": expires_ts,
        }
        try:
            token = jwt.encode(payload, self._jwt_secret, algorithm=ALGORITHM)
        except jwt.PyJWTError as exc:
            raise InternalError("Could not sign token.") from exc
        return token, datetime.fromtimestamp(expires_ts, tz=timezone.utc)
