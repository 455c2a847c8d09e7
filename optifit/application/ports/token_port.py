from __future__ import annotations

from datetime import datetime
from typing import Protocol

from optifit.application.dto.auth import TokenClaims
from optifit.domain.entities.user import User


class TokenPort(Protocol):
    def issue_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        ...

    def issue_refresh_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        ...

    def verify(self, *, token: str, token_type: str = "access") -> TokenClaims:
        ...

    def decode(self, *, token: str) -> dict | None:
        ...
