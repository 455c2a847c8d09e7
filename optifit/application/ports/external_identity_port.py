from __future__ import annotations

from typing import Protocol

from optifit.application.dto.auth import ExternalIdentityInfo


class ExternalIdentityPort(Protocol):
    def build_authorization_url(self, *, state: str) -> str:
        ...

    def exchange_code(self, *, code: str) -> ExternalIdentityInfo:
        ...

    def verify_id_token(self, *, id_token: str) -> ExternalIdentityInfo:
        ...
