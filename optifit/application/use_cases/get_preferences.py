from __future__ import annotations

from typing import Any

from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError


class GetPreferencesUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> dict[str, Any]:
        user = self._auth_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError("User not found.")
        return dict(user.preferences or {})
