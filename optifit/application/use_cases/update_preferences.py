from __future__ import annotations

from typing import Any

from optifit.application.dto.users import UpdatePreferencesInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError

from .auth_common import utcnow


class UpdatePreferencesUseCase:
    """Shallow-merges the given keys into the stored preferences."""

    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, command: UpdatePreferencesInput) -> dict[str, Any]:
        def _tx(auth_port: AccountsPort) -> dict[str, Any]:
            user = auth_port.get_user_by_id(user_id=command.user_id)
            if user is None:
                raise UserNotFoundError("User not found.")

            merged = {**(user.preferences or {}), **command.preferences}
            updated = auth_port.update_user(
                user_id=user.id,
                changes={"preferences": merged},
                updated_at=utcnow(),
            )
            if updated is None:
                raise UserNotFoundError("User not found.")
            return dict(updated.preferences)

        return self._auth_port.execute_in_transaction(_tx)
