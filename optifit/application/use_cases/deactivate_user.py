from __future__ import annotations

import logging

from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class DeactivateUserUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> None:
        user = self._auth_port.update_user(
            user_id=user_id,
            changes={"is_active": False},
            updated_at=utcnow(),
        )
        if user is None:
            raise UserNotFoundError("User not found.")
        logger.info("Deactivated user %s", user_id)
