from __future__ import annotations

import logging

from optifit.application.dto.users import ChangePasswordInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.password_hasher_port import PasswordHasherPort
from optifit.domain.exceptions import InvalidCredentialsError, UserNotFoundError

from .auth_common import utcnow, validate_password


logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    def __init__(self, *, auth_port: AccountsPort, password_hasher: PasswordHasherPort):
        self._auth_port = auth_port
        self._password_hasher = password_hasher

    def execute(self, command: ChangePasswordInput) -> None:
        validate_password(command.new_password)

        current_hash = self._auth_port.get_password_hash(user_id=command.user_id)
        if current_hash is None:
            raise UserNotFoundError("User not found.")
        if not self._password_hasher.verify(command.current_password, current_hash):
            raise InvalidCredentialsError("Invalid credentials.")

        updated = self._auth_port.update_password_hash(
            user_id=command.user_id,
            password_hash=self._password_hasher.hash(command.new_password),
            updated_at=utcnow(),
        )
        if not updated:
            raise UserNotFoundError("User not found.")
        logger.info("User %s changed password", command.user_id)
