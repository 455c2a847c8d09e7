from __future__ import annotations

import logging
from uuid import uuid4

from optifit.application.dto.auth import AuthTokensOutput, RegisterUserInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.password_hasher_port import PasswordHasherPort
from optifit.application.ports.token_port import TokenPort
from optifit.domain.entities.user import User
from optifit.domain.exceptions import EmailAlreadyExistsError

from .auth_common import issue_tokens, normalize_email, record_activity, utcnow, validate_password


logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        auth_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: RegisterUserInput) -> AuthTokensOutput:
        email = normalize_email(command.email)
        first_name = command.first_name.strip()
        last_name = command.last_name.strip()

        if not email:
            raise ValueError("email is required.")
        validate_password(command.password)

        password_hash = self._password_hasher.hash(command.password)

        def _tx(auth_port: AccountsPort) -> User:
            if auth_port.get_user_by_email(email=email) is not None:
                raise EmailAlreadyExistsError("User already exists.")

            now = utcnow()
            user = auth_port.create_user(
                user_id=str(uuid4()),
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                location=command.location,
                phone=command.phone,
                external_provider_id=None,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            record_activity(
                auth_port=auth_port,
                user=user,
                event_type="register",
                user_agent=command.user_agent,
                ip=command.ip,
            )
            return user

        user = self._auth_port.execute_in_transaction(_tx)
        logger.info("Registered user %s", user.id)
        return issue_tokens(user=user, token_port=self._token_port)
