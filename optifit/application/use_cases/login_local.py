from __future__ import annotations

import logging

from optifit.application.dto.auth import AuthTokensOutput, LoginLocalInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.password_hasher_port import PasswordHasherPort
from optifit.application.ports.token_port import TokenPort
from optifit.domain.exceptions import InvalidCredentialsError

from .auth_common import issue_tokens, normalize_email, record_activity


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
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

    def execute(self, command: LoginLocalInput) -> AuthTokensOutput:
        email = normalize_email(command.email)
        credentials = self._auth_port.get_credentials_by_email(email=email)
        if credentials is None:
            logger.warning("Login rejected for %s: unknown email", email)
            raise InvalidCredentialsError("Invalid credentials.")

        if not self._password_hasher.verify(command.password, credentials.password_hash):
            logger.warning("Login rejected for %s: password mismatch", email)
            raise InvalidCredentialsError("Invalid credentials.")

        user = credentials.user
        # Inactive accounts get the same answer as a wrong password.
        if not user.is_active:
            logger.warning("Login rejected for %s: inactive account", email)
            raise InvalidCredentialsError("Invalid credentials.")

        record_activity(
            auth_port=self._auth_port,
            user=user,
            event_type="login",
            user_agent=command.user_agent,
            ip=command.ip,
            method="password",
        )
        logger.info("User %s logged in", user.id)
        return issue_tokens(user=user, token_port=self._token_port)
