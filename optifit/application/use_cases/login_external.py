from __future__ import annotations

import logging
import secrets
from uuid import uuid4

from optifit.application.dto.auth import AuthTokensOutput, LoginExternalInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.password_hasher_port import PasswordHasherPort
from optifit.application.ports.token_port import TokenPort
from optifit.domain.entities.user import User
from optifit.domain.exceptions import UnauthorizedError

from .auth_common import issue_tokens, normalize_email, record_activity, utcnow


logger = logging.getLogger(__name__)


def _ensure_active(user: User) -> None:
    # Raised inside the transaction so a refused login links nothing.
    if not user.is_active:
        logger.warning("External login rejected: user %s is inactive", user.id)
        raise UnauthorizedError("Unauthorized.")


class LoginExternalUseCase:
    """Signs in a user vouched for by an external identity provider.

    Lookup order is provider subject first, then email. A subject match always
    wins, so an email reused elsewhere cannot take over an account that is
    already linked. Accounts created here get a random password nobody knows;
    they only ever sign in through the provider.
    """

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

    def execute(self, command: LoginExternalInput) -> AuthTokensOutput:
        subject = command.external_provider_id.strip()
        email = normalize_email(command.email)
        if not subject:
            raise UnauthorizedError("Missing external identity.")
        if not email:
            raise UnauthorizedError("External identity has no email.")

        def _tx(auth_port: AccountsPort) -> User:
            user = auth_port.get_user_by_external_provider_id(external_provider_id=subject)
            if user is not None:
                _ensure_active(user)
                return user

            now = utcnow()
            user = auth_port.get_user_by_email(email=email)
            if user is not None:
                _ensure_active(user)
                if user.external_provider_id and user.external_provider_id != subject:
                    logger.warning("User %s is already linked to another external identity", user.id)
                    raise UnauthorizedError("Unauthorized.")
                linked = auth_port.update_user(
                    user_id=user.id,
                    changes={"external_provider_id": subject},
                    updated_at=now,
                )
                logger.info("Linked external identity to user %s", user.id)
                return linked or user

            placeholder_hash = self._password_hasher.hash(secrets.token_urlsafe(32))
            return auth_port.create_user(
                user_id=str(uuid4()),
                email=email,
                password_hash=placeholder_hash,
                first_name=(command.given_name or "").strip() or email.split("@")[0],
                last_name=(command.family_name or "").strip(),
                location=None,
                phone=None,
                external_provider_id=subject,
                is_active=True,
                created_at=now,
                updated_at=now,
            )

        user = self._auth_port.execute_in_transaction(_tx)

        record_activity(
            auth_port=self._auth_port,
            user=user,
            event_type="login",
            user_agent=command.user_agent,
            ip=command.ip,
            method="external",
        )
        logger.info("User %s logged in with external identity", user.id)
        return issue_tokens(user=user, token_port=self._token_port)
