from __future__ import annotations

import logging

from optifit.application.dto.auth import AuthTokensOutput, RefreshSessionInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.token_port import TokenPort
from optifit.domain.exceptions import InvalidTokenError, UnauthorizedError

from .auth_common import issue_tokens


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    def __init__(self, *, auth_port: AccountsPort, token_port: TokenPort):
        self._auth_port = auth_port
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AuthTokensOutput:
        token = command.refresh_token.strip()
        if not token:
            raise UnauthorizedError("Unauthorized.")

        try:
            claims = self._token_port.verify(token=token, token_type="refresh")
        except InvalidTokenError as exc:
            logger.warning("Refresh rejected: token failed verification")
            raise UnauthorizedError("Unauthorized.") from exc

        user = self._auth_port.get_user_by_id(user_id=claims.sub)
        if user is None:
            logger.warning("Refresh rejected: user %s not found", claims.sub)
            raise UnauthorizedError("Unauthorized.")
        if not user.is_active:
            logger.warning("Refresh rejected: user %s is inactive", user.id)
            raise UnauthorizedError("Unauthorized.")

        return issue_tokens(user=user, token_port=self._token_port)
