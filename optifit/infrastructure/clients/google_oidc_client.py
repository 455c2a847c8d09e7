from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests
from google.oauth2 import id_token

from optifit.application.dto.auth import ExternalIdentityInfo
from optifit.application.ports.external_identity_port import ExternalIdentityPort
from optifit.domain.exceptions import ExternalIdentityError


logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
GOOGLE_SCOPES = "openid email profile"


class GoogleOidcClient(ExternalIdentityPort):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout_seconds: float = 10,
        http_client: httpx.Client | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._timeout = timeout_seconds
        self._http_client = http_client

    def build_authorization_url(self, *, state: str) -> str:
        query = urlencode(
            {
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "scope": GOOGLE_SCOPES,
                "state": state,
                "access_type": "online",
                "prompt": "select_account",
            }
        )
        return f"{GOOGLE_AUTHORIZATION_ENDPOINT}?{query}"

    def exchange_code(self, *, code: str) -> ExternalIdentityInfo:
        if not code:
            raise ExternalIdentityError("Missing authorization code.")

        form = {
            "code": code,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": self._redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            if self._http_client is not None:
                response = self._http_client.post(GOOGLE_TOKEN_ENDPOINT, data=form)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(GOOGLE_TOKEN_ENDPOINT, data=form)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Google code exchange failed: %s", exc)
            raise ExternalIdentityError("Google code exchange failed.") from exc

        raw_id_token = payload.get("id_token") if isinstance(payload, dict) else None
        if not raw_id_token:
            raise ExternalIdentityError("Google response has no id_token.")
        return self.verify_id_token(id_token=raw_id_token)

    def verify_id_token(self, *, id_token: str) -> ExternalIdentityInfo:
        try:
            payload = id_token_verify(token=id_token, audience=self._client_id)
        except (ValueError, GoogleAuthError) as exc:
            raise ExternalIdentityError("Invalid Google id_token.") from exc

        email = payload.get("email")
        subject = payload.get("sub")
        if not email or not subject:
            raise ExternalIdentityError("Google id_token missing required claims.")

        email_verified_raw = payload.get("email_verified", False)
        email_verified = bool(email_verified_raw)
        if isinstance(email_verified_raw, str):
            email_verified = email_verified_raw.lower() == "true"
        if not email_verified:
            raise ExternalIdentityError("Google account email is not verified.")

        return ExternalIdentityInfo(
            subject=str(subject),
            email=str(email),
            email_verified=email_verified,
            given_name=_optional_str(payload.get("given_name")),
            family_name=_optional_str(payload.get("family_name")),
        )


def _optional_str(value) -> str | None:
    return value if isinstance(value, str) else None


def id_token_verify(*, token: str, audience: str) -> dict:
    request = requests.Request()
    return id_token.verify_oauth2_token(token, request, audience)
