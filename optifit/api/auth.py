from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from optifit.api.deps import get_token_service
from optifit.application.dto.auth import TokenClaims
from optifit.application.ports.token_port import TokenPort
from optifit.domain.exceptions import InvalidTokenError


UNAUTHORIZED_DETAIL = "Unauthorized."


def require_jwt(authorization: str | None = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL)
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer":
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL)
    token = token.strip()
    if not token:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL)
    return token


def get_current_claims(
    request: Request,
    token: str = Depends(require_jwt),
    token_service: TokenPort = Depends(get_token_service),
) -> TokenClaims:
    try:
        claims = token_service.verify(token=token, token_type="access")
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL) from exc
    request.state.claims = claims
    return claims
