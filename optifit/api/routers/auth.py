from __future__ import annotations

import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Cookie, Depends, Header, HTTPException, Request, Response
from fastapi.responses import RedirectResponse

from optifit.api.deps import (
    get_external_identity_client,
    get_login_external_use_case,
    get_login_local_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
)
from optifit.api.schemas.auth import (
    AuthTokenResponse,
    AuthUserResponse,
    ExternalTokenLoginRequest,
    LoginRequest,
    LogoutResponse,
    RefreshRequest,
    RefreshTokenResponse,
    RegisterRequest,
)
from optifit.application.dto.auth import (
    AuthTokensOutput,
    ExternalIdentityInfo,
    LoginExternalInput,
    LoginLocalInput,
    RefreshSessionInput,
    RegisterUserInput,
)
from optifit.application.ports.external_identity_port import ExternalIdentityPort
from optifit.application.use_cases.login_external import LoginExternalUseCase
from optifit.application.use_cases.login_local import LoginLocalUseCase
from optifit.application.use_cases.refresh_session import RefreshSessionUseCase
from optifit.application.use_cases.register_user import RegisterUserUseCase
from optifit.domain.exceptions import (
    ConflictError,
    EmailAlreadyExistsError,
    ExternalIdentityError,
    InvalidCredentialsError,
    UnauthorizedError,
)


router = APIRouter()

REFRESH_COOKIE_NAME = "refresh_token"
REFRESH_COOKIE_PATH = "/auth"
STATE_COOKIE_NAME = "oauth_state"
STATE_COOKIE_PATH = "/auth/external"
STATE_COOKIE_MAX_AGE_SECONDS = 600


def _set_refresh_cookie(response: Response, refresh_token: str, max_age_seconds: int) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        samesite="lax",
        secure=False,
        max_age=max_age_seconds,
        path=REFRESH_COOKIE_PATH,
    )


def _cookie_max_age_seconds(refresh_expires_at: datetime) -> int:
    now = datetime.now(timezone.utc)
    return max(int((refresh_expires_at - now).total_seconds()), 0)


def _client_ip(request: Request, x_forwarded_for: str | None) -> str | None:
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


def _token_response(
    response: Response,
    output: AuthTokensOutput,
    model: type[AuthTokenResponse] = AuthTokenResponse,
) -> AuthTokenResponse:
    _set_refresh_cookie(
        response,
        output.refresh_token,
        max_age_seconds=_cookie_max_age_seconds(output.refresh_expires_at),
    )
    return model(
        token=output.access_token,
        access_token=output.access_token,
        refresh_token=output.refresh_token,
        access_expires_at=output.access_expires_at,
        refresh_expires_at=output.refresh_expires_at,
        user=AuthUserResponse(
            id=output.user.id,
            email=output.user.email,
            first_name=output.user.first_name,
            last_name=output.user.last_name,
            location=output.user.location,
            phone=output.user.phone,
            is_active=output.user.is_active,
            created_at=output.user.created_at,
            updated_at=output.user.updated_at,
        ),
    )


def _login_external(
    *,
    identity: ExternalIdentityInfo,
    request: Request,
    user_agent: str | None,
    x_forwarded_for: str | None,
    use_case: LoginExternalUseCase,
) -> AuthTokensOutput:
    try:
        return use_case.execute(
            LoginExternalInput(
                external_provider_id=identity.subject,
                email=identity.email,
                given_name=identity.given_name,
                family_name=identity.family_name,
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
            )
        )
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.post("/register", response_model=AuthTokenResponse, status_code=201)
def register_user(
    req: RegisterRequest,
    request: Request,
    response: Response,
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(
            RegisterUserInput(
                email=req.email,
                password=req.password,
                first_name=req.first_name,
                last_name=req.last_name,
                location=req.location,
                phone=req.phone,
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
            )
        )
    except EmailAlreadyExistsError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _token_response(response, output)


@router.post("/login", response_model=AuthTokenResponse)
def login_local(
    req: LoginRequest,
    request: Request,
    response: Response,
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(
            LoginLocalInput(
                email=req.email,
                password=req.password,
                user_agent=user_agent,
                ip=_client_ip(request, x_forwarded_for),
            )
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return _token_response(response, output)


@router.get("/auth/external")
def external_login_redirect(
    client: ExternalIdentityPort = Depends(get_external_identity_client),
):
    state = secrets.token_urlsafe(24)
    redirect = RedirectResponse(client.build_authorization_url(state=state))
    redirect.set_cookie(
        key=STATE_COOKIE_NAME,
        value=state,
        httponly=True,
        samesite="lax",
        secure=False,
        max_age=STATE_COOKIE_MAX_AGE_SECONDS,
        path=STATE_COOKIE_PATH,
    )
    return redirect


@router.get("/auth/external/callback", response_model=AuthTokenResponse)
def external_login_callback(
    request: Request,
    response: Response,
    code: str | None = None,
    state: str | None = None,
    state_cookie: str | None = Cookie(default=None, alias=STATE_COOKIE_NAME),
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    client: ExternalIdentityPort = Depends(get_external_identity_client),
    use_case: LoginExternalUseCase = Depends(get_login_external_use_case),
):
    if not state or not state_cookie or not secrets.compare_digest(state, state_cookie):
        raise HTTPException(status_code=400, detail="Invalid OAuth state.")
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code.")

    try:
        identity = client.exchange_code(code=code)
    except ExternalIdentityError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    output = _login_external(
        identity=identity,
        request=request,
        user_agent=user_agent,
        x_forwarded_for=x_forwarded_for,
        use_case=use_case,
    )
    response.delete_cookie(key=STATE_COOKIE_NAME, path=STATE_COOKIE_PATH)
    return _token_response(response, output)


@router.post("/auth/external/token", response_model=AuthTokenResponse)
def external_login_with_id_token(
    req: ExternalTokenLoginRequest,
    request: Request,
    response: Response,
    user_agent: str | None = Header(default=None),
    x_forwarded_for: str | None = Header(default=None),
    client: ExternalIdentityPort = Depends(get_external_identity_client),
    use_case: LoginExternalUseCase = Depends(get_login_external_use_case),
):
    try:
        identity = client.verify_id_token(id_token=req.id_token)
    except ExternalIdentityError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    output = _login_external(
        identity=identity,
        request=request,
        user_agent=user_agent,
        x_forwarded_for=x_forwarded_for,
        use_case=use_case,
    )
    return _token_response(response, output)


@router.post("/auth/refresh", response_model=RefreshTokenResponse)
def refresh_auth(
    response: Response,
    req: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    refresh_token = (req.refresh_token if req is not None else None) or refresh_token_cookie
    if not refresh_token:
        raise HTTPException(status_code=401, detail="Unauthorized.")

    try:
        output = use_case.execute(RefreshSessionInput(refresh_token=refresh_token))
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return _token_response(response, output, RefreshTokenResponse)


@router.post("/auth/logout", response_model=LogoutResponse)
def logout_auth(response: Response):
    response.delete_cookie(key=REFRESH_COOKIE_NAME, path=REFRESH_COOKIE_PATH)
    return LogoutResponse(ok=True)
