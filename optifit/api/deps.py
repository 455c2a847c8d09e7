from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException

from optifit.application.ports.accounts_port import AccountsPort
from optifit.application.ports.external_identity_port import ExternalIdentityPort
from optifit.application.ports.password_hasher_port import PasswordHasherPort
from optifit.application.ports.token_port import TokenPort
from optifit.application.use_cases.change_password import ChangePasswordUseCase
from optifit.application.use_cases.deactivate_user import DeactivateUserUseCase
from optifit.application.use_cases.get_health_profile import GetHealthProfileUseCase
from optifit.application.use_cases.get_preferences import GetPreferencesUseCase
from optifit.application.use_cases.get_profile import GetProfileUseCase
from optifit.application.use_cases.list_activity import ListActivityUseCase
from optifit.application.use_cases.login_external import LoginExternalUseCase
from optifit.application.use_cases.login_local import LoginLocalUseCase
from optifit.application.use_cases.refresh_session import RefreshSessionUseCase
from optifit.application.use_cases.register_user import RegisterUserUseCase
from optifit.application.use_cases.update_health_profile import UpdateHealthProfileUseCase
from optifit.application.use_cases.update_preferences import UpdatePreferencesUseCase
from optifit.application.use_cases.update_profile import UpdateProfileUseCase
from optifit.application.use_cases.validate_user import ValidateUserUseCase
from optifit.infrastructure.clients.google_oidc_client import GoogleOidcClient
from optifit.infrastructure.db.engine import get_engine
from optifit.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from optifit.infrastructure.security.password_hasher import PasswordHasher
from optifit.infrastructure.security.token_service import JwtTokenService
from optifit.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def get_accounts_repository() -> AccountsPort:
    return SqlAccountsRepository(_get_db_engine())


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasherPort:
    settings = get_settings()
    return PasswordHasher(bcrypt_rounds=settings.password_bcrypt_rounds)


@lru_cache(maxsize=1)
def _build_token_service(jwt_secret: str, access_ttl_minutes: int, refresh_ttl_days: int) -> JwtTokenService:
    return JwtTokenService(
        jwt_secret=jwt_secret,
        access_ttl_minutes=access_ttl_minutes,
        refresh_ttl_days=refresh_ttl_days,
    )


def get_token_service() -> TokenPort:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return _build_token_service(
        settings.jwt_secret,
        settings.jwt_access_ttl_minutes,
        settings.jwt_refresh_ttl_days,
    )


def get_external_identity_client() -> ExternalIdentityPort:
    settings = get_settings()
    if not settings.google_client_id:
        raise HTTPException(status_code=500, detail="GOOGLE_CLIENT_ID is required.")
    return GoogleOidcClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_redirect_uri,
        timeout_seconds=settings.google_timeout_seconds,
    )


def get_register_user_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        auth_port=auth_port,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_login_local_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        auth_port=auth_port,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_login_external_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginExternalUseCase:
    return LoginExternalUseCase(
        auth_port=auth_port,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_refresh_session_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
    token_port: TokenPort = Depends(get_token_service),
) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(auth_port=auth_port, token_port=token_port)


def get_get_profile_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> GetProfileUseCase:
    return GetProfileUseCase(auth_port=auth_port)


def get_update_profile_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdateProfileUseCase:
    return UpdateProfileUseCase(auth_port=auth_port)


def get_get_preferences_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> GetPreferencesUseCase:
    return GetPreferencesUseCase(auth_port=auth_port)


def get_update_preferences_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdatePreferencesUseCase:
    return UpdatePreferencesUseCase(auth_port=auth_port)


def get_change_password_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(auth_port=auth_port, password_hasher=password_hasher)


def get_deactivate_user_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> DeactivateUserUseCase:
    return DeactivateUserUseCase(auth_port=auth_port)


def get_list_activity_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> ListActivityUseCase:
    return ListActivityUseCase(auth_port=auth_port)


def get_validate_user_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> ValidateUserUseCase:
    return ValidateUserUseCase(auth_port=auth_port)


def get_get_health_profile_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> GetHealthProfileUseCase:
    return GetHealthProfileUseCase(auth_port=auth_port)


def get_update_health_profile_use_case(
    auth_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdateHealthProfileUseCase:
    return UpdateHealthProfileUseCase(auth_port=auth_port)
