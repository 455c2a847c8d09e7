from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, computed_field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    location: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class ExternalTokenLoginRequest(BaseModel):
    id_token: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_token", "refreshToken"),
    )


class AuthUserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    location: str | None = None
    phone: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AuthTokenResponse(BaseModel):
    token: str
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    refresh_expires_at: datetime
    user: AuthUserResponse


class RefreshTokenResponse(AuthTokenResponse):
    """Token pair that also carries the camelCase names refresh clients read."""

    @computed_field(alias="accessToken")
    @property
    def access_token_camel(self) -> str:
        return self.access_token

    @computed_field(alias="refreshToken")
    @property
    def refresh_token_camel(self) -> str:
        return self.refresh_token


class LogoutResponse(BaseModel):
    ok: bool
