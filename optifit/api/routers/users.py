from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from optifit.api.auth import get_current_claims
from optifit.api.deps import (
    get_change_password_use_case,
    get_deactivate_user_use_case,
    get_get_health_profile_use_case,
    get_get_preferences_use_case,
    get_get_profile_use_case,
    get_list_activity_use_case,
    get_update_health_profile_use_case,
    get_update_preferences_use_case,
    get_update_profile_use_case,
    get_validate_user_use_case,
)
from optifit.api.schemas.auth import AuthUserResponse
from optifit.api.schemas.users import (
    ActivityLogResponse,
    ChangePasswordRequest,
    HealthProfileRequest,
    HealthProfileResponse,
    UpdateProfileRequest,
    ValidateUserResponse,
)
from optifit.application.dto.auth import AuthUserOutput, TokenClaims
from optifit.application.dto.users import (
    ChangePasswordInput,
    UpdateHealthProfileInput,
    UpdatePreferencesInput,
    UpdateProfileInput,
)
from optifit.application.use_cases.change_password import ChangePasswordUseCase
from optifit.application.use_cases.deactivate_user import DeactivateUserUseCase
from optifit.application.use_cases.get_health_profile import GetHealthProfileUseCase
from optifit.application.use_cases.get_preferences import GetPreferencesUseCase
from optifit.application.use_cases.get_profile import GetProfileUseCase
from optifit.application.use_cases.list_activity import ListActivityUseCase
from optifit.application.use_cases.update_health_profile import UpdateHealthProfileUseCase
from optifit.application.use_cases.update_preferences import UpdatePreferencesUseCase
from optifit.application.use_cases.update_profile import UpdateProfileUseCase
from optifit.application.use_cases.validate_user import ValidateUserUseCase
from optifit.domain.exceptions import (
    HealthProfileNotFoundError,
    InvalidCredentialsError,
    UserNotFoundError,
)


router = APIRouter(prefix="/users")


def _user_response(output: AuthUserOutput) -> AuthUserResponse:
    return AuthUserResponse(
        id=output.id,
        email=output.email,
        first_name=output.first_name,
        last_name=output.last_name,
        location=output.location,
        phone=output.phone,
        is_active=output.is_active,
        created_at=output.created_at,
        updated_at=output.updated_at,
    )


@router.get("/profile", response_model=AuthUserResponse)
def get_profile(
    claims: TokenClaims = Depends(get_current_claims),
    use_case: GetProfileUseCase = Depends(get_get_profile_use_case),
):
    try:
        output = use_case.execute(user_id=claims.sub)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _user_response(output)


@router.put("/profile", response_model=AuthUserResponse)
def update_profile(
    req: UpdateProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    try:
        output = use_case.execute(
            UpdateProfileInput(
                user_id=claims.sub,
                first_name=req.first_name,
                last_name=req.last_name,
                location=req.location,
                phone=req.phone,
            )
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _user_response(output)


@router.delete("/profile", status_code=204)
def deactivate_profile(
    claims: TokenClaims = Depends(get_current_claims),
    use_case: DeactivateUserUseCase = Depends(get_deactivate_user_use_case),
):
    try:
        use_case.execute(user_id=claims.sub)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


@router.get("/preferences", response_model=dict[str, Any])
def get_preferences(
    claims: TokenClaims = Depends(get_current_claims),
    use_case: GetPreferencesUseCase = Depends(get_get_preferences_use_case),
):
    try:
        return use_case.execute(user_id=claims.sub)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.put("/preferences", response_model=dict[str, Any])
def update_preferences(
    preferences: dict[str, Any] = Body(...),
    claims: TokenClaims = Depends(get_current_claims),
    use_case: UpdatePreferencesUseCase = Depends(get_update_preferences_use_case),
):
    try:
        return use_case.execute(UpdatePreferencesInput(user_id=claims.sub, preferences=preferences))
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/health-profile", response_model=HealthProfileResponse)
def get_health_profile(
    claims: TokenClaims = Depends(get_current_claims),
    use_case: GetHealthProfileUseCase = Depends(get_get_health_profile_use_case),
):
    try:
        output = use_case.execute(user_id=claims.sub)
    except HealthProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return HealthProfileResponse(**asdict(output))


@router.put("/health-profile", response_model=HealthProfileResponse)
def update_health_profile(
    req: HealthProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    use_case: UpdateHealthProfileUseCase = Depends(get_update_health_profile_use_case),
):
    try:
        output = use_case.execute(UpdateHealthProfileInput(user_id=claims.sub, **req.model_dump()))
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return HealthProfileResponse(**asdict(output))


@router.post("/password", status_code=204)
def change_password(
    req: ChangePasswordRequest,
    claims: TokenClaims = Depends(get_current_claims),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    try:
        use_case.execute(
            ChangePasswordInput(
                user_id=claims.sub,
                current_password=req.current_password,
                new_password=req.new_password,
            )
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)


@router.get("/activity", response_model=list[ActivityLogResponse])
def list_activity(
    limit: int = Query(default=20, ge=1, le=100),
    claims: TokenClaims = Depends(get_current_claims),
    use_case: ListActivityUseCase = Depends(get_list_activity_use_case),
):
    try:
        rows = use_case.execute(user_id=claims.sub, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [
        ActivityLogResponse(
            id=row.id,
            event_type=row.event_type,
            event_data=row.event_data,
            created_at=row.created_at,
        )
        for row in rows
    ]


@router.get("/validate", response_model=ValidateUserResponse)
def validate_user(
    claims: TokenClaims = Depends(get_current_claims),
    use_case: ValidateUserUseCase = Depends(get_validate_user_use_case),
):
    return ValidateUserResponse(valid=use_case.execute(user_id=claims.sub))
