from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=1, max_length=72)


class ActivityLogResponse(BaseModel):
    id: str
    event_type: str
    event_data: dict[str, Any]
    created_at: datetime


class ValidateUserResponse(BaseModel):
    valid: bool


class HealthProfileRequest(BaseModel):
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=20)
    height_cm: float | None = Field(default=None, gt=0, le=300)
    weight_kg: float | None = Field(default=None, gt=0, le=1000)
    activity_level: str | None = Field(default=None, max_length=50)
    dietary_preferences: Any = None
    exercise_preferences: Any = None
    medical_conditions: list[str] | None = None
    supplements: Any = None
    sleep_patterns: Any = None
    stress_level: int | None = Field(default=None, ge=1, le=10)
    nutrition_info: Any = None
    additional_info: Any = None


class HealthProfileResponse(BaseModel):
    user_id: str
    date_of_birth: date | None
    gender: str | None
    height_cm: float | None
    weight_kg: float | None
    activity_level: str | None
    dietary_preferences: Any
    exercise_preferences: Any
    medical_conditions: list[str]
    supplements: Any
    sleep_patterns: Any
    stress_level: int | None
    nutrition_info: Any
    additional_info: Any
    created_at: datetime
    updated_at: datetime
