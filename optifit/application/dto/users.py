from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class UpdateProfileInput:
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    location: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class UpdatePreferencesInput:
    user_id: str
    preferences: dict[str, Any]


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: str
    current_password: str
    new_password: str


@dataclass(frozen=True)
class ActivityLogOutput:
    id: str
    event_type: str
    event_data: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class UpdateHealthProfileInput:
    user_id: str
    date_of_birth: date | None = None
    gender: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    activity_level: str | None = None
    dietary_preferences: Any = None
    exercise_preferences: Any = None
    medical_conditions: list[str] | None = None
    supplements: Any = None
    sleep_patterns: Any = None
    stress_level: int | None = None
    nutrition_info: Any = None
    additional_info: Any = None


@dataclass(frozen=True)
class HealthProfileOutput:
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
