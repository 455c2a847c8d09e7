from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    email: str
    first_name: str
    last_name: str
    external_provider_id: str | None
    location: str | None
    phone: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    preferences: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UserCredentials:
    """Only place a password hash lives outside the database."""

    user: User
    password_hash: str


@dataclass(frozen=True)
class ActivityLogEntry:
    id: str
    user_id: str
    event_type: str
    event_data: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class HealthProfile:
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
