from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Mapping

from optifit.domain.entities.user import ActivityLogEntry, HealthProfile, User, UserCredentials


def _as_str(value: Any) -> str:
    return str(value)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything written is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _as_dict(value: Any) -> dict:
    if value is None:
        return {}
    if isinstance(value, str):
        value = json.loads(value)
    return dict(value)


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        email=row["email"],
        first_name=row["first_name"] or "",
        last_name=row["last_name"] or "",
        external_provider_id=row.get("external_provider_id"),
        location=row.get("location"),
        phone=row.get("phone"),
        is_active=bool(row["is_active"]),
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
        preferences=_as_dict(row.get("preferences")),
    )


def map_row_to_user_credentials(row: Mapping[str, Any]) -> UserCredentials:
    return UserCredentials(
        user=map_row_to_user(row),
        password_hash=row["password_hash"],
    )


def map_row_to_activity_log(row: Mapping[str, Any]) -> ActivityLogEntry:
    return ActivityLogEntry(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        event_type=row["event_type"],
        event_data=_as_dict(row.get("event_data")),
        created_at=_as_utc(row["created_at"]),
    )


def _as_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _as_float(value: Any) -> float | None:
    return None if value is None else float(value)


def map_row_to_health_profile(row: Mapping[str, Any]) -> HealthProfile:
    return HealthProfile(
        user_id=_as_str(row["user_id"]),
        date_of_birth=_as_date(row.get("date_of_birth")),
        gender=row.get("gender"),
        height_cm=_as_float(row.get("height_cm")),
        weight_kg=_as_float(row.get("weight_kg")),
        activity_level=row.get("activity_level"),
        dietary_preferences=row.get("dietary_preferences"),
        exercise_preferences=row.get("exercise_preferences"),
        medical_conditions=list(row.get("medical_conditions") or []),
        supplements=row.get("supplements"),
        sleep_patterns=row.get("sleep_patterns"),
        stress_level=row.get("stress_level"),
        nutrition_info=row.get("nutrition_info"),
        additional_info=row.get("additional_info"),
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )
