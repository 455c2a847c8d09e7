from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Mapping, TypeVar

from sqlalchemy import JSON, Date, DateTime, bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import EmailAlreadyExistsError
from optifit.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_activity_log,
    map_row_to_health_profile,
    map_row_to_user,
    map_row_to_user_credentials,
)


T = TypeVar("T")

_USER_COLUMNS = """
    id, email, first_name, last_name, external_provider_id, location, phone,
    preferences, is_active, created_at, updated_at
"""

_ACTIVITY_LOG_COLUMNS = "id, user_id, event_type, event_data, created_at"

_HEALTH_PROFILE_COLUMNS = """
    user_id, date_of_birth, gender, height_cm, weight_kg, activity_level,
    dietary_preferences, exercise_preferences, medical_conditions, supplements,
    sleep_patterns, stress_level, nutrition_info, additional_info,
    created_at, updated_at
"""

_HEALTH_PROFILE_JSON_COLUMNS = (
    "dietary_preferences",
    "exercise_preferences",
    "medical_conditions",
    "supplements",
    "sleep_patterns",
    "nutrition_info",
    "additional_info",
)

_UPDATABLE_HEALTH_PROFILE_COLUMNS = frozenset(
    {
        "date_of_birth",
        "gender",
        "height_cm",
        "weight_kg",
        "activity_level",
        "stress_level",
        *_HEALTH_PROFILE_JSON_COLUMNS,
    }
)

_UPDATABLE_USER_COLUMNS = frozenset(
    {
        "first_name",
        "last_name",
        "location",
        "phone",
        "preferences",
        "external_provider_id",
        "is_active",
    }
)

_COLUMN_TYPES = {
    "preferences": JSON(),
    "event_data": JSON(),
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
    "date_of_birth": Date(),
    **{name: JSON() for name in _HEALTH_PROFILE_JSON_COLUMNS},
}


def _statement(sql: str, *, binds: Iterable[str] = (), returns: Iterable[str] = ()):
    stmt = text(sql)
    bind_names = [name for name in binds if name in _COLUMN_TYPES]
    if bind_names:
        stmt = stmt.bindparams(*(bindparam(name, type_=_COLUMN_TYPES[name]) for name in bind_names))
    return_names = [name for name in returns if name in _COLUMN_TYPES]
    if return_names:
        stmt = stmt.columns(**{name: _COLUMN_TYPES[name] for name in return_names})
    return stmt


_USER_RESULT = ("preferences", "created_at", "updated_at")
_ACTIVITY_LOG_RESULT = ("event_data", "created_at")
_HEALTH_PROFILE_RESULT = ("date_of_birth", *_HEALTH_PROFILE_JSON_COLUMNS, "created_at", "updated_at")


class SqlAccountsRepository(AccountsPort):
    def __init__(self, engine: Engine, *, connection: Connection | None = None):
        self._engine = engine
        self._connection = connection

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.connect() as conn:
            yield conn

    @contextmanager
    def _begin(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.begin() as conn:
            yield conn

    def execute_in_transaction(self, fn: Callable[[AccountsPort], T]) -> T:
        if self._connection is not None:
            return fn(self)
        with self._engine.begin() as conn:
            return fn(SqlAccountsRepository(self._engine, connection=conn))

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE id = :user_id
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                _statement(sql, returns=_USER_RESULT),
                {"user_id": user_id},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE lower(email) = :email
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                _statement(sql, returns=_USER_RESULT),
                {"email": email.strip().lower()},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_external_provider_id(self, *, external_provider_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE external_provider_id = :external_provider_id
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                _statement(sql, returns=_USER_RESULT),
                {"external_provider_id": external_provider_id},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_credentials_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}, password_hash
            FROM users
            WHERE lower(email) = :email
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                _statement(sql, returns=_USER_RESULT),
                {"email": email.strip().lower()},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user_credentials(row)

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        location: str | None,
        phone: str | None,
        external_provider_id: str | None,
        is_active: bool,
        created_at: datetime,
        updated_at: datetime,
    ):
        sql = f"""
            INSERT INTO users (
                id, email, password_hash, first_name, last_name, external_provider_id,
                location, phone, preferences, is_active, created_at, updated_at
            ) VALUES (
                :id, :email, :password_hash, :first_name, :last_name, :external_provider_id,
                :location, :phone, :preferences, :is_active, :created_at, :updated_at
            )
            RETURNING {_USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "email": email.strip().lower(),
            "password_hash": password_hash,
            "first_name": first_name,
            "last_name": last_name,
            "external_provider_id": external_provider_id,
            "location": location,
            "phone": phone,
            "preferences": {},
            "is_active": is_active,
            "created_at": created_at,
            "updated_at": updated_at,
        }
        stmt = _statement(sql, binds=params.keys(), returns=_USER_RESULT)
        try:
            with self._begin() as conn:
                row = conn.execute(stmt, params).mappings().one()
        except IntegrityError as exc:
            raise EmailAlreadyExistsError("User already exists.") from exc
        return map_row_to_user(row)

    def update_user(
        self,
        *,
        user_id: str,
        changes: Mapping[str, Any],
        updated_at: datetime,
    ):
        unknown = set(changes) - _UPDATABLE_USER_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update user columns: {', '.join(sorted(unknown))}.")
        assignments = [f"{name} = :{name}" for name in sorted(changes)]
        assignments.append("updated_at = :updated_at")
        sql = f"""
            UPDATE users
            SET {", ".join(assignments)}
            WHERE id = :user_id
            RETURNING {_USER_COLUMNS}
        """
        params = {**changes, "updated_at": updated_at, "user_id": user_id}
        stmt = _statement(sql, binds=params.keys(), returns=_USER_RESULT)
        try:
            with self._begin() as conn:
                row = conn.execute(stmt, params).mappings().first()
        except IntegrityError as exc:
            raise EmailAlreadyExistsError("User already exists.") from exc
        if row is None:
            return None
        return map_row_to_user(row)

    def get_password_hash(self, *, user_id: str) -> str | None:
        sql = """
            SELECT password_hash
            FROM users
            WHERE id = :user_id
            LIMIT 1
        """
        with self._connect() as conn:
            return conn.execute(text(sql), {"user_id": user_id}).scalar_one_or_none()

    def update_password_hash(
        self,
        *,
        user_id: str,
        password_hash: str,
        updated_at: datetime,
    ) -> bool:
        sql = """
            UPDATE users
            SET password_hash = :password_hash,
                updated_at = :updated_at
            WHERE id = :user_id
        """
        params = {"user_id": user_id, "password_hash": password_hash, "updated_at": updated_at}
        with self._begin() as conn:
            result = conn.execute(_statement(sql, binds=params.keys()), params)
        return result.rowcount > 0

    def create_activity_log(
        self,
        *,
        log_id: str,
        user_id: str,
        event_type: str,
        event_data: dict[str, Any],
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO user_activity_logs (
                id, user_id, event_type, event_data, created_at
            ) VALUES (
                :id, :user_id, :event_type, :event_data, :created_at
            )
            RETURNING {_ACTIVITY_LOG_COLUMNS}
        """
        params = {
            "id": log_id,
            "user_id": user_id,
            "event_type": event_type,
            "event_data": event_data,
            "created_at": created_at,
        }
        stmt = _statement(sql, binds=params.keys(), returns=_ACTIVITY_LOG_RESULT)
        with self._begin() as conn:
            row = conn.execute(stmt, params).mappings().one()
        return map_row_to_activity_log(row)

    def list_activity_logs(self, *, user_id: str, limit: int):
        sql = f"""
            SELECT {_ACTIVITY_LOG_COLUMNS}
            FROM user_activity_logs
            WHERE user_id = :user_id
            ORDER BY created_at DESC
            LIMIT :limit
        """
        with self._connect() as conn:
            rows = conn.execute(
                _statement(sql, returns=_ACTIVITY_LOG_RESULT),
                {"user_id": user_id, "limit": limit},
            ).mappings().all()
        return [map_row_to_activity_log(row) for row in rows]

    def get_health_profile(self, *, user_id: str):
        sql = f"""
            SELECT {_HEALTH_PROFILE_COLUMNS}
            FROM user_profiles
            WHERE user_id = :user_id
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                _statement(sql, returns=_HEALTH_PROFILE_RESULT),
                {"user_id": user_id},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_health_profile(row)

    def upsert_health_profile(
        self,
        *,
        user_id: str,
        changes: Mapping[str, Any],
        updated_at: datetime,
    ):
        unknown = set(changes) - _UPDATABLE_HEALTH_PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update health profile columns: {', '.join(sorted(unknown))}.")

        with self._begin() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM user_profiles WHERE user_id = :user_id"),
                {"user_id": user_id},
            ).first()
            if exists is None:
                columns = ["user_id", *sorted(changes), "created_at", "updated_at"]
                column_list = ", ".join(columns)
                value_list = ", ".join(":" + name for name in columns)
                sql = f"""
                    INSERT INTO user_profiles ({column_list})
                    VALUES ({value_list})
                    RETURNING {_HEALTH_PROFILE_COLUMNS}
                """
                params = {**changes, "user_id": user_id, "created_at": updated_at, "updated_at": updated_at}
            else:
                assignments = [f"{name} = :{name}" for name in sorted(changes)]
                assignments.append("updated_at = :updated_at")
                assignment_list = ", ".join(assignments)
                sql = f"""
                    UPDATE user_profiles
                    SET {assignment_list}
                    WHERE user_id = :user_id
                    RETURNING {_HEALTH_PROFILE_COLUMNS}
                """
                params = {**changes, "user_id": user_id, "updated_at": updated_at}
            row = conn.execute(
                _statement(sql, binds=params.keys(), returns=_HEALTH_PROFILE_RESULT),
                params,
            ).mappings().one()
        return map_row_to_health_profile(row)
