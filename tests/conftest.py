from __future__ import annotations

import copy
from dataclasses import replace
from datetime import datetime
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from optifit.domain.entities.user import ActivityLogEntry, HealthProfile, User, UserCredentials
from optifit.domain.exceptions import EmailAlreadyExistsError
from optifit.infrastructure.db.engine import create_schema, enable_sqlite_foreign_keys
from optifit.infrastructure.security.token_service import JwtTokenService


JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"


class FakeAccountsPort:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.password_hashes: dict[str, str] = {}
        self.activity_logs: list[ActivityLogEntry] = []
        self.health_profiles: dict[str, HealthProfile] = {}
        self.transactions = 0

    def execute_in_transaction(self, fn):
        snapshot = (
            dict(self.users),
            dict(self.password_hashes),
            list(self.activity_logs),
            dict(self.health_profiles),
        )
        self.transactions += 1
        try:
            return fn(self)
        except Exception:
            self.users, self.password_hashes, self.activity_logs, self.health_profiles = snapshot
            raise

    def get_user_by_id(self, *, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, *, email: str) -> User | None:
        email_l = email.strip().lower()
        for user in self.users.values():
            if user.email.lower() == email_l:
                return user
        return None

    def get_user_by_external_provider_id(self, *, external_provider_id: str) -> User | None:
        for user in self.users.values():
            if user.external_provider_id == external_provider_id:
                return user
        return None

    def get_credentials_by_email(self, *, email: str) -> UserCredentials | None:
        user = self.get_user_by_email(email=email)
        if user is None:
            return None
        return UserCredentials(user=user, password_hash=self.password_hashes[user.id])

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
    ) -> User:
        if self.get_user_by_email(email=email) is not None:
            raise EmailAlreadyExistsError("User already exists.")
        user = User(
            id=user_id,
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            external_provider_id=external_provider_id,
            location=location,
            phone=phone,
            is_active=is_active,
            created_at=created_at,
            updated_at=updated_at,
        )
        self.users[user.id] = user
        self.password_hashes[user.id] = password_hash
        return user

    def update_user(self, *, user_id: str, changes: dict[str, Any], updated_at: datetime) -> User | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = replace(user, **changes, updated_at=updated_at)
        self.users[user_id] = updated
        return updated

    def get_password_hash(self, *, user_id: str) -> str | None:
        return self.password_hashes.get(user_id)

    def update_password_hash(self, *, user_id: str, password_hash: str, updated_at: datetime) -> bool:
        if user_id not in self.users:
            return False
        self.password_hashes[user_id] = password_hash
        self.users[user_id] = replace(self.users[user_id], updated_at=updated_at)
        return True

    def create_activity_log(
        self,
        *,
        log_id: str,
        user_id: str,
        event_type: str,
        event_data: dict[str, Any],
        created_at: datetime,
    ) -> ActivityLogEntry:
        entry = ActivityLogEntry(
            id=log_id,
            user_id=user_id,
            event_type=event_type,
            event_data=copy.deepcopy(event_data),
            created_at=created_at,
        )
        self.activity_logs.append(entry)
        return entry

    def list_activity_logs(self, *, user_id: str, limit: int) -> list[ActivityLogEntry]:
        rows = [entry for entry in self.activity_logs if entry.user_id == user_id]
        rows.sort(key=lambda entry: entry.created_at, reverse=True)
        return rows[:limit]

    def get_health_profile(self, *, user_id: str) -> HealthProfile | None:
        return self.health_profiles.get(user_id)

    def upsert_health_profile(self, *, user_id: str, changes: dict[str, Any], updated_at: datetime) -> HealthProfile:
        profile = self.health_profiles.get(user_id)
        if profile is None:
            profile = HealthProfile(
                user_id=user_id,
                date_of_birth=None,
                gender=None,
                height_cm=None,
                weight_kg=None,
                activity_level=None,
                dietary_preferences=None,
                exercise_preferences=None,
                medical_conditions=[],
                supplements=None,
                sleep_patterns=None,
                stress_level=None,
                nutrition_info=None,
                additional_info=None,
                created_at=updated_at,
                updated_at=updated_at,
            )
        profile = replace(profile, **copy.deepcopy(changes), updated_at=updated_at)
        self.health_profiles[user_id] = profile
        return profile


class FakePasswordHasher:
    def hash(self, plain_password: str) -> str:
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{plain_password}"


@pytest.fixture
def accounts_port() -> FakeAccountsPort:
    return FakeAccountsPort()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(jwt_secret=JWT_SECRET, access_ttl_minutes=60, refresh_ttl_days=7)


@pytest.fixture
def sqlite_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    create_schema(engine)
    yield engine
    engine.dispose()
