from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Protocol, TypeVar

from optifit.domain.entities.user import ActivityLogEntry, HealthProfile, User, UserCredentials


TAccountsResult = TypeVar("TAccountsResult")


class AccountsPort(Protocol):
    def execute_in_transaction(
        self,
        fn: Callable[[AccountsPort], TAccountsResult],
    ) -> TAccountsResult:
        ...

    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def get_user_by_external_provider_id(self, *, external_provider_id: str) -> User | None:
        ...

    def get_credentials_by_email(self, *, email: str) -> UserCredentials | None:
        ...

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
        ...

    def update_user(
        self,
        *,
        user_id: str,
        changes: Mapping[str, Any],
        updated_at: datetime,
    ) -> User | None:
        ...

    def get_password_hash(self, *, user_id: str) -> str | None:
        ...

    def update_password_hash(
        self,
        *,
        user_id: str,
        password_hash: str,
        updated_at: datetime,
    ) -> bool:
        ...

    def create_activity_log(
        self,
        *,
        log_id: str,
        user_id: str,
        event_type: str,
        event_data: dict[str, Any],
        created_at: datetime,
    ) -> ActivityLogEntry:
        ...

    def list_activity_logs(self, *, user_id: str, limit: int) -> list[ActivityLogEntry]:
        ...

    def get_health_profile(self, *, user_id: str) -> HealthProfile | None:
        ...

    def upsert_health_profile(
        self,
        *,
        user_id: str,
        changes: Mapping[str, Any],
        updated_at: datetime,
    ) -> HealthProfile:
        ...
