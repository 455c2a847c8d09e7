from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from optifit.domain.exceptions import EmailAlreadyExistsError
from optifit.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository


NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _create(repo: SqlAccountsRepository, *, user_id: str, email: str, **overrides):
    params = {
        "user_id": user_id,
        "email": email,
        "password_hash": "hash-value",
        "first_name": "Alice",
        "last_name": "Smith",
        "location": None,
        "phone": None,
        "external_provider_id": None,
        "is_active": True,
        "created_at": NOW,
        "updated_at": NOW,
    }
    params.update(overrides)
    return repo.create_user(**params)


def test_create_user_returns_projection_without_hash(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)

    user = _create(repo, user_id="u-1", email="Alice@Example.com", location="Lisbon")

    assert user.id == "u-1"
    assert user.email == "alice@example.com"
    assert user.location == "Lisbon"
    assert user.preferences == {}
    assert user.created_at == NOW
    assert not hasattr(user, "password_hash")


def test_email_lookups_are_case_insensitive(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")

    assert repo.get_user_by_email(email="ALICE@example.COM").id == "u-1"
    credentials = repo.get_credentials_by_email(email=" Alice@Example.com ")
    assert credentials.user.id == "u-1"
    assert credentials.password_hash == "hash-value"
    assert repo.get_user_by_email(email="bob@example.com") is None
    assert repo.get_credentials_by_email(email="bob@example.com") is None


def test_duplicate_email_is_rejected(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")

    with pytest.raises(EmailAlreadyExistsError):
        _create(repo, user_id="u-2", email="ALICE@example.com")


def test_external_provider_id_is_unique_and_searchable(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com", external_provider_id="google-1")

    assert repo.get_user_by_external_provider_id(external_provider_id="google-1").id == "u-1"
    assert repo.get_user_by_external_provider_id(external_provider_id="google-2") is None
    with pytest.raises(EmailAlreadyExistsError):
        _create(repo, user_id="u-2", email="bob@example.com", external_provider_id="google-1")


def test_update_user_applies_changes_and_bumps_timestamp(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")
    later = NOW + timedelta(hours=1)

    updated = repo.update_user(
        user_id="u-1",
        changes={"first_name": "Alicia", "preferences": {"units": "metric"}},
        updated_at=later,
    )

    assert updated.first_name == "Alicia"
    assert updated.preferences == {"units": "metric"}
    assert updated.updated_at == later
    assert repo.get_user_by_id(user_id="u-1").preferences == {"units": "metric"}


def test_update_user_returns_none_for_unknown_id(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)

    assert repo.update_user(user_id="missing", changes={"first_name": "X"}, updated_at=NOW) is None


def test_update_user_refuses_unknown_columns(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")

    with pytest.raises(ValueError):
        repo.update_user(user_id="u-1", changes={"password_hash": "x"}, updated_at=NOW)


def test_password_hash_read_and_update(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")

    assert repo.get_password_hash(user_id="u-1") == "hash-value"
    assert repo.update_password_hash(user_id="u-1", password_hash="new-hash", updated_at=NOW) is True
    assert repo.get_password_hash(user_id="u-1") == "new-hash"
    assert repo.get_password_hash(user_id="missing") is None
    assert repo.update_password_hash(user_id="missing", password_hash="x", updated_at=NOW) is False


def test_transaction_rolls_back_on_error(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)

    def _tx(tx_repo):
        _create(tx_repo, user_id="u-1", email="alice@example.com")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        repo.execute_in_transaction(_tx)

    assert repo.get_user_by_id(user_id="u-1") is None


def test_transaction_commits_on_success(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)

    def _tx(tx_repo):
        user = _create(tx_repo, user_id="u-1", email="alice@example.com")
        tx_repo.create_activity_log(
            log_id="log-1",
            user_id=user.id,
            event_type="register",
            event_data={"ip": "127.0.0.1"},
            created_at=NOW,
        )
        return user

    user = repo.execute_in_transaction(_tx)

    assert repo.get_user_by_id(user_id=user.id) is not None
    assert [entry.id for entry in repo.list_activity_logs(user_id=user.id, limit=10)] == ["log-1"]


def test_activity_logs_are_listed_newest_first_with_limit(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")
    for index in range(3):
        repo.create_activity_log(
            log_id=f"log-{index}",
            user_id="u-1",
            event_type="login",
            event_data={"attempt": index},
            created_at=NOW + timedelta(minutes=index),
        )

    entries = repo.list_activity_logs(user_id="u-1", limit=2)

    assert [entry.id for entry in entries] == ["log-2", "log-1"]
    assert entries[0].event_data == {"attempt": 2}
    assert entries[0].created_at == NOW + timedelta(minutes=2)


def test_activity_logs_are_removed_with_their_user(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")
    repo.create_activity_log(
        log_id="log-1",
        user_id="u-1",
        event_type="login",
        event_data={},
        created_at=NOW,
    )

    with sqlite_engine.begin() as conn:
        conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": "u-1"})

    assert repo.list_activity_logs(user_id="u-1", limit=10) == []


def test_health_profile_is_created_on_first_upsert_then_merged(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")
    assert repo.get_health_profile(user_id="u-1") is None

    created = repo.upsert_health_profile(
        user_id="u-1",
        changes={
            "date_of_birth": date(1990, 5, 17),
            "height_cm": 172.5,
            "medical_conditions": ["asthma"],
            "sleep_patterns": {"hours": 7, "quality": "good"},
        },
        updated_at=NOW,
    )

    assert created.date_of_birth == date(1990, 5, 17)
    assert created.height_cm == 172.5
    assert created.weight_kg is None
    assert created.medical_conditions == ["asthma"]
    assert created.sleep_patterns == {"hours": 7, "quality": "good"}
    assert created.created_at == NOW

    later = NOW + timedelta(days=1)
    merged = repo.upsert_health_profile(
        user_id="u-1",
        changes={"weight_kg": 68.0, "stress_level": 4},
        updated_at=later,
    )

    assert merged.height_cm == 172.5
    assert merged.weight_kg == 68.0
    assert merged.stress_level == 4
    assert merged.created_at == NOW
    assert merged.updated_at == later
    assert repo.get_health_profile(user_id="u-1") == merged


def test_health_profile_refuses_unknown_columns(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")

    with pytest.raises(ValueError):
        repo.upsert_health_profile(user_id="u-1", changes={"user_id": "u-2"}, updated_at=NOW)


def test_health_profile_is_removed_with_its_user(sqlite_engine):
    repo = SqlAccountsRepository(sqlite_engine)
    _create(repo, user_id="u-1", email="alice@example.com")
    repo.upsert_health_profile(user_id="u-1", changes={"gender": "female"}, updated_at=NOW)

    with sqlite_engine.begin() as conn:
        conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": "u-1"})

    assert repo.get_health_profile(user_id="u-1") is None
