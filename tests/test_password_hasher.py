from __future__ import annotations

from optifit.infrastructure.security.password_hasher import PasswordHasher


def test_hash_verifies_original_password():
    hasher = PasswordHasher(bcrypt_rounds=4)
    password_hash = hasher.hash("correct horse")

    assert password_hash != "correct horse"
    assert password_hash.startswith("$2b$04$")
    assert hasher.verify("correct horse", password_hash)
    assert not hasher.verify("wrong horse", password_hash)


def test_same_password_gets_a_fresh_salt():
    hasher = PasswordHasher(bcrypt_rounds=4)

    assert hasher.hash("password123") != hasher.hash("password123")


def test_unknown_hash_format_does_not_verify():
    hasher = PasswordHasher(bcrypt_rounds=4)

    assert hasher.verify("password123", "not-a-hash") is False
    assert hasher.verify("password123", "") is False
