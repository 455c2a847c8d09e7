from __future__ import annotations

from passlib.context import CryptContext

from optifit.application.ports.password_hasher_port import PasswordHasherPort


class PasswordHasher(PasswordHasherPort):
    def __init__(self, *, bcrypt_rounds: int = 10):
        self._ctx = CryptContext(
            schemes=["bcrypt", "argon2"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds,
        )

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(plain_password, password_hash)
        except ValueError:
            return False
