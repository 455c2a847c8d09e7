from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidCredentialsError(DomainError):
    """Email or password did not match an active account."""


class ConflictError(DomainError):
    """A write collided with an existing record."""


class EmailAlreadyExistsError(ConflictError):
    """Another account already uses this email."""


class InvalidTokenError(DomainError):
    """Session token failed verification."""


class UnauthorizedError(DomainError):
    """Caller is not allowed to continue the auth flow."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class UserNotFoundError(NotFoundError):
    """No account with the requested id."""


class ExternalIdentityError(DomainError):
    """External identity provider rejected or failed the exchange."""


class InternalError(DomainError):
    """Store or signing failure not covered by another error."""


class HealthProfileNotFoundError(NotFoundError):
    """The account has no health profile yet."""
