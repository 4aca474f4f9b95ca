class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when the current state of an entity forbids the operation."""


class DuplicateKeyViolation(Exception):
    """Raised by the storage layer when a write hits a unique constraint.

    Engine specific error codes are translated into this exception in
    ``database.mysql_base`` so services never inspect driver errors.
    """


class AuthenticationError(DomainError):
    """Raised when credentials or a token cannot be verified."""


class AuthorizationError(DomainError):
    """Raised when a verified caller is not allowed to perform the operation."""
