class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist in the caller's tenant."""


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""
