class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a class instance or pre-check-in does not exist."""


class DuplicateCheckinError(DomainError):
    """Raised when a student already holds an active pre-check-in."""


class CapacityExceededError(DomainError):
    """Raised when a class instance has no seats left."""


class InvalidTransitionError(DomainError):
    """Raised when a list status change (or a mutation on a closed list) is not allowed."""


class IdentityCollisionError(AssertionError):
    """Two distinct class occurrences produced the same identity.

    Programming error, not a business condition: never catch it.
    """
