class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or incomplete."""


class InvalidRange(ValidationError):
    """Raised when a date range ends before it starts."""


class InvalidYearFormat(ValidationError):
    """Raised when an academic year token is not '<start>-<start+1>'."""


class NotFoundError(DomainError):
    """Raised when a class, student or other entity does not exist."""


class ClassNotFound(NotFoundError):
    pass


class ConflictError(DomainError):
    """Raised when a uniqueness constraint is violated."""


class ConcurrentUpdate(ConflictError):
    """Raised when another transaction won a race on the same rows; safe to retry."""


class AuthorizationError(DomainError):
    """Raised when a caller acts outside their school or class."""


class UnauthorizedMembership(AuthorizationError):
    """Raised when students do not belong to the class an operation targets."""


class PolicyError(DomainError):
    """Raised when a well-formed request is refused by a business policy."""


class FutureDate(PolicyError):
    pass


class WindowExceeded(PolicyError):
    pass


class AlreadyGraduated(PolicyError):
    pass
