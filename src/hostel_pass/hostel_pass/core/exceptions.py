class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class NotFoundError(DomainError):
    """Raised when a leave request id does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AccessDeniedError(DomainError):
    """Raised when a student touches a request that is not theirs."""


class InvalidTransitionError(DomainError):
    """Raised when the role/state pair does not allow the requested action."""


class RescanRequired(DomainError):
    """Scan-boundary failures: the record is untouched and the credential may be presented again."""


class InvalidPayloadError(RescanRequired):
    """Raised when scanned text is not a well-formed pass payload."""


class PayloadMismatchError(RescanRequired):
    """Raised when a pass does not correspond to a stored, matching request."""


class ConflictError(RescanRequired):
    """Raised when another writer changed the request between read and write."""
