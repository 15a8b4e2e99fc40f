"""
Error taxonomy for Ideas Central.

Every failure the core reports to its caller is one of these classes:

- ValidationError: malformed or out-of-range input (raised before any write)
- NotFoundError: a referenced Problem or Idea does not exist
- PersistenceError: the storage backend failed to read or write
- ConflictError: the write lost a race or breaks the idea lifecycle
- NotificationError: delivery failed (best-effort, never fatal)
- AuthenticationError / AuthorizationError: identity collaborator failures
"""


class IdeasCentralError(Exception):
    """Base class for all Ideas Central errors."""


class ValidationError(IdeasCentralError, ValueError):
    """Input is malformed or out of range."""


class NotFoundError(IdeasCentralError, LookupError):
    """A referenced record does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class PersistenceError(IdeasCentralError):
    """The storage backend failed."""


class ConflictError(IdeasCentralError):
    """
    The requested change conflicts with the current state of the record.

    Raised when an idea's version moved between read and write, or when a
    status transition is not allowed by the idea lifecycle.
    """


class NotificationError(IdeasCentralError):
    """A notification could not be delivered."""


class AuthenticationError(IdeasCentralError):
    """Credentials were rejected."""


class AuthorizationError(IdeasCentralError):
    """The identity lacks the role required for an action."""
