"""Domain layer errors.

Each subclass maps to one coarse category surfaced to API callers:
validation, not-found, forbidden, conflict and transient.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed input rejected before any storage access."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ForbiddenError(DomainError):
    """Raised when the actor or the target is barred from the action."""

    pass


class ConflictError(DomainError):
    """Raised when a state rule or a uniqueness invariant rejects a write."""

    pass


class ConcurrentVoteError(ConflictError):
    """A ledger write lost a race against another write for the same row.

    Raised after the unit of work has been rolled back. Callers must
    re-read the current state before trying again.
    """

    pass


class TransientError(DomainError):
    """A backing service is unreachable; the caller may retry later."""

    pass


class CacheUnavailableError(TransientError):
    """The response cache could not be reached."""

    pass
