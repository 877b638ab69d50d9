"""Transaction boundary interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Commits the writes a request has made so far.

    Services commit before they invalidate cached reads, so a reader that
    repopulates the cache after the invalidation sees the new state.
    Anything written after a commit is committed when the request ends.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make all pending writes durable and visible to other readers."""
        pass
