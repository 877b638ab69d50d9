"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .poll import InMemoryPollRepository
from .post import InMemoryPostRepository
from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryPollRepository",
    "InMemoryPostRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
    "InMemoryVoteRepository",
]
