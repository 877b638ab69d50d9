"""Repository interfaces for the Engage domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from engage.domain.repository.comment import CommentRepository
from engage.domain.repository.poll import PollRepository
from engage.domain.repository.post import PostRepository
from engage.domain.repository.user import UserRepository
from engage.domain.repository.unit_of_work import UnitOfWork
from engage.domain.repository.vote import VoteRepository

__all__ = [
    "UserRepository",
    "PostRepository",
    "CommentRepository",
    "VoteRepository",
    "PollRepository",
    "UnitOfWork",
]
