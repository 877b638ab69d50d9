"""PostgreSQL repository implementations."""

from engage.persistence.repository.comment import PostgresCommentRepository
from engage.persistence.repository.poll import PostgresPollRepository
from engage.persistence.repository.post import PostgresPostRepository
from engage.persistence.repository.unit_of_work import SQLAlchemyUnitOfWork
from engage.persistence.repository.user import PostgresUserRepository
from engage.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresPostRepository",
    "PostgresCommentRepository",
    "PostgresVoteRepository",
    "PostgresPollRepository",
    "SQLAlchemyUnitOfWork",
]
