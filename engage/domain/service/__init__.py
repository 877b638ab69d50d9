"""Domain services."""

from .base import Service
from .cache_invalidator import CacheInvalidator, ResponseCache
from .comment_service import CommentService
from .jwt_service import JWTService
from .poll_service import PollService
from .poll_tally import PollOptionResult, PollResults, tally_poll
from .post_service import PostPage, PostService
from .user_service import UserService
from .vote_service import VoteOutcome, VoteService
from .vote_transition import decide

__all__ = [
    "CacheInvalidator",
    "CommentService",
    "JWTService",
    "PollOptionResult",
    "PollResults",
    "PollService",
    "PostPage",
    "PostService",
    "ResponseCache",
    "Service",
    "UserService",
    "VoteOutcome",
    "VoteService",
    "decide",
    "tally_poll",
]
