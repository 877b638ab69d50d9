"""Cast vote use case."""

from typing import Union
from uuid import UUID

from pydantic import BaseModel

from engage.application.usecase.base import BaseUseCase
from engage.application.usecase.comment.get_comments import CommentView
from engage.application.usecase.post.get_post import PostView
from engage.domain.error import NotFoundError
from engage.domain.service import CommentService, PostService, VoteService
from engage.domain.value import (
    CommentId,
    PostId,
    UserId,
    VotableType,
    VoteDirection,
)


class CastVoteRequest(BaseModel):
    """Cast vote request."""

    votable_type: VotableType
    votable_id: UUID
    user_id: str  # User ID from authenticated user
    direction: VoteDirection


# The voted item as the voter now sees it
CastVoteResponse = Union[PostView, CommentView]


class CastVoteUseCase(BaseUseCase):
    """Use case for voting on a post or comment."""

    def __init__(
        self,
        vote_service: VoteService,
        post_service: PostService,
        comment_service: CommentService,
    ) -> None:
        """Initialize cast vote use case.

        Args:
            vote_service: Vote domain service
            post_service: Post domain service (reloads voted posts)
            comment_service: Comment domain service (reloads voted comments)
        """
        self.vote_service = vote_service
        self.post_service = post_service
        self.comment_service = comment_service

    async def execute(self, request: CastVoteRequest) -> CastVoteResponse:
        """Execute cast vote flow.

        Args:
            request: Cast vote request

        Returns:
            The updated post or comment, carrying the caller's vote (None
            after a toggle-off)
        """
        outcome = await self.vote_service.cast_vote(
            votable_type=request.votable_type,
            votable_id=request.votable_id,
            user_id=UserId(UUID(request.user_id)),
            vote_type=request.direction.vote_type,
        )

        if request.votable_type == VotableType.POST:
            post = await self.post_service.require_post(PostId(request.votable_id))
            return PostView.from_post(post, outcome.user_vote)

        comment_id = CommentId(request.votable_id)
        comment = await self.comment_service.get_comment_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment", str(comment_id))
        return CommentView.from_comment(comment, outcome.user_vote)
