"""Application layer DI providers."""

from dishka import Scope, provide

from engage.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentsUseCase,
)
from engage.application.usecase.poll import (
    CreatePollUseCase,
    DeletePollUseCase,
    GetPollStatsUseCase,
    GetPollUseCase,
    ListPostPollsUseCase,
    UpdatePollUseCase,
    VotePollUseCase,
)
from engage.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetPostUseCase,
    ListPostsUseCase,
    ToggleBlockPostUseCase,
    UpdatePostUseCase,
)
from engage.application.usecase.vote import CastVoteUseCase, RepairCountersUseCase
from engage.config import ListingSettings
from engage.domain.service import (
    CommentService,
    PollService,
    PostService,
    VoteService,
)
from engage.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_cast_vote_use_case(
        self,
        vote_service: VoteService,
        post_service: PostService,
        comment_service: CommentService,
    ) -> CastVoteUseCase:
        """Provide cast vote use case."""
        return CastVoteUseCase(
            vote_service=vote_service,
            post_service=post_service,
            comment_service=comment_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_repair_counters_use_case(
        self, vote_service: VoteService
    ) -> RepairCountersUseCase:
        """Provide repair counters use case."""
        return RepairCountersUseCase(vote_service=vote_service)

    # Poll use cases
    @provide(scope=Scope.REQUEST)
    def get_create_poll_use_case(self, poll_service: PollService) -> CreatePollUseCase:
        """Provide create poll use case."""
        return CreatePollUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_get_poll_use_case(self, poll_service: PollService) -> GetPollUseCase:
        """Provide get poll use case."""
        return GetPollUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_list_post_polls_use_case(
        self, poll_service: PollService
    ) -> ListPostPollsUseCase:
        """Provide list post polls use case."""
        return ListPostPollsUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_vote_poll_use_case(self, poll_service: PollService) -> VotePollUseCase:
        """Provide vote poll use case."""
        return VotePollUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_update_poll_use_case(self, poll_service: PollService) -> UpdatePollUseCase:
        """Provide update poll use case."""
        return UpdatePollUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_poll_stats_use_case(self, poll_service: PollService) -> GetPollStatsUseCase:
        """Provide poll statistics use case."""
        return GetPollStatsUseCase(poll_service=poll_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_poll_use_case(self, poll_service: PollService) -> DeletePollUseCase:
        """Provide delete poll use case."""
        return DeletePollUseCase(poll_service=poll_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(self, post_service: PostService) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_get_post_use_case(
        self, post_service: PostService, vote_service: VoteService
    ) -> GetPostUseCase:
        """Provide get post use case."""
        return GetPostUseCase(post_service=post_service, vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_list_posts_use_case(
        self,
        post_service: PostService,
        vote_service: VoteService,
        listing_settings: ListingSettings,
    ) -> ListPostsUseCase:
        """Provide list posts use case."""
        return ListPostsUseCase(
            post_service=post_service,
            vote_service=vote_service,
            listing_settings=listing_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_update_post_use_case(self, post_service: PostService) -> UpdatePostUseCase:
        """Provide update post use case."""
        return UpdatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_toggle_block_post_use_case(
        self, post_service: PostService
    ) -> ToggleBlockPostUseCase:
        """Provide toggle block post use case."""
        return ToggleBlockPostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(self, post_service: PostService) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(post_service=post_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comments_use_case(
        self, comment_service: CommentService, vote_service: VoteService
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            comment_service=comment_service, vote_service=vote_service
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)
