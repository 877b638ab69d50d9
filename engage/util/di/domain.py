"""Domain layer DI providers."""

from dishka import Scope, provide

from engage.config import AuthSettings, CacheSettings, VotingSettings
from engage.domain.repository import (
    CommentRepository,
    PollRepository,
    PostRepository,
    UnitOfWork,
    UserRepository,
    VoteRepository,
)
from engage.domain.service import (
    CacheInvalidator,
    CommentService,
    JWTService,
    PollService,
    PostService,
    ResponseCache,
    UserService,
    VoteService,
)
from engage.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_cache_invalidator(
        self, cache: ResponseCache, cache_settings: CacheSettings
    ) -> CacheInvalidator:
        """Provide cache invalidator."""
        return CacheInvalidator(cache=cache, cache_settings=cache_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_post_service(
        self,
        post_repository: PostRepository,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository,
            user_service=user_service,
            unit_of_work=unit_of_work,
            cache_invalidator=cache_invalidator,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_service=post_service,
            user_service=user_service,
            unit_of_work=unit_of_work,
            cache_invalidator=cache_invalidator,
        )

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        post_service: PostService,
        comment_service: CommentService,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
        voting_settings: VotingSettings,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            post_service=post_service,
            comment_service=comment_service,
            user_service=user_service,
            unit_of_work=unit_of_work,
            cache_invalidator=cache_invalidator,
            voting_settings=voting_settings,
        )

    @provide
    def get_poll_service(
        self,
        poll_repository: PollRepository,
        post_service: PostService,
        user_service: UserService,
    ) -> PollService:
        """Provide poll domain service."""
        return PollService(
            poll_repository=poll_repository,
            post_service=post_service,
            user_service=user_service,
        )
