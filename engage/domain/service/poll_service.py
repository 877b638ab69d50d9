"""Poll domain service."""

from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

import logfire

from engage.domain.error import (
    ConcurrentVoteError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from engage.domain.model.poll import Poll, PollOption, PollVote
from engage.domain.model.post import Post
from engage.domain.model.user import User
from engage.domain.repository import PollRepository
from engage.domain.value import (
    PollId,
    PollOptionId,
    PollVoteId,
    PostId,
    UserId,
)

from .base import Service
from .poll_tally import PollResults, tally_poll
from .post_service import PostService
from .user_service import UserService


class PollService(Service):
    """Domain service for polls and poll voting."""

    def __init__(
        self,
        poll_repository: PollRepository,
        post_service: PostService,
        user_service: UserService,
    ) -> None:
        """Initialize poll service.

        Args:
            poll_repository: Poll repository
            post_service: Post domain service
            user_service: User domain service
        """
        self.poll_repository = poll_repository
        self.post_service = post_service
        self.user_service = user_service

    async def require_poll(self, poll_id: PollId) -> Poll:
        """Get a poll by ID or fail.

        Raises:
            NotFoundError: If poll not found
        """
        poll = await self.poll_repository.find_by_id(poll_id)
        if not poll:
            logfire.warn("Poll not found", poll_id=str(poll_id))
            raise NotFoundError("Poll", str(poll_id))
        return poll

    async def create_poll(
        self,
        post_id: PostId,
        actor_id: UserId,
        question: str,
        options: Sequence[str],
        description: Optional[str] = None,
        allow_multiple_votes: bool = False,
        expires_at: Optional[datetime] = None,
    ) -> PollResults:
        """Attach a poll to a post.

        Only the post's author or an administrator may do this, and a post
        holds at most one active poll.

        Args:
            post_id: Post the poll belongs to
            actor_id: User creating the poll
            question: Poll question
            options: Option texts, in display order (at least two)
            description: Optional longer description
            allow_multiple_votes: Whether a voter may pick several options
            expires_at: When voting closes (None for never)

        Returns:
            The created poll with empty results

        Raises:
            ValidationError: If the question is blank or fewer than two options
            NotFoundError: If the post doesn't exist
            ForbiddenError: If the actor may not add polls to the post
            ConflictError: If the post already has an active poll
        """
        with logfire.span(
            "poll_service.create_poll", post_id=str(post_id), actor_id=str(actor_id)
        ):
            option_texts = [text.strip() for text in options]
            if not question.strip():
                raise ValidationError("Poll question is required")
            if len(option_texts) < 2 or not all(option_texts):
                raise ValidationError("A poll needs at least 2 non-empty options")

            actor = await self.user_service.require_participant(actor_id)
            post = await self.post_service.require_open_post(post_id)
            self._ensure_can_manage(actor, post)

            if await self.poll_repository.find_by_post(post_id, active_only=True):
                logfire.warn("Post already has an active poll", post_id=str(post_id))
                raise ConflictError("A poll already exists for this post")

            poll_id = PollId(uuid4())
            poll = Poll(
                id=poll_id,
                post_id=post.id,
                author_id=actor.id,
                question=question.strip(),
                description=description,
                allow_multiple_votes=allow_multiple_votes,
                expires_at=expires_at,
                options=[
                    PollOption(
                        id=PollOptionId(uuid4()),
                        poll_id=poll_id,
                        option_text=text,
                        position=position,
                    )
                    for position, text in enumerate(option_texts)
                ],
            )
            saved = await self.poll_repository.save(poll)
            logfire.info(
                "Poll created",
                poll_id=str(saved.id),
                post_id=str(post_id),
                option_count=len(saved.options),
            )
            return tally_poll(saved, [], actor.id)

    async def get_results(
        self, poll_id: PollId, viewer_id: Optional[UserId] = None
    ) -> PollResults:
        """Get a poll with its current results.

        Raises:
            NotFoundError: If poll not found
        """
        with logfire.span("poll_service.get_results", poll_id=str(poll_id)):
            poll = await self.require_poll(poll_id)
            votes = await self.poll_repository.find_votes(poll_id)
            return tally_poll(poll, votes, viewer_id)

    async def get_stats(self, poll_id: PollId, actor_id: UserId) -> PollResults:
        """Get a poll's tally for an administrator, without per-viewer flags.

        Raises:
            ForbiddenError: If the actor is not an administrator
            NotFoundError: If poll not found
        """
        with logfire.span("poll_service.get_stats", poll_id=str(poll_id)):
            await self.user_service.require_admin(actor_id)
            return await self.get_results(poll_id)

    async def list_for_post(
        self, post_id: PostId, viewer_id: Optional[UserId] = None
    ) -> list[PollResults]:
        """Get the active polls of a post with their results, newest first.

        Raises:
            NotFoundError: If post not found
        """
        with logfire.span("poll_service.list_for_post", post_id=str(post_id)):
            await self.post_service.require_post(post_id)
            polls = await self.poll_repository.find_by_post(post_id, active_only=True)
            results = []
            for poll in polls:
                votes = await self.poll_repository.find_votes(poll.id)
                results.append(tally_poll(poll, votes, viewer_id))
            return results

    async def cast_votes(
        self, poll_id: PollId, user_id: UserId, option_ids: Sequence[PollOptionId]
    ) -> PollResults:
        """Record a user's choice(s) on a poll.

        A single-choice poll takes exactly one vote per user, ever. On a
        multi-choice poll a user may add options over several requests but
        may not pick the same option twice. Either every requested option is
        recorded or none is.

        Args:
            poll_id: Poll ID
            user_id: Voting user ID
            option_ids: Chosen options

        Returns:
            Updated poll results, from the voter's point of view

        Raises:
            ValidationError: If no options are given, or one is repeated
            NotFoundError: If the user, the poll or an option doesn't exist
            ForbiddenError: If the user or the poll's post is barred
            ConflictError: If the poll is closed or the vote repeats one
        """
        with logfire.span(
            "poll_service.cast_votes",
            poll_id=str(poll_id),
            user_id=str(user_id),
            option_count=len(option_ids),
        ):
            if not option_ids:
                raise ValidationError("At least one option ID is required")
            if len(set(option_ids)) != len(option_ids):
                raise ValidationError("Option IDs must not repeat")

            user = await self.user_service.require_participant(user_id)
            poll = await self.require_poll(poll_id)

            if not poll.is_active:
                raise ConflictError("Poll is not active")
            if poll.is_expired(datetime.now()):
                logfire.warn("Vote on expired poll rejected", poll_id=str(poll_id))
                raise ConflictError("Poll has expired")

            await self.post_service.require_open_post(poll.post_id)

            unknown = [oid for oid in option_ids if oid not in poll.option_ids]
            if unknown:
                raise NotFoundError("Poll option", ", ".join(str(o) for o in unknown))

            if not poll.allow_multiple_votes and len(option_ids) > 1:
                raise ValidationError("This poll accepts a single option")

            previous = await self.poll_repository.find_user_votes(poll_id, user.id)
            if previous and not poll.allow_multiple_votes:
                raise ConflictError("You have already voted on this poll")
            already_chosen = {vote.poll_option_id for vote in previous}
            if already_chosen.intersection(option_ids):
                raise ConflictError("You have already voted for this option")

            now = datetime.now()
            votes = [
                PollVote(
                    id=PollVoteId(uuid4()),
                    poll_id=poll.id,
                    poll_option_id=option_id,
                    user_id=user.id,
                    created_at=now,
                )
                for option_id in option_ids
            ]
            try:
                await self.poll_repository.add_votes(poll, votes)
            except ConcurrentVoteError:
                logfire.warn(
                    "Concurrent poll vote rejected",
                    poll_id=str(poll_id),
                    user_id=str(user_id),
                )
                raise ConflictError("You have already voted on this poll")

            logfire.info(
                "Poll votes recorded",
                poll_id=str(poll_id),
                user_id=str(user_id),
                count=len(votes),
            )
            all_votes = await self.poll_repository.find_votes(poll_id)
            return tally_poll(poll, all_votes, user.id)

    async def update_poll(
        self,
        poll_id: PollId,
        actor_id: UserId,
        question: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        allow_multiple_votes: Optional[bool] = None,
        expires_at: Optional[datetime] = None,
    ) -> PollResults:
        """Change a poll's own fields. Fields left as None keep their value.

        Options cannot be changed, and the single/multi-choice mode is frozen
        once the poll has votes.

        Raises:
            ValidationError: If the new question is blank
            NotFoundError: If the poll doesn't exist
            ForbiddenError: If the actor may not manage the poll
            ConflictError: If the change would break an invariant
        """
        with logfire.span(
            "poll_service.update_poll", poll_id=str(poll_id), actor_id=str(actor_id)
        ):
            if question is not None and not question.strip():
                raise ValidationError("Poll question is required")

            actor = await self.user_service.require_participant(actor_id)
            poll = await self.require_poll(poll_id)
            post = await self.post_service.require_post(poll.post_id)
            self._ensure_can_manage(actor, post)

            votes = await self.poll_repository.find_votes(poll_id)
            if (
                allow_multiple_votes is not None
                and allow_multiple_votes != poll.allow_multiple_votes
                and votes
            ):
                raise ConflictError("Voting mode cannot change once votes exist")

            if is_active and not poll.is_active:
                active = await self.poll_repository.find_by_post(
                    poll.post_id, active_only=True
                )
                if active:
                    raise ConflictError("A poll already exists for this post")

            changes = {
                "question": question.strip() if question is not None else None,
                "description": description,
                "is_active": is_active,
                "allow_multiple_votes": allow_multiple_votes,
                "expires_at": expires_at,
            }
            update = {key: value for key, value in changes.items() if value is not None}
            update["updated_at"] = datetime.now()

            updated = await self.poll_repository.update(poll.model_copy(update=update))
            logfire.info("Poll updated", poll_id=str(poll_id), fields=sorted(update))
            return tally_poll(updated, votes, actor.id)

    async def delete_poll(self, poll_id: PollId, actor_id: UserId) -> None:
        """Delete a poll with its options and votes (admin only).

        Raises:
            ForbiddenError: If the actor is not an administrator
            NotFoundError: If the poll doesn't exist
        """
        with logfire.span("poll_service.delete_poll", poll_id=str(poll_id)):
            await self.user_service.require_admin(actor_id)
            if not await self.poll_repository.delete(poll_id):
                raise NotFoundError("Poll", str(poll_id))
            logfire.info("Poll deleted", poll_id=str(poll_id))

    @staticmethod
    def _ensure_can_manage(actor: User, post: Post) -> None:
        if not actor.is_admin and post.author_id != actor.id:
            raise ForbiddenError("Only post owners or admins can manage polls")
