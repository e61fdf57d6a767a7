"""
Vote resolution — one vote per (idea, user) with toggle/switch semantics.

Per (idea, user) the vote is in one of three states: none, upvoted,
downvoted. Repeating the current direction retracts the vote, the opposite
direction flips it in place, and with no vote a new one is created.
"""

import enum
import logging

from sqlalchemy.exc import IntegrityError

from ideahub.exceptions import InvalidStateError, NotFoundError
from ideahub.models.idea import IdeaStatus
from ideahub.models.vote import Vote, VoteType
from ideahub.storage import Storage

logger = logging.getLogger(__name__)


class VoteOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"

    @property
    def message(self) -> str:
        return f"Vote {self.value}"


class VoteResolver:
    """Applies a requested vote direction to the stored vote for (idea, user)."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def resolve(self, idea_id: int, user_id: int, requested: VoteType) -> VoteOutcome:
        """
        Create, flip or retract the user's vote on an approved idea and commit.

        Raises NotFoundError when the idea does not exist and InvalidStateError
        when it is not approved. Storage errors propagate unchanged.
        """
        idea = await self.storage.get_idea(idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")
        if idea.status != IdeaStatus.APPROVED:
            raise InvalidStateError("Can only vote on approved ideas")

        existing = await self.storage.get_vote(idea_id, user_id)

        if existing is None:
            outcome = await self._create(idea_id, user_id, requested)
        else:
            outcome = await self._toggle(existing, requested)

        logger.info(
            "Vote %s: idea=%s user=%s type=%s",
            outcome.value, idea_id, user_id, requested.value,
        )
        return outcome

    async def _toggle(self, existing: Vote, requested: VoteType) -> VoteOutcome:
        if existing.vote_type == requested:
            await self.storage.delete_vote(existing)
            await self.storage.commit()
            return VoteOutcome.REMOVED

        await self.storage.update_vote(existing, requested)
        await self.storage.commit()
        return VoteOutcome.UPDATED

    async def _create(self, idea_id: int, user_id: int, requested: VoteType) -> VoteOutcome:
        """
        Insert a new vote; if a concurrent request stored one first, apply
        the same toggle/switch rule to that row instead.
        """
        try:
            await self.storage.create_vote(idea_id, user_id, requested)
            await self.storage.commit()
            return VoteOutcome.CREATED
        except IntegrityError:
            await self.storage.rollback()
            existing = await self.storage.get_vote(idea_id, user_id)
            if existing is None:
                raise

        logger.info("Vote insert conflict: idea=%s user=%s, resolving against stored vote", idea_id, user_id)
        return await self._toggle(existing, requested)
