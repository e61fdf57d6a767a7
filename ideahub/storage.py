"""
Storage client — every database read and write the API performs.

One ``Storage`` wraps one ``AsyncSession``. Mutating methods commit their own
unit of work, except the vote primitives, whose transaction is owned by the
``VoteResolver`` that drives them.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import Depends
from sqlalchemy import case, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ideahub.database import get_db
from ideahub.models.idea import Category, Idea, IdeaStatus
from ideahub.models.user import Role, User
from ideahub.models.vote import Vote, VoteType


@dataclass(frozen=True)
class VoteCounts:
    upvotes: int = 0
    downvotes: int = 0


_UPVOTES = func.count(case((Vote.vote_type == VoteType.UPVOTE, 1)))
_DOWNVOTES = func.count(case((Vote.vote_type == VoteType.DOWNVOTE, 1)))


class Storage:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    # ═══════════════════════════════════════════════════════════
    #  Users
    # ═══════════════════════════════════════════════════════════

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role = Role.USER,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def list_users(self) -> Sequence[User]:
        result = await self.session.execute(
            select(User).order_by(User.created_at, User.id)
        )
        return result.scalars().all()

    async def update_user_role(self, user: User, role: Role) -> User:
        user.role = role
        await self.session.commit()
        await self.session.refresh(user)
        return user

    # ═══════════════════════════════════════════════════════════
    #  Ideas
    # ═══════════════════════════════════════════════════════════

    async def get_idea(self, idea_id: int) -> Optional[Idea]:
        result = await self.session.execute(select(Idea).where(Idea.id == idea_id))
        return result.scalar_one_or_none()

    async def get_idea_with_author(self, idea_id: int) -> Optional[Idea]:
        result = await self.session.execute(
            select(Idea).options(selectinload(Idea.author)).where(Idea.id == idea_id)
        )
        return result.scalar_one_or_none()

    async def list_ideas(
        self,
        status: Optional[IdeaStatus] = None,
        category: Optional[Category] = None,
        author_id: Optional[int] = None,
    ) -> Sequence[Idea]:
        query = select(Idea)
        if status is not None:
            query = query.where(Idea.status == status)
        if category is not None:
            query = query.where(Idea.category == category)
        if author_id is not None:
            query = query.where(Idea.author_id == author_id)
        result = await self.session.execute(
            query.order_by(desc(Idea.created_at), desc(Idea.id))
        )
        return result.scalars().all()

    async def create_idea(self, author_id: int, **fields: Any) -> Idea:
        idea = Idea(author_id=author_id, status=IdeaStatus.PENDING, **fields)
        self.session.add(idea)
        await self.session.commit()
        await self.session.refresh(idea)
        return idea

    async def update_idea(self, idea: Idea, **updates: Any) -> Idea:
        for key, value in updates.items():
            setattr(idea, key, value)
        await self.session.commit()
        # updated_at is regenerated server-side on every UPDATE
        await self.session.refresh(idea)
        return idea

    async def delete_idea(self, idea: Idea) -> None:
        await self.session.execute(delete(Vote).where(Vote.idea_id == idea.id))
        await self.session.delete(idea)
        await self.session.commit()

    async def list_approved_ideas_with_votes(
        self, category: Optional[Category] = None
    ) -> List[Tuple[Idea, VoteCounts]]:
        """Approved ideas, newest first, each paired with its aggregated vote counts."""
        query = (
            select(Idea, _UPVOTES, _DOWNVOTES)
            .outerjoin(Vote, Vote.idea_id == Idea.id)
            .options(selectinload(Idea.author))
            .where(Idea.status == IdeaStatus.APPROVED)
            .group_by(Idea.id)
            .order_by(desc(Idea.created_at), desc(Idea.id))
        )
        if category is not None:
            query = query.where(Idea.category == category)
        result = await self.session.execute(query)
        return [
            (idea, VoteCounts(upvotes=up or 0, downvotes=down or 0))
            for idea, up, down in result.all()
        ]

    async def list_ideas_for_admin(self) -> Sequence[Idea]:
        result = await self.session.execute(
            select(Idea)
            .options(selectinload(Idea.author))
            .order_by(desc(Idea.created_at), desc(Idea.id))
        )
        return result.scalars().all()

    # ═══════════════════════════════════════════════════════════
    #  Votes
    # ═══════════════════════════════════════════════════════════

    async def get_vote(self, idea_id: int, user_id: int) -> Optional[Vote]:
        result = await self.session.execute(
            select(Vote).where(Vote.idea_id == idea_id, Vote.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_vote(self, idea_id: int, user_id: int, vote_type: VoteType) -> Vote:
        vote = Vote(idea_id=idea_id, user_id=user_id, vote_type=vote_type)
        self.session.add(vote)
        await self.session.flush()
        return vote

    async def update_vote(self, vote: Vote, vote_type: VoteType) -> Vote:
        vote.vote_type = vote_type
        await self.session.flush()
        return vote

    async def delete_vote(self, vote: Vote) -> None:
        await self.session.delete(vote)
        await self.session.flush()

    async def get_vote_counts(self, idea_id: int) -> VoteCounts:
        result = await self.session.execute(
            select(Vote.vote_type, func.count(Vote.id))
            .where(Vote.idea_id == idea_id)
            .group_by(Vote.vote_type)
        )
        counts = {vote_type: count for vote_type, count in result.all()}
        return VoteCounts(
            upvotes=counts.get(VoteType.UPVOTE, 0),
            downvotes=counts.get(VoteType.DOWNVOTE, 0),
        )

    # ═══════════════════════════════════════════════════════════
    #  Statistics
    # ═══════════════════════════════════════════════════════════

    async def get_statistics(self) -> Dict[str, int]:
        pending = await self.session.execute(
            select(func.count(Idea.id)).where(Idea.status == IdeaStatus.PENDING)
        )
        approved = await self.session.execute(
            select(func.count(Idea.id)).where(Idea.status == IdeaStatus.APPROVED)
        )
        votes = await self.session.execute(select(func.count(Vote.id)))
        users = await self.session.execute(select(func.count(func.distinct(User.id))))
        return {
            "pending_ideas": pending.scalar() or 0,
            "approved_ideas": approved.scalar() or 0,
            "total_votes": votes.scalar() or 0,
            "active_users": users.scalar() or 0,
        }


# ── Dependency for FastAPI routes ──
def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    """Build the request's storage client on top of its session."""
    return Storage(db)
