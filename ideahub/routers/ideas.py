"""Ideas router — public feed, submission, owner edits, and voting."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ideahub.models.idea import Category, IdeaStatus
from ideahub.models.user import User
from ideahub.routers.auth import get_current_user
from ideahub.schemas.idea import IdeaCreate, IdeaDetailOut, IdeaOut, IdeaSummaryOut, IdeaUpdate
from ideahub.schemas.vote import MessageResponse, VoteRequest
from ideahub.services.ai_evaluator import evaluate_idea
from ideahub.services.auth import is_owner_or_admin
from ideahub.services.voting import VoteResolver
from ideahub.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ideas"])


def get_vote_resolver(storage: Storage = Depends(get_storage)) -> VoteResolver:
    return VoteResolver(storage)


async def _get_mutable_idea(idea_id: int, user: User, storage: Storage, action: str):
    idea = await storage.get_idea(idea_id)
    if not idea:
        raise HTTPException(status_code=404, detail="Idea not found")
    if not is_owner_or_admin(idea, user):
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this idea")
    return idea


# ═══════════════════════════════════════════════════════════════
#  Public feed
# ═══════════════════════════════════════════════════════════════

@router.get("/ideas", response_model=List[IdeaSummaryOut])
async def list_ideas(
    category: Optional[Category] = None,
    storage: Storage = Depends(get_storage),
):
    """Approved ideas with their vote counts, newest first."""
    rows = await storage.list_approved_ideas_with_votes(category=category)
    return [
        IdeaSummaryOut.model_validate(idea).model_copy(
            update={"upvotes": counts.upvotes, "downvotes": counts.downvotes}
        )
        for idea, counts in rows
    ]


@router.get("/ideas/{idea_id}", response_model=IdeaDetailOut)
async def read_idea(idea_id: int, storage: Storage = Depends(get_storage)):
    idea = await storage.get_idea_with_author(idea_id)
    if not idea:
        raise HTTPException(status_code=404, detail="Idea not found")

    counts = await storage.get_vote_counts(idea_id)
    return IdeaDetailOut.model_validate(idea).model_copy(
        update={"upvotes": counts.upvotes, "downvotes": counts.downvotes}
    )


# ═══════════════════════════════════════════════════════════════
#  Submission & owner edits
# ═══════════════════════════════════════════════════════════════

@router.post("/ideas", response_model=IdeaOut)
async def create_idea(
    body: IdeaCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = body.model_dump(exclude={"request_ai_evaluation"})

    if body.request_ai_evaluation:
        evaluation = await evaluate_idea(
            body.title,
            body.description,
            body.category.value,
            body.target_audience,
            body.timeline.value if body.timeline else None,
        )
        fields["ai_score"] = round(evaluation.score)
        fields["ai_evaluation"] = evaluation.feedback

    idea = await storage.create_idea(author_id=current_user.id, **fields)
    logger.info("Idea %s submitted by user %s", idea.id, current_user.id)
    return idea


@router.put("/ideas/{idea_id}", response_model=IdeaOut)
async def update_idea(
    idea_id: int,
    body: IdeaUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    idea = await _get_mutable_idea(idea_id, current_user, storage, "edit")
    return await storage.update_idea(idea, **body.model_dump(exclude_unset=True))


@router.delete("/ideas/{idea_id}", response_model=MessageResponse)
async def delete_idea(
    idea_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    idea = await _get_mutable_idea(idea_id, current_user, storage, "delete")
    await storage.delete_idea(idea)
    logger.info("Idea %s deleted by user %s", idea_id, current_user.id)
    return {"message": "Idea deleted successfully"}


@router.get("/my-ideas", response_model=List[IdeaOut])
async def my_ideas(
    status: Optional[IdeaStatus] = None,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await storage.list_ideas(status=status, author_id=current_user.id)


# ═══════════════════════════════════════════════════════════════
#  POST /ideas/{idea_id}/vote → create, flip or retract a vote
# ═══════════════════════════════════════════════════════════════

@router.post("/ideas/{idea_id}/vote", response_model=MessageResponse)
async def vote_idea(
    idea_id: int,
    body: VoteRequest,
    current_user: User = Depends(get_current_user),
    resolver: VoteResolver = Depends(get_vote_resolver),
):
    outcome = await resolver.resolve(idea_id, current_user.id, body.vote_type)
    return {"message": outcome.message}
