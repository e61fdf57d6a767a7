"""Admin router — moderation queue, statistics, and user roles."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ideahub.models.idea import IdeaStatus
from ideahub.models.user import User
from ideahub.routers.auth import require_admin
from ideahub.schemas.admin import StatisticsOut
from ideahub.schemas.idea import IdeaAdminOut, IdeaOut, RejectRequest
from ideahub.schemas.user import RoleUpdate, UserAdminOut
from ideahub.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


async def _get_idea_or_404(idea_id: int, storage: Storage):
    idea = await storage.get_idea(idea_id)
    if not idea:
        raise HTTPException(status_code=404, detail="Idea not found")
    return idea


@router.get("/ideas", response_model=List[IdeaAdminOut])
async def list_all_ideas(storage: Storage = Depends(get_storage)):
    """Every idea regardless of status, with author contact details."""
    return await storage.list_ideas_for_admin()


@router.put("/ideas/{idea_id}/approve", response_model=IdeaOut)
async def approve_idea(idea_id: int, storage: Storage = Depends(get_storage)):
    idea = await _get_idea_or_404(idea_id, storage)
    idea = await storage.update_idea(idea, status=IdeaStatus.APPROVED)
    logger.info("Idea %s approved", idea_id)
    return idea


@router.put("/ideas/{idea_id}/reject", response_model=IdeaOut)
async def reject_idea(
    idea_id: int,
    body: RejectRequest = RejectRequest(),
    storage: Storage = Depends(get_storage),
):
    idea = await _get_idea_or_404(idea_id, storage)
    idea = await storage.update_idea(
        idea, status=IdeaStatus.REJECTED, rejection_reason=body.reason
    )
    logger.info("Idea %s rejected", idea_id)
    return idea


@router.get("/statistics", response_model=StatisticsOut)
async def statistics(storage: Storage = Depends(get_storage)):
    return await storage.get_statistics()


@router.get("/users", response_model=List[UserAdminOut])
async def list_users(storage: Storage = Depends(get_storage)):
    return await storage.list_users()


@router.put("/users/{user_id}/role", response_model=UserAdminOut)
async def update_user_role(
    user_id: int,
    body: RoleUpdate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot change your own role")

    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user = await storage.update_user_role(user, body.role)
    logger.info("User %s role set to %s by admin %s", user_id, body.role.value, current_user.id)
    return user
