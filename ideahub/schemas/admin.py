"""Admin dashboard schemas."""

from ideahub.schemas.base import ApiModel


class StatisticsOut(ApiModel):
    pending_ideas: int
    approved_ideas: int
    total_votes: int
    active_users: int
