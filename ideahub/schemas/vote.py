"""Vote Pydantic schemas."""

from ideahub.models.vote import VoteType
from ideahub.schemas.base import ApiModel


class VoteRequest(ApiModel):
    vote_type: VoteType


class MessageResponse(ApiModel):
    message: str
