"""AI evaluator schemas."""

from typing import List, Optional

from pydantic import Field

from ideahub.models.idea import Category, Timeline
from ideahub.schemas.base import ApiModel


class EvaluationRequest(ApiModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: Category
    timeline: Optional[Timeline] = None
    target_audience: Optional[str] = None


class EvaluationOut(ApiModel):
    score: float
    feedback: str
    feasibility: float
    market_potential: float
    innovation: float
    impact: float


class EvaluationReportOut(EvaluationOut):
    persona: str
    data_sources: List[str]
    recommended_charts: List[str]
    next_steps: List[str]
    market_research: List[str]
    timeline: str
    budget_estimate: str
