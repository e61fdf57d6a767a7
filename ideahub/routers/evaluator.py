"""AI evaluator router — on-demand scoring with a planning report."""

from fastapi import APIRouter, Depends

from ideahub.routers.auth import get_current_user
from ideahub.schemas.evaluation import EvaluationReportOut, EvaluationRequest
from ideahub.services.ai_evaluator import build_evaluation_report, evaluate_idea

router = APIRouter(
    prefix="/ai-evaluator",
    tags=["ai-evaluator"],
    dependencies=[Depends(get_current_user)],
)


@router.post("/evaluate", response_model=EvaluationReportOut)
async def evaluate(body: EvaluationRequest):
    category = body.category.value
    timeline = body.timeline.value if body.timeline else None

    evaluation = await evaluate_idea(
        body.title, body.description, category, body.target_audience, timeline
    )
    return build_evaluation_report(
        evaluation, body.title, category, body.target_audience, timeline
    )
