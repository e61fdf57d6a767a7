"""
Gemini-backed Idea Evaluation Service.

Scores a submitted idea on feasibility, market potential, innovation and
impact using Google's Gemini API.

Falls back to a neutral evaluation when no GEMINI_API_KEY is set or the
call fails, so idea submission never depends on the AI being reachable.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import httpx

from ideahub.config import settings

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

FALLBACK_FEEDBACK = "AI evaluation temporarily unavailable. Please try again later."


RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "feedback": {"type": "STRING"},
        "feasibility": {"type": "NUMBER"},
        "marketPotential": {"type": "NUMBER"},
        "innovation": {"type": "NUMBER"},
        "impact": {"type": "NUMBER"},
    },
    "required": ["score", "feedback", "feasibility", "marketPotential", "innovation", "impact"],
}


@dataclass
class IdeaEvaluation:
    score: float
    feedback: str
    feasibility: float
    market_potential: float
    innovation: float
    impact: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def fallback_evaluation() -> IdeaEvaluation:
    return IdeaEvaluation(
        score=5,
        feedback=FALLBACK_FEEDBACK,
        feasibility=5,
        market_potential=5,
        innovation=5,
        impact=5,
    )


def _clamp(value: Any) -> float:
    return max(0.0, min(10.0, float(value)))


def build_prompt(
    title: str,
    description: str,
    category: str,
    target_audience: Optional[str] = None,
    timeline: Optional[str] = None,
) -> str:
    return f"""Please evaluate the following business/technology idea and provide a comprehensive analysis:

Title: {title}
Description: {description}
Category: {category}
Target Audience: {target_audience or 'Not specified'}
Timeline: {timeline or 'Not specified'}

Please analyze this idea based on the following criteria:
1. Technical/Business Feasibility (0-10)
2. Market Potential (0-10)
3. Innovation Level (0-10)
4. Potential Impact (0-10)
5. Overall Score (0-10)

Provide constructive feedback including strengths, weaknesses, and suggestions for improvement.

Respond with JSON in this exact format:
{{"score": number, "feedback": "detailed feedback text", "feasibility": number, "marketPotential": number, "innovation": number, "impact": number}}"""


def parse_evaluation(raw: str) -> IdeaEvaluation:
    """Parse the model's JSON answer, clamping every score into 0-10."""
    data = json.loads(raw)
    return IdeaEvaluation(
        score=_clamp(data["score"]),
        feedback=str(data["feedback"]),
        feasibility=_clamp(data["feasibility"]),
        market_potential=_clamp(data["marketPotential"]),
        innovation=_clamp(data["innovation"]),
        impact=_clamp(data["impact"]),
    )


async def _call_gemini(prompt: str) -> str:
    url = GEMINI_URL.format(model=settings.GEMINI_MODEL)
    async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as client:
        resp = await client.post(
            url,
            params={"key": settings.GEMINI_API_KEY},
            headers={"Content-Type": "application/json"},
            json={
                "contents": [{
                    "parts": [{"text": prompt}]
                }],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": RESPONSE_SCHEMA,
                },
            },
        )
        resp.raise_for_status()
        data = resp.json()
        return data["candidates"][0]["content"]["parts"][0]["text"].strip()


async def evaluate_idea(
    title: str,
    description: str,
    category: str,
    target_audience: Optional[str] = None,
    timeline: Optional[str] = None,
) -> IdeaEvaluation:
    """
    Score an idea with Gemini.

    Returns the neutral fallback evaluation when GEMINI_API_KEY is unset or
    when the request, the response shape, or the JSON payload is unusable.
    """
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set, returning fallback evaluation")
        return fallback_evaluation()

    prompt = build_prompt(title, description, category, target_audience, timeline)
    try:
        raw = await _call_gemini(prompt)
        if not raw:
            raise ValueError("Empty response from AI model")
        return parse_evaluation(raw)
    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Gemini evaluation failed ({e}), returning fallback evaluation")
        return fallback_evaluation()


# ── Extended report for the evaluator page ──

DATA_SOURCES = [
    "Google Trends for market interest analysis",
    "Industry reports from IBISWorld or Statista",
    "Competitor analysis using SimilarWeb",
    "Social media sentiment analysis",
    "Government databases for regulatory information",
    "Patent databases for innovation landscape",
]

RECOMMENDED_CHARTS = [
    "Market Size Analysis (Bar Chart)",
    "Competitive Landscape (Bubble Chart)",
    "Customer Segmentation (Pie Chart)",
    "Revenue Projections (Line Chart)",
    "SWOT Analysis Matrix",
    "Timeline Gantt Chart",
]

NEXT_STEPS = [
    "Conduct primary market research with target audience",
    "Develop minimum viable product (MVP) prototype",
    "Analyze competitive landscape and positioning",
    "Create detailed financial projections",
    "Develop go-to-market strategy",
    "Secure initial funding or investment",
]

MARKET_RESEARCH = [
    "Customer pain points and needs analysis",
    "Pricing strategy and willingness to pay",
    "Distribution channels and partnerships",
    "Market entry barriers and regulations",
    "Competitive advantages and differentiation",
    "Scalability and growth potential",
]

TIMELINE_WINDOWS = {
    "immediate": "1-3 months",
    "short": "3-6 months",
    "medium": "6-12 months",
}

BUDGET_RANGES = {
    "technology": "$50k-200k",
    "healthcare": "$100k-500k",
    "business": "$25k-100k",
}


def build_evaluation_report(
    evaluation: IdeaEvaluation,
    title: str,
    category: str,
    target_audience: Optional[str] = None,
    timeline: Optional[str] = None,
) -> Dict[str, Any]:
    """Combine a scored evaluation with consultant-style planning guidance."""
    window = TIMELINE_WINDOWS.get(timeline or "", "12+ months")
    budget = BUDGET_RANGES.get(category, "$10k-75k")
    target_audience = target_audience or "Not specified"
    timeline = timeline or "Not specified"
    return {
        **evaluation.to_dict(),
        "persona": (
            f"As your AI business consultant, I see {title} as a {category} solution "
            f"with {timeline} timeline potential. Based on the target audience of "
            f"{target_audience}, this idea shows promise but requires strategic "
            f"positioning and market validation."
        ),
        "data_sources": list(DATA_SOURCES),
        "recommended_charts": list(RECOMMENDED_CHARTS),
        "next_steps": list(NEXT_STEPS),
        "market_research": list(MARKET_RESEARCH),
        "timeline": f"Based on {timeline} timeline: {window} for initial market entry",
        "budget_estimate": (
            f"Estimated initial investment: {budget} depending on scope and complexity"
        ),
    }
