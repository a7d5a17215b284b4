"""Derive interview reports and their template text from analysed sessions."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from interview_evaluation.models import InterviewAnalysis, Recommendation
from interview_evaluation.thresholds import DEFAULT_THRESHOLDS, ScoreThresholds
from interview_session.errors import PreconditionError
from interview_session.models import InterviewSession
from storage.repository import new_id, utcnow

from .models import InterviewReport, ReportStatus

RECOMMENDATION_LEADS: Dict[Recommendation, str] = {
    Recommendation.STRONGLY_RECOMMEND: (
        "**Strong recommendation to proceed immediately.** This candidate demonstrates exceptional qualifications."
    ),
    Recommendation.RECOMMEND: "**Recommend moving forward** with next interview stages.",
    Recommendation.MAYBE: "**Consider for alternative positions** or additional screening.",
    Recommendation.NOT_RECOMMEND: "**Not recommended** for this position at this time.",
}

TOP_TIER_NOTE = "Candidate scored in the top tier across multiple categories."

ADVANCE_STEPS: List[str] = [
    "Schedule technical panel interview with senior team members",
    "Conduct system design assessment",
    "Arrange team fit conversation with potential colleagues",
    "Complete reference checks",
]

MAYBE_STEPS: List[str] = [
    "Consider alternative roles that match skill set",
    "Schedule follow-up discussion to address concerns",
    "Request additional work samples or portfolio",
]

DECLINE_STEPS: List[str] = [
    "Send professional rejection notice",
    "Keep in talent pipeline for future opportunities",
]

NEXT_STEPS: Dict[Recommendation, List[str]] = {
    Recommendation.STRONGLY_RECOMMEND: ADVANCE_STEPS,
    Recommendation.RECOMMEND: ADVANCE_STEPS,
    Recommendation.MAYBE: MAYBE_STEPS,
    Recommendation.NOT_RECOMMEND: DECLINE_STEPS,
}


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def generate_recommendations(
    analysis: InterviewAnalysis,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """Build the recommendations block.

    Parts are joined by a blank line: the tier lead, the top-tier note when
    the overall score reaches ``thresholds.top_tier_note``, the concerns block
    and the red-flags block (each only when non-empty).
    """

    parts = [RECOMMENDATION_LEADS[analysis.recommendation]]
    if analysis.overall_score >= thresholds.top_tier_note:
        parts.append(TOP_TIER_NOTE)
    if analysis.concerns:
        parts.append(f"\n**Areas to explore in next rounds:**\n{_bullets(analysis.concerns)}")
    if analysis.red_flags:
        parts.append(f"\n**⚠️ Red Flags to Address:**\n{_bullets(analysis.red_flags)}")
    return "\n\n".join(parts)


def generate_next_steps(analysis: InterviewAnalysis) -> str:
    """Numbered next steps keyed on the recommendation tier."""

    steps = NEXT_STEPS[analysis.recommendation]
    return "\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))


def generate_report_from_session(
    session: InterviewSession,
    *,
    now: Optional[datetime] = None,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> InterviewReport:
    """Build a draft report from an analysed session without persisting it.

    Raises:
        PreconditionError: If the session has no analysis yet.
    """

    analysis = session.analysis
    if analysis is None:
        raise PreconditionError(
            f"Session {session.id} has no analysis; complete the interview before generating a report"
        )
    stamp = now or utcnow()
    return InterviewReport(
        id=new_id(),
        session_id=session.id,
        candidate_id=session.candidate_id,
        job_id=session.job_id,
        candidate_name=session.candidate_name,
        job_title=session.job_title,
        status=ReportStatus.DRAFT,
        version=1,
        executive_summary=analysis.summary,
        analysis=analysis.model_copy(deep=True),
        recommendations=generate_recommendations(analysis, thresholds),
        next_steps=generate_next_steps(analysis),
        is_shared=False,
        shared_with=[],
        permissions=[],
        created_at=stamp,
        updated_at=stamp,
        created_by=session.created_by,
    )


__all__ = [
    "generate_next_steps",
    "generate_recommendations",
    "generate_report_from_session",
]
