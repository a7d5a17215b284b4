"""Canonical score thresholds shared by scoring and report generation."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .models import Recommendation


class ScoreThresholds(BaseModel):
    """Single threshold table for recommendation tiers and score-driven text.

    ``red_flag_below`` equals ``maybe``: every ``not-recommend`` analysis
    carries a red flag and no ``maybe`` analysis does.
    """

    model_config = ConfigDict(frozen=True)

    strongly_recommend: int = 85
    recommend: int = 70
    maybe: int = 60
    red_flag_below: int = 60
    top_tier_note: int = 80


DEFAULT_THRESHOLDS = ScoreThresholds()


def recommendation_for(score: int, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> Recommendation:
    """Map an overall score onto its recommendation tier."""

    if score >= thresholds.strongly_recommend:
        return Recommendation.STRONGLY_RECOMMEND
    if score >= thresholds.recommend:
        return Recommendation.RECOMMEND
    if score >= thresholds.maybe:
        return Recommendation.MAYBE
    return Recommendation.NOT_RECOMMEND


__all__ = ["DEFAULT_THRESHOLDS", "ScoreThresholds", "recommendation_for"]
