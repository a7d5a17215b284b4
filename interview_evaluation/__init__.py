from .models import (
    CategoryScores,
    InterviewAnalysis,
    KeyHighlight,
    Recommendation,
    Sentiment,
    Speaker,
    TranscriptEntry,
)
from .thresholds import DEFAULT_THRESHOLDS, ScoreThresholds, recommendation_for
from .scoring import (
    ReferenceScorer,
    ScoringStrategy,
    build_analysis,
    calculate_interview_score,
    overall_score,
    use_scorer,
)

__all__ = [
    "CategoryScores",
    "DEFAULT_THRESHOLDS",
    "InterviewAnalysis",
    "KeyHighlight",
    "Recommendation",
    "ReferenceScorer",
    "ScoreThresholds",
    "ScoringStrategy",
    "Sentiment",
    "Speaker",
    "TranscriptEntry",
    "build_analysis",
    "calculate_interview_score",
    "overall_score",
    "recommendation_for",
    "use_scorer",
]
