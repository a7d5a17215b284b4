"""Reference interview scoring and the pluggable scoring strategy."""
from __future__ import annotations

import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from config.registry import SCORER_KEY, bind_model, get_model, is_bound
from config.settings import settings

from .models import CategoryScores, InterviewAnalysis, KeyHighlight, Recommendation, Sentiment, Speaker, TranscriptEntry
from .thresholds import DEFAULT_THRESHOLDS, ScoreThresholds, recommendation_for

STRENGTHS: List[str] = [
    "Strong technical problem-solving abilities",
    "Excellent communication and articulation",
    "Proven track record of delivering results",
    "Good understanding of best practices",
    "Demonstrates continuous learning mindset",
    "Collaborative team player",
    "Adaptable to changing requirements",
]

MIDDLE_CONCERNS: List[str] = ["Could provide more specific examples in some areas"]

LOW_CONCERNS: List[str] = [
    "Limited depth in technical responses",
    "Could improve communication clarity",
    "Needs more experience in key areas",
]

RED_FLAG = "Concerns about overall qualification level"
HIGHLIGHT_CONTEXT = "Interview response"

CONFIDENCE_BASE: Dict[Recommendation, int] = {
    Recommendation.STRONGLY_RECOMMEND: 85,
    Recommendation.RECOMMEND: 75,
    Recommendation.MAYBE: 65,
    Recommendation.NOT_RECOMMEND: 50,
}
CONFIDENCE_SPREAD = 14

SUMMARY_OPENERS: Dict[Recommendation, str] = {
    Recommendation.STRONGLY_RECOMMEND: "Exceptional candidate who demonstrates strong qualifications across all key areas. ",
    Recommendation.RECOMMEND: "Solid candidate with good qualifications and relevant experience. ",
    Recommendation.MAYBE: "Candidate shows potential but has some areas that need development. ",
    Recommendation.NOT_RECOMMEND: "Candidate may not be the best fit for this position at this time. ",
}


class ScoringStrategy(Protocol):
    """Anything that turns a transcript into an analysis."""

    def score(self, transcript: Sequence[TranscriptEntry]) -> InterviewAnalysis: ...


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def overall_score(scores: CategoryScores) -> int:
    """Mean of the five category scores, rounded half up."""

    values = scores.values()
    return round_half_up(Decimal(sum(values)) / Decimal(len(values)))


def strengths_for(score: int, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> List[str]:
    if score >= thresholds.strongly_recommend:
        count = 5
    elif score >= thresholds.recommend:
        count = 4
    else:
        count = 3
    return STRENGTHS[:count]


def concerns_for(score: int, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> List[str]:
    if score >= thresholds.strongly_recommend:
        return []
    if score >= thresholds.recommend:
        return list(MIDDLE_CONCERNS)
    return list(LOW_CONCERNS)


def red_flags_for(score: int, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> List[str]:
    return [RED_FLAG] if score < thresholds.red_flag_below else []


def extract_key_highlights(
    transcript: Sequence[TranscriptEntry],
    *,
    limit: Optional[int] = None,
    quote_chars: Optional[int] = None,
) -> List[KeyHighlight]:
    """Quote the first candidate answers in transcript order.

    Sentiment is always positive; the reference scorer does not classify tone.
    """

    limit = settings.HIGHLIGHT_LIMIT if limit is None else limit
    quote_chars = settings.HIGHLIGHT_QUOTE_CHARS if quote_chars is None else quote_chars
    answers = [entry for entry in transcript if entry.speaker == Speaker.CANDIDATE][:limit]
    highlights: List[KeyHighlight] = []
    for entry in answers:
        quote = entry.content[:quote_chars]
        if len(entry.content) > quote_chars:
            quote += "..."
        highlights.append(KeyHighlight(quote=quote, context=HIGHLIGHT_CONTEXT, sentiment=Sentiment.POSITIVE))
    return highlights


def summarize(
    score: int,
    strengths: Sequence[str],
    concerns: Sequence[str],
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> str:
    summary = SUMMARY_OPENERS[recommendation_for(score, thresholds)]
    lead = strengths[0].lower() if strengths else "various capabilities"
    summary += f"Key strengths include {lead}."
    if concerns:
        summary += f" Areas for potential growth: {concerns[0].lower()}."
    return summary


def confidence_for(recommendation: Recommendation, rng: random.Random) -> int:
    """Tier-correlated pseudo-random confidence in [base, base + spread]."""

    base = CONFIDENCE_BASE[recommendation]
    return min(100, base + rng.randint(0, CONFIDENCE_SPREAD))


def build_analysis(
    category_scores: CategoryScores,
    transcript: Sequence[TranscriptEntry],
    *,
    confidence: Optional[int] = None,
    rng: Optional[random.Random] = None,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> InterviewAnalysis:
    """Derive a full analysis from fixed category scores.

    Everything except ``confidence`` is a pure function of the inputs.
    """

    score = overall_score(category_scores)
    recommendation = recommendation_for(score, thresholds)
    strengths = strengths_for(score, thresholds)
    concerns = concerns_for(score, thresholds)
    if confidence is None:
        confidence = confidence_for(recommendation, rng or random.Random())
    return InterviewAnalysis(
        overall_score=score,
        category_scores=category_scores,
        strengths=strengths,
        concerns=concerns,
        red_flags=red_flags_for(score, thresholds),
        key_highlights=extract_key_highlights(transcript),
        recommendation=recommendation,
        confidence_score=confidence,
        summary=summarize(score, strengths, concerns, thresholds),
    )


class ReferenceScorer:  # Deterministic stand-in for a model-backed scorer
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        floor: Optional[int] = None,
        ceiling: Optional[int] = None,
        thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
    ) -> None:
        self._floor = settings.SCORE_FLOOR if floor is None else floor
        self._ceiling = settings.SCORE_CEILING if ceiling is None else ceiling
        if self._floor > self._ceiling:
            raise ValueError(f"Score floor {self._floor} exceeds ceiling {self._ceiling}")
        self._rng = rng or random.Random(settings.SCORING_SEED)
        self._thresholds = thresholds

    def _draw(self) -> int:
        return self._rng.randint(self._floor, self._ceiling)

    def score_categories(self) -> CategoryScores:  # Five independent draws
        return CategoryScores(
            technical=self._draw(),
            communication=self._draw(),
            cultural_fit=self._draw(),
            experience=self._draw(),
            problem_solving=self._draw(),
        )

    def score(self, transcript: Sequence[TranscriptEntry]) -> InterviewAnalysis:
        return build_analysis(
            self.score_categories(),
            transcript,
            rng=self._rng,
            thresholds=self._thresholds,
        )


def use_scorer(strategy: ScoringStrategy) -> None:
    """Register ``strategy`` as the scorer used by ``calculate_interview_score``."""

    bind_model(SCORER_KEY, lambda transcript: strategy.score(transcript))


def calculate_interview_score(transcript: Sequence[TranscriptEntry]) -> InterviewAnalysis:
    """Score a transcript with the registered strategy.

    When nothing is registered, one ``ReferenceScorer`` is bound on first use
    and shared by later calls, so a fixed ``SCORING_SEED`` yields one
    reproducible sequence rather than the same scores for every session.
    """

    entries = list(transcript)
    if not is_bound(SCORER_KEY):
        use_scorer(ReferenceScorer())
    scorer: Callable[..., object] = get_model(SCORER_KEY)
    result = scorer(entries)
    if isinstance(result, InterviewAnalysis):
        return result
    return InterviewAnalysis.model_validate(result)


__all__ = [
    "ReferenceScorer",
    "ScoringStrategy",
    "build_analysis",
    "calculate_interview_score",
    "concerns_for",
    "confidence_for",
    "extract_key_highlights",
    "overall_score",
    "red_flags_for",
    "round_half_up",
    "strengths_for",
    "summarize",
    "use_scorer",
]
