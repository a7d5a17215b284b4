from __future__ import annotations  # Transcript input and scoring output models

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from storage.repository import new_id, utcnow


class Speaker(str, Enum):  # Utterance origin
    AI = "ai"
    CANDIDATE = "candidate"


class Recommendation(str, Enum):  # Hiring recommendation tier
    STRONGLY_RECOMMEND = "strongly-recommend"
    RECOMMEND = "recommend"
    MAYBE = "maybe"
    NOT_RECOMMEND = "not-recommend"


class Sentiment(str, Enum):  # Tone attached to a transcript highlight
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class TranscriptEntry(BaseModel):  # Single immutable utterance
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    timestamp: datetime = Field(default_factory=utcnow)
    speaker: Speaker
    content: str
    duration: int = Field(default=0, ge=0)


class CategoryScores(BaseModel):  # Independent per-category scores
    technical: int = Field(ge=0, le=100)
    communication: int = Field(ge=0, le=100)
    cultural_fit: int = Field(ge=0, le=100)
    experience: int = Field(ge=0, le=100)
    problem_solving: int = Field(ge=0, le=100)

    def values(self) -> List[int]:  # Scores in declaration order
        return [self.technical, self.communication, self.cultural_fit, self.experience, self.problem_solving]


class KeyHighlight(BaseModel):  # Quoted candidate moment
    quote: str
    context: str
    sentiment: Sentiment = Sentiment.POSITIVE


class InterviewAnalysis(BaseModel):  # Scored evaluation embedded in a session
    overall_score: int = Field(ge=0, le=100)
    category_scores: CategoryScores
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
    key_highlights: List[KeyHighlight] = Field(default_factory=list)
    recommendation: Recommendation
    confidence_score: int = Field(ge=0, le=100)
    summary: str


__all__ = [
    "CategoryScores",
    "InterviewAnalysis",
    "KeyHighlight",
    "Recommendation",
    "Sentiment",
    "Speaker",
    "TranscriptEntry",
]
