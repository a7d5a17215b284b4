from __future__ import annotations  # Interview session domain models

import secrets
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from interview_evaluation.models import InterviewAnalysis, Speaker, TranscriptEntry
from storage.repository import new_id, utcnow


class SessionStatus(str, Enum):  # Interview lifecycle state
    SCHEDULED = "scheduled"
    READY = "ready"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class InterviewMode(str, Enum):  # Channel the interview runs over
    VIDEO = "video"
    PHONE = "phone"
    TEXT = "text"


class InterviewQuestion(BaseModel):  # Caller-supplied interview question
    id: str = Field(default_factory=new_id)
    text: str
    category: str = "general"


class InterviewSession(BaseModel):  # One interview attempt with transcript and analysis
    id: str = Field(default_factory=new_id)
    candidate_id: str
    job_id: str
    status: SessionStatus = SessionStatus.SCHEDULED
    scheduled_date: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    analysis: Optional[InterviewAnalysis] = None
    report_id: Optional[str] = None
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    interview_mode: InterviewMode = InterviewMode.VIDEO
    questions: List[InterviewQuestion] = Field(default_factory=list)
    current_question_index: int = Field(default=0, ge=0)
    invitation_token: str = Field(default_factory=lambda: secrets.token_urlsafe(16))
    created_by: str = "system"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


__all__ = [
    "InterviewMode",
    "InterviewQuestion",
    "InterviewSession",
    "SessionStatus",
    "Speaker",
    "TranscriptEntry",
]
