from __future__ import annotations  # Interview report domain models

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview_evaluation.models import InterviewAnalysis
from storage.repository import new_id, utcnow


class ReportStatus(str, Enum):  # Review workflow state
    DRAFT = "draft"
    IN_REVIEW = "in-review"
    FINALIZED = "finalized"


class InterviewReport(BaseModel):  # Reviewable artifact derived from an analysed session
    id: str = Field(default_factory=new_id)
    session_id: str
    candidate_id: str
    job_id: str
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    status: ReportStatus = ReportStatus.DRAFT
    version: int = Field(default=1, ge=1)
    executive_summary: str
    analysis: InterviewAnalysis
    recommendations: str
    next_steps: str
    is_shared: bool = False
    shared_with: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)
    finalized_at: Optional[datetime] = None
    finalized_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    created_by: str = "system"


class ReportComment(BaseModel):  # Threaded reviewer remark
    id: str = Field(default_factory=new_id)
    report_id: str
    user_id: str
    user_name: str
    content: str
    mentions: List[str] = Field(default_factory=list)
    parent_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    is_edited: bool = False


class CommentThread(BaseModel):  # Comment with its nested replies
    comment: ReportComment
    replies: List["CommentThread"] = Field(default_factory=list)


class ReportVersion(BaseModel):  # Append-only report snapshot
    id: str = Field(default_factory=new_id)
    report_id: str
    version: int = Field(ge=1)
    timestamp: datetime = Field(default_factory=utcnow)
    user_id: str
    user_name: str
    changes: str
    snapshot: Dict[str, Any] = Field(default_factory=dict)


class ReportShare(BaseModel):  # Revocable token-based access grant
    id: str = Field(default_factory=new_id)
    report_id: str
    share_token: str
    created_by: str
    recipient: Optional[str] = None
    access_level: str = "view"
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None

    def is_active(self, now: datetime) -> bool:  # Not revoked and not expired at ``now``
        if self.revoked_at is not None:
            return False
        return self.expires_at is None or self.expires_at > now


CommentThread.model_rebuild()


__all__ = [
    "CommentThread",
    "InterviewReport",
    "ReportComment",
    "ReportShare",
    "ReportStatus",
    "ReportVersion",
]
