from __future__ import annotations  # Session report package exports

from .generator import generate_next_steps, generate_recommendations, generate_report_from_session
from .models import CommentThread, InterviewReport, ReportComment, ReportShare, ReportStatus, ReportVersion
from .pdf import generate_report_pdf
from .store import CommentStore, ReportStore, ShareStore, VersionStore

__all__ = [
    "CommentStore",
    "CommentThread",
    "InterviewReport",
    "ReportComment",
    "ReportShare",
    "ReportStatus",
    "ReportStore",
    "ReportVersion",
    "ShareStore",
    "VersionStore",
    "generate_next_steps",
    "generate_recommendations",
    "generate_report_from_session",
    "generate_report_pdf",
]
