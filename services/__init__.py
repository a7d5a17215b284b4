"""Operations over the interview session and report stores."""
from .comments import CommentService, extract_mentions
from .reports import ReportPipeline
from .repositories import Repositories, open_repositories
from .sessions import SessionLifecycle
from .shares import ShareService
from .stats import interview_stats

__all__ = [
    "CommentService",
    "ReportPipeline",
    "Repositories",
    "SessionLifecycle",
    "ShareService",
    "extract_mentions",
    "interview_stats",
    "open_repositories",
]
