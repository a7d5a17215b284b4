from .errors import InvalidTransitionError, PreconditionError
from .models import (
    InterviewMode,
    InterviewQuestion,
    InterviewSession,
    SessionStatus,
    Speaker,
    TranscriptEntry,
)
from .store import SessionStore

__all__ = [
    "InterviewMode",
    "InterviewQuestion",
    "InterviewSession",
    "InvalidTransitionError",
    "PreconditionError",
    "SessionStatus",
    "SessionStore",
    "Speaker",
    "TranscriptEntry",
]
