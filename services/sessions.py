"""Interview session lifecycle: creation, status transitions, transcript capture and scoring."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from interview_evaluation.scoring import calculate_interview_score
from interview_session.errors import InvalidTransitionError, PreconditionError
from interview_session.models import (
    InterviewMode,
    InterviewQuestion,
    InterviewSession,
    SessionStatus,
    Speaker,
    TranscriptEntry,
)
from observability.logger import log_event
from storage.repository import as_utc, utcnow

from .repositories import Repositories

TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.SCHEDULED: frozenset({SessionStatus.READY}),
    SessionStatus.READY: frozenset(
        {SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED, SessionStatus.NO_SHOW}
    ),
    SessionStatus.IN_PROGRESS: frozenset(
        {SessionStatus.COMPLETED, SessionStatus.CANCELLED, SessionStatus.NO_SHOW}
    ),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
    SessionStatus.NO_SHOW: frozenset(),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in TRANSITIONS[current]


def _session_duration(session: InterviewSession, completed_at: datetime) -> int:
    # Wall-clock seconds when the start is known, otherwise the summed answer time
    if session.started_at is not None:
        return max(0, int((completed_at - session.started_at).total_seconds()))
    return sum(entry.duration for entry in session.transcript)


class SessionLifecycle:
    """Drive interview sessions through their closed status table.

    Mutations raise :class:`PreconditionError` when the session does not exist
    and :class:`InvalidTransitionError` when the status table forbids the move.
    Plain lookups return ``None``.
    """

    def __init__(self, repos: Repositories) -> None:
        self._repos = repos

    def create_session(
        self,
        candidate_id: str,
        job_id: str,
        scheduled_date: datetime,
        *,
        candidate_name: Optional[str] = None,
        job_title: Optional[str] = None,
        interview_mode: InterviewMode = InterviewMode.VIDEO,
        questions: Iterable[InterviewQuestion] = (),
        created_by: str = "system",
    ) -> InterviewSession:
        if not candidate_id or not job_id:
            raise ValueError("candidate_id and job_id are required")
        session = InterviewSession(
            candidate_id=candidate_id,
            job_id=job_id,
            scheduled_date=scheduled_date,
            candidate_name=candidate_name,
            job_title=job_title,
            interview_mode=interview_mode,
            questions=list(questions),
            created_by=created_by,
        )
        self._repos.sessions.save(session)
        log_event("session_created", session.id, status=session.status.value, candidate_id=candidate_id)
        return session

    def get_session(self, session_id: str) -> Optional[InterviewSession]:
        return self._repos.sessions.get(session_id)

    def get_by_invitation_token(self, token: str) -> Optional[InterviewSession]:
        return self._repos.sessions.by_invitation_token(token)

    def sessions_for_candidate(self, candidate_id: str) -> List[InterviewSession]:
        return self._repos.sessions.by_candidate(candidate_id)

    def mark_ready(self, session_id: str) -> InterviewSession:
        return self._transition(session_id, SessionStatus.READY)

    def start(self, session_id: str, started_at: Optional[datetime] = None) -> InterviewSession:
        stamp = as_utc(started_at) if started_at else utcnow()
        return self._transition(session_id, SessionStatus.IN_PROGRESS, started_at=stamp)

    def cancel(self, session_id: str) -> InterviewSession:
        return self._transition(session_id, SessionStatus.CANCELLED)

    def mark_no_show(self, session_id: str) -> InterviewSession:
        return self._transition(session_id, SessionStatus.NO_SHOW)

    def append_transcript(
        self,
        session_id: str,
        speaker: Speaker,
        content: str,
        duration: int = 0,
        *,
        timestamp: Optional[datetime] = None,
    ) -> TranscriptEntry:
        session = self._require(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise PreconditionError(
                f"Session {session_id} is '{session.status.value}'; transcript is only recorded in progress"
            )
        entry = TranscriptEntry(
            speaker=Speaker(speaker),
            content=content,
            duration=duration,
            timestamp=as_utc(timestamp) if timestamp else utcnow(),
        )
        self._repos.sessions.update(session_id, {"transcript": [*session.transcript, entry]})
        return entry

    def advance_question(self, session_id: str) -> InterviewSession:
        session = self._require(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise PreconditionError(f"Session {session_id} is not in progress")
        next_index = session.current_question_index + 1
        if next_index > len(session.questions):
            raise ValueError(f"Session {session_id} has no question after index {session.current_question_index}")
        return self._save_changes(session_id, {"current_question_index": next_index})

    def complete(self, session_id: str, completed_at: Optional[datetime] = None) -> InterviewSession:
        """Finish an in-progress session and attach its analysis in one write."""

        session = self._require(session_id)
        self._check(session, SessionStatus.COMPLETED)
        if not session.transcript:
            raise PreconditionError(f"Session {session_id} has no transcript to score")
        finished = as_utc(completed_at) if completed_at else utcnow()
        if session.started_at is not None and finished < session.started_at:
            raise ValueError(f"Session {session_id} cannot complete before it started")
        analysis = calculate_interview_score(session.transcript)
        updated = self._save_changes(
            session_id,
            {
                "status": SessionStatus.COMPLETED,
                "completed_at": finished,
                "duration": _session_duration(session, finished),
                "current_question_index": len(session.questions),
                "analysis": analysis,
            },
        )
        log_event(
            "session_transition",
            session_id,
            from_status=session.status.value,
            to_status=SessionStatus.COMPLETED.value,
            overall_score=analysis.overall_score,
        )
        return updated

    def rescore(self, session_id: str) -> InterviewSession:
        session = self._require(session_id)
        if session.status != SessionStatus.COMPLETED:
            raise PreconditionError(f"Session {session_id} must be completed before rescoring")
        analysis = calculate_interview_score(session.transcript)
        log_event("session_rescored", session_id, overall_score=analysis.overall_score)
        return self._save_changes(session_id, {"analysis": analysis})

    def delete_session(self, session_id: str) -> bool:
        # Administrative; dependent reports become orphans for the validator to report
        deleted = self._repos.sessions.delete(session_id)
        if deleted:
            log_event("session_deleted", session_id)
        return deleted

    def _require(self, session_id: str) -> InterviewSession:
        session = self._repos.sessions.get(session_id)
        if session is None:
            raise PreconditionError(f"Session {session_id} not found")
        return session

    def _check(self, session: InterviewSession, target: SessionStatus) -> None:
        if not can_transition(session.status, target):
            raise InvalidTransitionError("Session", session.id, session.status.value, target.value)

    def _save_changes(self, session_id: str, changes: Dict[str, Any]) -> InterviewSession:
        updated = self._repos.sessions.update(session_id, changes)
        if updated is None:
            raise PreconditionError(f"Session {session_id} not found")
        return updated

    def _transition(self, session_id: str, target: SessionStatus, **changes: Any) -> InterviewSession:
        session = self._require(session_id)
        self._check(session, target)
        updated = self._save_changes(session_id, {"status": target, **changes})
        log_event(
            "session_transition",
            session_id,
            from_status=session.status.value,
            to_status=target.value,
        )
        return updated


__all__ = ["SessionLifecycle", "TRANSITIONS", "can_transition"]
