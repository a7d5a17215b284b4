from __future__ import annotations  # Interview session persistence

from typing import List, Optional

from storage.repository import EntityStore

from .models import InterviewSession, SessionStatus


class SessionStore(EntityStore[InterviewSession]):  # Keyed collection of interview sessions
    table = "interview_sessions"
    model = InterviewSession
    columns = ("candidate_id", "job_id", "status", "invitation_token")

    def by_candidate(self, candidate_id: str) -> List[InterviewSession]:
        return self._find_by("candidate_id", candidate_id)

    def by_job(self, job_id: str) -> List[InterviewSession]:
        return self._find_by("job_id", job_id)

    def by_status(self, status: SessionStatus) -> List[InterviewSession]:
        return self._find_by("status", SessionStatus(status).value)

    def by_invitation_token(self, token: str) -> Optional[InterviewSession]:  # Candidate-facing lookup
        matches = self._find_by("invitation_token", token)
        return matches[0] if matches else None


__all__ = ["SessionStore"]
