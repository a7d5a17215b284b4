"""Report pipeline: creation from sessions, review workflow and version history."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from interview_evaluation.thresholds import DEFAULT_THRESHOLDS, ScoreThresholds
from interview_session.errors import InvalidTransitionError, PreconditionError
from observability.logger import log_event
from observability.tracing import span
from session_reports.generator import generate_report_from_session
from session_reports.models import InterviewReport, ReportStatus, ReportVersion
from storage.repository import utcnow

from .repositories import Repositories

EDITABLE_FIELDS: FrozenSet[str] = frozenset({"executive_summary", "recommendations", "next_steps"})
OWNERSHIP_FIELDS: FrozenSet[str] = frozenset({"id", "session_id", "candidate_id", "job_id"})
INITIAL_VERSION_NOTE = "Initial report created"
REVISION_NOTE = "Updated executive summary and recommendations (v{version})"

REPORT_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.DRAFT: frozenset({ReportStatus.IN_REVIEW}),
    ReportStatus.IN_REVIEW: frozenset({ReportStatus.DRAFT, ReportStatus.FINALIZED}),
    ReportStatus.FINALIZED: frozenset(),
}


class ReportPipeline:
    """Turn analysed sessions into reports and move them through review.

    A session owns at most one report. ``report.session_id`` is the
    authoritative link; ``session.report_id`` is written back as a cache.
    """

    def __init__(self, repos: Repositories, thresholds: ScoreThresholds = DEFAULT_THRESHOLDS) -> None:
        self._repos = repos
        self._thresholds = thresholds

    def create_report(self, session_id: str, created_by: Optional[str] = None) -> InterviewReport:
        session = self._repos.sessions.get(session_id)
        if session is None:
            raise PreconditionError(f"Session {session_id} not found")
        existing = self._repos.reports.by_session(session_id)
        if existing is not None:
            raise PreconditionError(f"Session {session_id} already has report {existing.id}")
        with span("create_report", session_id):
            report = generate_report_from_session(session, thresholds=self._thresholds)
            if created_by:
                report = report.model_copy(update={"created_by": created_by})
            self._repos.reports.save(report)
            self._repos.sessions.update(session_id, {"report_id": report.id})
        log_event("report_created", report.id, session_id=session_id, status=report.status.value)
        return report

    def get_report(self, report_id: str) -> Optional[InterviewReport]:
        return self._repos.reports.get(report_id)

    def report_for_session(self, session_id: str) -> Optional[InterviewReport]:
        return self._repos.reports.by_session(session_id)

    def reports_for_candidate(self, candidate_id: str) -> List[InterviewReport]:
        return self._repos.reports.by_candidate(candidate_id)

    def submit_for_review(self, report_id: str) -> InterviewReport:
        return self._transition(report_id, ReportStatus.IN_REVIEW)

    def return_to_draft(self, report_id: str) -> InterviewReport:
        return self._transition(report_id, ReportStatus.DRAFT)

    def finalize(self, report_id: str, finalized_by: str) -> InterviewReport:
        if not finalized_by:
            raise ValueError("finalized_by is required")
        return self._transition(
            report_id,
            ReportStatus.FINALIZED,
            finalized_at=utcnow(),
            finalized_by=finalized_by,
        )

    def update_report(self, report_id: str, changes: Mapping[str, Any]) -> Optional[InterviewReport]:
        """Partial update that records no version.

        The owning session and candidate are fixed once the report exists,
        and a finalized report keeps its status.
        """

        fixed = set(changes) & OWNERSHIP_FIELDS
        if fixed:
            raise ValueError(f"Report ownership fields cannot change: {', '.join(sorted(fixed))}")
        report = self._repos.reports.get(report_id)
        if report is None:
            return None
        target = ReportStatus(changes["status"]) if "status" in changes else report.status
        if report.status == ReportStatus.FINALIZED and target != ReportStatus.FINALIZED:
            raise InvalidTransitionError("Report", report_id, report.status.value, target.value)
        return self._repos.reports.update(report_id, changes)

    def revise_report(
        self,
        report_id: str,
        changes: Mapping[str, Any],
        user_id: str,
        user_name: str,
        description: Optional[str] = None,
    ) -> InterviewReport:
        report = self._require(report_id)
        if report.status == ReportStatus.FINALIZED:
            raise PreconditionError(f"Report {report_id} is finalized and cannot be revised")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable on a report: {', '.join(sorted(unknown))}")
        version = self._next_version(report, bump=True)
        updated = self._repos.reports.update(report_id, {**changes, "version": version})
        if updated is None:
            raise PreconditionError(f"Report {report_id} not found")
        self._repos.versions.append(
            ReportVersion(
                report_id=report_id,
                version=version,
                user_id=user_id,
                user_name=user_name,
                changes=description or REVISION_NOTE.format(version=version),
                snapshot=updated.model_dump(mode="json"),
            )
        )
        log_event("report_revised", report_id, version=version)
        return updated

    def record_version(
        self,
        report_id: str,
        user_id: str,
        user_name: str,
        changes: Optional[str] = None,
    ) -> ReportVersion:
        """Snapshot the current report without editing it."""

        report = self._require(report_id)
        number = self._next_version(report)
        note = changes or (INITIAL_VERSION_NOTE if number == 1 else REVISION_NOTE.format(version=number))
        version = self._repos.versions.append(
            ReportVersion(
                report_id=report_id,
                version=number,
                user_id=user_id,
                user_name=user_name,
                changes=note,
                snapshot=report.model_dump(mode="json"),
            )
        )
        log_event("report_version_recorded", report_id, version=number)
        return version

    def versions(self, report_id: str) -> List[ReportVersion]:
        return self._repos.versions.by_report(report_id)

    def delete_report(self, report_id: str) -> bool:
        # Administrative; comments, versions and shares are left for orphan detection
        report = self._repos.reports.get(report_id)
        if report is None:
            return False
        self._repos.reports.delete(report_id)
        session = self._repos.sessions.get(report.session_id)
        if session is not None and session.report_id == report_id:
            self._repos.sessions.update(session.id, {"report_id": None})
        log_event("report_deleted", report_id, session_id=report.session_id)
        return True

    def _require(self, report_id: str) -> InterviewReport:
        report = self._repos.reports.get(report_id)
        if report is None:
            raise PreconditionError(f"Report {report_id} not found")
        return report

    def _next_version(self, report: InterviewReport, *, bump: bool = False) -> int:
        # Must exceed every stored snapshot; a revision also moves past the report's own number
        latest = self._repos.versions.latest_version(report.id)
        floor = report.version + 1 if bump else report.version
        return floor if latest is None else max(floor, latest + 1)

    def _transition(self, report_id: str, target: ReportStatus, **changes: Any) -> InterviewReport:
        report = self._require(report_id)
        if target not in REPORT_TRANSITIONS[report.status]:
            raise InvalidTransitionError("Report", report_id, report.status.value, target.value)
        updated = self._repos.reports.update(report_id, {"status": target, **changes})
        if updated is None:
            raise PreconditionError(f"Report {report_id} not found")
        log_event(
            "report_transition",
            report_id,
            from_status=report.status.value,
            to_status=target.value,
        )
        return updated


__all__ = ["EDITABLE_FIELDS", "OWNERSHIP_FIELDS", "REPORT_TRANSITIONS", "ReportPipeline"]
