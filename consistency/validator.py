"""Referential integrity checks and orphan detection.

Both entry points read every collection once, index it by id and then check
each record against those indexes. Findings are returned as data; nothing in
this module raises for bad records, and nothing is written back.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from interview_session.models import InterviewSession, SessionStatus
from observability.logger import log_event
from services.repositories import Repositories
from session_reports.models import InterviewReport, ReportComment, ReportShare, ReportStatus, ReportVersion
from storage.repository import ScanRow, as_utc

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class OrphanedRecords:
    orphaned_reports: List[InterviewReport] = field(default_factory=list)
    orphaned_comments: List[ReportComment] = field(default_factory=list)
    sessions_without_reports: List[InterviewSession] = field(default_factory=list)
    orphaned_versions: List[ReportVersion] = field(default_factory=list)
    orphaned_shares: List[ReportShare] = field(default_factory=list)

    def total(self) -> int:
        return (
            len(self.orphaned_reports)
            + len(self.orphaned_comments)
            + len(self.sessions_without_reports)
            + len(self.orphaned_versions)
            + len(self.orphaned_shares)
        )


def _split(rows: Iterable[ScanRow]) -> Tuple[Set[str], list, List[str]]:
    """Return (all stored ids, parsed entities, ids whose payload failed validation)."""

    ids: Set[str] = set()
    entities: list = []
    broken: List[str] = []
    for row in rows:
        ids.add(row.record_id)
        if row.entity is None:
            logger.warning("Unreadable payload for %s: %s", row.record_id, row.error)
            broken.append(row.record_id)
        else:
            entities.append(row.entity)
    return ids, entities, broken


def _label(record_id: str) -> str:
    return record_id or "unknown"


def _check_sessions(
    sessions: List[InterviewSession],
    report_ids: Set[str],
    reports_by_id: Dict[str, InterviewReport],
    errors: List[str],
    warnings: List[str],
) -> None:
    for session in sessions:
        if not session.id or not session.candidate_id or not session.job_id:
            errors.append(f"Session {_label(session.id)} missing required fields")
        if session.started_at and session.completed_at:
            if as_utc(session.completed_at) < as_utc(session.started_at):
                errors.append(f"Session {session.id}: completedAt before startedAt")
        if session.status == SessionStatus.COMPLETED and session.analysis is None:
            warnings.append(f"Completed session {session.id} missing analysis")
        if session.report_id:
            if session.report_id not in report_ids:
                errors.append(f"Session {session.id} references non-existent report {session.report_id}")
                continue
            linked = reports_by_id.get(session.report_id)
            if linked is not None and linked.session_id != session.id:
                errors.append(
                    f"Session {session.id} references report {session.report_id} owned by session {linked.session_id}"
                )


def _check_reports(
    reports: List[InterviewReport],
    sessions_by_id: Dict[str, InterviewSession],
    session_ids: Set[str],
    errors: List[str],
    warnings: List[str],
) -> None:
    for report in reports:
        if not report.id or not report.session_id or not report.candidate_id:
            errors.append(f"Report {_label(report.id)} missing required fields")
        if report.session_id not in session_ids:
            errors.append(f"Report {report.id} references non-existent session {report.session_id}")
        else:
            session = sessions_by_id.get(report.session_id)
            if session is not None:
                if session.candidate_id != report.candidate_id:
                    errors.append(f"Report {report.id} candidateId mismatch with session")
                if session.job_id != report.job_id:
                    errors.append(f"Report {report.id} jobId mismatch with session")
        if report.status == ReportStatus.FINALIZED and (not report.finalized_at or not report.finalized_by):
            warnings.append(f"Finalized report {report.id} missing finalization metadata")


def _check_comments(
    comments: List[ReportComment],
    comment_ids: Set[str],
    report_ids: Set[str],
    errors: List[str],
) -> None:
    comments_by_id = {comment.id: comment for comment in comments}
    for comment in comments:
        if not comment.id or not comment.report_id or not comment.user_id:
            errors.append(f"Comment {_label(comment.id)} missing required fields")
        if comment.report_id not in report_ids:
            errors.append(f"Comment {comment.id} references non-existent report {comment.report_id}")
        if comment.parent_id:
            if comment.parent_id not in comment_ids:
                errors.append(f"Comment {comment.id} references non-existent parent {comment.parent_id}")
                continue
            parent = comments_by_id.get(comment.parent_id)
            if parent is not None and parent.report_id != comment.report_id:
                errors.append(f"Comment {comment.id} parent {comment.parent_id} belongs to a different report")


def validate_data(repos: Repositories) -> ValidationResult:
    """Check every stored record; ``is_valid`` is true iff no errors were found."""

    session_ids, sessions, broken_sessions = _split(repos.sessions.scan())
    report_ids, reports, broken_reports = _split(repos.reports.scan())
    comment_ids, comments, broken_comments = _split(repos.comments.scan())
    _, shares, _ = _split(repos.shares.scan())

    errors: List[str] = []
    warnings: List[str] = []
    errors.extend(f"Session {_label(rid)} missing required fields" for rid in broken_sessions)
    errors.extend(f"Report {_label(rid)} missing required fields" for rid in broken_reports)
    errors.extend(f"Comment {_label(rid)} missing required fields" for rid in broken_comments)

    sessions_by_id = {session.id: session for session in sessions}
    reports_by_id = {report.id: report for report in reports}
    _check_sessions(sessions, report_ids, reports_by_id, errors, warnings)
    _check_reports(reports, sessions_by_id, session_ids, errors, warnings)
    _check_comments(comments, comment_ids, report_ids, errors)

    token_counts = Counter(share.share_token for share in shares)
    for token, count in token_counts.items():
        if count > 1:
            errors.append(f"Share token {token} is used by more than one share")

    result = ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
    log_event("validation_run", str(repos.path), errors=len(errors), warnings=len(warnings))
    return result


def find_orphaned_records(repos: Repositories) -> OrphanedRecords:
    """Records whose parent is gone, plus analysed completed sessions lacking a report."""

    session_ids, sessions, _ = _split(repos.sessions.scan())
    report_ids, reports, _ = _split(repos.reports.scan())
    _, comments, _ = _split(repos.comments.scan())
    _, versions, _ = _split(repos.versions.scan())
    _, shares, _ = _split(repos.shares.scan())

    reported_sessions = {report.session_id for report in reports}
    return OrphanedRecords(
        orphaned_reports=[r for r in reports if r.session_id not in session_ids],
        orphaned_comments=[c for c in comments if c.report_id not in report_ids],
        sessions_without_reports=[
            s
            for s in sessions
            if s.status == SessionStatus.COMPLETED and s.analysis is not None and s.id not in reported_sessions
        ],
        orphaned_versions=[v for v in versions if v.report_id not in report_ids],
        orphaned_shares=[s for s in shares if s.report_id not in report_ids],
    )


def validation_summary(result: ValidationResult) -> str:
    lines = ["AI Interview Data Validation", f"Status: {'✓ Valid' if result.is_valid else '✗ Invalid'}", ""]
    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        lines.extend(f"  • {error}" for error in result.errors)
        lines.append("")
    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"  • {warning}" for warning in result.warnings)
    if result.is_valid and not result.warnings:
        lines.append("All data validated successfully!")
    return "\n".join(lines)


__all__ = [
    "OrphanedRecords",
    "ValidationResult",
    "find_orphaned_records",
    "validate_data",
    "validation_summary",
]
