from __future__ import annotations  # Report, comment, version and share persistence

from typing import Any, List, Mapping, NoReturn, Optional

from storage.repository import EntityStore
from storage.sqlite import get_conn

from .models import InterviewReport, ReportComment, ReportShare, ReportStatus, ReportVersion


class ReportStore(EntityStore[InterviewReport]):  # Keyed collection of interview reports
    table = "interview_reports"
    model = InterviewReport
    columns = ("session_id", "candidate_id", "job_id", "status")

    def by_session(self, session_id: str) -> Optional[InterviewReport]:  # Authoritative session -> report lookup
        matches = self._find_by("session_id", session_id)
        return matches[0] if matches else None

    def by_candidate(self, candidate_id: str) -> List[InterviewReport]:
        return self._find_by("candidate_id", candidate_id)

    def by_status(self, status: ReportStatus) -> List[InterviewReport]:
        return self._find_by("status", ReportStatus(status).value)


class CommentStore(EntityStore[ReportComment]):  # Flat comment list; parent_id forms reply trees
    table = "report_comments"
    model = ReportComment
    columns = ("report_id", "parent_id", "user_id")
    touch_field = None

    def by_report(self, report_id: str) -> List[ReportComment]:  # Top-level comments only
        return [comment for comment in self._find_by("report_id", report_id) if not comment.parent_id]

    def all_for_report(self, report_id: str) -> List[ReportComment]:  # Comments and replies
        return self._find_by("report_id", report_id)

    def replies_to(self, comment_id: str) -> List[ReportComment]:
        return self._find_by("parent_id", comment_id)


class VersionStore(EntityStore[ReportVersion]):  # Append-only report snapshots
    table = "report_versions"
    model = ReportVersion
    columns = ("report_id", "version")
    touch_field = None

    def append(self, version: ReportVersion) -> ReportVersion:  # Add a snapshot with a strictly higher number
        latest = self.latest_version(version.report_id)
        if latest is not None and version.version <= latest:
            raise ValueError(
                f"Version {version.version} for report {version.report_id} must exceed {latest}"
            )
        if self.get(version.id) is not None:
            raise ValueError(f"Version record {version.id} already exists")
        return super().save(version)

    def save(self, entity: ReportVersion) -> ReportVersion:
        return self.append(entity)

    def update(self, record_id: str, changes: Mapping[str, Any]) -> NoReturn:
        raise TypeError("Report versions are append-only")

    def delete(self, record_id: str) -> NoReturn:
        raise TypeError("Report versions are append-only")

    def by_report(self, report_id: str) -> List[ReportVersion]:
        return self._find_by("report_id", report_id, order_by="version")

    def latest_version(self, report_id: str) -> Optional[int]:
        with get_conn(self.path) as conn:
            row = conn.execute(
                "SELECT MAX(version) FROM report_versions WHERE report_id = ?",
                (report_id,),
            ).fetchone()
        return None if row[0] is None else int(row[0])


class ShareStore(EntityStore[ReportShare]):  # Token-addressed share grants
    table = "report_shares"
    model = ReportShare
    columns = ("report_id", "share_token")
    touch_field = None

    def by_token(self, token: str) -> Optional[ReportShare]:
        matches = self._find_by("share_token", token)
        return matches[0] if matches else None

    def by_report(self, report_id: str) -> List[ReportShare]:
        return self._find_by("report_id", report_id)


__all__ = ["CommentStore", "ReportStore", "ShareStore", "VersionStore"]
