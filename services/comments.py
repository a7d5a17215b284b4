"""Threaded reviewer comments on interview reports."""
from __future__ import annotations

import re
from typing import Dict, List, Optional

from interview_session.errors import PreconditionError
from observability.logger import log_event
from session_reports.models import CommentThread, ReportComment
from storage.repository import utcnow

from .repositories import Repositories

MENTION_PATTERN = re.compile(r"(?<![\w@])@([A-Za-z0-9_.\-]+)")


def extract_mentions(content: str) -> List[str]:
    """Return ``@handle`` names in first-occurrence order without duplicates."""

    seen: Dict[str, None] = {}
    for match in MENTION_PATTERN.finditer(content or ""):
        seen.setdefault(match.group(1).rstrip(".-"), None)
    return [handle for handle in seen if handle]


class CommentService:
    def __init__(self, repos: Repositories) -> None:
        self._repos = repos

    def add_comment(
        self,
        report_id: str,
        user_id: str,
        user_name: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> ReportComment:
        if self._repos.reports.get(report_id) is None:
            raise PreconditionError(f"Report {report_id} not found")
        if parent_id is not None:
            parent = self._repos.comments.get(parent_id)
            if parent is None:
                raise PreconditionError(f"Parent comment {parent_id} not found")
            if parent.report_id != report_id:
                raise PreconditionError(f"Parent comment {parent_id} belongs to report {parent.report_id}")
        comment = ReportComment(
            report_id=report_id,
            user_id=user_id,
            user_name=user_name,
            content=content,
            mentions=extract_mentions(content),
            parent_id=parent_id,
        )
        self._repos.comments.save(comment)
        log_event("comment_added", comment.id, report_id=report_id, parent_id=parent_id)
        return comment

    def reply(self, parent_id: str, user_id: str, user_name: str, content: str) -> ReportComment:
        parent = self._repos.comments.get(parent_id)
        if parent is None:
            raise PreconditionError(f"Parent comment {parent_id} not found")
        return self.add_comment(parent.report_id, user_id, user_name, content, parent_id=parent_id)

    def edit_comment(self, comment_id: str, content: str) -> Optional[ReportComment]:
        updated = self._repos.comments.update(
            comment_id,
            {
                "content": content,
                "mentions": extract_mentions(content),
                "is_edited": True,
                "updated_at": utcnow(),
            },
        )
        if updated is not None:
            log_event("comment_edited", comment_id, report_id=updated.report_id)
        return updated

    def delete_comment(self, comment_id: str) -> int:
        """Delete a comment and every reply beneath it; returns the number removed."""

        pending = [comment_id]
        removed = 0
        while pending:
            current = pending.pop()
            pending.extend(reply.id for reply in self._repos.comments.replies_to(current))
            if self._repos.comments.delete(current):
                removed += 1
        if removed:
            log_event("comment_deleted", comment_id, removed=removed)
        return removed

    def get_comment(self, comment_id: str) -> Optional[ReportComment]:
        return self._repos.comments.get(comment_id)

    def get_comments_by_report(self, report_id: str) -> List[ReportComment]:  # Top-level only
        return self._repos.comments.by_report(report_id)

    def get_replies(self, comment_id: str) -> List[ReportComment]:
        return self._repos.comments.replies_to(comment_id)

    def thread(self, report_id: str) -> List[CommentThread]:
        comments = self._repos.comments.all_for_report(report_id)
        children: Dict[Optional[str], List[ReportComment]] = {}
        for comment in comments:
            children.setdefault(comment.parent_id, []).append(comment)

        def build(comment: ReportComment) -> CommentThread:
            return CommentThread(
                comment=comment,
                replies=[build(child) for child in children.get(comment.id, [])],
            )

        return [build(comment) for comment in children.get(None, [])]


__all__ = ["CommentService", "extract_mentions"]
