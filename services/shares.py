"""Token-based report sharing."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from config.settings import settings
from interview_session.errors import PreconditionError
from observability.logger import log_event
from session_reports.models import InterviewReport, ReportShare
from storage.repository import as_utc, utcnow

from .repositories import Repositories


class ShareService:
    def __init__(self, repos: Repositories) -> None:
        self._repos = repos

    def _new_token(self) -> str:  # Unique across all stored shares
        while True:
            token = secrets.token_urlsafe(settings.SHARE_TOKEN_BYTES)
            if self._repos.shares.by_token(token) is None:
                return token

    def create_share(
        self,
        report_id: str,
        created_by: str,
        *,
        recipient: Optional[str] = None,
        access_level: str = "view",
        expires_at: Optional[datetime] = None,
    ) -> ReportShare:
        report = self._repos.reports.get(report_id)
        if report is None:
            raise PreconditionError(f"Report {report_id} not found")
        now = utcnow()
        if expires_at is None and settings.SHARE_TTL_DAYS:
            expires_at = now + timedelta(days=settings.SHARE_TTL_DAYS)
        share = ReportShare(
            report_id=report_id,
            share_token=self._new_token(),
            created_by=created_by,
            recipient=recipient,
            access_level=access_level,
            created_at=now,
            expires_at=as_utc(expires_at) if expires_at else None,
        )
        self._repos.shares.save(share)
        shared_with = list(report.shared_with)
        if recipient and recipient not in shared_with:
            shared_with.append(recipient)
        self._repos.reports.update(report_id, {"is_shared": True, "shared_with": shared_with})
        log_event("report_shared", share.id, report_id=report_id, recipient=recipient)
        return share

    def get_share_by_token(self, token: str) -> Optional[ReportShare]:
        return self._repos.shares.by_token(token)

    def shares_for_report(self, report_id: str) -> List[ReportShare]:
        return self._repos.shares.by_report(report_id)

    def revoke(self, share_id: str) -> Optional[ReportShare]:
        share = self._repos.shares.get(share_id)
        if share is None:
            return None
        if share.revoked_at is not None:
            return share
        revoked = self._repos.shares.update(share_id, {"revoked_at": utcnow()})
        log_event("share_revoked", share_id, report_id=share.report_id)
        return revoked

    def resolve(self, token: str, now: Optional[datetime] = None) -> Optional[InterviewReport]:
        """Return the shared report for an active token, else ``None``."""

        share = self._repos.shares.by_token(token)
        if share is None or not share.is_active(as_utc(now) if now else utcnow()):
            return None
        return self._repos.reports.get(share.report_id)


__all__ = ["ShareService"]
