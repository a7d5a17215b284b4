"""Bundle of every entity store bound to one database."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from config.settings import settings
from interview_session.store import SessionStore
from session_reports.store import CommentStore, ReportStore, ShareStore, VersionStore
from storage.migrate import migrate


@dataclass(frozen=True)
class Repositories:
    sessions: SessionStore
    reports: ReportStore
    comments: CommentStore
    versions: VersionStore
    shares: ShareStore

    @property
    def path(self) -> Path:
        return self.sessions.path


def open_repositories(db_path: Optional[Union[str, Path]] = None) -> Repositories:
    """Migrate ``db_path`` (default ``settings.DB_PATH``) and build its stores."""

    path = Path(db_path or settings.DB_PATH)
    migrate(path)
    return Repositories(
        sessions=SessionStore(path),
        reports=ReportStore(path),
        comments=CommentStore(path),
        versions=VersionStore(path),
        shares=ShareStore(path),
    )


__all__ = ["Repositories", "open_repositories"]
