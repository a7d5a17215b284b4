"""SQLite schema migrations."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from .sqlite import get_conn

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  id TEXT PRIMARY KEY,
  candidate_id TEXT,
  job_id TEXT,
  status TEXT,
  invitation_token TEXT,
  payload_json TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_sessions_candidate ON interview_sessions(candidate_id);",
    "CREATE INDEX IF NOT EXISTS ix_sessions_job ON interview_sessions(job_id);",
    "CREATE INDEX IF NOT EXISTS ix_sessions_status ON interview_sessions(status);",
    "CREATE INDEX IF NOT EXISTS ix_sessions_token ON interview_sessions(invitation_token);",
    """
CREATE TABLE IF NOT EXISTS interview_reports (
  id TEXT PRIMARY KEY,
  session_id TEXT,
  candidate_id TEXT,
  job_id TEXT,
  status TEXT,
  payload_json TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_reports_session ON interview_reports(session_id);",
    "CREATE INDEX IF NOT EXISTS ix_reports_candidate ON interview_reports(candidate_id);",
    "CREATE INDEX IF NOT EXISTS ix_reports_status ON interview_reports(status);",
    """
CREATE TABLE IF NOT EXISTS report_comments (
  id TEXT PRIMARY KEY,
  report_id TEXT,
  parent_id TEXT,
  user_id TEXT,
  payload_json TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_comments_report ON report_comments(report_id);",
    "CREATE INDEX IF NOT EXISTS ix_comments_parent ON report_comments(parent_id);",
    """
CREATE TABLE IF NOT EXISTS report_versions (
  id TEXT PRIMARY KEY,
  report_id TEXT,
  version INTEGER,
  payload_json TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_versions_report ON report_versions(report_id, version);",
    """
CREATE TABLE IF NOT EXISTS report_shares (
  id TEXT PRIMARY KEY,
  report_id TEXT,
  share_token TEXT,
  payload_json TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_shares_report ON report_shares(report_id);",
    "CREATE INDEX IF NOT EXISTS ix_shares_token ON report_shares(share_token);",
]


def migrate(db_path: Optional[Union[str, Path]] = None) -> None:
    """Apply schema migrations to the SQLite database."""

    with get_conn(db_path) as conn:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)


if __name__ == "__main__":
    migrate()
