"""Tests for aggregate interview statistics."""
from __future__ import annotations

from datetime import datetime, timezone

from services.reports import ReportPipeline
from services.stats import interview_stats
from storage.sqlite import get_conn


def test_stats_on_empty_store(repos):
    stats = interview_stats(repos)
    assert stats["total"] == 0
    assert stats["completion_rate"] == 0
    assert stats["avg_score"] == 0
    assert stats["avg_duration"] == 0


def test_stats_counts_and_averages(repos, lifecycle, completed_session):
    first = completed_session(90)
    completed_session(71)
    lifecycle.create_session("c9", "j9", datetime(2024, 6, 1, tzinfo=timezone.utc))
    ReportPipeline(repos).create_report(first.id)

    stats = interview_stats(repos)
    assert stats["total"] == 3
    assert stats["completed"] == 2
    assert stats["scheduled"] == 1
    assert stats["by_status"]["cancelled"] == 0
    assert stats["completion_rate"] == 67
    assert stats["avg_score"] == 81  # 80.5 rounds up
    assert stats["avg_duration"] == 1500
    assert stats["reports"] == {"draft": 1, "in-review": 0, "finalized": 0}


def test_stats_skip_unreadable_rows(repos, completed_session):
    completed_session(80)
    with get_conn(repos.path) as conn:
        conn.execute("INSERT INTO interview_sessions (id, payload_json) VALUES (?, ?)", ("bad-s", "{}"))

    stats = interview_stats(repos)
    assert stats["total"] == 1
    assert stats["completed"] == 1
