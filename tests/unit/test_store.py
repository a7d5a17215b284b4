"""Tests for the SQLite entity stores."""
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from interview_session.models import InterviewSession, SessionStatus
from session_reports.generator import generate_report_from_session
from session_reports.models import ReportVersion
from storage.sqlite import get_conn


def _session(**overrides) -> InterviewSession:
    fields = {
        "candidate_id": "c1",
        "job_id": "j1",
        "scheduled_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return InterviewSession(**fields)


def test_save_get_and_list_in_insertion_order(repos):
    first = repos.sessions.save(_session(candidate_id="a"))
    second = repos.sessions.save(_session(candidate_id="b"))

    assert repos.sessions.get(first.id) == first
    assert [s.id for s in repos.sessions.list()] == [first.id, second.id]
    assert repos.sessions.count() == 2
    assert repos.sessions.get("missing") is None


def test_save_replaces_existing_record(repos):
    original = repos.sessions.save(_session())
    repos.sessions.save(original.model_copy(update={"candidate_name": "Grace"}))

    stored = repos.sessions.get(original.id)
    assert stored.candidate_name == "Grace"
    assert stored.updated_at >= original.updated_at
    assert repos.sessions.count() == 1


def test_save_rejects_empty_id(repos):
    with pytest.raises(ValueError):
        repos.sessions.save(_session(id=""))


def test_update_merges_and_refreshes_updated_at(repos):
    original = repos.sessions.save(_session())
    updated = repos.sessions.update(original.id, {"status": SessionStatus.READY})

    assert updated.status == SessionStatus.READY
    assert updated.candidate_id == "c1"
    assert updated.updated_at >= original.updated_at
    assert repos.sessions.update("missing", {"status": SessionStatus.READY}) is None
    with pytest.raises(ValueError):
        repos.sessions.update(original.id, {"id": "other"})


def test_delete_reports_whether_record_existed(repos):
    session = repos.sessions.save(_session())
    assert repos.sessions.delete(session.id) is True
    assert repos.sessions.delete(session.id) is False


def test_indexed_finders(repos):
    one = repos.sessions.save(_session(candidate_id="x", job_id="j1"))
    repos.sessions.save(_session(candidate_id="y", job_id="j2"))

    assert [s.id for s in repos.sessions.by_candidate("x")] == [one.id]
    assert len(repos.sessions.by_job("j2")) == 1
    assert len(repos.sessions.by_status(SessionStatus.SCHEDULED)) == 2
    assert repos.sessions.by_invitation_token(one.invitation_token).id == one.id


def test_finder_on_unindexed_column_is_rejected(repos):
    with pytest.raises(ValueError):
        repos.sessions._find_by("payload_json", "x")


def test_scan_reports_unreadable_rows(repos):
    good = repos.sessions.save(_session())
    with get_conn(repos.path) as conn:
        conn.execute(
            "INSERT INTO interview_sessions (id, payload_json) VALUES (?, ?)",
            ("broken", '{"id": "broken"}'),
        )

    rows = list(repos.sessions.scan())
    assert [row.record_id for row in rows] == [good.id, "broken"]
    assert rows[0].entity is not None and rows[0].error is None
    assert rows[1].entity is None and rows[1].error


def test_version_store_is_append_only(repos):
    repos.versions.append(ReportVersion(report_id="r1", version=1, user_id="u", user_name="U", changes="v1"))
    repos.versions.append(ReportVersion(report_id="r1", version=2, user_id="u", user_name="U", changes="v2"))

    with pytest.raises(ValueError):
        repos.versions.append(ReportVersion(report_id="r1", version=2, user_id="u", user_name="U", changes="dup"))
    with pytest.raises(TypeError):
        repos.versions.delete("anything")
    with pytest.raises(TypeError):
        repos.versions.update("anything", {"changes": "x"})

    assert [v.version for v in repos.versions.by_report("r1")] == [1, 2]
    assert repos.versions.latest_version("r1") == 2
    assert repos.versions.latest_version("r2") is None


def test_migrate_creates_tables(repos):
    with sqlite3.connect(repos.path) as conn:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {
        "interview_sessions",
        "interview_reports",
        "report_comments",
        "report_versions",
        "report_shares",
    } <= names


def test_report_round_trip_refreshes_only_updated_at(repos, completed_session):
    report = repos.reports.save(generate_report_from_session(completed_session(90)))
    repos.reports.save(report)
    stored = repos.reports.get(report.id)

    assert stored.model_dump(exclude={"updated_at"}) == report.model_dump(exclude={"updated_at"})
    assert stored.updated_at >= report.updated_at


def test_update_rejects_unknown_fields(repos):
    original = repos.sessions.save(_session())
    with pytest.raises(ValueError, match="candidat_name"):
        repos.sessions.update(original.id, {"candidat_name": "Grace"})
    assert repos.sessions.get(original.id) == original
