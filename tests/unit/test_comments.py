"""Tests for threaded report comments."""
from __future__ import annotations

import pytest

from interview_session.errors import PreconditionError
from services.comments import CommentService, extract_mentions
from services.reports import ReportPipeline


@pytest.fixture
def report(repos, completed_session):
    return ReportPipeline(repos).create_report(completed_session(80).id)


@pytest.fixture
def comments(repos):
    return CommentService(repos)


def test_extract_mentions_dedupes_in_order():
    text = "Thanks @bob and @alice. Looping in @bob again; mail carol@example.com"
    assert extract_mentions(text) == ["bob", "alice"]
    assert extract_mentions("") == []


def test_top_level_listing_excludes_replies(comments, report):
    root = comments.add_comment(report.id, "u1", "Uma", "Strong systems answer @lee")
    reply = comments.reply(root.id, "u2", "Lee", "Agreed")

    assert root.mentions == ["lee"]
    assert [c.id for c in comments.get_comments_by_report(report.id)] == [root.id]
    assert [c.id for c in comments.get_replies(root.id)] == [reply.id]
    assert reply.report_id == report.id


def test_comment_requires_existing_report_and_parent(comments, report):
    with pytest.raises(PreconditionError):
        comments.add_comment("missing", "u1", "Uma", "hi")
    with pytest.raises(PreconditionError):
        comments.add_comment(report.id, "u1", "Uma", "hi", parent_id="missing")


def test_parent_must_share_report(repos, comments, report, completed_session):
    other = ReportPipeline(repos).create_report(completed_session(80, candidate_id="cand-2").id)
    parent = comments.add_comment(other.id, "u1", "Uma", "elsewhere")
    with pytest.raises(PreconditionError):
        comments.add_comment(report.id, "u1", "Uma", "cross-report", parent_id=parent.id)


def test_edit_marks_comment_edited(comments, report):
    original = comments.add_comment(report.id, "u1", "Uma", "draft note")
    edited = comments.edit_comment(original.id, "final note for @kim")

    assert edited.is_edited is True
    assert edited.updated_at is not None
    assert edited.mentions == ["kim"]
    assert comments.edit_comment("missing", "x") is None


def test_delete_cascades_to_replies(comments, report):
    root = comments.add_comment(report.id, "u1", "Uma", "root")
    child = comments.reply(root.id, "u2", "Lee", "child")
    comments.reply(child.id, "u3", "Kim", "grandchild")
    keep = comments.add_comment(report.id, "u1", "Uma", "unrelated")

    assert comments.delete_comment(root.id) == 3
    assert [c.id for c in comments.get_comments_by_report(report.id)] == [keep.id]
    assert comments.delete_comment(root.id) == 0


def test_thread_nests_replies(comments, report):
    root = comments.add_comment(report.id, "u1", "Uma", "root")
    child = comments.reply(root.id, "u2", "Lee", "child")
    comments.reply(child.id, "u3", "Kim", "grandchild")

    threads = comments.thread(report.id)
    assert len(threads) == 1
    assert threads[0].comment.id == root.id
    assert threads[0].replies[0].comment.id == child.id
    assert threads[0].replies[0].replies[0].comment.content == "grandchild"
