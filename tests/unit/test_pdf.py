"""Tests for PDF export of interview reports."""
from __future__ import annotations

from services.comments import CommentService
from services.reports import ReportPipeline
from session_reports.pdf import generate_report_pdf


def test_pdf_export_produces_document(repos, completed_session):
    report = ReportPipeline(repos).create_report(completed_session(55).id)
    comments = CommentService(repos)
    root = comments.add_comment(report.id, "u1", "Uma", "Needs a second round @lee")
    comments.reply(root.id, "u2", "Lee", "Agreed")

    payload = generate_report_pdf(report, repos.comments.all_for_report(report.id))

    assert isinstance(payload, bytes)
    assert payload.startswith(b"%PDF")
    assert len(payload) > 1000


def test_pdf_export_without_comments(repos, completed_session):
    report = ReportPipeline(repos).create_report(completed_session(92).id)
    assert generate_report_pdf(report).startswith(b"%PDF")
