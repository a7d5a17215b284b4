"""End-to-end: schedule an interview, score it, review the report and share it."""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from consistency.validator import find_orphaned_records, validate_data
from interview_evaluation.scoring import ReferenceScorer, use_scorer
from interview_session.models import InterviewQuestion, SessionStatus, Speaker
from services import CommentService, ReportPipeline, SessionLifecycle, ShareService, interview_stats
from session_reports.models import ReportStatus
from session_reports.pdf import generate_report_pdf


def test_full_interview_flow(repos):
    use_scorer(ReferenceScorer(random.Random(2024)))
    lifecycle = SessionLifecycle(repos)
    pipeline = ReportPipeline(repos)
    comments = CommentService(repos)
    shares = ShareService(repos)
    start = datetime(2024, 7, 2, 14, 0, tzinfo=timezone.utc)

    session = lifecycle.create_session(
        "cand-42",
        "job-7",
        start,
        candidate_name="Grace Hopper",
        job_title="Compiler Engineer",
        questions=[InterviewQuestion(text="Walk me through a hard bug", category="technical")],
    )
    assert lifecycle.get_by_invitation_token(session.invitation_token).id == session.id

    lifecycle.mark_ready(session.id)
    lifecycle.start(session.id, started_at=start)
    lifecycle.append_transcript(session.id, Speaker.AI, "Walk me through a hard bug", 6)
    lifecycle.append_transcript(session.id, Speaker.CANDIDATE, "A moth in relay 70, panel F.", 40)
    lifecycle.advance_question(session.id)
    done = lifecycle.complete(session.id, completed_at=start + timedelta(minutes=18))

    assert done.status == SessionStatus.COMPLETED
    assert done.analysis.key_highlights[0].quote == "A moth in relay 70, panel F."
    assert [s.id for s in find_orphaned_records(repos).sessions_without_reports] == [session.id]

    report = pipeline.create_report(session.id, created_by="recruiter-1")
    pipeline.record_version(report.id, "recruiter-1", "Rita")
    note = comments.add_comment(report.id, "hm-1", "Hank", "Let's loop in @rita")
    comments.reply(note.id, "recruiter-1", "Rita", "Scheduling the panel")
    pipeline.revise_report(report.id, {"next_steps": "1. Panel interview"}, "hm-1", "Hank")
    pipeline.submit_for_review(report.id)
    final = pipeline.finalize(report.id, "hm-1")
    share = shares.create_share(report.id, "hm-1", recipient="panel@example.com")

    assert final.status == ReportStatus.FINALIZED
    assert [v.version for v in pipeline.versions(report.id)] == [1, 2]
    assert shares.resolve(share.share_token).id == report.id
    assert generate_report_pdf(final, repos.comments.all_for_report(report.id)).startswith(b"%PDF")

    result = validate_data(repos)
    assert result.is_valid
    assert result.warnings == []
    assert find_orphaned_records(repos).total() == 0

    stats = interview_stats(repos)
    assert stats["completed"] == 1
    assert stats["completion_rate"] == 100
    assert stats["reports"]["finalized"] == 1
