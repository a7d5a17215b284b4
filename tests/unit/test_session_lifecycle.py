"""Tests for interview session status transitions and completion."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interview_session.errors import InvalidTransitionError, PreconditionError
from interview_session.models import InterviewQuestion, SessionStatus, Speaker

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _in_progress(lifecycle, questions=()):
    session = lifecycle.create_session("c1", "j1", START, questions=questions)
    lifecycle.mark_ready(session.id)
    return lifecycle.start(session.id, started_at=START)


def test_create_session_defaults(lifecycle):
    session = lifecycle.create_session("c1", "j1", START, candidate_name="Ada")

    assert session.status == SessionStatus.SCHEDULED
    assert session.invitation_token
    assert session.transcript == []
    assert lifecycle.get_session(session.id).candidate_name == "Ada"
    assert lifecycle.get_by_invitation_token(session.invitation_token).id == session.id


@pytest.mark.parametrize("candidate_id,job_id", [("", "j1"), ("c1", "")])
def test_create_session_requires_ids(lifecycle, candidate_id, job_id):
    with pytest.raises(ValueError):
        lifecycle.create_session(candidate_id, job_id, START)


def test_happy_path_to_completed(lifecycle, seeded_scorer):
    session = _in_progress(lifecycle, questions=[InterviewQuestion(text="q1"), InterviewQuestion(text="q2")])
    assert session.started_at == START

    lifecycle.append_transcript(session.id, Speaker.AI, "Tell me about yourself", 4)
    lifecycle.append_transcript(session.id, Speaker.CANDIDATE, "I build data pipelines.", 20)
    lifecycle.advance_question(session.id)

    done = lifecycle.complete(session.id, completed_at=START + timedelta(minutes=30))

    assert done.status == SessionStatus.COMPLETED
    assert done.analysis is not None
    assert done.duration == 1800
    assert done.current_question_index == 2
    assert [entry.speaker for entry in done.transcript] == [Speaker.AI, Speaker.CANDIDATE]


def test_skipping_ready_is_rejected(lifecycle):
    session = lifecycle.create_session("c1", "j1", START)
    with pytest.raises(InvalidTransitionError) as excinfo:
        lifecycle.start(session.id)
    assert excinfo.value.current == "scheduled"
    assert excinfo.value.target == "in-progress"


def test_terminal_states_reject_further_moves(lifecycle):
    session = lifecycle.create_session("c1", "j1", START)
    lifecycle.mark_ready(session.id)
    lifecycle.cancel(session.id)

    for move in (lifecycle.mark_ready, lifecycle.start, lifecycle.mark_no_show, lifecycle.cancel):
        with pytest.raises(InvalidTransitionError):
            move(session.id)


def test_no_show_from_in_progress(lifecycle):
    session = _in_progress(lifecycle)
    assert lifecycle.mark_no_show(session.id).status == SessionStatus.NO_SHOW


def test_transcript_only_while_in_progress(lifecycle):
    session = lifecycle.create_session("c1", "j1", START)
    with pytest.raises(PreconditionError):
        lifecycle.append_transcript(session.id, Speaker.CANDIDATE, "too early")


def test_complete_requires_transcript(lifecycle):
    session = _in_progress(lifecycle)
    with pytest.raises(PreconditionError):
        lifecycle.complete(session.id)
    assert lifecycle.get_session(session.id).status == SessionStatus.IN_PROGRESS


def test_complete_rejects_end_before_start(lifecycle, seeded_scorer):
    session = _in_progress(lifecycle)
    lifecycle.append_transcript(session.id, Speaker.CANDIDATE, "answer")
    with pytest.raises(ValueError):
        lifecycle.complete(session.id, completed_at=START - timedelta(minutes=1))


def test_advance_question_is_bounded(lifecycle):
    session = _in_progress(lifecycle, questions=[InterviewQuestion(text="only")])
    assert lifecycle.advance_question(session.id).current_question_index == 1
    with pytest.raises(ValueError):
        lifecycle.advance_question(session.id)


def test_missing_session_raises_on_mutation(lifecycle):
    assert lifecycle.get_session("nope") is None
    with pytest.raises(PreconditionError):
        lifecycle.mark_ready("nope")


def test_rescore_replaces_analysis(completed_session, lifecycle, fixed_score):
    session = completed_session(92)
    fixed_score(50)
    rescored = lifecycle.rescore(session.id)
    assert rescored.analysis.overall_score == 50
    assert session.analysis.overall_score == 92


def test_rescore_requires_completed(lifecycle):
    session = lifecycle.create_session("c1", "j1", START)
    with pytest.raises(PreconditionError):
        lifecycle.rescore(session.id)


def test_delete_session(lifecycle):
    session = lifecycle.create_session("c1", "j1", START)
    assert lifecycle.delete_session(session.id) is True
    assert lifecycle.get_session(session.id) is None
    assert lifecycle.delete_session(session.id) is False
