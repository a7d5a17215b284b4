import os
import random
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import SCORER_KEY, unbind_model
from config.settings import settings
from interview_evaluation.models import CategoryScores, Speaker
from interview_evaluation.scoring import ReferenceScorer, build_analysis, use_scorer
from interview_session.models import InterviewQuestion
from services.repositories import open_repositories
from services.sessions import SessionLifecycle

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

ANSWERS = [
    "I led the migration of our billing service to an event-driven design and cut latency by forty percent.",
    "We used feature flags to roll out gradually.",
    "Pairing with QA early saved us a release cycle.",
    "A fourth answer that should never be quoted.",
]


class FixedScorer:  # Scores every transcript with the same category scores
    def __init__(self, score: int, confidence: int = 80) -> None:
        self.scores = CategoryScores(
            technical=score,
            communication=score,
            cultural_fit=score,
            experience=score,
            problem_solving=score,
        )
        self.confidence = confidence

    def score(self, transcript):
        return build_analysis(self.scores, transcript, confidence=self.confidence)


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    try:
        yield db_path
    finally:
        unbind_model(SCORER_KEY)
        td.cleanup()


@pytest.fixture
def repos(tmp_db):
    return open_repositories(tmp_db)


@pytest.fixture
def lifecycle(repos):
    return SessionLifecycle(repos)


@pytest.fixture
def seeded_scorer():
    scorer = ReferenceScorer(random.Random(7))
    use_scorer(scorer)
    return scorer


@pytest.fixture
def fixed_score():
    def bind(score: int, confidence: int = 80) -> FixedScorer:
        scorer = FixedScorer(score, confidence)
        use_scorer(scorer)
        return scorer

    return bind


@pytest.fixture
def completed_session(lifecycle, fixed_score):
    """Factory for a session walked through to ``completed`` with a fixed score."""

    def make(score: int = 92, *, candidate_id: str = "cand-1", job_id: str = "job-1"):
        fixed_score(score)
        session = lifecycle.create_session(
            candidate_id,
            job_id,
            START,
            candidate_name="Ada Lovelace",
            job_title="Backend Engineer",
            questions=[InterviewQuestion(text="Tell me about a project"), InterviewQuestion(text="How do you ship?")],
        )
        lifecycle.mark_ready(session.id)
        lifecycle.start(session.id, started_at=START)
        for offset, answer in enumerate(ANSWERS[:3]):
            lifecycle.append_transcript(session.id, Speaker.AI, f"Question {offset + 1}", 5)
            lifecycle.append_transcript(session.id, Speaker.CANDIDATE, answer, 30)
        return lifecycle.complete(session.id, completed_at=START + timedelta(minutes=25))

    return make
