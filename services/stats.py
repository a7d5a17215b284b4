"""Aggregate interview statistics."""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from interview_evaluation.scoring import round_half_up
from interview_session.models import SessionStatus
from session_reports.models import ReportStatus

from .repositories import Repositories


def _mean(values: List[int]) -> int:
    if not values:
        return 0
    return round_half_up(Decimal(sum(values)) / Decimal(len(values)))


def interview_stats(repos: Repositories) -> Dict[str, Any]:
    """Counts per status, completion rate (percent) and averages over completed sessions.

    ``avg_duration`` is in seconds. Averages are 0 when nothing qualifies.
    """

    # Unreadable rows are skipped; validate_data reports them
    sessions = [row.entity for row in repos.sessions.scan() if row.entity is not None]
    reports = [row.entity for row in repos.reports.scan() if row.entity is not None]
    by_status = {status.value: 0 for status in SessionStatus}
    for session in sessions:
        by_status[session.status.value] += 1
    completed = by_status[SessionStatus.COMPLETED.value]
    total = len(sessions)
    scores = [s.analysis.overall_score for s in sessions if s.analysis is not None]
    durations = [
        s.duration for s in sessions if s.status == SessionStatus.COMPLETED and s.duration is not None
    ]
    report_counts = {status.value: 0 for status in ReportStatus}
    for report in reports:
        report_counts[report.status.value] += 1
    return {
        "total": total,
        "completed": completed,
        "in_progress": by_status[SessionStatus.IN_PROGRESS.value],
        "scheduled": by_status[SessionStatus.SCHEDULED.value],
        "by_status": by_status,
        "completion_rate": round_half_up(Decimal(completed * 100) / Decimal(total)) if total else 0,
        "avg_score": _mean(scores),
        "avg_duration": _mean(durations),
        "reports": report_counts,
    }


__all__ = ["interview_stats"]
