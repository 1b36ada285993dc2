"""Dashboard numbers for the application pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from jobflow.models import Job, JobStatus

APPLIED_STATUSES = {JobStatus.APPLIED_AUTO, JobStatus.APPLIED_MANUAL}
# Stages a job only reaches after an application went out
SUBMITTED_STATUSES = APPLIED_STATUSES | {JobStatus.INTERVIEW, JobStatus.OFFER, JobStatus.REJECTED}


def _rate(part: int, whole: int) -> float:
    return round(part / whole, 2) if whole else 0.0


@dataclass
class PipelineStats:
    active: int
    applied: int
    interviews: int
    offers: int
    submitted: int = 0

    @property
    def application_rate(self) -> float:
        """Share of tracked jobs that were applied to."""
        return _rate(self.submitted, self.active)

    @property
    def conversion_rate(self) -> float:
        """Share of applications that reached an interview or an offer."""
        return _rate(self.interviews + self.offers, self.submitted)


def _tracked(jobs: Iterable[Job]) -> list[Job]:
    return [j for j in jobs if j.status != JobStatus.DETECTED]


def compute_stats(jobs: Iterable[Job]) -> PipelineStats:
    tracked = _tracked(jobs)
    return PipelineStats(
        active=len(tracked),
        applied=sum(1 for j in tracked if j.status in APPLIED_STATUSES),
        interviews=sum(1 for j in tracked if j.status == JobStatus.INTERVIEW),
        offers=sum(1 for j in tracked if j.status == JobStatus.OFFER),
        submitted=sum(1 for j in tracked if j.status in SUBMITTED_STATUSES),
    )


def funnel(jobs: Iterable[Job]) -> list[tuple[str, int]]:
    stats = compute_stats(jobs)
    return [
        ("Saved", stats.active),
        ("Applied", stats.applied),
        ("Interview", stats.interviews),
        ("Offer", stats.offers),
    ]


def _day(iso: str) -> date | None:
    """Local calendar date of an ISO timestamp (naive timestamps are already local)."""
    try:
        dt = datetime.fromisoformat(iso)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def weekly_activity(jobs: Iterable[Job], today: date | None = None) -> list[tuple[str, int]]:
    """(weekday, tracked jobs detected that day) for the seven days ending ``today``."""
    today = today or date.today()
    counts: dict[date, int] = {}
    for j in _tracked(jobs):
        d = _day(j.detected_at)
        if d is not None:
            counts[d] = counts.get(d, 0) + 1
    days = [today - timedelta(days=i) for i in range(6, -1, -1)]
    return [(d.strftime("%a"), counts.get(d, 0)) for d in days]
