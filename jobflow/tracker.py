"""Track detected jobs through the application pipeline (CSV with file locking)."""
from __future__ import annotations

import csv
import fcntl
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from jobflow.config import DATA_DIR
from jobflow.log import get_logger
from jobflow.models import Job, JobStatus

log = get_logger(__name__)

APPLICATIONS_CSV: Path = DATA_DIR / "applications.csv"
HEADERS: list[str] = [f.name for f in fields(Job)]
EXPORT_HEADERS: list[str] = ["Title", "Company", "Location", "Status", "Date Detected", "URL"]

ARCHIVED_STATUSES = {JobStatus.REJECTED, JobStatus.OFFER}
SORT_KEYS = {"detected_at", "title", "company", "location", "status", "match_score"}


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def ensure_tracker() -> None:
    APPLICATIONS_CSV.parent.mkdir(parents=True, exist_ok=True)
    if not APPLICATIONS_CSV.exists():
        with open(APPLICATIONS_CSV, "w", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.writer(f).writerow(HEADERS)
            _unlock(f)
        log.info("Created application tracker → %s", APPLICATIONS_CSV.name)


def get_jobs() -> list[Job]:
    ensure_tracker()
    with open(APPLICATIONS_CSV, "r", newline="", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        rows = list(csv.DictReader(f))
        _unlock(f)
    return [Job.from_row(r) for r in rows]


def _write_all(jobs: list[Job]) -> None:
    with open(APPLICATIONS_CSV, "w", newline="", encoding="utf-8") as f:
        _lock(f)
        w = csv.DictWriter(f, fieldnames=HEADERS)
        w.writeheader()
        w.writerows(j.to_row() for j in jobs)
        _unlock(f)


def import_jobs(jobs: Iterable[Job]) -> list[Job]:
    """Append jobs whose application URL is not tracked yet; returns the ones added."""
    ensure_tracker()
    known = {j.application_url for j in get_jobs() if j.application_url}
    added: list[Job] = []
    for job in jobs:
        if job.application_url and job.application_url in known:
            continue
        known.add(job.application_url)
        added.append(job)
    if added:
        with open(APPLICATIONS_CSV, "a", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.DictWriter(f, fieldnames=HEADERS).writerows(j.to_row() for j in added)
            _unlock(f)
    log.info("Imported %d new job(s) into the tracker", len(added))
    return added


def update_status(job_id: str, status: str | JobStatus) -> bool:
    """Move a tracked job to another pipeline stage (e.g. Saved -> Applied Manually)."""
    new_status = JobStatus.parse(status)
    jobs = get_jobs()
    for job in jobs:
        if job.id == job_id:
            job.status = new_status
            break
    else:
        return False
    _write_all(jobs)
    log.debug("Updated %s → %s", job_id, new_status.value)
    return True


def get_job(job_id: str) -> Job | None:
    return next((j for j in get_jobs() if j.id == job_id), None)


def save_job(job: Job) -> bool:
    """Replace the stored record with the same id (e.g. after tailoring)."""
    jobs = get_jobs()
    for i, existing in enumerate(jobs):
        if existing.id == job.id:
            jobs[i] = job
            break
    else:
        return False
    _write_all(jobs)
    return True


def delete_job(job_id: str) -> bool:
    jobs = get_jobs()
    remaining = [j for j in jobs if j.id != job_id]
    if len(remaining) == len(jobs):
        return False
    _write_all(remaining)
    log.debug("Deleted %s", job_id)
    return True


def active_and_archived(jobs: Iterable[Job]) -> tuple[list[Job], list[Job]]:
    """Split tracked jobs; freshly detected leads belong to neither list."""
    active: list[Job] = []
    archived: list[Job] = []
    for j in jobs:
        if j.status == JobStatus.DETECTED:
            continue
        (archived if j.status in ARCHIVED_STATUSES else active).append(j)
    return active, archived


def search_jobs(jobs: Iterable[Job], query: str) -> list[Job]:
    q = (query or "").lower().strip()
    if not q:
        return list(jobs)
    return [j for j in jobs if q in j.title.lower() or q in j.company.lower()]


def sort_jobs(jobs: Iterable[Job], key: str = "detected_at", descending: bool = True) -> list[Job]:
    if key not in SORT_KEYS:
        raise ValueError(f"Cannot sort by {key!r}")

    def value(j: Job):
        v = getattr(j, key)
        return v.value if isinstance(v, JobStatus) else v

    return sorted(jobs, key=value, reverse=descending)


def _detected_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).date().isoformat()
    except ValueError:
        return iso


def export_csv(jobs: Iterable[Job], path: Path | None = None) -> Path:
    """Write the spreadsheet-friendly export the dashboard offers for download."""
    if path is None:
        path = DATA_DIR / f"JobFlow_Export_{datetime.now(timezone.utc):%Y-%m-%d}.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(EXPORT_HEADERS)
        for j in jobs:
            w.writerow([j.title, j.company, j.location, j.status.value, _detected_date(j.detected_at), j.application_url])
            count += 1
    log.info("Exported %d job(s) → %s", count, path)
    return path
