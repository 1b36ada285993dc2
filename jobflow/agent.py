"""
Inbox scan pipeline.

Runs: load profile → read inbox export → extract leads → import into tracker → scan report.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from jobflow.config import INBOX_DIR, ensure_dirs, get_env, load_profile, target_roles
from jobflow.cover_letter import generate_cover_letter
from jobflow.interview import generate_interview_questions
from jobflow.job_page import fetch_job_details
from jobflow.log import get_logger
from jobflow.models import Job, JobStatus
from jobflow.report import build_scan_report, write_scan_report
from jobflow.resume_tailor import customize_resume
from jobflow.resume_text import load_master_resume
from jobflow.scanner import SCAN_MODES, clean_application_url, load_messages, scan_messages
from jobflow.tracker import ensure_tracker, get_job, get_jobs, import_jobs, save_job

log = get_logger(__name__)


def run(
    *,
    inbox_dir: Path | None = None,
    mode: str | None = None,
    write_report: bool = True,
) -> dict[str, Any]:
    ensure_dirs()
    ensure_tracker()
    profile = load_profile()
    keywords = target_roles(profile)
    mode = mode or get_env("SCAN_MODE", "fast").lower() or "fast"
    if mode not in SCAN_MODES:
        log.warning("Unknown SCAN_MODE %r, falling back to fast", mode)
        mode = "fast"

    if keywords:
        log.info("Matching links against %d target role(s)", len(keywords))
    else:
        log.info("No target roles in profile — using generic job-title matching")

    messages = load_messages(inbox_dir or INBOX_DIR)
    if not messages:
        log.warning("No messages to scan")
        return {
            "messages_scanned": 0, "leads_found": 0, "jobs_added": 0,
            "report_path": None, "report_preview": "**No messages found.** Export emails into the inbox folder.",
        }

    resume = load_master_resume() if mode == "ai" else ""
    leads = scan_messages(messages, keywords, mode=mode, resume=resume)
    added = import_jobs(leads)

    report = build_scan_report(leads, added, get_jobs(), mode=mode)
    report_path = write_scan_report(report) if write_report else None

    log.info(
        "Scan complete — messages=%d, leads=%d, new=%d",
        len(messages), len(leads), len(added),
    )
    return {
        "messages_scanned": len(messages),
        "leads_found": len(leads),
        "jobs_added": len(added),
        "report_path": str(report_path) if report_path else None,
        "report_preview": report[:2000] + "..." if len(report) > 2000 else report,
    }


def tailor(job_id: str) -> dict[str, Any]:
    """Cover letter, tailored resume and interview prep for one tracked job."""
    job = get_job(job_id)
    if job is None:
        raise KeyError(f"No tracked job with id {job_id!r}")

    profile = load_profile()
    resume = load_master_resume()
    candidate = profile.get("profile", {})
    job.cover_letter = generate_cover_letter(job, resume, candidate.get("name", ""), candidate.get("email", ""))
    job.customized_resume = customize_resume(job, resume) if resume else ""
    questions = generate_interview_questions(job, resume)
    if job.status == JobStatus.DETECTED:
        job.status = JobStatus.REVIEW
    save_job(job)
    log.info("Tailored %s @ %s", job.title, job.company)
    return {"job": job, "interview_questions": questions}


def add_job(url: str) -> Job | None:
    """Track a posting by its link; None when the URL is already tracked."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Not a web link: {url!r}")
    ensure_tracker()
    details = fetch_job_details(url)
    job = Job.from_page(details, clean_application_url(url))
    if not import_jobs([job]):
        log.info("Already tracking %s", job.application_url)
        return None
    log.info("Added %s @ %s (%s)", job.title, job.company, job.id)
    return job
