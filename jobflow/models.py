"""Data models for inbox messages, job leads and tracked applications."""
from __future__ import annotations

import random
import string
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum

from jobflow.log import get_logger

log = get_logger(__name__)

PENDING_COMPANY = "Pending Review"
DEFAULT_LOCATION = "Remote/Hybrid"
DEFAULT_DESCRIPTION = "Extracted from email link. Click to view details."
HEURISTIC_MATCH_SCORE = 80


class JobStatus(str, Enum):
    DETECTED = "Detected"
    REVIEW = "In Review"
    SAVED = "Saved"
    APPLIED_AUTO = "Auto-Applied"
    APPLIED_MANUAL = "Applied Manually"
    INTERVIEW = "Interview"
    REJECTED = "Rejected"
    OFFER = "Offer"

    @classmethod
    def parse(cls, value: str | JobStatus) -> JobStatus:
        """Accept an enum, its value ("In Review") or its name ("REVIEW")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for status in cls:
            if text == status.value or text.upper() == status.name:
                return status
        raise ValueError(f"Unknown job status: {value!r}")


@dataclass
class RawMessage:
    message_id: str
    html: str
    subject: str = ""
    sender: str = ""


@dataclass
class CandidateLink:
    text: str
    href: str
    context: str = ""


@dataclass
class ExtractedJobLead:
    title: str
    company: str = PENDING_COMPANY
    location: str = DEFAULT_LOCATION
    description: str = DEFAULT_DESCRIPTION
    application_url: str = ""
    match_score: int = HEURISTIC_MATCH_SCORE
    fit_reason: str = ""

    @property
    def needs_review(self) -> bool:
        return self.company == PENDING_COMPANY

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "applicationUrl": self.application_url,
            "matchScore": self.match_score,
        }


def _short_token(length: int = 5) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


@dataclass
class Job:
    id: str
    title: str
    company: str
    location: str
    description: str
    source: str = "Gmail"
    detected_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    status: JobStatus = JobStatus.DETECTED
    match_score: int = 0
    requirements: list[str] = field(default_factory=list)
    application_url: str = ""
    salary_range: str = ""
    cover_letter: str = ""
    customized_resume: str = ""
    notes: str = ""

    @classmethod
    def from_page(cls, details: dict[str, str], url: str) -> Job:
        """A job the user added by link, already saved to the pipeline."""
        return cls(
            id=f"manual-{_short_token()}",
            title=details.get("title") or "Untitled Role",
            company=details.get("company") or "Unknown Company",
            location="Remote",
            description="",
            source="Manual",
            status=JobStatus.SAVED,
            application_url=url,
            notes="Added manually via link",
        )

    @classmethod
    def from_lead(cls, lead: ExtractedJobLead, message_id: str, source: str = "Gmail") -> Job:
        notes = lead.fit_reason
        if lead.needs_review:
            notes = (notes + " " if notes else "") + "Company not detected, confirm before applying."
        return cls(
            id=f"gmail-{message_id}-{_short_token()}",
            title=lead.title,
            company=lead.company,
            location=lead.location,
            description=lead.description,
            source=source,
            match_score=lead.match_score,
            application_url=lead.application_url,
            notes=notes,
        )

    def to_row(self) -> dict[str, str]:
        row = {k: ("" if v is None else v) for k, v in asdict(self).items()}
        row["status"] = self.status.value
        row["match_score"] = str(self.match_score)
        row["requirements"] = "; ".join(self.requirements)
        return row

    @classmethod
    def from_row(cls, row: dict[str, str]) -> Job:
        """Rebuild a tracked job; a hand-edited status or score falls back to Detected / 0."""
        job_id = row.get("id", "")
        try:
            status = JobStatus.parse(row.get("status") or JobStatus.DETECTED)
        except ValueError:
            log.warning("Job %s has unknown status %r, treating it as Detected", job_id, row.get("status"))
            status = JobStatus.DETECTED
        try:
            score = int(float(row.get("match_score") or 0))
        except (TypeError, ValueError, OverflowError):
            log.warning("Job %s has non-numeric match score %r, using 0", job_id, row.get("match_score"))
            score = 0
        return cls(
            id=job_id,
            title=row.get("title", ""),
            company=row.get("company", ""),
            location=row.get("location", ""),
            description=row.get("description", ""),
            source=row.get("source", "") or "Gmail",
            detected_at=row.get("detected_at", ""),
            status=status,
            match_score=score,
            requirements=[r.strip() for r in (row.get("requirements") or "").split(";") if r.strip()],
            application_url=row.get("application_url", ""),
            salary_range=row.get("salary_range", ""),
            cover_letter=row.get("cover_letter", ""),
            customized_resume=row.get("customized_resume", ""),
            notes=row.get("notes", ""),
        )
