"""Generate tailored cover letters using Groq (or the local template)."""
from __future__ import annotations

import os
import re
from datetime import date

from openai import OpenAIError

from jobflow.keywords import extract_keywords
from jobflow.llm import LLMUnavailable, complete
from jobflow.log import get_logger
from jobflow.models import Job

log = get_logger(__name__)

_RECIPIENT_RE = re.compile(r"(?:report to|contact)\s+([A-Z][a-z]+ [A-Z][a-z]+)")


def _candidate(name: str, email: str) -> tuple[str, str]:
    return (
        name or os.environ.get("CANDIDATE_NAME", "").strip() or "Candidate",
        email or os.environ.get("CANDIDATE_EMAIL", "").strip(),
    )


def generate_cover_letter(job: Job, resume: str = "", name: str = "", email: str = "") -> str:
    name, email = _candidate(name, email)
    prompt = f"""Write a short, professional cover letter (under 250 words) for this role.
Candidate name: {name}
Candidate email: {email}
Candidate resume (excerpt): {resume[:2000]}
Job title: {job.title}
Company: {job.company}
Job description (excerpt): {job.description[:1500]}

Mention 2-3 skills from the resume that the role asks for. End with "Sincerely," and the
candidate name: {name}. Do not use placeholders like [Your Name]."""

    try:
        letter = complete(prompt, max_tokens=500)
    except LLMUnavailable:
        log.debug("No GROQ_API_KEY — using template cover letter")
        return local_cover_letter(job, name, email)
    except (OpenAIError, ValueError) as exc:
        log.warning("Cover letter generation failed (%s), using template", exc)
        return local_cover_letter(job, name, email)
    log.info("Cover letter generated for %s @ %s", job.title, job.company)
    return letter


def local_cover_letter(job: Job, name: str, email: str, today: date | None = None) -> str:
    today = today or date.today()
    keywords = extract_keywords(job.description)
    manager = _RECIPIENT_RE.search(job.description)
    recipient = manager.group(1) if manager else "Hiring Manager"
    first = keywords[0] if keywords else "software development"
    second = keywords[1] if len(keywords) > 1 else "problem solving"

    return f"""{name}
{email}
{today.strftime("%B")} {today.day}, {today.year}

{recipient}
{job.company}

RE: Application for {job.title}

Dear {recipient},

I am writing to express my strong interest in the {job.title} position at {job.company}. Having reviewed the job description, I am excited about the opportunity to contribute my skills in {', '.join(keywords[:3])} to your team.

Based on my professional background, I have developed strong competencies that align well with your requirements:
*   Proven experience in {first} and {second}.
*   A track record of delivering results in fast-paced environments.
*   Strong alignment with {job.company}'s mission.

In my previous roles, I have consistently demonstrated the ability to adapt and drive value. I am particularly drawn to this role because of {job.company}'s reputation for excellence and innovation.

Thank you for considering my application. I have attached my resume for your review and would welcome the chance to discuss how my background fits the needs of your team.

Sincerely,

{name}"""

