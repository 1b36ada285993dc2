"""Rewrite the master resume for a specific job."""
from __future__ import annotations

import re

from openai import OpenAIError

from jobflow.keywords import extract_keywords
from jobflow.llm import LLMUnavailable, complete
from jobflow.log import get_logger
from jobflow.models import Job

log = get_logger(__name__)

_HAS_SUMMARY_RE = re.compile(r"SUMMARY|OBJECTIVE", re.IGNORECASE)
# Summary section runs until the next all-caps heading line or the end of the text
_SUMMARY_SECTION_RE = re.compile(
    r"(SUMMARY|OBJECTIVE)[\s\S]*?(?=\n(?-i:[A-Z_][A-Z_ &/]+)\s*\n|\Z)",
    re.IGNORECASE,
)


def targeted_summary(job: Job) -> str:
    keywords = extract_keywords(job.description)
    return (
        f"PROFESSIONAL SUMMARY FOR {job.company.upper()}\n"
        f"{'-' * 50}\n"
        f"Dedicated professional targeting the {job.title} role. "
        f"Brings relevant expertise in {', '.join(keywords)}. "
        f"Committed to delivering high-quality results and driving success for {job.company}.\n"
    )


def local_customize_resume(job: Job, resume: str) -> str:
    summary = targeted_summary(job)
    if _HAS_SUMMARY_RE.search(resume):
        return _SUMMARY_SECTION_RE.sub(lambda _: summary, resume, count=1)
    return summary + "\n" + resume


def customize_resume(job: Job, resume: str) -> str:
    """LLM rewrite of ``resume`` for ``job``; keyword summary swap when offline."""
    if not resume.strip():
        log.warning("Empty resume, nothing to tailor for %s", job.title)
        return ""
    prompt = f"""Rewrite this resume for the role below. Keep every fact truthful, reorder and
reword bullets to foreground what the job asks for, and keep the same section headings.
Return only the resume text.

Role: {job.title} at {job.company}
Job description: {job.description[:2500]}

Resume:
{resume[:6000]}"""
    try:
        tailored = complete(prompt, max_tokens=2000, temperature=0.2)
    except LLMUnavailable:
        return local_customize_resume(job, resume)
    except (OpenAIError, ValueError) as exc:
        log.warning("Resume tailoring failed (%s), using keyword summary", exc)
        return local_customize_resume(job, resume)
    log.info("Resume tailored for %s @ %s", job.title, job.company)
    return tailored
