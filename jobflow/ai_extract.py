"""LLM-backed job extraction with the local heuristic as fallback."""
from __future__ import annotations

from typing import Any, Iterable

from openai import OpenAIError

from jobflow.extractor import MAX_LEADS, extract_job_leads
from jobflow.llm import LLMUnavailable, complete, parse_json_reply
from jobflow.log import get_logger
from jobflow.models import DEFAULT_DESCRIPTION, DEFAULT_LOCATION, PENDING_COMPANY, ExtractedJobLead

log = get_logger(__name__)

MAX_HTML_CHARS = 15000
MAX_RESUME_CHARS = 2000

_PROMPT = """\
Analyze this email for job listings.
User Resume: {resume}
Email HTML: {html}

TASK: Extract specific job listings. Score each from 0-100 based on how well it
matches the user's resume and target role. Provide a concise "fitReason" for each.

Return ONLY valid JSON in this shape, no explanations:
{{"jobs": [{{"title": "", "company": "", "location": "", "applicationUrl": "",
"matchScore": 0, "fitReason": ""}}]}}
"""


def _text(value: Any, default: str) -> str:
    text = str(value).strip() if value is not None else ""
    return text or default


def _score(value: Any) -> int:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError):
        return 0


def leads_from_payload(payload: Any) -> list[ExtractedJobLead]:
    """Normalise the model's ``{"jobs": [...]}`` answer into leads.

    Entries without an application URL cannot be deduplicated or opened,
    so they are dropped.
    """
    items = payload.get("jobs") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []

    by_url: dict[str, ExtractedJobLead] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        url = _text(item.get("applicationUrl"), "")
        title = _text(item.get("title"), "")
        if not url or not title or url.lower() == "null":
            continue
        by_url.setdefault(url, ExtractedJobLead(
            title=title,
            company=_text(item.get("company"), PENDING_COMPANY),
            location=_text(item.get("location"), DEFAULT_LOCATION),
            description=_text(item.get("description"), DEFAULT_DESCRIPTION),
            application_url=url,
            match_score=_score(item.get("matchScore")),
            fit_reason=_text(item.get("fitReason"), ""),
        ))
    return list(by_url.values())


def analyze_jobs_with_ai(
    html: str,
    resume: str = "",
    user_keywords: Iterable[str] | None = (),
    api_key: str | None = None,
) -> list[ExtractedJobLead]:
    """Ask the LLM for scored leads; use the local extractor when it can't answer."""
    prompt = _PROMPT.format(resume=(resume or "")[:MAX_RESUME_CHARS], html=(html or "")[:MAX_HTML_CHARS])
    try:
        raw = complete(prompt, max_tokens=1500, temperature=0.1, api_key=api_key)
        leads = leads_from_payload(parse_json_reply(raw))
    except LLMUnavailable:
        log.debug("No GROQ_API_KEY, using local extraction")
        return extract_job_leads(html, user_keywords)
    except (OpenAIError, ValueError) as exc:
        log.warning("AI extraction failed (%s), using local extraction", exc)
        return extract_job_leads(html, user_keywords)

    log.info("AI extraction returned %d lead(s)", len(leads))
    return leads[:MAX_LEADS]
