"""Local (non-AI) job-lead extraction from inbox HTML.

Job-alert emails are mostly anchors: a handful of real postings buried in
navigation, tracking and compliance links. The extractor keeps anchors
whose text reads like a job title (or contains one of the user's target
roles), guesses the hiring company from the link text or the text next to
it, and returns at most ``MAX_LEADS`` leads keyed by application URL.

Nothing here raises on bad markup: an unparsable body yields no leads.
"""
from __future__ import annotations

import re
from typing import Iterable

from bs4 import BeautifulSoup

from jobflow.log import get_logger
from jobflow.models import (
    DEFAULT_DESCRIPTION,
    DEFAULT_LOCATION,
    HEURISTIC_MATCH_SCORE,
    PENDING_COMPANY,
    CandidateLink,
    ExtractedJobLead,
)

log = get_logger(__name__)

MAX_LEADS = 10
MIN_TEXT_LEN = 4
MAX_TEXT_LEN = 100

_SKIPPED_SCHEMES = ("mailto:", "tel:")

JOB_TITLE_RE = re.compile(
    r"(?:software|systems|data|site|reliability|qa|test|frontend|backend|full.?stack|devops"
    r"|cloud|network|security|product|project|program|account|sales|marketing|business"
    r"|customer|support|human|hr|legal|finance|operations)"
    r"\s+(?:engineer|developer|architect|admin|manager|director|lead|specialist|analyst"
    r"|associate|representative|executive|consultant)"
    r"|programmer|coder|technician|designer",
    re.IGNORECASE,
)

# Navigation and compliance link text, matched anywhere in the display text
BLACKLIST_RE = re.compile(
    r"unsubscribe|privacy|policy|view in browser|profile|settings|preferences|help|support"
    r"|login|sign in|forgot password|terms|conditions|read more|apply now|click here"
    r"|browser|email me|alert",
    re.IGNORECASE,
)

INLINE_COMPANY_RE = re.compile(r"\s(at|for|with)\s+([A-Z][a-zA-Z0-9\s]+)")
_LEADING_CONNECTOR_RE = re.compile(r"^(at|for|with|-|–)\s+", re.IGNORECASE)
_SEGMENT_SPLIT_RE = re.compile(r"[-|•]")

# Residual parent text must be short enough to be "Company - Title" noise
_CONTEXT_MIN_LEN = 3
_CONTEXT_MAX_LEN = 39

# Page-level details (single posting pages, not alert emails)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE)
_TITLE_TAG_RE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_PAGE_COMPANY_RE = re.compile(r"(?:at|company:|organization:)\s+([A-Z][a-z0-9\s,.]{2,20})", re.IGNORECASE)
UNKNOWN_ROLE = "Unknown Role"
UNKNOWN_COMPANY = "Unknown Company"


def _parse(html: str | bytes | None) -> BeautifulSoup | None:
    if not html or not isinstance(html, (str, bytes)):
        return None
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:
        log.debug("Unparsable message body (%s), treating as no links", exc)
        return None


def find_candidate_links(html: str | bytes | None) -> list[CandidateLink]:
    """All anchors with a usable href and plausible display text, in document order."""
    soup = _parse(html)
    if soup is None:
        return []

    links: list[CandidateLink] = []
    for a in soup.find_all("a"):
        href = a.get("href")
        text = a.get_text().strip()
        if not href or not MIN_TEXT_LEN <= len(text) <= MAX_TEXT_LEN:
            continue
        if href.startswith(_SKIPPED_SCHEMES):
            continue
        context = a.parent.get_text() if a.parent is not None else ""
        links.append(CandidateLink(text=text, href=href, context=context))
    return links


def _normalize_keywords(user_keywords: Iterable[str] | None) -> list[str]:
    return [kw.lower() for kw in (user_keywords or []) if kw and kw.strip()]


def is_job_link(text: str, keywords: list[str]) -> bool:
    """Keywords, when configured, replace the generic job-title regex entirely."""
    if BLACKLIST_RE.search(text):
        return False
    if keywords:
        low = text.lower()
        return any(kw in low for kw in keywords)
    return JOB_TITLE_RE.search(text) is not None


def infer_company(link: CandidateLink) -> str:
    company = PENDING_COMPANY

    inline = INLINE_COMPANY_RE.search(link.text)
    if inline and inline.group(2):
        company = inline.group(2).strip()
    else:
        surrounding = link.context.replace(link.text, "", 1).strip()
        if _CONTEXT_MIN_LEN <= len(surrounding) <= _CONTEXT_MAX_LEN:
            best = max(_SEGMENT_SPLIT_RE.split(surrounding), key=len).strip()
            if best:
                company = best

    return _LEADING_CONNECTOR_RE.sub("", company)


def extract_job_leads(
    html: str | bytes | None,
    user_keywords: Iterable[str] | None = (),
) -> list[ExtractedJobLead]:
    """Turn one message body into at most ``MAX_LEADS`` job leads.

    Leads are keyed by application URL. A repeated URL keeps the position
    of its first anchor and the content of its last one.
    """
    keywords = _normalize_keywords(user_keywords)

    by_url: dict[str, ExtractedJobLead] = {}
    for link in find_candidate_links(html):
        if not is_job_link(link.text, keywords):
            continue
        by_url[link.href] = ExtractedJobLead(
            title=link.text,
            company=infer_company(link),
            location=DEFAULT_LOCATION,
            description=DEFAULT_DESCRIPTION,
            application_url=link.href,
            match_score=HEURISTIC_MATCH_SCORE,
        )

    leads = list(by_url.values())[:MAX_LEADS]
    log.debug("Local extraction: %d lead(s) from %d unique URL(s)", len(leads), len(by_url))
    return leads


def extract_job_details(html: str | None) -> dict[str, str]:
    """Best-effort title and company from a single job-posting page."""
    html = html if isinstance(html, str) else ""

    match = _H1_RE.search(html) or _TITLE_TAG_RE.search(html)
    title = _TAG_RE.sub("", match.group(1)).strip() if match else ""

    company_match = _PAGE_COMPANY_RE.search(html)
    company = company_match.group(1).strip() if company_match else ""

    return {"title": title or UNKNOWN_ROLE, "company": company or UNKNOWN_COMPANY}
