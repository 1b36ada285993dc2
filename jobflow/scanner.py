"""Scan a batch of inbox messages for job leads."""
from __future__ import annotations

import email
import html as html_mod
from email import policy
from pathlib import Path
from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from jobflow.ai_extract import analyze_jobs_with_ai
from jobflow.extractor import extract_job_leads
from jobflow.log import get_logger
from jobflow.models import Job, RawMessage

log = get_logger(__name__)

SCAN_MODES = ("fast", "ai")
_TRACKING_PARAMS = {"utm_source", "utm_medium", "utm_campaign"}


def clean_application_url(url: str) -> str:
    """Drop campaign tracking params; anything unparsable comes back as-is."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc or not parts.query:
        return url
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    query = [(k, v) for k, v in pairs if k not in _TRACKING_PARAMS]
    if len(query) == len(pairs):
        return url
    return urlunsplit(parts._replace(query=urlencode(query)))


def _body_from_eml(data: bytes) -> tuple[str, str, str]:
    msg = email.message_from_bytes(data, policy=policy.default)
    subject, sender = str(msg.get("subject", "")), str(msg.get("from", ""))
    part = msg.get_body(preferencelist=("html", "plain"))
    if part is None:
        return "", subject, sender
    content = part.get_content()
    if part.get_content_subtype() != "html":
        content = f"<pre>{html_mod.escape(content)}</pre>"
    return content, subject, sender


def load_messages(path: Path) -> list[RawMessage]:
    """Read ``.eml`` and ``.html`` exports from a directory, sorted by file name."""
    if path.is_file():
        files = [path]
    elif path.is_dir():
        files = sorted(p for p in path.iterdir() if p.is_file())
    else:
        log.warning("Inbox path %s does not exist", path)
        return []

    messages: list[RawMessage] = []
    for f in files:
        suffix = f.suffix.lower()
        try:
            if suffix == ".eml":
                body, subject, sender = _body_from_eml(f.read_bytes())
                messages.append(RawMessage(message_id=f.stem, html=body, subject=subject, sender=sender))
            elif suffix in (".html", ".htm"):
                messages.append(RawMessage(message_id=f.stem, html=f.read_text(encoding="utf-8", errors="ignore")))
        except (OSError, LookupError, ValueError) as exc:
            log.warning("Skipping unreadable message %s: %s", f.name, exc)
    log.info("Loaded %d message(s) from %s", len(messages), path)
    return messages


def scan_messages(
    messages: Iterable[RawMessage],
    keywords: Iterable[str] | None = (),
    *,
    mode: str = "fast",
    resume: str = "",
) -> list[Job]:
    """Extract leads from every message and promote them to detected jobs.

    Across the batch the first message to mention a URL wins. The result is
    ordered by match score, highest first.
    """
    if mode not in SCAN_MODES:
        raise ValueError(f"Unknown scan mode {mode!r}, expected one of {SCAN_MODES}")
    keywords = list(keywords or [])

    found: dict[str, Job] = {}
    scanned = 0
    for message in messages:
        scanned += 1
        try:
            if mode == "ai":
                leads = analyze_jobs_with_ai(message.html, resume, keywords)
            else:
                leads = extract_job_leads(message.html, keywords)
        except Exception as exc:
            log.error("Scan failed for message %s: %s", message.message_id, exc)
            continue

        for lead in leads:
            url = clean_application_url(lead.application_url)
            if not url or url in found:
                continue
            lead.application_url = url
            found[url] = Job.from_lead(lead, message.message_id)
        log.debug("[%s] %d lead(s)", message.message_id, len(leads))

    jobs = sorted(found.values(), key=lambda j: -j.match_score)
    log.info("Scanned %d message(s) → %d potential lead(s)", scanned, len(jobs))
    return jobs
