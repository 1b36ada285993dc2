"""Markdown report of an inbox scan."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from jobflow.config import REPORTS_DIR
from jobflow.log import get_logger
from jobflow.models import PENDING_COMPANY, Job
from jobflow.stats import compute_stats, funnel

log = get_logger(__name__)


def _short_url_label(url: str) -> str:
    try:
        host = (urlparse(url).hostname or "").replace("www.", "")
    except ValueError:
        return "Link"
    parts = [p for p in host.split(".") if p]
    return parts[0].capitalize() if parts else "Link"


def _clip(text: str, width: int) -> str:
    return text[:width] + ("…" if len(text) > width else "")


def build_scan_report(leads: list[Job], added: list[Job], tracked: list[Job], mode: str = "fast") -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    added_ids = {j.id for j in added}
    review = sum(1 for j in leads if j.company == PENDING_COMPANY)

    lines: list[str] = [f"# Inbox Scan — {date}", ""]
    lines.append(
        f"**{len(leads)}** leads found ({mode} mode) | **{len(added)}** new | "
        f"**{review}** need a company check"
    )
    lines.append("")

    if leads:
        lines.append("## Leads")
        lines.append("")
        lines.append("| # | Role | Company | Location | Score | New | Link |")
        lines.append("|--:|------|---------|----------|------:|-----|------|")
        for i, j in enumerate(leads, 1):
            link = f"[{_short_url_label(j.application_url)}]({j.application_url})" if j.application_url else "—"
            new = "yes" if j.id in added_ids else ""
            lines.append(
                f"| {i} | {_clip(j.title, 40)} | {_clip(j.company, 22)} | {_clip(j.location, 18)} "
                f"| {j.match_score} | {new} | {link} |"
            )
        lines.append("")

    stats = compute_stats(tracked)
    lines.append("---")
    lines.append("")
    lines.append("## Pipeline")
    lines.append("")
    for stage, count in funnel(tracked):
        lines.append(f"- **{stage}:** {count}")
    lines.append(f"- **Application rate:** {stats.application_rate:.0%}")
    lines.append(f"- **Conversion rate:** {stats.conversion_rate:.0%}")
    lines.append("")

    log.info("Built scan report: %d leads, %d new", len(leads), len(added))
    return "\n".join(lines)


def write_scan_report(content: str) -> Path:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    path = REPORTS_DIR / f"scan_{datetime.now(timezone.utc):%Y-%m-%d}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
