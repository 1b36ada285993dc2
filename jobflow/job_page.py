"""Fetch a single job-posting page and pull its title and company."""
from __future__ import annotations

import requests

from jobflow.extractor import UNKNOWN_COMPANY, UNKNOWN_ROLE, extract_job_details
from jobflow.log import get_logger
from jobflow.retry import retry

log = get_logger(__name__)

_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
                  "Chrome/124.0 Safari/537.36",
}


def _is_client_error(exc: BaseException) -> bool:
    response = getattr(exc, "response", None)
    return response is not None and 400 <= response.status_code < 500


@retry(max_attempts=2, base_delay=1.5, retryable=(requests.RequestException,), giveup=_is_client_error)
def _download(url: str, timeout: float) -> str:
    r = requests.get(url, headers=_HEADERS, timeout=timeout)
    r.raise_for_status()
    return r.text


def fetch_job_details(url: str, timeout: float = 15) -> dict[str, str]:
    """Title/company for ``url``; unknown placeholders when the page can't be read."""
    details = {"title": UNKNOWN_ROLE, "company": UNKNOWN_COMPANY, "url": url}
    if not url or not url.startswith(("http://", "https://")):
        log.debug("Not fetching non-HTTP URL %r", url)
        return details
    try:
        html = _download(url, timeout)
    except requests.RequestException as exc:
        log.warning("Could not fetch %s: %s", url, exc)
        return details
    details.update(extract_job_details(html))
    return details
