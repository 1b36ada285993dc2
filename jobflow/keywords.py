"""Frequency-based keyword extraction for offline tailoring."""
from __future__ import annotations

import re
from collections import Counter

STOPWORDS: frozenset[str] = frozenset(
    {"the", "and", "or", "a", "an", "in", "on", "at", "to", "for", "of", "with", "by"}
)
_PUNCT_RE = re.compile(r"[^\w\s]")


def extract_keywords(text: str, limit: int = 10) -> list[str]:
    """Most frequent words longer than three letters, capitalised.

    Ties keep the order in which words first appear.
    """
    words = _PUNCT_RE.sub("", (text or "").lower()).split()
    freq = Counter(w for w in words if w not in STOPWORDS and len(w) > 3)
    ranked = sorted(freq.items(), key=lambda kv: -kv[1])
    return [w[:1].upper() + w[1:] for w, _ in ranked[:limit]]
