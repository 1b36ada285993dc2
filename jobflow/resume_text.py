"""Load the master resume as plain text for tailoring and AI scans.

Supports PDF (pypdf), DOCX (stdlib zipfile) and plain text/markdown.
"""
from __future__ import annotations

import re
import zipfile
from pathlib import Path
from xml.etree import ElementTree

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from jobflow.config import get_resume_path
from jobflow.log import get_logger

log = get_logger(__name__)

_DOCX_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction glued words together."""
    if not text or len(text) < 50 or text.count(" ") / len(text) > 0.08:
        return text
    fixed = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def _pdf_text(path: Path) -> str:
    try:
        reader = PdfReader(str(path))
    except PdfReadError as exc:
        raise ValueError(f"Unreadable PDF {path.name}: {exc}") from exc
    return "\n".join(_fix_spacing(page.extract_text() or "") for page in reader.pages)


def _docx_text(path: Path) -> str:
    paragraphs: list[str] = []
    try:
        with zipfile.ZipFile(path) as zf, zf.open("word/document.xml") as f:
            tree = ElementTree.parse(f)
    except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
        raise ValueError(f"Unreadable DOCX {path.name}: {exc}") from exc
    for para in tree.iter(f"{_DOCX_NS}p"):
        parts = [node.text for node in para.iter(f"{_DOCX_NS}t") if node.text]
        if parts:
            paragraphs.append("".join(parts))
    return "\n".join(paragraphs)


def extract_text(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in (".txt", ".md"):
        return path.read_text(encoding="utf-8", errors="ignore")
    if suffix == ".docx":
        return _docx_text(path)
    if suffix == ".pdf":
        return _pdf_text(path)
    raise ValueError(f"Unsupported resume format: {suffix}")


def load_master_resume(path: Path | None = None) -> str:
    """Text of ``path`` or of the first file in resume/; empty when there is none."""
    path = path or get_resume_path()
    if path is None:
        log.info("No resume found, tailoring will use job details only")
        return ""
    try:
        text = extract_text(path).strip()
    except (OSError, ValueError) as exc:
        log.warning("Could not read resume %s: %s", path.name, exc)
        return ""
    log.debug("Loaded resume %s (%d chars)", path.name, len(text))
    return text
