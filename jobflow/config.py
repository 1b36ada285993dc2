"""Profile and environment configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobflow.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
REPORTS_DIR: Path = ROOT_DIR / "reports"
RESUME_DIR: Path = ROOT_DIR / "resume"
INBOX_DIR: Path = ROOT_DIR / "inbox"

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"

_EMPTY_PROFILE: dict[str, Any] = {
    "profile": {"name": "", "email": "", "phone": ""},
    "target_roles": [],
    "target_locations": [],
    "min_salary": "",
    "remote_only": False,
}


def load_profile(path: Path | None = None) -> dict[str, Any]:
    path = path or PROFILE_PATH
    if not path.exists():
        log.warning("No profile at %s, scanning with generic job-title matching", path)
        data: dict[str, Any] = {}
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    # Older profiles used the agent-era key names
    if "preferred_roles" in data and "target_roles" not in data:
        data["target_roles"] = data.pop("preferred_roles")
    if "locations" in data and "target_locations" not in data:
        data["target_locations"] = data.pop("locations")

    for key, default in _EMPTY_PROFILE.items():
        data.setdefault(key, copy.deepcopy(default))
    return data


def target_roles(profile: dict[str, Any]) -> list[str]:
    return [str(r).strip() for r in profile.get("target_roles") or [] if str(r).strip()]


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def groq_settings() -> tuple[str, str]:
    """(api_key, model) for the OpenAI-compatible Groq endpoint; key may be empty."""
    return get_env("GROQ_API_KEY"), get_env("GROQ_LLM_MODEL", DEFAULT_GROQ_MODEL) or DEFAULT_GROQ_MODEL


def ensure_dirs() -> None:
    for d in (DATA_DIR, REPORTS_DIR, RESUME_DIR, INBOX_DIR):
        d.mkdir(parents=True, exist_ok=True)


def get_resume_path() -> Path | None:
    """First resume file in the resume folder, PDF before DOCX before text."""
    if not RESUME_DIR.exists():
        return None
    for ext in (".pdf", ".docx", ".txt", ".md"):
        for p in sorted(RESUME_DIR.iterdir()):
            if p.suffix.lower() == ext and p.is_file():
                return p
    return None
