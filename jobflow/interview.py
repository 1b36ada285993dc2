"""Mock interview questions for a tracked job."""
from __future__ import annotations

from openai import OpenAIError

from jobflow.keywords import extract_keywords
from jobflow.llm import LLMUnavailable, complete, parse_json_reply
from jobflow.log import get_logger
from jobflow.models import Job

log = get_logger(__name__)

QUESTION_COUNT = 3


def local_questions(job: Job) -> list[str]:
    keywords = extract_keywords(job.description) + ["this field"] * QUESTION_COUNT
    return [
        f"Walk us through a project where you applied {keywords[0]} end to end.",
        f"What would you focus on in your first 90 days as {job.title} at {job.company}?",
        f"Describe a hard trade-off you made involving {keywords[1]} and how it turned out.",
    ]


def generate_interview_questions(job: Job, resume: str = "") -> list[str]:
    prompt = f"""Based on the following job and candidate, generate {QUESTION_COUNT} challenging
interview questions. Return ONLY a JSON object: {{"questions": ["...", "...", "..."]}}
Role: {job.title} at {job.company}
Candidate Resume: {resume[:1000]}"""
    try:
        payload = parse_json_reply(complete(prompt, max_tokens=400))
    except LLMUnavailable:
        return local_questions(job)
    except (OpenAIError, ValueError) as exc:
        log.warning("Interview question generation failed (%s)", exc)
        return local_questions(job)

    questions = payload.get("questions") if isinstance(payload, dict) else None
    if not isinstance(questions, list):
        questions = []
    questions = [str(q).strip() for q in questions if str(q).strip()]
    return questions[:QUESTION_COUNT] or local_questions(job)
