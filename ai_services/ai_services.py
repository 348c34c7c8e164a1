from __future__ import annotations  # LLM-backed interview operations

from pathlib import Path
from textwrap import dedent
from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from config import LlmRoute, load_app_registry, settings
from llm_gateway import call


PARSE_RESUME_KEY = "ai_services.parse_resume"
GENERATE_QUESTION_KEY = "ai_services.generate_question"
EVALUATE_ANSWER_KEY = "ai_services.evaluate_answer"
GENERATE_SUMMARY_KEY = "ai_services.generate_summary"


class ParsedResume(BaseModel):  # Contact fields extracted from resume text
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class GeneratedQuestion(BaseModel):  # Single interview question
    question: str = Field(min_length=1)


class AnswerEvaluation(BaseModel):  # Score and one-line rationale for an answer
    score: int = Field(ge=1, le=10)
    justification: str


class TranscriptEntry(BaseModel):  # One question/answer pair fed to the summary
    text: str
    answer: Optional[str] = None
    score: Optional[int] = None
    justification: Optional[str] = None


class CandidateSummary(BaseModel):  # Hiring-manager summary of the whole interview
    summary: str = Field(min_length=1)


def parse_resume(resume_text: str, *, route: LlmRoute) -> ParsedResume:  # Extract contact details
    return call(_build_parse_task(resume_text), ParsedResume, cfg=route)


def generate_question(difficulty: Literal["easy", "medium", "hard"], *, route: LlmRoute) -> GeneratedQuestion:  # Produce one question
    result = call(_build_question_task(difficulty), GeneratedQuestion, cfg=route)
    return GeneratedQuestion(question=result.question.strip())


def evaluate_answer(question: str, answer: str, *, route: LlmRoute) -> AnswerEvaluation:  # Score an answer
    return call(_build_evaluation_task(question, answer), AnswerEvaluation, cfg=route)


def generate_summary(transcript: Sequence[TranscriptEntry], *, route: LlmRoute) -> CandidateSummary:  # Summarize performance
    return call(_build_summary_task(transcript), CandidateSummary, cfg=route)


def parse_resume_with_config(resume_text: str, *, config_path: Path) -> ParsedResume:
    return parse_resume(resume_text, route=_route_for(PARSE_RESUME_KEY, ParsedResume, config_path))


def generate_question_with_config(difficulty: Literal["easy", "medium", "hard"], *, config_path: Path) -> GeneratedQuestion:
    return generate_question(difficulty, route=_route_for(GENERATE_QUESTION_KEY, GeneratedQuestion, config_path))


def evaluate_answer_with_config(question: str, answer: str, *, config_path: Path) -> AnswerEvaluation:
    return evaluate_answer(question, answer, route=_route_for(EVALUATE_ANSWER_KEY, AnswerEvaluation, config_path))


def generate_summary_with_config(transcript: Sequence[TranscriptEntry], *, config_path: Path) -> CandidateSummary:
    return generate_summary(transcript, route=_route_for(GENERATE_SUMMARY_KEY, CandidateSummary, config_path))


def _route_for(key: str, schema: type[BaseModel], config_path: Path) -> LlmRoute:  # Resolve the configured route
    registry = load_app_registry(config_path, {key: schema})
    route, _ = registry[key]
    return route


def _build_parse_task(resume_text: str) -> str:  # Build resume extraction prompt
    header = dedent(
        """
        You are an expert recruitment assistant. Parse the following resume text and extract the candidate's full name, email address, and phone number.
        Respond with a JSON object containing the keys name, email and phone.
        If a field is not found, its value should be null.
        """
    ).strip()
    return f"{header}\n\nResume Text:\n---\n{resume_text}\n---"


def _build_question_task(difficulty: str) -> str:  # Build question generation prompt
    return dedent(
        f"""
        You are an expert interviewer hiring for a {settings.ROLE_TITLE} role with a focus on {settings.ROLE_FOCUS}.
        Generate one, and only one, interview question with a difficulty level of "{difficulty}".
        The question should be conceptual, concise, and directly related to the role.
        Respond with a JSON object whose question key holds only the question text. Do not label the difficulty.
        """
    ).strip()


def _build_evaluation_task(question: str, answer: str) -> str:  # Build answer scoring prompt
    instructions = dedent(
        """
        Evaluate the answer based on technical accuracy, clarity, and completeness.
        Provide a score from 1 to 10 and a brief, one-sentence justification for the score.
        Respond with a JSON object containing score (integer) and justification (string).
        """
    ).strip()
    return (
        f"You are an expert assistant evaluating an interview answer for a {settings.ROLE_TITLE} role.\n"
        f"Question: \"{question}\"\n"
        f"Candidate's Answer: \"{answer}\"\n\n"
        f"{instructions}"
    )


def _format_transcript(transcript: Sequence[TranscriptEntry]) -> str:
    blocks: List[str] = []
    for entry in transcript:
        blocks.append(
            f"Question: {entry.text}\n"
            f"Answer: {entry.answer}\n"
            f"Score: {entry.score}/10\n"
            f"Justification: {entry.justification}"
        )
    return "\n\n".join(blocks)


def _build_summary_task(transcript: Sequence[TranscriptEntry]) -> str:  # Build summary prompt
    formatted = _format_transcript(transcript)
    header = dedent(
        f"""
        You are an expert hiring manager for a {settings.ROLE_TITLE} role.
        Based on the following interview transcript, provide a concise, 3-4 sentence professional summary of the candidate's performance.
        Highlight their potential strengths and weaknesses regarding {settings.ROLE_FOCUS}.
        Do not use markdown. Respond with a JSON object whose summary key holds the summary text.
        """
    ).strip()
    return f"{header}\n\nTranscript:\n---\n{formatted}\n---"
