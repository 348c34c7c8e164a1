from __future__ import annotations  # Re-export ai_services public API

from .ai_services import (  # noqa: F401
    EVALUATE_ANSWER_KEY,
    GENERATE_QUESTION_KEY,
    GENERATE_SUMMARY_KEY,
    PARSE_RESUME_KEY,
    AnswerEvaluation,
    CandidateSummary,
    GeneratedQuestion,
    ParsedResume,
    TranscriptEntry,
    evaluate_answer,
    evaluate_answer_with_config,
    generate_question,
    generate_question_with_config,
    generate_summary,
    generate_summary_with_config,
    parse_resume,
    parse_resume_with_config,
)

__all__ = [
    "EVALUATE_ANSWER_KEY",
    "GENERATE_QUESTION_KEY",
    "GENERATE_SUMMARY_KEY",
    "PARSE_RESUME_KEY",
    "AnswerEvaluation",
    "CandidateSummary",
    "GeneratedQuestion",
    "ParsedResume",
    "TranscriptEntry",
    "evaluate_answer",
    "evaluate_answer_with_config",
    "generate_question",
    "generate_question_with_config",
    "generate_summary",
    "generate_summary_with_config",
    "parse_resume",
    "parse_resume_with_config",
]
