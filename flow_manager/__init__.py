"""Interview orchestration flow and its collaborators."""
from __future__ import annotations

from .client import DirectInterviewApi, HttpInterviewApi, InterviewApi, InterviewApiError
from .orchestrator import InterviewFlow, SessionConflictError
from .policy import (
    DIFFICULTY_SEQUENCE,
    NO_ANSWER_PLACEHOLDER,
    SUMMARY_FALLBACK,
    TIME_LIMITS,
    TOTAL_QUESTIONS,
    difficulty_for,
    time_limit,
)
from .timer import CountdownTimer

__all__ = [
    "CountdownTimer",
    "DIFFICULTY_SEQUENCE",
    "DirectInterviewApi",
    "HttpInterviewApi",
    "InterviewApi",
    "InterviewApiError",
    "InterviewFlow",
    "NO_ANSWER_PLACEHOLDER",
    "SUMMARY_FALLBACK",
    "SessionConflictError",
    "TIME_LIMITS",
    "TOTAL_QUESTIONS",
    "difficulty_for",
    "time_limit",
]
