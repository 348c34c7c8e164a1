"""Fixed question sequencing and timing policy."""
from __future__ import annotations

from typing import Dict, Tuple

from interview_session import Difficulty

DIFFICULTY_SEQUENCE: Tuple[Difficulty, ...] = ("easy", "easy", "medium", "medium", "hard", "hard")
TOTAL_QUESTIONS = len(DIFFICULTY_SEQUENCE)
TIME_LIMITS: Dict[Difficulty, int] = {"easy": 20, "medium": 60, "hard": 120}

NO_ANSWER_PLACEHOLDER = "[Time's Up! No answer provided.]"
SUMMARY_FALLBACK = "Error: Could not generate summary."


def difficulty_for(index: int) -> Difficulty:
    """Return the difficulty of the question at ``index`` (0-based)."""

    if not 0 <= index < TOTAL_QUESTIONS:
        raise IndexError(f"Question index out of range: {index}")
    return DIFFICULTY_SEQUENCE[index]


def time_limit(difficulty: Difficulty) -> int:
    return TIME_LIMITS[difficulty]


def has_next(index: int) -> bool:
    return index + 1 < TOTAL_QUESTIONS


def rules_message() -> str:
    counts = {level: DIFFICULTY_SEQUENCE.count(level) for level in TIME_LIMITS}
    return (
        "Here's how the interview will work:\n\n"
        f"- **Total Questions**: {TOTAL_QUESTIONS}\n"
        f"- **Structure**: {counts['easy']} Easy, {counts['medium']} Medium, {counts['hard']} Hard\n"
        "- **Scoring**: Each question is scored out of 10.\n"
        "- **Timing**:\n"
        f"  - Easy: {TIME_LIMITS['easy']} seconds\n"
        f"  - Medium: {TIME_LIMITS['medium']} seconds\n"
        f"  - Hard: {TIME_LIMITS['hard']} seconds\n\n"
        "When the timer runs out, your answer will be submitted automatically. "
        "Let's begin with the first question."
    )


__all__ = [
    "DIFFICULTY_SEQUENCE",
    "NO_ANSWER_PLACEHOLDER",
    "SUMMARY_FALLBACK",
    "TIME_LIMITS",
    "TOTAL_QUESTIONS",
    "difficulty_for",
    "has_next",
    "rules_message",
    "time_limit",
]
