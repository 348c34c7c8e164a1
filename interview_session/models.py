from __future__ import annotations  # Interview session domain models

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from validation import CandidateDetails, CorrectionField


Difficulty = Literal["easy", "medium", "hard"]
Sender = Literal["ai", "user"]
SessionStatus = Literal["idle", "loading", "active", "finished"]


class InterviewQuestion(BaseModel):  # Generated question with its recorded evaluation
    model_config = ConfigDict(frozen=True)

    text: str
    difficulty: Difficulty
    answer: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=10)
    justification: Optional[str] = None


class ChatMessage(BaseModel):  # Transcript line shown in the chat window
    model_config = ConfigDict(frozen=True)

    sender: Sender
    text: str


class SessionState(BaseModel):  # Immutable snapshot of the active session
    model_config = ConfigDict(frozen=True)

    status: SessionStatus = "idle"
    candidate_details: CandidateDetails = Field(default_factory=CandidateDetails)
    messages: Tuple[ChatMessage, ...] = ()
    correction_queue: Tuple[CorrectionField, ...] = ()
    questions: Tuple[InterviewQuestion, ...] = ()
    current_question_index: int = -1
    timer_active: bool = False
    remaining_time: Optional[int] = None
    total_score: Optional[int] = None
    final_summary: Optional[str] = None

    @property
    def current_question(self) -> Optional[InterviewQuestion]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    @property
    def current_correction(self) -> Optional[CorrectionField]:
        return self.correction_queue[0] if self.correction_queue else None


__all__ = ["ChatMessage", "Difficulty", "InterviewQuestion", "Sender", "SessionState", "SessionStatus"]
