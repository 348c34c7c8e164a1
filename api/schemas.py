"""Pydantic schemas for the interview HTTP API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ai_services import TranscriptEntry
from interview_session import Difficulty, SessionState


class ParseResumeReq(BaseModel):
    resumeText: str = Field(min_length=1)


class GenerateQuestionReq(BaseModel):
    difficulty: Difficulty


class EvaluateAnswerReq(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class GenerateSummaryReq(BaseModel):
    transcript: List[TranscriptEntry]


class ErrorResp(BaseModel):
    error: str


class StartSessionReq(BaseModel):
    resume_text: str = Field(min_length=1)


class AnswerReq(BaseModel):
    text: str = ""


class DraftReq(BaseModel):
    text: str = ""


class SessionResp(BaseModel):
    state: SessionState
    resumable: bool = False
    time_limit: Optional[int] = None


class CandidateListItem(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    total_score: Optional[int] = None
    completed_at: str
