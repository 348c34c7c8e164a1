from __future__ import annotations  # Interview session package exports

from .models import ChatMessage, Difficulty, InterviewQuestion, Sender, SessionState, SessionStatus
from .store import SessionStore, completion_message

__all__ = [
    "ChatMessage",
    "Difficulty",
    "InterviewQuestion",
    "Sender",
    "SessionState",
    "SessionStatus",
    "SessionStore",
    "completion_message",
]
