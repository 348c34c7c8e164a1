import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ai_services import AnswerEvaluation, CandidateSummary, GeneratedQuestion, ParsedResume, TranscriptEntry
from candidate_management import CandidateArchive
from config.settings import settings
from flow_manager import InterviewApiError, InterviewFlow
from interview_session import SessionStore


class FakeInterviewApi:
    """Scripted stand-in for the four AI operations."""

    def __init__(
        self,
        *,
        resume: Optional[ParsedResume] = None,
        scores: Optional[Iterable[int]] = None,
        summary: str = "Solid fundamentals, needs depth on scaling.",
    ) -> None:
        self.resume = resume or ParsedResume(name="Jane Doe", email="jane@example.com", phone="5551234567")
        self.scores: List[int] = list(scores or [7, 7, 7, 7, 7, 7])
        self.summary = summary
        self.fail: set[str] = set()
        self.calls: List[Tuple[str, object]] = []
        self.transcripts: List[List[TranscriptEntry]] = []
        self._questions = 0
        self._evaluations = 0

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise InterviewApiError(f"{op} failed")

    async def parse_resume(self, resume_text: str) -> ParsedResume:
        self.calls.append(("parse_resume", resume_text))
        self._maybe_fail("parse_resume")
        return self.resume

    async def generate_question(self, difficulty: str) -> GeneratedQuestion:
        self.calls.append(("generate_question", difficulty))
        self._maybe_fail("generate_question")
        self._questions += 1
        return GeneratedQuestion(question=f"Question {self._questions} ({difficulty})")

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation:
        self.calls.append(("evaluate_answer", answer))
        self._maybe_fail("evaluate_answer")
        score = self.scores[self._evaluations % len(self.scores)]
        self._evaluations += 1
        return AnswerEvaluation(score=score, justification=f"Scored {score} for '{answer}'.")

    async def generate_summary(self, transcript: Sequence[TranscriptEntry]) -> CandidateSummary:
        self.calls.append(("generate_summary", len(transcript)))
        self.transcripts.append(list(transcript))
        self._maybe_fail("generate_summary")
        return CandidateSummary(summary=self.summary)

    def ops(self, name: str) -> List[object]:
        return [arg for op, arg in self.calls if op == name]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "STATE_DIR", str(tmp_path / "state"), raising=False)
    monkeypatch.setattr(settings, "PERSIST_STATE", False, raising=False)
    monkeypatch.setattr(settings, "MESSAGE_PACING", 0.0, raising=False)
    yield


@pytest.fixture
def fake_api() -> FakeInterviewApi:
    return FakeInterviewApi()


@pytest.fixture
def make_flow():
    def _make(api, *, store: Optional[SessionStore] = None, archive: Optional[CandidateArchive] = None) -> InterviewFlow:
        return InterviewFlow(
            store if store is not None else SessionStore(),
            archive if archive is not None else CandidateArchive(),
            api,
            tick_seconds=3600,
            pacing=0,
        )

    return _make


@pytest.fixture
def api_factory():
    return FakeInterviewApi
