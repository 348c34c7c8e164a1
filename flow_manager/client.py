from __future__ import annotations  # Async clients for the four AI operations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ai_services import (
    AnswerEvaluation,
    CandidateSummary,
    GeneratedQuestion,
    ParsedResume,
    TranscriptEntry,
    evaluate_answer_with_config,
    generate_question_with_config,
    generate_summary_with_config,
    parse_resume_with_config,
)
from interview_session import Difficulty


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class InterviewApiError(RuntimeError):  # Any failed AI operation, whatever the transport
    pass


class InterviewApi(Protocol):  # The external operations the interview flow depends on
    async def parse_resume(self, resume_text: str) -> ParsedResume: ...

    async def generate_question(self, difficulty: Difficulty) -> GeneratedQuestion: ...

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation: ...

    async def generate_summary(self, transcript: Sequence[TranscriptEntry]) -> CandidateSummary: ...


class DirectInterviewApi:  # In-process calls through the LLM-backed services
    def __init__(self, config_path: Path) -> None:
        self._config_path = Path(config_path)

    async def _run(self, op: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args, config_path=self._config_path)
        except Exception as exc:  # noqa: BLE001
            logger.error("AI operation %s failed: %s", op, exc)
            raise InterviewApiError(f"{op} failed") from exc

    async def parse_resume(self, resume_text: str) -> ParsedResume:
        return await self._run("parse_resume", parse_resume_with_config, resume_text)

    async def generate_question(self, difficulty: Difficulty) -> GeneratedQuestion:
        return await self._run("generate_question", generate_question_with_config, difficulty)

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation:
        return await self._run("evaluate_answer", evaluate_answer_with_config, question, answer)

    async def generate_summary(self, transcript: Sequence[TranscriptEntry]) -> CandidateSummary:
        return await self._run("generate_summary", generate_summary_with_config, list(transcript))

    async def aclose(self) -> None:
        return None


class HttpInterviewApi:  # POSTs to a remote deployment of the AI endpoints
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    async def _post(self, path: str, body: Dict[str, Any], schema: Type[T]) -> T:
        try:
            response = await self._client.post(path, json=body)
            response.raise_for_status()
            return schema.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            logger.error("POST %s failed: %s", path, exc)
            raise InterviewApiError(f"POST {path} failed") from exc

    async def parse_resume(self, resume_text: str) -> ParsedResume:
        return await self._post("/api/parse-resume", {"resumeText": resume_text}, ParsedResume)

    async def generate_question(self, difficulty: Difficulty) -> GeneratedQuestion:
        return await self._post("/api/generate-question", {"difficulty": difficulty}, GeneratedQuestion)

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation:
        return await self._post("/api/evaluate-answer", {"question": question, "answer": answer}, AnswerEvaluation)

    async def generate_summary(self, transcript: Sequence[TranscriptEntry]) -> CandidateSummary:
        body = {"transcript": [entry.model_dump() for entry in transcript]}
        return await self._post("/api/generate-summary", body, CandidateSummary)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["DirectInterviewApi", "HttpInterviewApi", "InterviewApi", "InterviewApiError"]
