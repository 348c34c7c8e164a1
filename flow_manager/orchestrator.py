"""Interview orchestration: resume intake, detail corrections and the Q&A loop.

The flow is the single writer of the session store. Every public coroutine
returns the snapshot it leaves behind; failures of the AI operations are
turned into a chat message and never escape.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Sequence, Set, TypeVar
from uuid import uuid4

from ai_services import TranscriptEntry
from candidate_management import CandidateArchive
from config import settings
from interview_session import InterviewQuestion, SessionState, SessionStore
from observability import log_event, span
from validation import (
    FIELD_ORDER,
    CandidateDetails,
    CorrectionField,
    correction_prompt,
    validate_and_get_corrections,
    validate_correction,
)

from .client import InterviewApi, InterviewApiError
from .policy import (
    NO_ANSWER_PLACEHOLDER,
    SUMMARY_FALLBACK,
    difficulty_for,
    has_next,
    rules_message,
    time_limit,
)
from .timer import CountdownTimer


logger = logging.getLogger(__name__)

T = TypeVar("T")

PARSE_FAILURE_MESSAGE = (
    "I'm sorry, I encountered an error reading that document. Let's get your details manually."
)
VERIFIED_MESSAGE = (
    "I've successfully verified your details. Before we begin, please review the interview format."
)
CORRECTION_SAVED_MESSAGE = "Thank you, I've updated that."
CORRECTION_RETRY_MESSAGE = "That doesn't seem right. Please try again."
DETAILS_CONFIRMED_MESSAGE = "Great, all your details are confirmed. Let's begin the interview."
ANSWER_RECORDED_MESSAGE = "Your answer has been recorded. Preparing the next question..."
ERROR_MESSAGE = "An error occurred. Let's try that again."
SUBMITTED_MESSAGE = (
    "Your results have been successfully submitted to the hiring team. "
    "Thank you for your time! You may now close this window."
)
SUBMITTED_FALLBACK_MESSAGE = (
    "Your results have been successfully submitted. Thank you for your time! You may now close this window."
)


class SessionConflictError(RuntimeError):
    """Raised when a new session is started while another is in progress."""


class InterviewFlow:
    def __init__(
        self,
        store: SessionStore,
        archive: CandidateArchive,
        api: InterviewApi,
        *,
        tick_seconds: Optional[float] = None,
        pacing: Optional[float] = None,
    ) -> None:
        self._store = store
        self._archive = archive
        self._api = api
        self._pacing = settings.MESSAGE_PACING if pacing is None else pacing
        interval = settings.TIMER_TICK_SECONDS if tick_seconds is None else tick_seconds
        self._timer = CountdownTimer(self.tick, interval=interval)
        self._draft = ""
        self._onboarding = False
        self._preparing = False
        self._background: Set[asyncio.Task] = set()
        self.session_id = uuid4().hex
        store.subscribe(self._log_transition)

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def archive(self) -> CandidateArchive:
        return self._archive

    @property
    def api(self) -> InterviewApi:
        return self._api

    @property
    def state(self) -> SessionState:
        return self._store.state

    @property
    def draft(self) -> str:
        return self._draft

    @property
    def timer_running(self) -> bool:
        return self._timer.running

    # -- public operations -------------------------------------------------

    async def start_from_resume(self, resume_text: str) -> SessionState:
        """Parse the resume and move the session from ``idle`` to ``active``."""

        if self._store.state.status != "idle" or self._onboarding:
            raise SessionConflictError("An interview session is already in progress")
        self._onboarding = True
        try:
            try:
                with span(self.session_id, "parse_resume"):
                    parsed = await self._api.parse_resume(resume_text)
            except InterviewApiError:
                logger.warning("Resume parsing failed; falling back to manual details", exc_info=True)
                self._store.set_status("active")
                self._store.add_message("ai", PARSE_FAILURE_MESSAGE)
                self._begin_corrections(FIELD_ORDER)
                return self._store.state

            details = CandidateDetails(name=parsed.name, email=parsed.email, phone=parsed.phone)
            self._store.set_candidate_details(**details.model_dump())
            result = validate_and_get_corrections(details)
            self._store.set_status("active")
            if result.is_valid:
                await self._onboard(details)
            else:
                self._store.add_message(
                    "ai",
                    f"Hello, {details.name or 'there'}! I've reviewed your resume. A few details need confirmation.",
                )
                self._begin_corrections(result.fields_to_correct)
            return self._store.state
        finally:
            self._onboarding = False

    async def submit_answer(
        self,
        text: str,
        *,
        auto: bool = False,
        question_index: Optional[int] = None,
    ) -> SessionState:
        """Handle one submission from the candidate or from the countdown.

        The first submission to dispatch wins: anything arriving while the
        session is not ``active``, while the first question is being prepared,
        or an auto-submission for a question that is no longer current, is
        ignored.
        """

        state = self._store.state
        if state.status != "active" or self._preparing:
            return state
        if auto and question_index is not None and question_index != state.current_question_index:
            return state
        if not auto and not text.strip():
            return state

        answer = (text.strip() or NO_ANSWER_PLACEHOLDER) if auto else text
        self._stop_timer()
        self._draft = ""
        self._store.add_message("user", answer)

        field = state.current_correction
        if field is not None:
            await self._apply_correction(field, answer)
        elif state.current_question is None:
            self._preparing = True
            try:
                await self._ask_first_question()
            finally:
                self._preparing = False
        else:
            await self._answer_current_question(answer)
        return self._store.state

    def update_draft(self, text: str) -> None:
        """Remember the current input value for auto-submission."""

        self._draft = text

    def tick(self) -> SessionState:
        """Advance the countdown by one step; auto-submit when it reaches zero."""

        state = self._store.tick_timer()
        if state.timer_active and state.remaining_time == 0:
            self._stop_timer()
            log_event("auto_submit", self.session_id, question_index=state.current_question_index)
            self._spawn(
                self.submit_answer(self._draft, auto=True, question_index=state.current_question_index)
            )
        return self._store.state

    def reset(self) -> SessionState:
        """Discard the session; in-flight requests are not cancelled."""

        self._timer.stop()
        self._draft = ""
        self._preparing = False
        state = self._store.reset()
        self.session_id = uuid4().hex
        return state

    def resume(self) -> SessionState:
        """Pick up a rehydrated session: restart its countdown, unstick ``loading``."""

        state = self._store.state
        if state.status == "loading":
            state = self._store.set_status("active")
        if state.timer_active and state.remaining_time is not None:
            self._timer.start()
        return state

    async def drain(self) -> None:
        """Wait for background work (auto-submissions, summary generation)."""

        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def aclose(self) -> None:
        self._timer.stop()
        for task in list(self._background):
            task.cancel()
        await self.drain()

    # -- onboarding and corrections ---------------------------------------

    async def _onboard(self, details: CandidateDetails) -> None:
        self._preparing = True
        try:
            self._store.add_message("ai", f"Hello, {details.name}! Welcome to your mock interview.")
            await self._pause(1.2)
            self._store.add_message("ai", VERIFIED_MESSAGE)
            await self._pause(1.5)
            self._store.add_message("ai", rules_message())
            await self._pause(2.5)
            await self._ask_first_question()
        finally:
            self._preparing = False

    def _begin_corrections(self, fields: Sequence[CorrectionField]) -> None:
        self._store.start_correction_flow(list(fields))
        self._ask_for_correction()

    def _ask_for_correction(self) -> None:
        state = self._store.state
        field = state.current_correction
        if field is None:
            return
        prompt = correction_prompt(field)
        if state.messages and state.messages[-1].text == prompt:
            return
        self._store.add_message("ai", prompt)

    async def _apply_correction(self, field: CorrectionField, answer: str) -> None:
        outcome = validate_correction(field, answer)
        log_event("correction", self.session_id, field=field, outcome="ok" if outcome.is_valid else "retry")
        if not outcome.is_valid:
            self._store.add_message("ai", CORRECTION_RETRY_MESSAGE)
            return
        self._store.set_candidate_details(**{field: outcome.value})
        self._store.add_message("ai", CORRECTION_SAVED_MESSAGE)
        state = self._store.process_next_correction()
        if state.correction_queue:
            self._ask_for_correction()
            return

        self._preparing = True
        try:
            await self._pause(1.2)
            self._store.add_message("ai", DETAILS_CONFIRMED_MESSAGE)
            await self._pause(1.5)
            self._store.add_message("ai", rules_message())
            await self._pause(2.5)
            await self._ask_first_question()
        finally:
            self._preparing = False

    # -- question loop -----------------------------------------------------

    async def _ask_first_question(self) -> None:
        difficulty = difficulty_for(0)
        try:
            generated = await self._timed("generate_question", self._api.generate_question(difficulty))
        except InterviewApiError:
            logger.warning("First question could not be generated", exc_info=True)
            self._store.add_message("ai", ERROR_MESSAGE)
            return
        self._store.start_interview(InterviewQuestion(text=generated.question, difficulty=difficulty))
        self._start_timer(time_limit(difficulty))

    async def _answer_current_question(self, answer: str) -> None:
        state = self._store.state
        index = state.current_question_index
        question = state.current_question
        if question is None:
            raise RuntimeError("No current question to answer")
        self._store.set_status("loading")
        try:
            calls: List[Awaitable[Any]] = [
                self._timed("evaluate_answer", self._api.evaluate_answer(question.text, answer))
            ]
            next_difficulty = difficulty_for(index + 1) if has_next(index) else None
            if next_difficulty is not None:
                calls.append(self._timed("generate_question", self._api.generate_question(next_difficulty)))
            results = await asyncio.gather(*calls, return_exceptions=True)

            evaluation = _unwrap(results[0])
            self._store.save_answer_and_score(answer, evaluation.score, evaluation.justification)
            log_event("evaluation", self.session_id, question_index=index, score=evaluation.score)
            self._store.add_message("ai", ANSWER_RECORDED_MESSAGE)

            if next_difficulty is None:
                self._finish()
                return
            generated = _unwrap(results[1])
            await self._pause(1.5)
            self._store.ask_next_question(InterviewQuestion(text=generated.question, difficulty=next_difficulty))
            self._start_timer(time_limit(next_difficulty))
        except InterviewApiError:
            logger.warning("Interview step failed for question %d", index, exc_info=True)
            self._store.add_message("ai", ERROR_MESSAGE)
        finally:
            if self._store.state.status == "loading":
                self._store.set_status("active")

    def _finish(self) -> None:
        self._timer.stop()
        state = self._store.end_interview()
        log_event("finished", self.session_id, score=state.total_score)
        self._spawn(self._summarize_and_archive(state))

    async def _summarize_and_archive(self, state: SessionState) -> None:
        transcript = [
            TranscriptEntry(
                text=question.text,
                answer=question.answer,
                score=question.score,
                justification=question.justification,
            )
            for question in state.questions
        ]
        try:
            result = await self._timed("generate_summary", self._api.generate_summary(transcript))
        except InterviewApiError:
            logger.warning("Summary generation failed; archiving with placeholder", exc_info=True)
            self._archive_session(state, SUMMARY_FALLBACK)
            await self._pause(1.5)
            self._store.add_message("ai", SUBMITTED_FALLBACK_MESSAGE)
            return
        self._store.set_final_summary(result.summary)
        self._archive_session(state, result.summary)
        await self._pause(1.5)
        self._store.add_message("ai", SUBMITTED_MESSAGE)

    def _archive_session(self, state: SessionState, summary: str) -> None:
        record = self._archive.add_record(
            details=state.candidate_details,
            questions=state.questions,
            total_score=state.total_score,
            final_summary=summary,
        )
        log_event("archived", self.session_id, action=record.id, score=record.total_score)

    # -- helpers -----------------------------------------------------------

    def _start_timer(self, seconds: int) -> None:
        self._store.start_timer(seconds)
        self._timer.start()

    def _stop_timer(self) -> None:
        self._timer.stop()
        state = self._store.state
        if state.timer_active or state.remaining_time is not None:
            self._store.stop_timer()

    async def _pause(self, seconds: float) -> None:
        if self._pacing > 0:
            await asyncio.sleep(seconds * self._pacing)

    async def _timed(self, op: str, awaitable: Awaitable[T]) -> T:
        with span(self.session_id, op):
            return await awaitable

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background interview task failed", exc_info=task.exception())

    def _log_transition(self, action: str, state: SessionState) -> None:
        if action == "tick_timer":
            return
        log_event(
            "transition",
            self.session_id,
            action=action,
            status=state.status,
            question_index=state.current_question_index,
        )


def _unwrap(result: Any) -> Any:
    if isinstance(result, BaseException):
        raise result
    return result


__all__ = ["InterviewFlow", "SessionConflictError"]
