"""Single-writer store for the interview session snapshot.

Every mutation is a named transition that builds a new immutable
``SessionState`` and hands it to subscribers as ``(action, state)``.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from validation import CandidateDetails, CorrectionField

from .models import ChatMessage, InterviewQuestion, Sender, SessionState, SessionStatus


logger = logging.getLogger(__name__)

Listener = Callable[[str, SessionState], None]

MAX_SCORE_PER_QUESTION = 10


def completion_message(total_score: int, question_count: int) -> str:
    return (
        "The interview is now complete. Thank you for your time!\n\n"
        f"Your final score is: {total_score} / {question_count * MAX_SCORE_PER_QUESTION}."
    )


class SessionStore:
    def __init__(self, initial: Optional[SessionState] = None) -> None:
        self._state = initial or SessionState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, action: str, state: SessionState) -> SessionState:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(action, state)
            except Exception:  # noqa: BLE001
                logger.exception("Session listener failed action=%s", action)
        return state

    def _update(self, action: str, **changes: object) -> SessionState:
        return self._commit(action, self._state.model_copy(update=changes))

    def set_candidate_details(self, **partial: Optional[str]) -> SessionState:
        merged = {**self._state.candidate_details.model_dump(), **partial}
        return self._update("set_candidate_details", candidate_details=CandidateDetails(**merged))

    def set_status(self, status: SessionStatus) -> SessionState:
        return self._update("set_status", status=status)

    def add_message(self, sender: Sender, text: str) -> SessionState:
        message = ChatMessage(sender=sender, text=text)
        return self._update("add_message", messages=self._state.messages + (message,))

    def start_correction_flow(self, fields: Sequence[CorrectionField]) -> SessionState:
        return self._update("start_correction_flow", correction_queue=tuple(fields))

    def process_next_correction(self) -> SessionState:
        return self._update("process_next_correction", correction_queue=self._state.correction_queue[1:])

    def start_interview(self, question: InterviewQuestion) -> SessionState:
        if self._state.questions:
            raise ValueError("Interview already started")
        return self._update(
            "start_interview",
            questions=(question,),
            current_question_index=0,
            messages=self._state.messages + (ChatMessage(sender="ai", text=question.text),),
        )

    def save_answer_and_score(self, answer: str, score: int, justification: str) -> SessionState:
        index = self._state.current_question_index
        if index < 0:
            return self._state
        questions = list(self._state.questions)
        questions[index] = questions[index].model_copy(
            update={"answer": answer, "score": score, "justification": justification}
        )
        return self._update("save_answer_and_score", questions=tuple(questions))

    def ask_next_question(self, question: InterviewQuestion) -> SessionState:
        return self._update(
            "ask_next_question",
            questions=self._state.questions + (question,),
            current_question_index=self._state.current_question_index + 1,
            messages=self._state.messages + (ChatMessage(sender="ai", text=question.text),),
        )

    def end_interview(self) -> SessionState:
        total = sum(question.score or 0 for question in self._state.questions)
        message = ChatMessage(sender="ai", text=completion_message(total, len(self._state.questions)))
        return self._update(
            "end_interview",
            status="finished",
            timer_active=False,
            total_score=total,
            messages=self._state.messages + (message,),
        )

    def start_timer(self, seconds: int) -> SessionState:
        return self._update("start_timer", timer_active=True, remaining_time=seconds)

    def tick_timer(self) -> SessionState:
        state = self._state
        if state.timer_active and state.remaining_time is not None and state.remaining_time > 0:
            return self._update("tick_timer", remaining_time=state.remaining_time - 1)
        return state

    def stop_timer(self) -> SessionState:
        return self._update("stop_timer", timer_active=False, remaining_time=None)

    def set_final_summary(self, summary: str) -> SessionState:
        return self._update("set_final_summary", final_summary=summary)

    def reset(self) -> SessionState:
        return self._commit("reset", SessionState())


__all__ = ["Listener", "SessionStore", "completion_message"]
