"""Lightweight CLI helpers for inspecting the persisted interview state."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from config.settings import settings
from storage import PersistedState, StateFile


def _load(state_dir: Optional[str] = None) -> PersistedState:
    state_file = StateFile(Path(state_dir or settings.STATE_DIR), settings.PERSIST_NAMESPACE)
    return state_file.load() or PersistedState()


def list_candidates(state: PersistedState) -> None:
    for record in state.candidates:
        score = "-" if record.total_score is None else record.total_score
        print(f"[{record.completed_at}] {record.id} {record.details.name} <{record.details.email}> score={score}")


def show_candidate(state: PersistedState, record_id: str) -> None:
    for record in state.candidates:
        if record.id != record_id:
            continue
        print(f"{record.details.name} <{record.details.email}> {record.details.phone}")
        print(f"score={record.total_score} completed={record.completed_at}")
        for index, question in enumerate(record.questions, start=1):
            print(f"Q{index} [{question.difficulty}] {question.text}")
            print(f"  answer: {question.answer}")
            print(f"  score: {question.score} :: {question.justification}")
        print(f"summary: {record.final_summary}")
        return
    print(f"No candidate with id {record_id}")


def tail_transcript(state: PersistedState, limit: int = 20) -> None:
    session = state.interview
    print(f"status={session.status} question_index={session.current_question_index}")
    for message in session.messages[-limit:]:
        print(f"{message.sender}: {message.text}")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--state-dir", help="Directory holding the persisted state file")
    parser.add_argument("--list", action="store_true", help="List archived candidates")
    parser.add_argument("--show", metavar="ID", help="Show one archived candidate")
    parser.add_argument("--tail-session", type=int, help="Show the latest session messages")
    args = parser.parse_args()

    state = _load(args.state_dir)
    if args.list:
        list_candidates(state)
    if args.show:
        show_candidate(state, args.show)
    if args.tail_session:
        tail_transcript(state, args.tail_session)


if __name__ == "__main__":
    main()
