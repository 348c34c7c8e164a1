"""Namespaced JSON snapshot of the session and archive state."""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from candidate_management import CandidateArchive, CandidateRecord
from interview_session import SessionState, SessionStore


logger = logging.getLogger(__name__)


class PersistedState(BaseModel):
    interview: SessionState = Field(default_factory=SessionState)
    candidates: List[CandidateRecord] = Field(default_factory=list)


class StateFile:
    """One JSON document per namespace, replaced atomically on each save."""

    def __init__(self, directory: str | Path, namespace: str) -> None:
        self._directory = Path(directory)
        self.namespace = namespace

    @property
    def path(self) -> Path:
        slug = re.sub(r"[^A-Za-z0-9_.-]+", "-", self.namespace).strip("-") or "state"
        return self._directory / f"{slug}.json"

    def save(self, state: PersistedState) -> Path:
        """Persist ``state`` atomically and return the file path."""
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self.path
        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump({"namespace": self.namespace, **state.model_dump(mode="json")}, handle, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
        return path

    def load(self) -> Optional[PersistedState]:
        """Load the stored snapshot, or ``None`` when absent or unreadable."""
        path = self.path
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
            data.pop("namespace", None)
            return PersistedState.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Discarding unreadable state file %s: %s", path, exc)
            return None


def bind_persistence(state_file: StateFile, store: SessionStore, archive: CandidateArchive) -> None:
    """Write a fresh snapshot whenever the session or the archive changes."""

    def _save(*_: object) -> None:
        state_file.save(PersistedState(interview=store.state, candidates=archive.list_records()))

    def _on_transition(action: str, state: SessionState) -> None:
        # Countdown steps are not persisted; a rehydrated timer resumes from the last other transition.
        if action != "tick_timer":
            _save()

    store.subscribe(_on_transition)
    archive.subscribe(_save)


__all__ = ["PersistedState", "StateFile", "bind_persistence"]
