"""Persistence helpers for session and archive snapshots."""
from .persistence import PersistedState, StateFile, bind_persistence

__all__ = ["PersistedState", "StateFile", "bind_persistence"]
