"""Session event logging and AI call timing."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
