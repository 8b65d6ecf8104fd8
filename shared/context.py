"""
Call context for tool execution.

The host framework runs every tool call inside a conversation session.
The session id travels through contextvars so tools can read it without
it being part of the model-supplied parameters.

Usage:
    from shared.context import session_scope, get_session_id

    with session_scope("session-123"):
        await tool.run(call)
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


def get_session_id() -> Optional[str]:
    """Get current session id (or None if not set)."""
    return _session_id_var.get()


def set_session_id(session_id: Optional[str]) -> None:
    """Set session id for the current async context."""
    _session_id_var.set(session_id)


@contextmanager
def session_scope(session_id: str) -> Iterator[str]:
    """Bind a session id for the duration of the block."""
    token = _session_id_var.set(session_id)
    try:
        yield session_id
    finally:
        _session_id_var.reset(token)
