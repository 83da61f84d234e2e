"""Session Context Management.

Binds a notification session (one mounted pipeline instance) and the
user it serves to every log entry, using contextvars.
"""

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_session_id_var: ContextVar[str] = ContextVar("session_id", default="")
_user_id_var: ContextVar[str] = ContextVar("user_id", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_session_id() -> str:
    """Generate a unique session ID using UUID4."""
    return str(uuid.uuid4())


def get_session_id() -> str:
    return _session_id_var.get()


def get_user_id() -> str:
    return _user_id_var.get()


def get_context_dict() -> dict[str, Any]:
    """Get all context variables as a dictionary for log binding."""
    ctx = {}
    session_id = _session_id_var.get()
    if session_id:
        ctx["session_id"] = session_id
    user_id = _user_id_var.get()
    if user_id:
        ctx["user_id"] = user_id
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


@dataclass
class SessionContext:
    """Context manager for session-scoped logging context.

    Example:
        with SessionContext(user_id="user_1"):
            controller.receive_snapshot(records)  # logs carry session_id, user_id
    """

    session_id: str = ""
    user_id: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    _tokens: list = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.session_id:
            self.session_id = generate_session_id()

    def __enter__(self) -> "SessionContext":
        self._tokens = [
            (_session_id_var, _session_id_var.set(self.session_id)),
            (_user_id_var, _user_id_var.set(self.user_id)),
            (_extra_context_var, _extra_context_var.set(self.extra.copy())),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # restore the enclosing context, if any
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the context."""
        current = _extra_context_var.get()
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)
