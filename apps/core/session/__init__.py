# ======================================================================
# PATH: apps/core/session/__init__.py
# ======================================================================
from .context import (
    clear_current_session,
    get_current_session,
    session_from_user,
    set_current_session,
)
from .mixins import SessionContextMixin

__all__ = [
    "clear_current_session",
    "get_current_session",
    "session_from_user",
    "set_current_session",
    "SessionContextMixin",
]
