"""Refactor session package."""

from tf_refactor.session.exceptions import InteractionAbort, SessionBuildError, SessionError
from tf_refactor.session.graph import (
    ABORT_PREFIX,
    Decider,
    RefactorSession,
    build_session_graph,
    run_session,
)
from tf_refactor.session.interaction import AutoDecider, ConsoleDecider, render_rich_diff
from tf_refactor.session.state import SessionState, make_initial_state

__all__ = [
    "ABORT_PREFIX",
    "AutoDecider",
    "ConsoleDecider",
    "Decider",
    "InteractionAbort",
    "RefactorSession",
    "SessionBuildError",
    "SessionError",
    "SessionState",
    "build_session_graph",
    "make_initial_state",
    "render_rich_diff",
    "run_session",
]
