"""Exceptions for refactor session operations."""


class SessionError(Exception):
    """Base exception for all refactor session operations."""


class SessionBuildError(SessionError):
    """Raised when the session graph cannot be constructed."""


class InteractionAbort(SessionError):
    """Raised by a decider when the accept/skip decision cannot be collected."""
