"""Exceptions for report operations."""


class ReportError(Exception):
    """Base exception for all report operations."""


class ReportWriteError(ReportError):
    """Raised when a report cannot be written to storage."""
