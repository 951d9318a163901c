"""Data models for the Terraform refactor assistant."""

from tf_refactor.models.diff_models import DiffKind, DiffLine
from tf_refactor.models.session_models import (
    SUGGESTION_ERROR_PREFIX,
    ChangeRecord,
    FileStage,
    SessionResult,
    SessionStatus,
    SourceFile,
    Suggestion,
)

__all__ = [
    "SUGGESTION_ERROR_PREFIX",
    "ChangeRecord",
    "DiffKind",
    "DiffLine",
    "FileStage",
    "SessionResult",
    "SessionStatus",
    "SourceFile",
    "Suggestion",
]
