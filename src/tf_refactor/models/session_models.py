"""Models for files, suggestions and change records within a session."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from tf_refactor.models.diff_models import DiffLine

SUGGESTION_ERROR_PREFIX = "Error during refactoring: "


class FileStage(str, Enum):
    """Per-file stage in the refactor session."""

    PENDING = "pending"
    SUGGESTION_REQUESTED = "suggestion_requested"
    DIFF_COMPUTED = "diff_computed"
    AWAITING_DECISION = "awaiting_decision"
    APPLIED = "applied"
    SKIPPED = "skipped"
    RECORDED = "recorded"


class SessionStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


class SourceFile(BaseModel):
    """A configuration file under review."""

    model_config = ConfigDict(frozen=False)

    path: str  # Unique within a session
    content: str


class Suggestion(BaseModel):
    """Proposed replacement content for one SourceFile."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    proposed_content: str
    error: str | None = None  # Cause when generation failed

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def failed(cls, source_path: str, cause: str) -> "Suggestion":
        """Build a Suggestion whose content is the error marker for ``cause``."""
        return cls(
            source_path=source_path,
            proposed_content=f"{SUGGESTION_ERROR_PREFIX}{cause}",
            error=cause,
        )


class ChangeRecord(BaseModel):
    """Bookkeeping for one processed file: its diff and the decision."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    diff: list[DiffLine] = Field(default_factory=list)
    accepted: bool
    suggestion_failed: bool = False


class SessionResult(BaseModel):
    """Outcome of a refactor session."""

    model_config = ConfigDict(frozen=False)

    files: list[SourceFile] = Field(default_factory=list)
    records: list[ChangeRecord] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.COMPLETED
    errors: list[str] = Field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.status == SessionStatus.ABORTED

    @property
    def accepted_count(self) -> int:
        return sum(1 for record in self.records if record.accepted)
