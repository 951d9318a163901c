"""State definition for the refactor session graph."""

import operator
from typing import Annotated, TypedDict

from tf_refactor.models import ChangeRecord, DiffLine, FileStage, SourceFile, Suggestion
from tf_refactor.providers import DEFAULT_INSTRUCTION


class SessionState(TypedDict):
    """State for the refactor session graph.

    ``records`` and ``errors`` accumulate across nodes; all other fields
    are overwritten.
    """

    # Input
    instruction: str
    files: list[SourceFile]

    # Current file
    current_index: int
    stage: FileStage
    suggestion: Suggestion | None
    diff: list[DiffLine]
    accepted: bool

    aborted: bool

    records: Annotated[list[ChangeRecord], operator.add]
    errors: Annotated[list[str], operator.add]


def make_initial_state(
    files: list[SourceFile],
    instruction: str = DEFAULT_INSTRUCTION,
) -> SessionState:
    """Create the initial session state.

    Files are copied so the session owns the only mutable handles.
    """
    return {
        "instruction": instruction,
        "files": [source_file.model_copy() for source_file in files],
        "current_index": 0,
        "stage": FileStage.PENDING,
        "suggestion": None,
        "diff": [],
        "accepted": False,
        "aborted": False,
        "records": [],
        "errors": [],
    }
