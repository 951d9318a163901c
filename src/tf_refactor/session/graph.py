"""LangGraph state machine for the interactive refactor session.

Each file walks suggest -> diff -> decide -> apply|skip -> record, then the
graph either loops to the next file or ends. An aborted decision ends the
graph without recording the current file.
"""

import logging
from typing import Callable

from langgraph.graph import END, START, StateGraph

from tf_refactor.models import (
    ChangeRecord,
    DiffLine,
    FileStage,
    SessionResult,
    SessionStatus,
    SourceFile,
    Suggestion,
)
from tf_refactor.providers import DEFAULT_INSTRUCTION, SuggestionProvider
from tf_refactor.session.exceptions import InteractionAbort, SessionBuildError
from tf_refactor.session.state import SessionState, make_initial_state
from tf_refactor.utils.line_differ import compute_diff

logger = logging.getLogger(__name__)

ABORT_PREFIX = "ABORT:"
NODES_PER_FILE = 5

Decider = Callable[[SourceFile, Suggestion, list[DiffLine]], bool]


def _current_file(state: SessionState) -> SourceFile:
    return state["files"][state["current_index"]]


def make_suggest_node(provider: SuggestionProvider) -> Callable[[SessionState], dict]:
    """Factory: returns a node that requests a suggestion for the current file.

    Provider failures never escape; they become an error-marked Suggestion
    and an entry in ``errors``. ``KeyboardInterrupt`` while waiting on the
    provider aborts the session without recording the current file.
    """

    def suggest_node(state: SessionState) -> dict:
        source_file = _current_file(state)
        try:
            suggestion = provider.suggest(source_file, state["instruction"])
        except KeyboardInterrupt:
            return _abort_update(
                source_file.path, "interrupted by user", FileStage.SUGGESTION_REQUESTED
            )
        except Exception as exc:
            logger.exception("Provider raised for %s", source_file.path)
            suggestion = Suggestion.failed(source_file.path, str(exc) or type(exc).__name__)

        update: dict = {
            "suggestion": suggestion,
            "stage": FileStage.SUGGESTION_REQUESTED,
        }
        if suggestion.is_error:
            update["errors"] = [f"suggest_node error for {source_file.path}: {suggestion.error}"]
        return update

    return suggest_node


def diff_node(state: SessionState) -> dict:
    source_file = _current_file(state)
    diff = compute_diff(source_file.content, state["suggestion"].proposed_content)
    return {"diff": diff, "stage": FileStage.DIFF_COMPUTED}


def make_decide_node(decider: Decider) -> Callable[[SessionState], dict]:
    """Factory: returns a node that collects the accept/skip decision.

    Any failure of the decider, including ``KeyboardInterrupt``, aborts the
    session.
    """

    def decide_node(state: SessionState) -> dict:
        source_file = _current_file(state)
        try:
            accepted = bool(decider(source_file, state["suggestion"], state["diff"]))
        except InteractionAbort as exc:
            reason = str(exc) or "decision aborted"
            return _abort_update(source_file.path, reason)
        except KeyboardInterrupt:
            return _abort_update(source_file.path, "interrupted by user")
        except Exception as exc:
            logger.debug("Decider failed", exc_info=True)
            return _abort_update(source_file.path, f"{type(exc).__name__}: {exc}")

        return {"accepted": accepted, "stage": FileStage.AWAITING_DECISION}

    return decide_node


def _abort_update(
    path: str,
    reason: str,
    stage: FileStage = FileStage.AWAITING_DECISION,
) -> dict:
    return {
        "aborted": True,
        "stage": stage,
        "errors": [f"{ABORT_PREFIX} session aborted on {path} ({stage.value}): {reason}"],
    }


def route_suggestion(state: SessionState) -> str:
    return "abort" if state["aborted"] else "diff"


def route_decision(state: SessionState) -> str:
    if state["aborted"]:
        return "abort"
    return "apply" if state["accepted"] else "skip"


def apply_node(state: SessionState) -> dict:
    """Replace the current file's content with the proposed content."""
    updated_files = list(state["files"])
    idx = state["current_index"]
    updated_files[idx] = updated_files[idx].model_copy(
        update={"content": state["suggestion"].proposed_content}
    )
    return {"files": updated_files, "stage": FileStage.APPLIED}


def skip_node(state: SessionState) -> dict:
    return {"stage": FileStage.SKIPPED}


def record_node(state: SessionState) -> dict:
    """Append the ChangeRecord for the current file and advance."""
    source_file = _current_file(state)
    suggestion = state["suggestion"]
    record = ChangeRecord(
        source_path=source_file.path,
        diff=list(state["diff"]),
        accepted=state["stage"] == FileStage.APPLIED,
        suggestion_failed=suggestion.is_error,
    )
    return {
        "records": [record],
        "stage": FileStage.RECORDED,
        "current_index": state["current_index"] + 1,
        "suggestion": None,
        "diff": [],
        "accepted": False,
    }


def next_file_or_end(state: SessionState) -> str:
    if state["current_index"] < len(state["files"]):
        return "continue"
    return "done"


def build_session_graph(provider: SuggestionProvider, decider: Decider):
    """Build and compile the session StateGraph.

    Edge topology:
      START -> suggest_node -> conditional(route_suggestion) -> {diff_node, END}
      diff_node -> decide_node
      decide_node -> conditional(route_decision) -> {apply_node, skip_node, END}
      apply_node -> record_node
      skip_node -> record_node
      record_node -> conditional(next_file_or_end) -> {suggest_node, END}

    Raises:
        SessionBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(SessionState)

        graph.add_node("suggest_node", make_suggest_node(provider))
        graph.add_node("diff_node", diff_node)
        graph.add_node("decide_node", make_decide_node(decider))
        graph.add_node("apply_node", apply_node)
        graph.add_node("skip_node", skip_node)
        graph.add_node("record_node", record_node)

        graph.add_edge(START, "suggest_node")
        graph.add_conditional_edges(
            "suggest_node",
            route_suggestion,
            {
                "diff": "diff_node",
                "abort": END,
            },
        )
        graph.add_edge("diff_node", "decide_node")
        graph.add_conditional_edges(
            "decide_node",
            route_decision,
            {
                "apply": "apply_node",
                "skip": "skip_node",
                "abort": END,
            },
        )
        graph.add_edge("apply_node", "record_node")
        graph.add_edge("skip_node", "record_node")
        graph.add_conditional_edges(
            "record_node",
            next_file_or_end,
            {
                "continue": "suggest_node",
                "done": END,
            },
        )

        return graph.compile()

    except Exception as exc:
        raise SessionBuildError(f"Failed to build session graph: {exc}") from exc


class RefactorSession:
    """Runs the suggest/diff/decide cycle over a list of files."""

    def __init__(
        self,
        provider: SuggestionProvider,
        decider: Decider,
        instruction: str = DEFAULT_INSTRUCTION,
    ) -> None:
        self.provider = provider
        self.decider = decider
        self.instruction = instruction
        self._graph = None

    @property
    def graph(self):
        if self._graph is None:
            self._graph = build_session_graph(self.provider, self.decider)
        return self._graph

    def run(self, files: list[SourceFile]) -> SessionResult:
        """Process ``files`` sequentially.

        Returns:
            SessionResult with the final file states, one ChangeRecord per
            processed file in processing order, and ABORTED status if the
            decision step was aborted.
        """
        if not files:
            return SessionResult()

        state = make_initial_state(files, self.instruction)
        final = self.graph.invoke(
            state,
            config={"recursion_limit": NODES_PER_FILE * len(files) + NODES_PER_FILE},
        )

        status = SessionStatus.ABORTED if final["aborted"] else SessionStatus.COMPLETED
        return SessionResult(
            files=final["files"],
            records=final["records"],
            status=status,
            errors=final["errors"],
        )


def run_session(
    files: list[SourceFile],
    provider: SuggestionProvider,
    decider: Decider,
    instruction: str = DEFAULT_INSTRUCTION,
) -> SessionResult:
    return RefactorSession(provider, decider, instruction).run(files)
