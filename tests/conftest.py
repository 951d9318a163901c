import io

import pytest
from rich.console import Console

from tf_refactor.models import SourceFile
from tf_refactor.providers import ProviderError, SuggestionProvider


class FakeProvider(SuggestionProvider):
    """Provider whose answers are keyed by file content.

    A value that is an exception instance is raised instead of returned.
    """

    name = "fake"

    def __init__(self, responses: dict[str, object] | None = None, default: str | None = None) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: list[tuple[str, str]] = []

    def complete(self, instruction: str, content: str) -> str:
        self.calls.append((instruction, content))
        response = self.responses.get(content, self.default)
        if isinstance(response, BaseException):
            raise response
        if response is None:
            raise ProviderError("no canned response")
        return response


class ScriptedDecider:
    """Decider that replays a list of answers; exceptions in the list are raised."""

    def __init__(self, answers: list[object]) -> None:
        self.answers = list(answers)
        self.seen: list[str] = []

    def __call__(self, source_file, suggestion, diff) -> bool:
        self.seen.append(source_file.path)
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def make_file():
    def _make(path: str = "main.tf", content: str = "a\nb\nc") -> SourceFile:
        return SourceFile(path=path, content=content)

    return _make


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def scripted_decider():
    return ScriptedDecider


@pytest.fixture
def buffer_console():
    """Console writing to an in-memory buffer, plain text only."""
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=False, color_system=None, width=100), buffer
