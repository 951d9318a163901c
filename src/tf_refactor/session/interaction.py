"""Deciders: the user-interaction side of the refactor session."""

import os
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from tf_refactor.models import DiffKind, DiffLine, SourceFile, Suggestion
from tf_refactor.session.exceptions import InteractionAbort

DIFF_STYLES = {
    DiffKind.UNCHANGED: "grey50",
    DiffKind.REMOVED: "red",
    DiffKind.ADDED: "blue",
}

_YES = {"y", "yes"}
_NO = {"n", "no"}


def render_rich_diff(lines: list[DiffLine]) -> Text:
    """Colour each diff line by kind for terminal display."""
    text = Text()
    for index, line in enumerate(lines):
        if index:
            text.append("\n")
        text.append(line.render(), style=DIFF_STYLES[line.kind])
    return text


class ConsoleDecider:
    """Shows the diff in a panel and asks whether to apply it."""

    def __init__(
        self,
        console: Console | None = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self.console = console or Console()
        self.input_fn = input_fn

    def show(self, source_file: SourceFile, diff: list[DiffLine]) -> None:
        self.console.print(
            Panel(
                render_rich_diff(diff),
                title=f"Proposed changes in {os.path.basename(source_file.path)}",
                title_align="center",
                border_style="cyan",
                padding=(1, 1),
            )
        )

    def ask(self, question: str) -> bool:
        """Ask a yes/no question; an empty answer means yes.

        Raises:
            InteractionAbort: On end of input or Ctrl-C.
        """
        while True:
            try:
                answer = self.input_fn(f"{question} [Y/n]: ").strip().lower()
            except (EOFError, KeyboardInterrupt) as exc:
                raise InteractionAbort("decision prompt interrupted") from exc
            if not answer or answer in _YES:
                return True
            if answer in _NO:
                return False
            self.console.print("[yellow]Please answer 'y' or 'n'.[/yellow]")

    def __call__(self, source_file: SourceFile, suggestion: Suggestion, diff: list[DiffLine]) -> bool:
        self.show(source_file, diff)
        if suggestion.is_error:
            self.console.print(
                f"[red]✖ No usable suggestion for {source_file.path}: {suggestion.error}[/red]"
            )
            return False

        accepted = self.ask("Do you want to apply these changes?")
        if accepted:
            self.console.print(f"[green]✔ Changes applied for {source_file.path}[/green]")
        else:
            self.console.print(f"[grey50]⏭ Skipped {source_file.path}[/grey50]")
        return accepted


class AutoDecider:
    """Non-interactive decider that answers the same way for every file.

    Failed suggestions are never accepted.
    """

    def __init__(self, accept: bool) -> None:
        self.accept = accept

    def __call__(self, source_file: SourceFile, suggestion: Suggestion, diff: list[DiffLine]) -> bool:
        if suggestion.is_error:
            return False
        return self.accept
