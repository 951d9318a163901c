"""Positional line differ used to preview refactor suggestions.

This is a two-pointer alignment, not a longest-common-subsequence diff.
Once the two sequences fall out of step (after an inserted or deleted
line) it keeps emitting Removed/Added pairs and does not re-synchronise.
"""

from tf_refactor.models import DiffKind, DiffLine


def split_lines(text: str) -> list[str]:
    """Split text on newlines.

    The empty string yields no lines. Otherwise behaves like
    ``text.split("\\n")``, so a trailing newline produces a final empty line.
    """
    if not text:
        return []
    return text.split("\n")


def compute_diff(old_text: str, new_text: str) -> list[DiffLine]:
    """Align two texts line by line.

    Args:
        old_text: Current file content.
        new_text: Proposed replacement content.

    Returns:
        Ordered DiffLines tagged unchanged, removed or added.
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)

    result: list[DiffLine] = []
    i = 0
    j = 0

    while i < len(old_lines) or j < len(new_lines):
        if i < len(old_lines) and j < len(new_lines) and old_lines[i] == new_lines[j]:
            result.append(DiffLine(kind=DiffKind.UNCHANGED, text=old_lines[i]))
            i += 1
            j += 1
            continue

        # Both branches may fire in the same iteration
        if i < len(old_lines):
            result.append(DiffLine(kind=DiffKind.REMOVED, text=old_lines[i]))
            i += 1
        if j < len(new_lines):
            result.append(DiffLine(kind=DiffKind.ADDED, text=new_lines[j]))
            j += 1

    return result


def render_diff(lines: list[DiffLine]) -> str:
    """Render DiffLines as plain text, one prefixed line per entry."""
    return "".join(f"{line.render()}\n" for line in lines)


def diff_stats(lines: list[DiffLine]) -> dict[str, int]:
    """Count lines per kind."""
    stats = {kind.value: 0 for kind in DiffKind}
    for line in lines:
        stats[line.kind.value] += 1
    return stats


def has_changes(lines: list[DiffLine]) -> bool:
    return any(line.kind != DiffKind.UNCHANGED for line in lines)
