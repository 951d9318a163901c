"""Utilities for the Terraform refactor assistant."""

from tf_refactor.utils.files import discover_tf_files, write_source_files
from tf_refactor.utils.line_differ import (
    compute_diff,
    diff_stats,
    has_changes,
    render_diff,
    split_lines,
)

__all__ = [
    "compute_diff",
    "diff_stats",
    "discover_tf_files",
    "has_changes",
    "render_diff",
    "split_lines",
    "write_source_files",
]
