"""Markdown rendering and persistence of session reports."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from tf_refactor.models import ChangeRecord, Suggestion
from tf_refactor.report.exceptions import ReportWriteError
from tf_refactor.utils.line_differ import render_diff

logger = logging.getLogger(__name__)

REPORT_TITLE = "Terraform Refactor Report"
REPORT_PREFIX = "refactor-report-"


def format_timestamp(generated_at: datetime) -> str:
    """Return a filename-safe UTC ISO-8601 stamp.

    ``2026-10-18T09:05:03.120Z`` becomes ``2026-10-18T09-05-03-120Z``.
    Naive datetimes are taken as UTC.
    """
    if generated_at.tzinfo is None:
        generated_at = generated_at.replace(tzinfo=timezone.utc)
    utc = generated_at.astimezone(timezone.utc)
    iso = utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def report_filename(generated_at: datetime) -> str:
    return f"{REPORT_PREFIX}{format_timestamp(generated_at)}.md"


def _record_status(record: ChangeRecord) -> str:
    if record.suggestion_failed:
        return "suggestion failed (skipped)" if not record.accepted else "suggestion failed (applied)"
    return "applied" if record.accepted else "skipped"


def render_report(records: list[ChangeRecord], generated_at: datetime) -> str:
    """Render change records as a Markdown document.

    Args:
        records: Change records in processing order.
        generated_at: Timestamp shown in the header.

    Returns:
        The report text. Identical input yields identical output.
    """
    parts = [f"# {REPORT_TITLE} ({format_timestamp(generated_at)})\n\n"]
    for record in records:
        parts.append(f"## {record.source_path}\n\n")
        parts.append(f"Status: {_record_status(record)}\n\n")
        parts.append("```diff\n")
        parts.append(render_diff(record.diff))
        parts.append("```\n\n")
    return "".join(parts)


def render_analysis_report(suggestions: list[Suggestion], generated_at: datetime) -> str:
    """Render raw suggestions without a decision step (``--analyze``)."""
    parts = [f"# {REPORT_TITLE} ({format_timestamp(generated_at)})\n\n"]
    for suggestion in suggestions:
        parts.append(f"## {suggestion.source_path}\n\n")
        if suggestion.is_error:
            parts.append("Error during refactoring.\n\n")
            parts.append(f"> {suggestion.proposed_content}\n\n")
        else:
            parts.append(f"```hcl\n{suggestion.proposed_content}\n```\n\n")
    return "".join(parts)


def save_report(text: str, directory: str | Path, generated_at: datetime) -> Path:
    """Write a report under its timestamped filename.

    Raises:
        ReportWriteError: If the directory or file cannot be written.
    """
    report_dir = Path(directory).expanduser()
    report_path = report_dir / report_filename(generated_at)
    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"Error saving the refactor report to {report_path}: {exc}") from exc
    logger.debug("Report written to %s", report_path)
    return report_path
