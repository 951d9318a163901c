"""Session report rendering and persistence."""

from tf_refactor.report.exceptions import ReportError, ReportWriteError
from tf_refactor.report.writer import (
    format_timestamp,
    render_analysis_report,
    render_report,
    report_filename,
    save_report,
)

__all__ = [
    "ReportError",
    "ReportWriteError",
    "format_timestamp",
    "render_analysis_report",
    "render_report",
    "report_filename",
    "save_report",
]
