"""CLI entry point for the Terraform refactor assistant."""
import argparse
from dotenv import load_dotenv
import getpass
import json
import os
import platform
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

from rich.panel import Panel

from tf_refactor import __version__
from tf_refactor.common.logger import (
    console,
    err_console,
    error,
    progress,
    setup_logging,
    success,
    warning,
)
from tf_refactor.models import SessionResult, SourceFile
from tf_refactor.providers import (
    DEFAULT_INSTRUCTION,
    PROVIDER_NAMES,
    ProviderConfigError,
    SuggestionProvider,
    create_provider,
)
from tf_refactor.report import (
    ReportWriteError,
    render_analysis_report,
    render_report,
    save_report,
)
from tf_refactor.session import AutoDecider, ConsoleDecider, RefactorSession, SessionError
from tf_refactor.utils import diff_stats, discover_tf_files, write_source_files

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_PROVIDER_ERROR = 2
EXIT_SESSION_ABORTED = 3
EXIT_REPORT_ERROR = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Defaults
DEFAULT_PROVIDER = os.getenv("TF_REFACTOR_PROVIDER", "q")
DEFAULT_TIMEOUT = 30
DEFAULT_REPORT_DIR = "./report"
DEFAULT_DIRECTORY = "./"

# Safe keys allowed in config output (no secrets)
_SAFE_CONFIG_KEYS = frozenset({
    "directory", "provider", "model", "timeout", "instruction",
    "report_dir", "yes", "no_apply", "write", "analyze",
    "verbose", "dry_run", "output_json",
})


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tf-refactor",
        description="Review AI-suggested refactors of Terraform files one diff at a time",
    )
    parser.add_argument(
        "directory",
        type=str,
        nargs="?",
        default=None,
        help="Directory containing .tf files (prompted for when omitted)",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default=DEFAULT_PROVIDER if DEFAULT_PROVIDER in PROVIDER_NAMES else "q",
        choices=PROVIDER_NAMES,
        help="Suggestion provider: q (Amazon Q CLI, default), anthropic, or openai",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model ID for API-backed providers",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f"Suggestion timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--instruction",
        type=str,
        default=DEFAULT_INSTRUCTION,
        help="Instruction sent to the assistant along with each file",
    )
    parser.add_argument(
        "--report-dir",
        type=str,
        default=DEFAULT_REPORT_DIR,
        help=f"Directory for the session report (default: {DEFAULT_REPORT_DIR})",
    )
    decision = parser.add_mutually_exclusive_group()
    decision.add_argument(
        "--yes", action="store_true", help="Apply every successful suggestion without asking"
    )
    decision.add_argument(
        "--no-apply", action="store_true", help="Show diffs and record them, but apply nothing"
    )
    decision.add_argument(
        "--analyze",
        action="store_true",
        help="Only collect suggestions and write them to a report",
    )
    parser.add_argument(
        "--write",
        action="store_true",
        help="Write accepted changes back to the .tf files",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print config and exit without running"
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output the session summary as JSON"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def prompt_directory(input_fn=input) -> str | None:
    """Ask for the Terraform directory; an empty answer means the default.

    Returns:
        The directory, or None if input ended.
    """
    try:
        answer = input_fn(f"📁 Enter path to Terraform folder [{DEFAULT_DIRECTORY}]: ").strip()
    except EOFError:
        return None
    return answer or DEFAULT_DIRECTORY


def validate_directory(raw_path: str) -> str:
    """Validate and resolve the Terraform directory.

    Raises:
        SystemExit: If path is not a valid directory.
    """
    resolved = Path(raw_path).expanduser().resolve()
    if not resolved.is_dir():
        print(f"Error: '{raw_path}' is not a valid directory.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    return str(resolved)


def _username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def print_greeting() -> None:
    """Print the banner with user, host and working directory."""
    now = datetime.now().astimezone()
    lines = [
        "[bold blue]Terraform Refactor[/bold blue]",
        f"[bold green]{_username()}@{platform.node()}[/bold green]",
        "",
        f"[bold]📅 Date:[/bold] [cyan]{now.strftime('%d/%m/%Y, %H:%M:%S %Z')}[/cyan]",
        f"[bold]📁 Current Working Directory:[/bold] [cyan]{os.getcwd()}[/cyan]",
        "",
        "[yellow]Terraform Refactor Tool will help you improve code readability and performance![/yellow]",
    ]
    console.print(Panel("\n".join(lines), border_style="green", padding=(1, 1)))


def format_result_json(result: SessionResult, report_path: Path | None) -> str:
    """Serialize a session summary to JSON."""
    payload = {
        "status": result.status.value,
        "files": len(result.files),
        "records": [
            {
                "path": record.source_path,
                "accepted": record.accepted,
                "suggestion_failed": record.suggestion_failed,
                "stats": diff_stats(record.diff),
            }
            for record in result.records
        ],
        "errors": result.errors,
        "report_path": str(report_path) if report_path else None,
    }
    return json.dumps(payload, indent=2, default=str)


def print_result_human(result: SessionResult) -> None:
    """Print a short summary of the session."""
    skipped = len(result.records) - result.accepted_count
    progress(
        f"\nFiles reviewed: {len(result.records)}/{len(result.files)}  "
        f"applied: {result.accepted_count}  skipped: {skipped}"
    )
    if result.errors:
        progress(f"Errors ({len(result.errors)}):")
        for err in result.errors:
            progress(f"  - {err}")


def print_config_human(config: dict) -> None:
    """Print configuration, restricted to the safe allow-list."""
    print("\nConfiguration:")
    print(f"{'='*40}")
    for key, value in config.items():
        if key in _SAFE_CONFIG_KEYS:
            print(f"  {key}: {value}")
    print(f"{'='*40}")


def run_analysis(
    files: list[SourceFile],
    provider: SuggestionProvider,
    instruction: str,
    report_dir: str,
) -> int:
    """Collect suggestions for every file and write them to a report."""
    suggestions = []
    for source_file in files:
        progress(f"Refactoring file: {source_file.path}")
        suggestion = provider.suggest(source_file, instruction)
        if suggestion.is_error:
            error(f"Refactoring failed for: {source_file.path}")
        else:
            success(f"Refactored: {source_file.path}")
        suggestions.append(suggestion)

    generated_at = datetime.now(timezone.utc)
    try:
        report_path = save_report(
            render_analysis_report(suggestions, generated_at), report_dir, generated_at
        )
    except ReportWriteError as exc:
        warning(str(exc))
        return EXIT_REPORT_ERROR
    success(f"📄 Refactor report saved to {report_path}")
    return EXIT_SUCCESS


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    raw_directory = args.directory
    if raw_directory is None:
        try:
            raw_directory = prompt_directory() if sys.stdin.isatty() else DEFAULT_DIRECTORY
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            return EXIT_KEYBOARD_INTERRUPT
        if raw_directory is None:
            return EXIT_INVALID_INPUT

    try:
        directory = validate_directory(raw_directory)
    except SystemExit as exc:
        return exc.code

    config = {
        "directory": directory,
        "provider": args.provider,
        "model": args.model,
        "timeout": args.timeout,
        "instruction": args.instruction,
        "report_dir": args.report_dir,
        "yes": args.yes,
        "no_apply": args.no_apply,
        "write": args.write,
        "analyze": args.analyze,
        "verbose": args.verbose,
        "dry_run": args.dry_run,
        "output_json": args.output_json,
    }

    if args.dry_run:
        if args.output_json:
            print(json.dumps(config, indent=2))
        else:
            print_config_human(config)
        return EXIT_SUCCESS

    try:
        if not args.output_json:
            print_greeting()
            progress(f"🔍 Analyzing Terraform files in directory: {directory}")

        files = discover_tf_files(directory)
        if not files:
            error("No Terraform files found in the directory!")
            return EXIT_SUCCESS

        provider = create_provider(args.provider, model=args.model, timeout=args.timeout)

        if args.analyze:
            return run_analysis(files, provider, args.instruction, args.report_dir)

        if args.yes:
            decider = AutoDecider(accept=True)
        elif args.no_apply:
            decider = AutoDecider(accept=False)
        else:
            decider = ConsoleDecider(console=err_console if args.output_json else console)

        session = RefactorSession(provider, decider, instruction=args.instruction)
        result = session.run(files)

        exit_code = EXIT_SESSION_ABORTED if result.aborted else EXIT_SUCCESS
        if result.aborted:
            warning("Session aborted; reporting the files reviewed so far.")

        report_path = None
        if result.records:
            generated_at = datetime.now(timezone.utc)
            try:
                report_path = save_report(
                    render_report(result.records, generated_at), args.report_dir, generated_at
                )
                if not args.output_json:
                    success(f"📄 Refactor report saved to {report_path}")
            except ReportWriteError as exc:
                warning(str(exc))
                if exit_code == EXIT_SUCCESS:
                    exit_code = EXIT_REPORT_ERROR

        if args.write:
            written = {str(path) for path in write_source_files(result.files, result.records)}
            for record in result.records:
                if not record.accepted:
                    continue
                if record.source_path not in written:
                    warning(f"Could not write changes to {record.source_path}")
                elif not args.output_json:
                    success(f"Wrote {record.source_path}")

        if args.output_json:
            print(format_result_json(result, report_path))
        else:
            print_result_human(result)

        return exit_code

    except ProviderConfigError as exc:
        return _handle_error("Provider error", exc, args.verbose, EXIT_PROVIDER_ERROR)

    except SessionError as exc:
        return _handle_error("Session error", exc, args.verbose, EXIT_SESSION_ABORTED)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
