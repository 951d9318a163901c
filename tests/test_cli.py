"""Unit tests for the CLI module (tf_refactor.cli.main)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tf_refactor.cli.main import (
    DEFAULT_DIRECTORY,
    DEFAULT_REPORT_DIR,
    DEFAULT_TIMEOUT,
    EXIT_INVALID_INPUT,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_PROVIDER_ERROR,
    EXIT_REPORT_ERROR,
    EXIT_SESSION_ABORTED,
    EXIT_SUCCESS,
    build_parser,
    main,
    prompt_directory,
    validate_directory,
)
from tf_refactor.common.logger import err_console
from tf_refactor.providers import DEFAULT_INSTRUCTION, ProviderConfigError
from tf_refactor.session import InteractionAbort


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("tf_refactor.cli.main.setup_logging"):
        yield


@pytest.fixture
def tf_dir(tmp_path):
    directory = tmp_path / "infra"
    directory.mkdir()
    (directory / "a.tf").write_text("a\nb\nc")
    (directory / "b.tf").write_text("keep")
    return directory


@pytest.fixture
def report_dir(tmp_path):
    return tmp_path / "reports"


def _reports(report_dir):
    return sorted(report_dir.glob("refactor-report-*.md")) if report_dir.exists() else []


# ---------------------------------------------------------------------------
# TestBuildParser
# ---------------------------------------------------------------------------
class TestBuildParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.directory is None
        assert args.timeout == DEFAULT_TIMEOUT
        assert args.report_dir == DEFAULT_REPORT_DIR
        assert args.instruction == DEFAULT_INSTRUCTION
        assert args.yes is False
        assert args.write is False

    def test_all_flags(self):
        args = build_parser().parse_args([
            "/tmp", "--provider", "openai", "--model", "gpt-4o", "--timeout", "60",
            "--report-dir", "/r", "--no-apply", "--write", "--verbose", "--output-json",
        ])
        assert args.directory == "/tmp"
        assert args.provider == "openai"
        assert args.model == "gpt-4o"
        assert args.timeout == 60
        assert args.no_apply is True
        assert args.write is True

    def test_yes_and_no_apply_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["/tmp", "--yes", "--no-apply"])

    def test_no_api_key_flags(self):
        args = build_parser().parse_args([])
        assert not hasattr(args, "api_key")


# ---------------------------------------------------------------------------
# TestDirectoryInput
# ---------------------------------------------------------------------------
class TestDirectoryInput:
    def test_validate_valid_dir(self, tmp_path):
        assert validate_directory(str(tmp_path)) == str(tmp_path.resolve())

    def test_validate_nonexistent(self):
        with pytest.raises(SystemExit) as exc_info:
            validate_directory("/nonexistent/path/xyz_abc_123")
        assert exc_info.value.code == EXIT_INVALID_INPUT

    def test_main_rejects_file(self, tmp_path):
        f = tmp_path / "main.tf"
        f.write_text("x")
        assert main([str(f)]) == EXIT_INVALID_INPUT

    def test_prompt_default(self):
        assert prompt_directory(lambda prompt: "  ") == DEFAULT_DIRECTORY

    def test_prompt_answer(self):
        assert prompt_directory(lambda prompt: "./infra") == "./infra"

    def test_interrupt_at_prompt(self, capsys):
        with patch("tf_refactor.cli.main.sys.stdin") as stdin, \
                patch("tf_refactor.cli.main.prompt_directory", side_effect=KeyboardInterrupt):
            stdin.isatty.return_value = True
            rc = main([])
        assert rc == EXIT_KEYBOARD_INTERRUPT
        assert "Interrupted." in capsys.readouterr().err

    def test_prompt_eof(self):
        def _eof(prompt):
            raise EOFError

        assert prompt_directory(_eof) is None


# ---------------------------------------------------------------------------
# TestDryRun
# ---------------------------------------------------------------------------
class TestDryRun:
    def test_dry_run_json_output(self, tf_dir, capsys):
        rc = main([str(tf_dir), "--dry-run", "--output-json"])
        assert rc == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["directory"] == str(tf_dir.resolve())
        assert "api_key" not in data

    def test_dry_run_human(self, tf_dir, capsys):
        assert main([str(tf_dir), "--dry-run"]) == EXIT_SUCCESS
        assert "Configuration:" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# TestRun
# ---------------------------------------------------------------------------
class TestRun:
    def test_no_files_skips_provider_and_report(self, tmp_path, report_dir, capsys):
        with patch("tf_refactor.cli.main.create_provider") as create:
            rc = main([str(tmp_path), "--yes", "--report-dir", str(report_dir)])
        assert rc == EXIT_SUCCESS
        create.assert_not_called()
        assert _reports(report_dir) == []
        assert "No Terraform files found" in capsys.readouterr().err

    def test_yes_run_writes_report(self, tf_dir, report_dir, fake_provider):
        provider = fake_provider({"a\nb\nc": "a\nx\nc", "keep": "keep"})
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--yes", "--report-dir", str(report_dir)])

        assert rc == EXIT_SUCCESS
        reports = _reports(report_dir)
        assert len(reports) == 1
        text = reports[0].read_text()
        assert f"## {tf_dir.resolve() / 'a.tf'}" in text
        assert "- b\n+ x\n" in text
        # In-memory only without --write
        assert (tf_dir / "a.tf").read_text() == "a\nb\nc"

    def test_write_persists_accepted_files(self, tf_dir, report_dir, fake_provider):
        provider = fake_provider({"a\nb\nc": "a\nx\nc", "keep": "other"})
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--yes", "--write", "--report-dir", str(report_dir)])
        assert rc == EXIT_SUCCESS
        assert (tf_dir / "a.tf").read_text() == "a\nx\nc"
        assert (tf_dir / "b.tf").read_text() == "other"

    def test_no_apply_with_write_changes_nothing(self, tf_dir, report_dir, fake_provider):
        provider = fake_provider(default="rewritten")
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--no-apply", "--write", "--report-dir", str(report_dir)])
        assert rc == EXIT_SUCCESS
        assert (tf_dir / "a.tf").read_text() == "a\nb\nc"
        assert "Status: skipped" in _reports(report_dir)[0].read_text()

    def test_output_json(self, tf_dir, report_dir, fake_provider, capsys):
        provider = fake_provider(default="rewritten")
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--yes", "--output-json", "--report-dir", str(report_dir)])
        assert rc == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "completed"
        assert [r["accepted"] for r in data["records"]] == [True, True]
        assert data["report_path"].endswith(".md")

    def test_abort_still_reports(self, tf_dir, report_dir, fake_provider):
        answers = iter([True])

        def decider(source_file, suggestion, diff):
            try:
                return next(answers)
            except StopIteration:
                raise InteractionAbort("eof") from None

        provider = fake_provider(default="rewritten")
        with patch("tf_refactor.cli.main.create_provider", return_value=provider), \
                patch("tf_refactor.cli.main.ConsoleDecider", return_value=decider):
            rc = main([str(tf_dir), "--report-dir", str(report_dir)])

        assert rc == EXIT_SESSION_ABORTED
        text = _reports(report_dir)[0].read_text()
        assert "a.tf" in text
        assert "b.tf" not in text

    def test_provider_config_error(self, tf_dir, report_dir):
        with patch(
            "tf_refactor.cli.main.create_provider",
            side_effect=ProviderConfigError("No Anthropic API key found."),
        ):
            rc = main([str(tf_dir), "--provider", "anthropic", "--report-dir", str(report_dir)])
        assert rc == EXIT_PROVIDER_ERROR

    def test_report_failure_keeps_applied_changes(self, tf_dir, tmp_path, fake_provider):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not dir")
        provider = fake_provider(default="rewritten")
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--yes", "--write", "--report-dir", str(blocker)])
        assert rc == EXIT_REPORT_ERROR
        assert (tf_dir / "a.tf").read_text() == "rewritten"

    def test_analyze_writes_suggestion_report(self, tf_dir, report_dir, fake_provider):
        provider = fake_provider({"a\nb\nc": "a\nx\nc", "keep": ProviderConfigError("nope")})
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--analyze", "--report-dir", str(report_dir)])
        assert rc == EXIT_SUCCESS
        text = _reports(report_dir)[0].read_text()
        assert "```hcl\na\nx\nc\n```" in text
        assert "Error during refactoring." in text

    def test_interrupt_during_suggestion_still_reports(self, tf_dir, report_dir, fake_provider):
        provider = fake_provider({"a\nb\nc": "a\nx\nc", "keep": KeyboardInterrupt()})
        with patch("tf_refactor.cli.main.create_provider", return_value=provider):
            rc = main([str(tf_dir), "--yes", "--report-dir", str(report_dir)])

        assert rc == EXIT_SESSION_ABORTED
        text = _reports(report_dir)[0].read_text()
        assert "a.tf" in text
        assert "b.tf" not in text

    def test_write_back_failure_still_reports(self, tf_dir, report_dir, fake_provider, capsys):
        provider = fake_provider(default="rewritten")
        real_write_text = Path.write_text

        def _write_text(self, *args, **kwargs):
            if self.name == "a.tf":
                raise PermissionError("read-only")
            return real_write_text(self, *args, **kwargs)

        with patch("tf_refactor.cli.main.create_provider", return_value=provider), \
                patch.object(Path, "write_text", autospec=True, side_effect=_write_text):
            rc = main([str(tf_dir), "--yes", "--write", "--report-dir", str(report_dir)])

        assert rc == EXIT_SUCCESS
        assert len(_reports(report_dir)) == 1
        assert (tf_dir / "a.tf").read_text() == "a\nb\nc"
        assert (tf_dir / "b.tf").read_text() == "rewritten"
        assert "Could not write changes to" in capsys.readouterr().err

    def test_interactive_json_keeps_stdout_clean(self, tf_dir, report_dir, fake_provider, capsys):
        provider = fake_provider(default="rewritten")
        decider = MagicMock(return_value=False)
        with patch("tf_refactor.cli.main.create_provider", return_value=provider), \
                patch("tf_refactor.cli.main.ConsoleDecider", return_value=decider) as decider_cls:
            rc = main([str(tf_dir), "--output-json", "--report-dir", str(report_dir)])

        assert rc == EXIT_SUCCESS
        assert decider_cls.call_args.kwargs["console"] is err_console
        data = json.loads(capsys.readouterr().out)
        assert [r["accepted"] for r in data["records"]] == [False, False]
