"""Suggestion provider backed by the Amazon Q command-line chat."""

import logging
import shutil
import subprocess

from tf_refactor.providers.base import SuggestionProvider, build_prompt
from tf_refactor.providers.exceptions import (
    ProviderExecutionError,
    ProviderNotInstalledError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)

Q_EXECUTABLE = "q"
Q_INSTALL_URL = "https://docs.aws.amazon.com/q/developer/latest/userguide/install-cli.html"
DEFAULT_Q_TIMEOUT = 30


class QChatProvider(SuggestionProvider):
    """Pipes the prompt into ``q chat`` and returns its stdout.

    Blank output raises ``ProviderResponseError`` instead of producing an
    empty suggestion.
    """

    name = "q"

    def __init__(self, executable: str = Q_EXECUTABLE, timeout: int = DEFAULT_Q_TIMEOUT) -> None:
        self.executable = executable
        self.timeout = timeout

    def check_installed(self) -> str:
        """Return the resolved executable path.

        Raises:
            ProviderNotInstalledError: If the executable is not on PATH.
        """
        resolved = shutil.which(self.executable)
        if not resolved:
            raise ProviderNotInstalledError(
                f"Amazon Q CLI ('{self.executable}') is not installed or not in PATH. "
                f"Install it from {Q_INSTALL_URL}"
            )
        return resolved

    def complete(self, instruction: str, content: str) -> str:
        executable = self.check_installed()
        try:
            result = subprocess.run(
                [executable, "chat"],
                input=build_prompt(instruction, content),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProviderTimeoutError(
                f"'q chat' did not respond within {self.timeout}s"
            ) from exc
        except OSError as exc:
            raise ProviderExecutionError(f"Failed to run 'q chat': {exc}") from exc

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit code {result.returncode}"
            logger.debug("q chat failed: %s", detail)
            raise ProviderExecutionError(f"Failed to run 'q chat': {detail}")

        answer = result.stdout.strip()
        if not answer:
            raise ProviderResponseError("'q chat' returned an empty response")
        return answer
