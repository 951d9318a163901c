"""Base class for suggestion providers."""

import logging
import re
from abc import ABC, abstractmethod

from tf_refactor.models import SourceFile, Suggestion
from tf_refactor.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION = (
    "Can you refactor this Terraform code for readability, performance, "
    "and best practices? Respond with only the fixed code."
)

_FENCE_RE = re.compile(r"^```[\w+-]*\n(.*?)\n?```$", re.DOTALL)


def build_prompt(instruction: str, content: str) -> str:
    return f"{instruction}\n\n{content}"


def strip_code_fence(text: str) -> str:
    """Remove a single Markdown code fence wrapping the whole answer."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1)
    return stripped


class SuggestionProvider(ABC):
    """Produces replacement content for a file.

    Subclasses implement ``complete``; callers use ``suggest``, which never
    raises and turns failures into an error-marked Suggestion.
    """

    name: str = "base"

    @abstractmethod
    def complete(self, instruction: str, content: str) -> str:
        """Return the assistant's answer for ``content``.

        Raises:
            ProviderError: If no answer could be produced.
        """

    def suggest(self, source_file: SourceFile, instruction: str = DEFAULT_INSTRUCTION) -> Suggestion:
        logger.debug("Refactoring file: %s", source_file.path)
        try:
            proposed = self.complete(instruction, source_file.content)
        except ProviderError as exc:
            logger.error("Error refactoring file %s: %s", source_file.path, exc)
            return Suggestion.failed(source_file.path, str(exc))
        return Suggestion(source_path=source_file.path, proposed_content=proposed)
