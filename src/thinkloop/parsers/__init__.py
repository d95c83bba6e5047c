"""
Parsers decode raw model output into typed values.

:class:`JSONParser` is forgiving about *where* the JSON sits (markdown fences, chatter around the
object) and strict about *what* it contains: the object must validate against the target pydantic
model.
"""

import logging
import re
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Generic,
    Type,
    TypeVar,
)

from pydantic import (
    BaseModel,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ParserError(ValueError):
    """Raised when text cannot be decoded into the expected structure."""


class Parser(ABC):
    """Decodes model output text."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Return the decoded value or raise :class:`ParserError`."""


def sanitize_json_string(content: str) -> str:
    """Clean up JSON strings returned by LLMs."""
    # Strip markdown code blocks if present
    if "```" in content:
        match = re.search(r"```(?:json)?\s*(.+?)```", content, re.DOTALL)
        if match:
            content = match.group(1).strip()

    # Remove control characters except whitespace
    content = "".join(ch for ch in content if ch >= " " or ch in "\n\r\t")

    # Keep only the first balanced top-level object; braces inside strings are skipped.
    open_idx = content.find("{")
    if open_idx < 0:
        return content.strip()

    depth = 0
    in_string = False
    escaped = False
    for i in range(open_idx, len(content)):
        ch = content[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[open_idx : i + 1]
    return content[open_idx:]


class JSONParser(Parser, Generic[T]):
    """Parses the first JSON object in the text into *model*."""

    def __init__(self, model: Type[T]):
        self.model = model

    def parse(self, text: str) -> T:
        cleaned = sanitize_json_string(text)
        try:
            return self.model.model_validate_json(cleaned)
        except ValidationError as exc:
            logger.debug("Failed to parse model output %r: %s", text, exc)
            raise ParserError(f"invalid {self.model.__name__}: {exc}") from exc


class TextParser(Parser):
    """Returns the text as-is."""

    def parse(self, text: str) -> str:
        return text


__all__ = [
    "JSONParser",
    "Parser",
    "ParserError",
    "TextParser",
    "sanitize_json_string",
]
