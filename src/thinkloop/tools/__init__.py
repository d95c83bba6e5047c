"""
Tool descriptors and the tool registry for thinkloop.

A :class:`Tool` is a named callable ``run(ctx, input) -> observation`` plus the description, usage
hints and examples shown to the model.  A :class:`ToolRegistry` validates a tool set once, indexes it
by normalized name and keeps the original order for prompt rendering.
"""

import logging
import re
from typing import (
    Any,
    Callable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

from thinkloop.core.context import RunContext

logger = logging.getLogger(__name__)

_TOOL_SPACE_PATTERN = re.compile(r"[_\s]+")


class ToolConfigError(ValueError):
    """Raised when a tool set is malformed (empty, unnamed, undescribed or duplicated tools)."""


class ToolInputError(ValueError):
    """Raised by a tool when its input requirements are not satisfied."""


def normalize_tool_name(name: str) -> str:
    """
    Canonicalize a tool name: lower-case it and collapse runs of whitespace/underscores into ``-``.

    >>> normalize_tool_name("Foo_ TOOL")
    'foo-tool'
    """
    return _TOOL_SPACE_PATTERN.sub("-", name.lower())


ToolFn = Callable[[RunContext, str], Any]


class Tool(BaseModel):
    """A callable the agent may invoke, described for the model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Tool name; normalized by the registry")
    description: str = Field(..., description="What the tool does and what its input means")
    examples: List[str] = Field(default_factory=list, description="Example inputs")
    args: List[str] = Field(default_factory=list, description="Usage hints for the input")
    run: ToolFn = Field(..., exclude=True, repr=False)


def tool(
    name: Optional[str] = None,
    description: Optional[str] = None,
    examples: Sequence[str] = (),
    args: Sequence[str] = (),
) -> Callable[[ToolFn], Tool]:
    """
    Build a :class:`Tool` from a plain function.

    The function must accept ``(ctx, input)`` and return the observation.  It can be used like this:
        @tool("add table", examples=["employees"], args=["table name"])
        def add_table(ctx, input):
            \"\"\"Add a table within the app. The input is the name of the table.\"\"\"
            ...

    Parameters
    ----------
    name: str
        The tool name.  Defaults to the function name.
    description: str
        The description shown to the model.  Defaults to the function's docstring.
    examples, args:
        Example inputs and usage hints rendered into the prompt.

    Returns
    -------
    Callable
        A decorator that turns the function into a :class:`Tool`.
    """

    def wrapper(fn: ToolFn) -> Tool:
        tool_name = name or fn.__name__
        logger.debug("Defining tool '%s'", tool_name)
        return Tool(
            name=tool_name,
            description=description or (fn.__doc__ or "").strip(),
            examples=list(examples),
            args=list(args),
            run=fn,
        )

    return wrapper


class ToolRegistry:
    """
    Validated, read-only index of a tool set.

    Construction fails with :class:`ToolConfigError` when the tool list is empty, when a tool has an
    empty name or description, or when two tools normalize to the same name.  Tools are never
    silently dropped.
    """

    def __init__(self, tools: Sequence[Tool]) -> None:
        if not tools:
            raise ToolConfigError("no tools provided")

        by_name: dict[str, Tool] = {}
        ordered: List[Tool] = []
        for i, t in enumerate(tools):
            if not t.name:
                raise ToolConfigError(f"{i}: tool name is empty")
            if not t.description:
                raise ToolConfigError(f"{i}: tool description is empty")

            name = normalize_tool_name(t.name)
            if name in by_name:
                raise ToolConfigError(f"{i}: multiple tools with the same name were used: {name!r}")

            normalized = t if t.name == name else t.model_copy(update={"name": name})
            by_name[name] = normalized
            ordered.append(normalized)

        self._tools = by_name
        self._ordered: Tuple[Tool, ...] = tuple(ordered)
        logger.debug("Registered %d tools: %s", len(ordered), list(by_name))

    def lookup(self, name: str) -> Optional[Tool]:
        """Return the tool registered under *name* (raw or normalized), or *None*."""
        return self._tools.get(normalize_tool_name(name))

    def all(self) -> Tuple[Tool, ...]:
        """All tools in registration order, with normalized names."""
        return self._ordered

    def names(self) -> List[str]:
        return [t.name for t in self._ordered]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_tool_name(name) in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)
