"""
Basic sanity tests for the tool executor.

Run with:
$ pytest -q
"""

import pytest

from thinkloop.agent.tool_executor import (
    ToolExecutionError,
    execute_tool,
)
from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)
from thinkloop.tools import (
    ToolRegistry,
    tool,
)


# These are stub tools for testing purposes.
@tool("add")
def _add(ctx: RunContext, tool_input: str) -> int:
    """Return the sum of two space-separated integers (used only for tests)."""

    a, b = tool_input.split()
    return int(a) + int(b)


@tool("nothing")
def _nothing(ctx: RunContext, tool_input: str) -> None:
    """Return nothing at all."""


@tool("cancel")
def _cancel(ctx: RunContext, tool_input: str) -> str:
    """Cancel the run from inside the tool."""

    raise RunCancelled("stop")


REGISTRY = ToolRegistry([_add, _nothing, _cancel])


def test_execute_tool_success() -> None:
    """Executor should return the tool's result as a string."""

    assert execute_tool(REGISTRY, RunContext(), "add", "2 3") == "5"


def test_execute_tool_none_is_empty_observation() -> None:
    """A tool returning *None* produces an empty observation."""

    assert execute_tool(REGISTRY, RunContext(), "nothing", "") == ""


def test_execute_tool_normalizes_name() -> None:
    """Raw names are normalized before lookup."""

    assert execute_tool(REGISTRY, RunContext(), "ADD", "1 1") == "2"


def test_execute_tool_missing() -> None:
    """Executor should raise *ToolExecutionError* for an unknown tool."""

    try:
        execute_tool(REGISTRY, RunContext(), "not_a_tool", "")
    except ToolExecutionError as exc:
        assert "not_a_tool" in str(exc)
    else:  # pragma: no cover
        raise AssertionError("ToolExecutionError was not raised")


def test_execute_tool_bad_input() -> None:
    """Executor should wrap the tool's own error and keep its message."""

    try:
        execute_tool(REGISTRY, RunContext(), "add", "2")  # missing second operand
    except ToolExecutionError as exc:
        assert exc.tool_name == "add"
        assert "not enough values to unpack" in str(exc)
        assert isinstance(exc.__cause__, ValueError)
    else:  # pragma: no cover
        raise AssertionError("ToolExecutionError was not raised")


def test_execute_tool_cancellation_is_not_wrapped() -> None:
    """Cancellation raised inside a tool propagates unchanged."""

    with pytest.raises(RunCancelled):
        execute_tool(REGISTRY, RunContext(), "cancel", "")


def test_execute_tool_cancelled_context() -> None:
    """A cancelled context stops the tool from running."""

    ctx = RunContext()
    ctx.cancel()
    with pytest.raises(RunCancelled):
        execute_tool(REGISTRY, ctx, "add", "1 1")
