"""Dispatches tool calls through a :class:`~thinkloop.tools.ToolRegistry` and wraps errors."""

import logging

from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)
from thinkloop.tools import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutionError(RuntimeError):
    """Raised when a requested tool cannot run or fails.  The message is the tool's own error."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(message)
        self.tool_name = tool_name


def execute_tool(registry: ToolRegistry, ctx: RunContext, name: str, tool_input: str) -> str:
    """
    Look up *name* in the registry and invoke it with *tool_input*.

    Parameters
    ----------
    registry:
        The validated tool set.
    ctx:
        The run's cancellation token, passed verbatim to the tool.
    name:
        The tool name, raw or normalized.
    tool_input:
        Free text handed to the tool.

    Returns
    -------
    str
        The tool's result as an observation string (``None`` becomes ``""``).

    Raises
    ------
    ToolExecutionError
        If the tool is missing or its invocation raises an exception.
    RunCancelled
        If the run was cancelled while the tool ran; never wrapped.
    """

    t = registry.lookup(name)
    if t is None:
        raise ToolExecutionError(name, f"Tool '{name}' is not registered.")

    ctx.raise_if_cancelled()
    try:
        logger.debug("Executing tool '%s' with input=%r", t.name, tool_input)
        result = t.run(ctx, tool_input)
    except RunCancelled:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("Tool '%s' failed: %s", t.name, exc)
        raise ToolExecutionError(t.name, str(exc)) from exc

    ctx.raise_if_cancelled()
    observation = "" if result is None else str(result)
    logger.info("Tool '%s' returned: %s", t.name, observation)
    return observation
