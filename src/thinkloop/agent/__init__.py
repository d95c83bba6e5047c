"""The reason-then-act agent: loop, validation layer, display layer and default prompt."""

from thinkloop.agent.agent_loop import (
    Agent,
    IterationLimitExceeded,
    error_observation,
)
from thinkloop.agent.cli_logger import CLILogger
from thinkloop.agent.default_prompt import (
    DEFAULT_PROMPT,
    default_parser,
    default_prompt,
)
from thinkloop.agent.reasoning_predictor import (
    InvalidToolError,
    ReasoningPredictor,
)
from thinkloop.agent.tool_executor import (
    ToolExecutionError,
    execute_tool,
)

__all__ = [
    "Agent",
    "CLILogger",
    "DEFAULT_PROMPT",
    "IterationLimitExceeded",
    "InvalidToolError",
    "ReasoningPredictor",
    "ToolExecutionError",
    "default_parser",
    "default_prompt",
    "error_observation",
    "execute_tool",
]
