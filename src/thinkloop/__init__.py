"""thinkloop - a reason-then-act agent loop around an untrusted text-generation model."""

__version__ = "0.1.0"

from thinkloop.agent import (
    Agent,
    InvalidToolError,
    IterationLimitExceeded,
)
from thinkloop.chains import (
    Chain,
    ChainConfigError,
    Stage,
    StageFunc,
    stage,
)
from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)
from thinkloop.core.schema import (
    PromptData,
    Reasoning,
    ThoughtIteration,
)
from thinkloop.predictors import (
    BasePredictor,
    LLMError,
    ParseError,
    Predictor,
    Retrier,
)
from thinkloop.prompters import HydrateError
from thinkloop.tools import (
    Tool,
    ToolConfigError,
    ToolRegistry,
    normalize_tool_name,
    tool,
)

__all__ = [
    # Agent
    "Agent",
    "InvalidToolError",
    "IterationLimitExceeded",
    # Pipeline composer
    "Chain",
    "ChainConfigError",
    "Stage",
    "StageFunc",
    "stage",
    # Context
    "RunCancelled",
    "RunContext",
    # Schema
    "PromptData",
    "Reasoning",
    "ThoughtIteration",
    # Prediction pipeline
    "BasePredictor",
    "HydrateError",
    "LLMError",
    "ParseError",
    "Predictor",
    "Retrier",
    # Tools
    "Tool",
    "ToolConfigError",
    "ToolRegistry",
    "normalize_tool_name",
    "tool",
]
