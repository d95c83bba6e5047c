"""Reason-then-act orchestration loop for thinkloop."""

from __future__ import annotations

import logging
from typing import (
    Any,
    Generic,
    List,
    Optional,
    Sequence,
    TextIO,
    TypeVar,
)

from thinkloop.agent.cli_logger import CLILogger
from thinkloop.agent.reasoning_predictor import (
    InvalidToolError,
    ReasoningPredictor,
)
from thinkloop.agent.tool_executor import (
    ToolExecutionError,
    execute_tool,
)
from thinkloop.core.context import RunContext
from thinkloop.core.schema import (
    PromptData,
    ThoughtIteration,
)
from thinkloop.predictors import (
    Predictor,
    Retrier,
)
from thinkloop.tools import (
    Tool,
    ToolRegistry,
)

logger = logging.getLogger(__name__)

TOut = TypeVar("TOut")


class IterationLimitExceeded(RuntimeError):
    """Raised when the model has not produced a final answer within the iteration budget."""


def error_observation(exc: BaseException) -> str:
    """The observation that stands in for a failed action."""
    return f"ERROR: {exc}"


# ---------------------------------------------------------------------------
# Agent Loop
# ---------------------------------------------------------------------------
class Agent(Generic[TOut]):
    """
    Reasons and acts using its tools and a predictor until the model gives a final answer.

    The base predictor is wrapped so that every prediction is structurally validated and validation
    or model failures are retried:

        base -> ReasoningPredictor -> Retrier [-> CLILogger]

    The optional display layer sits outside the retry so only the accepted turn is shown.
    """

    def __init__(
        self,
        predictor: Predictor,
        tools: Sequence[Tool],
        *,
        max_iterations: Optional[int] = None,
        display: Optional[TextIO] = None,
        display_prefix: str = "",
    ):
        if max_iterations is not None and max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.registry = ToolRegistry(tools)
        self.max_iterations = max_iterations

        p: Predictor = Retrier(ReasoningPredictor(predictor, self.registry))
        if display is not None:
            p = CLILogger(p, display, prefix=display_prefix)
        self._predictor = p

    def run(self, ctx: RunContext, goal: str) -> TOut:
        """
        Run the loop in an attempt to reach *goal* and return the model's final answer.

        Invalid tool names and tool failures are folded back into the history as ``ERROR:``
        observations so the model can correct itself.  Any other prediction failure ends the run.

        Raises
        ------
        ValueError
            If *goal* is empty (before any prediction is made).
        IterationLimitExceeded
            If ``max_iterations`` turns pass without a final answer.
        RunCancelled
            If *ctx* is cancelled or its deadline passes.
        """
        if not goal:
            raise ValueError("goal is empty")

        # History of the loop; sent back in the prompt on every turn.
        iterations: List[ThoughtIteration[Any]] = []

        while True:
            ctx.raise_if_cancelled()
            if self.max_iterations is not None and len(iterations) >= self.max_iterations:
                raise IterationLimitExceeded(
                    f"no final answer after {self.max_iterations} iterations"
                )

            request: PromptData[Any] = PromptData(
                goal=goal,
                tools=self.registry.all(),
                chains=tuple(iterations),
            )
            try:
                reasoning = self._predictor.predict(ctx, request)
            except InvalidToolError as exc:
                logger.info("Model requested an unknown tool: %s", exc.action)
                iterations.append(
                    ThoughtIteration.from_reasoning(exc.reasoning, error_observation(exc))
                )
                continue

            if not reasoning.has_action:
                logger.info("Final answer after %d iterations", len(iterations))
                return reasoning.final_answer

            # The validation layer guarantees the action resolves in the registry.
            try:
                observation = execute_tool(self.registry, ctx, reasoning.action, reasoning.input)
            except ToolExecutionError as exc:
                observation = error_observation(exc)

            iterations.append(ThoughtIteration.from_reasoning(reasoning, observation))
