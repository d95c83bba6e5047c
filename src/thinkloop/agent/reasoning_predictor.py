"""Structural validation of the model's :class:`~thinkloop.core.schema.Reasoning`."""

from typing import Any

from thinkloop.core.context import RunContext
from thinkloop.core.schema import Reasoning
from thinkloop.predictors import (
    ParseError,
    PredictionError,
    Predictor,
)
from thinkloop.tools import (
    ToolRegistry,
    normalize_tool_name,
)


class InvalidToolError(PredictionError):
    """The model named an action that is not a registered tool.  Not retried; fed back instead."""

    def __init__(self, action: str, reasoning: Reasoning):
        super().__init__(f"invalid tool: {action!r}")
        self.action = action
        self.reasoning = reasoning


class ReasoningPredictor(Predictor):
    """
    Ensures every reasoning has a thought and exactly one of an action or a final answer.

    Actions are rewritten to their normalized tool name and must resolve in the registry.
    """

    def __init__(self, predictor: Predictor, registry: ToolRegistry):
        self.predictor = predictor
        self.registry = registry

    def predict(self, ctx: RunContext, request: Any) -> Reasoning:
        r = self.predictor.predict(ctx, request)

        if not r.thought:
            raise ParseError("Missing Thought field")
        if not r.has_action and not r.has_final_answer:
            raise ParseError("Either Action or FinalAnswer must be set")
        if r.has_action and r.has_final_answer:
            raise ParseError("Both Action and FinalAnswer are set")

        if r.has_action:
            action = normalize_tool_name(r.action)
            r = r.model_copy(update={"action": action})
            if action not in self.registry:
                raise InvalidToolError(action, r)

        return r
