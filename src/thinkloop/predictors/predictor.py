"""Predictor contract, failure classes and the base hydrate -> generate -> parse predictor."""

from __future__ import annotations

import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import Any

from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)
from thinkloop.llms import LLM
from thinkloop.parsers import Parser
from thinkloop.prompters import (
    HydrateError,
    Prompter,
)

logger = logging.getLogger(__name__)


class PredictionError(RuntimeError):
    """Base class for classified prediction failures."""


class LLMError(PredictionError):
    """Obtaining a response from the LLM failed.  Retried."""


class ParseError(PredictionError):
    """The LLM response could not be parsed or failed validation.  Retried."""


class Predictor(ABC):
    """Submits a request to the LLM (possibly through other layers) and returns the response."""

    @abstractmethod
    def predict(self, ctx: RunContext, request: Any) -> Any:
        """Return the response for *request* or raise."""


class BasePredictor(Predictor):
    """Hydrates the prompt, calls the LLM and parses its output."""

    def __init__(self, llm: LLM, prompter: Prompter, parser: Parser):
        self.llm = llm
        self.prompter = prompter
        self.parser = parser

    def predict(self, ctx: RunContext, request: Any) -> Any:
        ctx.raise_if_cancelled()
        try:
            prompt, params = self.prompter.hydrate(ctx, request)
        except (HydrateError, RunCancelled):
            raise
        except Exception as exc:
            raise HydrateError(f"failed to hydrate prompt: {exc}") from exc

        try:
            output = self.llm.generate(ctx, prompt, params)
        except RunCancelled:
            raise
        except Exception as exc:
            # A call that failed because the deadline ran out is a cancellation, not a model error.
            ctx.raise_if_cancelled()
            raise LLMError(f"failed to obtain response from LLM: {exc}") from exc

        ctx.raise_if_cancelled()
        logger.debug("LLM output: %s", output)
        try:
            return self.parser.parse(output)
        except Exception as exc:
            raise ParseError(f"failed to parse response: {exc}") from exc
