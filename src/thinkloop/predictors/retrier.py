"""Bounded retry around any predictor."""

import logging
from typing import (
    Any,
    Tuple,
    Type,
)

from thinkloop.core.context import RunContext
from thinkloop.predictors.predictor import (
    LLMError,
    ParseError,
    Predictor,
)

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3

RETRYABLE: Tuple[Type[Exception], ...] = (LLMError, ParseError)


class Retrier(Predictor):
    """
    Calls the wrapped predictor up to ``max_attempts`` times.

    Only :class:`LLMError` and :class:`ParseError` are retried.  Anything else (hydration failures,
    invalid tools, cancellation) is raised on the attempt that produced it.  When every attempt
    fails, the last error is raised.
    """

    def __init__(self, predictor: Predictor, max_attempts: int = MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.predictor = predictor
        self.max_attempts = max_attempts

    def predict(self, ctx: RunContext, request: Any) -> Any:
        attempt = 1
        while True:
            try:
                return self.predictor.predict(ctx, request)
            except RETRYABLE as exc:
                logger.warning(
                    "Prediction attempt %d/%d failed: %s", attempt, self.max_attempts, exc
                )
                if attempt >= self.max_attempts:
                    raise
            attempt += 1
