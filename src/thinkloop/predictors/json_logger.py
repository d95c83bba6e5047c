"""Structured request/response trace around a predictor, one JSON document per line."""

import json
from typing import (
    Any,
    TextIO,
)

from pydantic import BaseModel

from thinkloop.core.context import RunContext
from thinkloop.predictors.predictor import Predictor


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    return value


class JSONLogger(Predictor):
    """
    Writes ``{"request": ...}`` before the call and ``{"response": ...}`` after a successful one.

    Requests and responses pass through untouched; errors propagate without a response line.
    """

    def __init__(self, predictor: Predictor, out: TextIO):
        self.predictor = predictor
        self.out = out

    def _write(self, key: str, value: Any) -> None:
        self.out.write(json.dumps({key: _dump(value)}, default=str) + "\n")
        self.out.flush()

    def predict(self, ctx: RunContext, request: Any) -> Any:
        self._write("request", request)
        response = self.predictor.predict(ctx, request)
        self._write("response", response)
        return response
