"""Fake predictor for tests."""

from typing import (
    Any,
    List,
    Optional,
    Sequence,
)

from thinkloop.core.context import RunContext
from thinkloop.predictors.predictor import Predictor


class FakePredictor(Predictor):
    """
    Records every request and replays canned responses in order.

    If ``error`` is set it is raised on every call.  A response that is itself an exception is
    raised instead of returned, which lets a test script a failure on a specific call.
    """

    def __init__(self, responses: Sequence[Any] = (), error: Optional[Exception] = None):
        self.requests: List[Any] = []
        self.responses = list(responses)
        self.error = error

    def predict(self, ctx: RunContext, request: Any) -> Any:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if not self.responses:
            raise AssertionError("FakePredictor ran out of responses")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp
