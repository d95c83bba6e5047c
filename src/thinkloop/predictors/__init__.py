"""
Predictors submit a request to an LLM and return a typed response.

Every layer of the prediction pipeline implements the same :class:`Predictor` contract, so layers
nest freely::

    predictor = BasePredictor(llm, prompter, parser)   # hydrate -> generate -> parse
    predictor = JSONLogger(predictor, trace_file)       # request/response trace
    predictor = Retrier(predictor)                      # bounded retry

Failures are classified so the outer layers can decide what to do with them:

* :class:`thinkloop.prompters.HydrateError` - the prompt could not be rendered; never retried.
* :class:`LLMError` - the backend call failed; retried.
* :class:`ParseError` - the output did not decode or failed validation; retried.
"""

from thinkloop.predictors.json_logger import JSONLogger
from thinkloop.predictors.predictor import (
    BasePredictor,
    LLMError,
    ParseError,
    PredictionError,
    Predictor,
)
from thinkloop.predictors.retrier import Retrier

__all__ = [
    "BasePredictor",
    "JSONLogger",
    "LLMError",
    "ParseError",
    "PredictionError",
    "Predictor",
    "Retrier",
]
