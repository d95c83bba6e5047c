"""Human-facing display of each reasoning turn, suitable for a terminal."""

import json
from typing import (
    Any,
    TextIO,
)

from thinkloop.common import (
    AnsiColors,
    colored_print,
    colorize,
)
from thinkloop.core.context import RunContext
from thinkloop.core.schema import Reasoning
from thinkloop.predictors import Predictor


class CLILogger(Predictor):
    """
    Prints the thought/action/input (or thought/final answer) of every successful prediction.

    The optional *prefix* is shown in blue in front of each line.  Errors pass through silently.
    """

    def __init__(self, predictor: Predictor, out: TextIO, prefix: str = ""):
        self.predictor = predictor
        self.out = out
        self.prefix = prefix

    def predict(self, ctx: RunContext, request: Any) -> Reasoning:
        resp = self.predictor.predict(ctx, request)

        prefix = f"{colorize(f'[{self.prefix}]', AnsiColors.BLUE)} " if self.prefix else ""
        if resp.has_action:
            line = (
                f"Thought: {json.dumps(resp.thought)} Action: {json.dumps(resp.action)} "
                f"Input: {json.dumps(resp.input)}"
            )
        else:
            line = f"Thought: {json.dumps(resp.thought)} FinalAnswer: {resp.final_answer}"
        print(prefix, end="", file=self.out)
        colored_print(line, AnsiColors.GREEN, file=self.out, flush=True)
        return resp
