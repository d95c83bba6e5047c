"""Fake LLM for tests."""

from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
)

from thinkloop.core.context import RunContext
from thinkloop.llms import LLM


class FakeLLM(LLM):
    """
    Records prompts and params and answers from canned data.

    Resolution order: ``error`` -> ``always_text`` -> ``responses`` (consumed in order) ->
    ``outputs[prompt]``.
    """

    def __init__(
        self,
        outputs: Optional[Dict[str, str]] = None,
        responses: Optional[List[str]] = None,
        always_text: str = "",
        error: Optional[Exception] = None,
        on_generate: Optional[Callable[[RunContext, str], None]] = None,
    ):
        self.prompts: List[str] = []
        self.params: List[Any] = []
        self.outputs = outputs or {}
        self.responses = list(responses or [])
        self.always_text = always_text
        self.error = error
        self.on_generate = on_generate

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        self.prompts.append(prompt)
        self.params.append(params)
        if self.on_generate is not None:
            self.on_generate(ctx, prompt)
        if self.error is not None:
            raise self.error
        if self.always_text:
            return self.always_text
        if self.responses:
            return self.responses.pop(0)
        return self.outputs.get(prompt, "")
