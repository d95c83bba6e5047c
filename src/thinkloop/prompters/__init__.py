"""
Prompters turn a structured request into prompt text plus the LLM parameters to send with it.

:class:`TextTemplate` renders a Jinja2 template in strict mode: referencing a missing field is an
error rather than an empty string.  Every rendering failure surfaces as :class:`HydrateError`, which
the prediction pipeline never retries.
"""

import json
import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Mapping,
    TextIO,
    Tuple,
)

from jinja2 import (
    Environment,
    StrictUndefined,
    TemplateError,
)
from pydantic import BaseModel

from thinkloop.core.context import RunContext

logger = logging.getLogger(__name__)


class HydrateError(RuntimeError):
    """Raised when a prompt cannot be rendered from its request.  Never retried."""


class Prompter(ABC):
    """A prompt that can be hydrated with a request object."""

    @abstractmethod
    def hydrate(self, ctx: RunContext, request: Any) -> Tuple[str, Any]:
        """Return ``(prompt_text, llm_params)`` for *request*."""


def to_json(value: Any) -> str:
    """Compact JSON for templates; pydantic models drop unset (``None``) fields."""
    if isinstance(value, BaseModel):
        return value.model_dump_json(exclude_none=True)
    return json.dumps(value, default=str)


def _template_vars(request: Any) -> Mapping[str, Any]:
    if isinstance(request, BaseModel):
        return {name: getattr(request, name) for name in type(request).model_fields}
    if isinstance(request, Mapping):
        return request
    raise HydrateError(f"cannot hydrate a prompt from {type(request).__name__}")


class TextTemplate(Prompter):
    """Jinja2-backed prompter that always returns the same LLM parameters."""

    def __init__(self, text: str, params: Any = None):
        env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        env.filters["to_json"] = to_json
        # Syntax errors surface here, when the prompter is built.
        self.template = env.from_string(text)
        self.params = params

    def hydrate(self, ctx: RunContext, request: Any) -> Tuple[str, Any]:
        try:
            prompt = self.template.render(**_template_vars(request))
        except TemplateError as exc:
            raise HydrateError(f"failed to hydrate prompt: {exc}") from exc
        return prompt, self.params


class PromptLogger(Prompter):
    """Writes each hydrated prompt to *out* before handing it on."""

    def __init__(self, prompter: Prompter, out: TextIO):
        self.prompter = prompter
        self.out = out

    def hydrate(self, ctx: RunContext, request: Any) -> Tuple[str, Any]:
        prompt, params = self.prompter.hydrate(ctx, request)
        print(prompt, file=self.out, flush=True)
        return prompt, params


__all__ = [
    "HydrateError",
    "PromptLogger",
    "Prompter",
    "TextTemplate",
    "to_json",
]
