"""Writes every LLM call (prompt, params, response or error) as one JSON line."""

import json
from typing import (
    Any,
    TextIO,
)

from pydantic import BaseModel

from thinkloop.core.context import RunContext
from thinkloop.llms import LLM


class LLMLogger(LLM):
    """Wraps an :class:`LLM` and records each call to *out*; errors still propagate."""

    def __init__(self, llm: LLM, out: TextIO):
        self.llm = llm
        self.out = out

    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        record: dict[str, Any] = {
            "prompt": prompt,
            "response": "",
            "params": params.model_dump() if isinstance(params, BaseModel) else params,
            "err": "",
        }
        try:
            response = self.llm.generate(ctx, prompt, params)
            record["response"] = response
            return response
        except Exception as exc:
            record["err"] = str(exc)
            raise
        finally:
            self.out.write(json.dumps(record, default=str) + "\n")
            self.out.flush()
