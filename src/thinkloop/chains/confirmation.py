"""
Confirmation chain: ask the user to confirm an action and let the LLM judge the reply.

The chain is three stages::

    str (message) -> ask user -> str (reply) -> classify with LLM -> str (raw) -> parse -> ConfirmationResponse
"""

from typing import (
    Any,
    TextIO,
)

from pydantic import BaseModel

from thinkloop.chains import (
    Chain,
    StageFunc,
)
from thinkloop.core.context import RunContext
from thinkloop.llms import LLM
from thinkloop.parsers import JSONParser
from thinkloop.prompters import TextTemplate

USER_PROMPT_TEMPLATE = "{message}\n\nDo you want to continue?: "

CONFIRMATION_PROMPT = """\
Check if the input signals that the user said some form of yes.

Example 1:
Input: "yes"
Output: {"result": true}

Example 2:
Input: "no"
Output: {"result": false}

Example 3:
Input: "yea"
Output: {"result": true}

Example 4:
Input: "nevermind, lets add a table instead"
Output: {"error": "user wants to do something different: lets add a table instead"}

Begin!

Input: {{ input }}
Output:
"""


class ConfirmationError(RuntimeError):
    """Raised when the user's reply cannot be read."""


class ConfirmationRequest(BaseModel):
    """Template data for the classification prompt."""

    input: str


class ConfirmationResponse(BaseModel):
    """The LLM's verdict on the user's reply."""

    result: bool = False
    error: str = ""


def confirmation_chain(llm: LLM, params: Any, reader: TextIO, writer: TextIO) -> Chain:
    """Return a :class:`Chain` from a message (``str``) to a :class:`ConfirmationResponse`."""
    prompter = TextTemplate(CONFIRMATION_PROMPT, params)
    parser = JSONParser(ConfirmationResponse)

    def ask(ctx: RunContext, message: str) -> str:
        writer.write(USER_PROMPT_TEMPLATE.format(message=message))
        writer.flush()
        reply = reader.readline()
        if not reply:
            raise ConfirmationError("failed to read confirmation: end of input")
        return reply.strip()

    def classify(ctx: RunContext, reply: str) -> str:
        prompt, llm_params = prompter.hydrate(ctx, ConfirmationRequest(input=reply))
        return llm.generate(ctx, prompt, llm_params)

    def parse(ctx: RunContext, raw: str) -> ConfirmationResponse:
        return parser.parse(raw)

    return Chain(
        [
            StageFunc(ask, str, str),
            StageFunc(classify, str, str),
            StageFunc(parse, str, ConfirmationResponse),
        ],
        input_type=str,
        output_type=ConfirmationResponse,
    )
