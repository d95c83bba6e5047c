"""The ``user-input`` tool: ask the user a question and observe the reply."""

import sys
from typing import (
    Optional,
    TextIO,
)

from thinkloop.common import (
    AnsiColors,
    colored_print,
)
from thinkloop.core.context import RunContext
from thinkloop.tools import Tool


def read_line(reader: TextIO) -> str:
    """Read one line from *reader*, raising :class:`EOFError` when there is none."""
    line = reader.readline()
    if not line:
        raise EOFError("unable to get input from user")
    return line.rstrip("\r\n")


def user_input_tool(reader: Optional[TextIO] = None, writer: Optional[TextIO] = None) -> Tool:
    """Return a tool that prints its input as a question and returns the user's answer."""

    def run(ctx: RunContext, question: str) -> str:
        out = writer or sys.stdout
        colored_print(f"AI: {question}", AnsiColors.YELLOW, file=out)
        colored_print("You: ", AnsiColors.BLUE, end="", file=out, flush=True)
        return read_line(reader or sys.stdin)

    return Tool(
        name="user-input",
        description="Ask the user a question. The input is what is displayed to the user.",
        examples=["some question to the user"],
        args=["prompt"],
        run=run,
    )
