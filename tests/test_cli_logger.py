"""Tests for the terminal display layer."""

import io

import pytest

from thinkloop.agent.cli_logger import CLILogger
from thinkloop.core.context import RunContext
from thinkloop.core.schema import Reasoning
from thinkloop.predictors import LLMError
from thinkloop.predictors.testing import FakePredictor

GREEN = "\033[92m"
BLUE = "\033[94m"
RESET = "\033[0m"


def test_action_line() -> None:
    out = io.StringIO()
    resp = Reasoning[str](thought="some-thought", action="some-action", input="some-input")
    logger = CLILogger(FakePredictor(responses=[resp]), out)

    assert logger.predict(RunContext(), "req") is resp
    assert out.getvalue() == (
        f'{GREEN}Thought: "some-thought" Action: "some-action" Input: "some-input"{RESET}\n'
    )


def test_final_answer_line_with_prefix() -> None:
    out = io.StringIO()
    resp = Reasoning[str](thought="some-thought", final_answer="some-answer")
    logger = CLILogger(FakePredictor(responses=[resp]), out, prefix="agent")

    logger.predict(RunContext(), "req")

    assert out.getvalue() == (
        f"{BLUE}[agent]{RESET} "
        f'{GREEN}Thought: "some-thought" FinalAnswer: some-answer{RESET}\n'
    )


def test_errors_print_nothing() -> None:
    out = io.StringIO()
    logger = CLILogger(FakePredictor(error=LLMError("down")), out)

    with pytest.raises(LLMError):
        logger.predict(RunContext(), "req")
    assert out.getvalue() == ""
