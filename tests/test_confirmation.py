"""Tests for the confirmation chain."""

import io

import pytest

from thinkloop.chains.confirmation import (
    ConfirmationError,
    ConfirmationResponse,
    confirmation_chain,
)
from thinkloop.core.context import RunContext
from thinkloop.llms.testing import FakeLLM
from thinkloop.parsers import ParserError


def test_confirmation_yes() -> None:
    """The user's reply is shown to the LLM and its verdict is parsed."""

    llm = FakeLLM(always_text='{"result": true}')
    writer = io.StringIO()
    chain = confirmation_chain(llm, None, io.StringIO("yea sure\n"), writer)

    resp = chain.run(RunContext(), "Adding table employees")

    assert resp == ConfirmationResponse(result=True)
    assert writer.getvalue() == "Adding table employees\n\nDo you want to continue?: "
    assert len(llm.prompts) == 1
    assert "Input: yea sure" in llm.prompts[0]


def test_confirmation_error_reply() -> None:
    llm = FakeLLM(always_text='{"error": "user wants to do something different"}')
    chain = confirmation_chain(llm, None, io.StringIO("no, add a column\n"), io.StringIO())

    resp = chain.run(RunContext(), "Adding table employees")

    assert resp.result is False
    assert resp.error == "user wants to do something different"


def test_confirmation_end_of_input() -> None:
    """No reply from the user fails before the LLM is asked."""

    llm = FakeLLM(always_text='{"result": true}')
    chain = confirmation_chain(llm, None, io.StringIO(""), io.StringIO())

    with pytest.raises(ConfirmationError):
        chain.run(RunContext(), "Adding table employees")
    assert llm.prompts == []


def test_confirmation_unparseable_verdict() -> None:
    llm = FakeLLM(always_text="I think so?")
    chain = confirmation_chain(llm, None, io.StringIO("yes\n"), io.StringIO())

    with pytest.raises(ParserError):
        chain.run(RunContext(), "Adding table employees")
