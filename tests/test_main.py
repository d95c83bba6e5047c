"""Tests for the command-line entry point; backends are faked."""

import argparse
import json
from pathlib import Path

import pytest

from thinkloop import main as cli
from thinkloop.config import (
    Settings,
    get_settings,
)
from thinkloop.llms import LLMBackendError
from thinkloop.llms.backends import TGILLM
from thinkloop.llms.testing import FakeLLM


def test_parser_global_flags() -> None:
    args = cli.build_parser().parse_args(
        ["--backend", "TGI", "--max-iterations", "5", "--timeout", "2.5", "prompt", "hi"]
    )
    assert args.backend == "tgi"
    assert args.max_iterations == 5
    assert args.timeout == 2.5
    assert args.command == "prompt"
    assert args.text == "hi"


def test_parser_rejects_unknown_backend() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--backend", "nope", "agent"])


def test_overrides_only_apply_given_flags() -> None:
    args = cli.build_parser().parse_args(["--max-tokens", "12", "agent"])
    settings = cli._apply_overrides(Settings(TEMPERATURE=0.7), args)

    assert settings.MAX_TOKENS == 12
    assert settings.TEMPERATURE == 0.7


def _prompt_args(text: str, llm_log: Path | None = None) -> argparse.Namespace:
    return argparse.Namespace(text=text, llm_log=llm_log)


def test_run_prompt(capsys: pytest.CaptureFixture[str]) -> None:
    llm = FakeLLM(always_text="hello there")

    assert cli.run_prompt(Settings(), llm, _prompt_args("hi")) == 0
    assert capsys.readouterr().out == "hello there\n"
    assert llm.prompts == ["hi"]


def test_run_prompt_from_file_with_log(tmp_path: Path) -> None:
    prompt_file = tmp_path / "prompt.txt"
    prompt_file.write_text("from a file", encoding="utf-8")
    log = tmp_path / "logs" / "llm.jsonl"
    llm = FakeLLM(always_text="ok")

    assert cli.run_prompt(Settings(), llm, _prompt_args(f"@{prompt_file}", log)) == 0
    assert llm.prompts == ["from a file"]
    record = json.loads(log.read_text(encoding="utf-8"))
    assert record["prompt"] == "from a file"
    assert record["response"] == "ok"


def test_run_prompt_failure() -> None:
    llm = FakeLLM(error=LLMBackendError("down"))
    assert cli.run_prompt(Settings(), llm, _prompt_args("hi")) == 1


@pytest.fixture
def fresh_settings():
    """Reload settings from the (patched) environment for each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_main_prompt_loads_backend(
    fresh_settings, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """The prompt command builds the configured backend and prints its reply."""

    monkeypatch.setenv("LLM_BACKEND", "tgi")
    monkeypatch.setattr(TGILLM, "generate", lambda self, ctx, prompt, params: f"pong: {prompt}")

    assert cli.main(["prompt", "ping"]) == 0
    assert capsys.readouterr().out == "pong: ping\n"


def test_main_unknown_backend_from_env(fresh_settings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_BACKEND", "nope")

    with pytest.raises(SystemExit):
        cli.main(["prompt", "ping"])
