"""
thinkloop entry point.

This file handles startup concerns (arg-parsing, env setup, logging) and launches the requested
command:

* ``agent``  - interactive app-editor agent: asks for a goal, runs the loop, prints the answer.
* ``prompt`` - send a single prompt (or ``@file``) to the configured backend and print the reply.
"""

import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import (
    Iterator,
    Optional,
    TextIO,
)

from thinkloop.agent import (
    Agent,
    IterationLimitExceeded,
    default_parser,
    default_prompt,
)
from thinkloop.common import (
    AnsiColors,
    colored_print,
)
from thinkloop.config import (
    Settings,
    get_settings,
)
from thinkloop.core.context import (
    RunCancelled,
    RunContext,
)
from thinkloop.llms import (
    LLM,
    LLMParams,
    available_llms,
    load_llm,
)
from thinkloop.llms.call_logger import LLMLogger
from thinkloop.predictors import (
    BasePredictor,
    JSONLogger,
    PredictionError,
    Predictor,
)
from thinkloop.prompters import (
    HydrateError,
    PromptLogger,
    Prompter,
)
from thinkloop.tools.app_editor import build_app_editor_tools
from thinkloop.tools.user_input import read_line

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _init_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of *settings* with any command-line overrides applied."""
    overrides = {
        "LLM_BACKEND": args.backend,
        "MODEL": args.model,
        "MAX_TOKENS": args.max_tokens,
        "TEMPERATURE": args.temperature,
        "TOP_K": args.top_k,
        "TOP_P": args.top_p,
        "MAX_ITERATIONS": args.max_iterations,
        "TIMEOUT": args.timeout,
        "LOG_LEVEL": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@contextlib.contextmanager
def _open_log(path: Optional[Path]) -> Iterator[Optional[TextIO]]:
    if path is None:
        yield None
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        logger.info("Writing log to %s", path)
        yield f


def build_predictor(
    llm: LLM,
    params: LLMParams,
    prompt_log: Optional[TextIO] = None,
    trace_log: Optional[TextIO] = None,
) -> Predictor:
    """Assemble the base predictor for the agent with the optional logging layers."""
    prompter: Prompter = default_prompt(params)
    if prompt_log is not None:
        prompter = PromptLogger(prompter, prompt_log)
    predictor: Predictor = BasePredictor(llm, prompter, default_parser(str))
    if trace_log is not None:
        predictor = JSONLogger(predictor, trace_log)
    return predictor


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def run_agent(settings: Settings, llm: LLM, args: argparse.Namespace) -> int:
    """Run the interactive app-editor agent until the user stops."""
    params = LLMParams.from_settings(settings)
    tools = build_app_editor_tools(llm, params)

    with _open_log(args.prompt_log) as prompt_log, _open_log(args.trace_log) as trace_log:
        agent: Agent[str] = Agent(
            build_predictor(llm, params, prompt_log, trace_log),
            tools,
            max_iterations=settings.MAX_ITERATIONS,
            display=sys.stderr,
        )
        colored_print("🔮  thinkloop app editor - Ctrl+D to quit.", AnsiColors.YELLOW)
        while True:
            colored_print("AI: What is the goal?", AnsiColors.YELLOW)
            colored_print("You: ", AnsiColors.BLUE, end="", flush=True)
            try:
                goal = read_line(sys.stdin)
            except (EOFError, KeyboardInterrupt):
                return 0

            ctx = RunContext(timeout=settings.TIMEOUT)
            try:
                answer = agent.run(ctx, goal)
            except ValueError as exc:
                colored_print(f"⚠️ {exc}", AnsiColors.RED)
                continue
            except RunCancelled as exc:
                colored_print(f"⚠️ {exc}", AnsiColors.RED)
                continue
            except (PredictionError, HydrateError, IterationLimitExceeded) as exc:
                logger.error("agent run failed: %s", exc)
                colored_print(f"⚠️ agent run failed: {exc}", AnsiColors.RED)
                return 1
            print(answer)


def run_prompt(settings: Settings, llm: LLM, args: argparse.Namespace) -> int:
    """Send one prompt to the backend and print the reply."""
    prompt: str = args.text
    # A prompt starting with "@" names a file holding the prompt.
    if prompt.startswith("@"):
        prompt = Path(prompt[1:]).read_text(encoding="utf-8")

    ctx = RunContext(timeout=settings.TIMEOUT)
    with _open_log(args.llm_log) as llm_log:
        if llm_log is not None:
            llm = LLMLogger(llm, llm_log)
        try:
            print(llm.generate(ctx, prompt, LLMParams.from_settings(settings)))
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("prompt failed: %s", exc)
            return 1
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reason-then-act agent driven by an LLM")
    parser.add_argument("--backend", choices=available_llms(), type=str.lower, default=None,
                        help="LLM backend (default from env: LLM_BACKEND)")
    parser.add_argument("--model", default=None, help="Model name for the backend")
    parser.add_argument("--max-tokens", type=int, default=None,
                        help="The maximum number of tokens to generate")
    parser.add_argument("--temperature", type=float, default=None,
                        help="The temperature to use for the prompt")
    parser.add_argument("--top-k", type=int, default=None,
                        help="The top-k value to use for the prompt")
    parser.add_argument("--top-p", type=float, default=None,
                        help="The top-p value to use for the prompt")
    parser.add_argument("--max-iterations", type=int, default=None,
                        help="Give up after this many reasoning turns")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Deadline in seconds for each agent run or prompt")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        type=str.lower,
        default=None,
        help="Logging level (default from env: LOG_LEVEL)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    agent = sub.add_parser("agent", help="Run the interactive app-editor agent")
    agent.add_argument("--prompt-log", type=Path, default=None,
                       help="Append every hydrated prompt to this file")
    agent.add_argument("--trace-log", type=Path, default=None,
                       help="Append JSON request/response records to this file")

    prompt = sub.add_parser("prompt", help="Send a single prompt to the backend")
    prompt.add_argument("text", help="Prompt text, or @path to read it from a file")
    prompt.add_argument("--llm-log", type=Path, default=None,
                        help="Append JSON prompt/response records to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the thinkloop application.

    This function sets up the command-line interface, initializes logging, builds the LLM backend
    from settings and dispatches to the requested command.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _apply_overrides(get_settings(), args)
    _init_logging(settings.LOG_LEVEL)

    logger.info("Starting thinkloop [%s, backend=%s]", args.command, settings.LLM_BACKEND)
    secrets = {"API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"}
    logger.debug("Settings: %s", settings.model_dump(exclude=secrets))

    try:
        llm = load_llm(settings.LLM_BACKEND, settings)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "agent":
        return run_agent(settings, llm, args)
    return run_prompt(settings, llm, args)


if __name__ == "__main__":
    sys.exit(main())
