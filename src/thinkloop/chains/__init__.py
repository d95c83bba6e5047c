"""
Pipeline composer.

A :class:`Chain` strings independently written stages into one callable.  Every stage declares the
type it accepts and the type it produces; the chain checks, once and eagerly at construction, that
adjacent stages agree and that the ends match the chain's own declared types.  A malformed chain
therefore fails when it is wired, never on first use.

    chain = Chain([parse_int, add_one, to_text], input_type=str, output_type=str)
    chain.run(ctx, "41")  # -> "42"
"""

from __future__ import annotations

import inspect
import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Callable,
    Optional,
    Sequence,
)

from thinkloop.core.context import RunContext

logger = logging.getLogger(__name__)


class ChainConfigError(TypeError):
    """Raised when a chain is assembled from incompatible or malformed stages."""


class Stage(ABC):
    """A unit of work: accepts a context and a typed input, returns a typed output or raises."""

    input_type: Optional[Any] = None
    output_type: Optional[Any] = None

    @abstractmethod
    def run(self, ctx: RunContext, value: Any) -> Any:
        """Process *value* and return the result."""


class StageFunc(Stage):
    """Adapts a plain ``fn(ctx, value)`` callable into a :class:`Stage` with declared types."""

    def __init__(self, fn: Callable[[RunContext, Any], Any], input_type: Any, output_type: Any):
        self.fn = fn
        self.input_type = input_type
        self.output_type = output_type
        self.name = getattr(fn, "__name__", type(fn).__name__)

    def run(self, ctx: RunContext, value: Any) -> Any:
        return self.fn(ctx, value)

    def __repr__(self) -> str:
        return (
            f"StageFunc({self.name}: {_type_name(self.input_type)} -> "
            f"{_type_name(self.output_type)})"
        )


def stage(input_type: Any, output_type: Any) -> Callable[[Callable[[RunContext, Any], Any]], StageFunc]:
    """Decorator form of :class:`StageFunc`."""

    def wrapper(fn: Callable[[RunContext, Any], Any]) -> StageFunc:
        return StageFunc(fn, input_type, output_type)

    return wrapper


class Chain(Stage):
    """Runs stages strictly in order, feeding each output into the next stage."""

    def __init__(self, stages: Sequence[Any], input_type: Any, output_type: Any):
        self.stages = list(stages)
        self.input_type = input_type
        self.output_type = output_type
        self._validate()

    def run(self, ctx: RunContext, value: Any) -> Any:
        """
        Execute every stage in order.

        The first exception raised by a stage propagates unchanged and no later stage runs.
        """
        for i, s in enumerate(self.stages):
            ctx.raise_if_cancelled()
            logger.debug("Running stage %d: %r", i, s)
            value = s.run(ctx, value)
        return value

    def _validate(self) -> None:
        if not self.stages:
            raise ChainConfigError("no stages provided")

        last_out = self.input_type
        for i, s in enumerate(self.stages):
            _check_shape(i, s)

            in_type = getattr(s, "input_type", None)
            out_type = getattr(s, "output_type", None)
            if in_type is None or out_type is None:
                raise ChainConfigError(f"stage {i}: input_type and output_type must be declared")
            if in_type != last_out:
                raise ChainConfigError(
                    f"stage {i}: expected input type {_type_name(last_out)}, "
                    f"got {_type_name(in_type)}"
                )
            last_out = out_type

        if last_out != self.output_type:
            raise ChainConfigError(
                f"invalid output type. Expected {_type_name(self.output_type)}, "
                f"got {_type_name(last_out)}"
            )

    def __repr__(self) -> str:
        return (
            f"Chain({len(self.stages)} stages: {_type_name(self.input_type)} -> "
            f"{_type_name(self.output_type)})"
        )


def _check_shape(i: int, s: Any) -> None:
    """A stage must expose ``run(ctx, value)``: exactly two positional arguments."""
    run = getattr(s, "run", None)
    if not callable(run):
        raise ChainConfigError(f"stage {i}: missing run(ctx, value) method")
    try:
        params = list(inspect.signature(run).parameters.values())
    except (TypeError, ValueError) as exc:  # no introspectable signature
        raise ChainConfigError(f"stage {i}: cannot inspect run(): {exc}") from exc

    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    for p in params:
        if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise ChainConfigError(
                f"stage {i}: invalid number of arguments: run() must not take *{p.name}"
            )
        if p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty:
            raise ChainConfigError(
                f"stage {i}: invalid number of arguments: unexpected keyword-only {p.name!r}"
            )
    count = sum(1 for p in params if p.kind in positional)
    if count != 2:
        raise ChainConfigError(
            f"stage {i}: invalid number of arguments: run() takes {count}, expected 2"
        )


def _type_name(t: Any) -> str:
    return getattr(t, "__name__", repr(t))
