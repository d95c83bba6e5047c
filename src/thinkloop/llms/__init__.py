"""
Language-model backends for thinkloop.

This package is the only place that *directly* calls an LLM.  Everything else (agent loop, tools,
pipeline) stays model-agnostic and talks to the :class:`LLM` contract:

    generate(ctx, prompt, params) -> text

Backends are registered with :func:`register_llm` and instantiated from settings by
:func:`load_llm`.  The concrete backends live in :mod:`thinkloop.llms.backends`.
"""

from __future__ import annotations

import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Optional,
    Type,
)

from pydantic import BaseModel

from thinkloop.core.context import RunContext

if TYPE_CHECKING:
    from thinkloop.config import Settings

logger = logging.getLogger(__name__)


class LLMBackendError(RuntimeError):
    """Raised when a backend request fails or returns an unusable response."""


class LLMParams(BaseModel):
    """Sampling parameters sent alongside a prompt."""

    model: Optional[str] = None
    max_tokens: int = 1024
    temperature: float = 0.2
    top_k: int = 40
    top_p: float = 0.9

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LLMParams":
        return cls(
            model=settings.MODEL,
            max_tokens=settings.MAX_TOKENS,
            temperature=settings.TEMPERATURE,
            top_k=settings.TOP_K,
            top_p=settings.TOP_P,
        )


class LLM(ABC):
    """Abstract text-generation backend."""

    @abstractmethod
    def generate(self, ctx: RunContext, prompt: str, params: Any) -> str:
        """Return the model's completion for *prompt*."""

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LLM":
        """
        Build the backend from application settings.

        Optional hook used by :func:`load_llm`.  Backends that can be configured from
        :class:`~thinkloop.config.Settings` override it; the rest are constructed directly and
        raise :class:`NotImplementedError` here.
        """
        raise NotImplementedError(f"{cls.__name__} cannot be built from settings")


# ---------------------------------------------------------------------------
# Registry helpers
# ---------------------------------------------------------------------------
_LLM_REGISTRY: Dict[str, Type[LLM]] = {}


def register_llm(name: str) -> Callable[[Type[LLM]], Type[LLM]]:
    """Decorator to register an LLM backend class under *name*."""

    def wrapper(cls: Type[LLM]) -> Type[LLM]:
        _LLM_REGISTRY[name] = cls
        return cls

    return wrapper


def available_llms() -> list[str]:
    """Names of all registered backends."""
    _load_builtin_backends()
    return sorted(_LLM_REGISTRY)


def load_llm(name: str | None, settings: "Settings") -> LLM:
    """
    Factory that returns an instantiated backend.

    Fallback order:
    1. *name* arg
    2. ``settings.LLM_BACKEND``
    """
    _load_builtin_backends()
    target = (name or settings.LLM_BACKEND).lower()
    cls = _LLM_REGISTRY.get(target)
    if cls is None:
        raise ValueError(f"LLM backend '{target}' is not registered.")
    logger.debug("Loading LLM backend '%s'", target)
    return cls.from_settings(settings)


def _load_builtin_backends() -> None:
    # Importing the module registers the built-in backends.
    import thinkloop.llms.backends  # noqa: F401  pylint: disable=import-outside-toplevel


__all__ = [
    "LLM",
    "LLMBackendError",
    "LLMParams",
    "available_llms",
    "load_llm",
    "register_llm",
]
