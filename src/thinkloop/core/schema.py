"""
Schema definitions for model <-> agent <-> tool messages.

These data models serve as the contract between the language model, the agent loop and the
prediction pipeline.  We keep them separate from runtime logic so they can be imported anywhere
without side-effects.
"""

from typing import (
    Generic,
    Optional,
    Tuple,
    TypeVar,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from thinkloop.tools import Tool

TOut = TypeVar("TOut")


class Reasoning(BaseModel, Generic[TOut]):
    """
    One structured model turn: a thought plus either an action (with its input) or a final answer.

    The raw form decoded from the model may violate the action/final-answer rule; the agent's
    validation layer rejects such values.
    """

    model_config = ConfigDict(frozen=True)

    thought: str = ""
    action: Optional[str] = None
    input: str = ""
    final_answer: Optional[TOut] = None

    @field_validator("action", mode="before")
    @classmethod
    def _blank_action_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_action(self) -> bool:
        return self.action is not None

    @property
    def has_final_answer(self) -> bool:
        return self.final_answer is not None


class ThoughtIteration(Reasoning[TOut], Generic[TOut]):
    """A reasoning turn together with the observation its action produced."""

    observation: str = ""

    @classmethod
    def from_reasoning(cls, reasoning: Reasoning, observation: str) -> "ThoughtIteration":
        """Fold *observation* into a copy of *reasoning*."""
        return cls(
            thought=reasoning.thought,
            action=reasoning.action,
            input=reasoning.input,
            final_answer=reasoning.final_answer,
            observation=observation,
        )


class PromptData(BaseModel, Generic[TOut]):
    """The request handed to the prediction pipeline on every loop iteration."""

    model_config = ConfigDict(frozen=True)

    goal: str
    tools: Tuple[Tool, ...] = Field(default_factory=tuple)
    chains: Tuple[ThoughtIteration[TOut], ...] = Field(default_factory=tuple)
