"""Core types shared by every layer of the agent."""

from thinkloop.core.context import RunCancelled, RunContext

__all__ = ["RunCancelled", "RunContext"]
