"""Common utility functions for the project."""

from enum import Enum
from typing import Any

RESET = "\033[0m"


class AnsiColors(Enum):
    """
    ANSI color codes for terminal output.
    """

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[33m"
    BLUE = "\033[94m"


def colorize(text: str, color: AnsiColors) -> str:
    """Wrap *text* in the escape sequence for *color* followed by a reset."""
    return f"{color.value}{text}{RESET}"


def colored_print(text: str, color: AnsiColors, *args: Any, **kwargs: Any) -> None:
    """
    Print text in color.

    Args:
        text: The text to print
        color: The color to use (AnsiColors enum)
        args: Additional positional arguments for print
        kwargs: Additional keyword arguments for print (e.g. ``file``)
    """
    print(colorize(text, color), *args, **kwargs)
