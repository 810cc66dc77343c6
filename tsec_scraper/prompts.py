"""
Operator interaction: identifier prompts and console helpers.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.prompt import Prompt

from .exceptions import InvalidInputError, OperationCancelledError
from .utils.text import parse_int_safe

console = Console()


def validate_positive_int(raw: Any, label: str) -> int:
    """
    Parse an operator-supplied identifier.

    Raises:
        InvalidInputError: If the value is not a positive integer
    """
    value = parse_int_safe(raw)
    if value is None or value <= 0:
        raise InvalidInputError(
            f"Invalid {label}. Please enter a positive integer.",
            field_name=label,
            field_value=raw,
        )
    return value


def prompt_positive_int(
    label: str,
    ask: Optional[Callable[[str], str]] = None,
) -> int:
    """
    Ask the operator for a positive integer identifier.

    An empty answer, EOF or Ctrl-C cancels the whole operation.

    Raises:
        OperationCancelledError: If the operator cancels
        InvalidInputError: If the answer is not a positive integer
    """
    ask = ask or (lambda text: Prompt.ask(text, console=console, default=""))
    try:
        raw = ask(f"Enter {label} (integer)")
    except (EOFError, KeyboardInterrupt):
        raise OperationCancelledError()
    if raw is None or not str(raw).strip():
        raise OperationCancelledError()
    return validate_positive_int(raw, label)


def resolve_identifier(value: Optional[Any], label: str, ask: Optional[Callable[[str], str]] = None) -> int:
    """Use a value given on the command line, or prompt for it."""
    if value is not None:
        return validate_positive_int(value, label)
    return prompt_positive_int(label, ask=ask)


def get_progress() -> Progress:
    """Progress bar for sequential crawls."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
    )
