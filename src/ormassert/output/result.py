"""CommandResult — what every CLI command hands to the output layer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CommandError(BaseModel):
    """Structured error payload within a CommandResult."""

    model_config = {"frozen": True}

    code: str
    message: str


class CommandResult(BaseModel):
    """Outcome of one CLI command.

    Attributes:
        ok: Whether the command succeeded (drives the exit code).
        op: Name of the command (e.g. ``"rows"``).
        data: Command-specific payload.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: CommandError | None = None
