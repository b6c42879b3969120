# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces enable clean separation between the read-eval loop,
the kernel's dispatch logic, and external process execution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .executor import LaunchResult  # pragma: no cover


class Launcher(Protocol):
    """Protocol for running external programs."""

    def launch(self, args: list[str]) -> LaunchResult:
        """Run args[0] with argv ``args``, wait for it, classify the outcome.

        Returns:
            NormalExit, Signaled or LaunchFailed
        """
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def system(self) -> dict[str, Any]:
        """System configuration (prompt, error prefix)."""
        ...

    @property
    def help(self) -> dict[str, Any]:
        """Help banner and footer."""
        ...

    @property
    def execution(self) -> dict[str, Any]:
        """Launch reporting switches."""
        ...


class LineReader(Protocol):
    """Protocol for the terminal front end used by the REPL."""

    def read(self, prompt: str) -> str:
        """Read one line. Raises EOFError at end of input."""
        ...

    def write(self, text: str) -> None:
        """Write text exactly as given."""
        ...
