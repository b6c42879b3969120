# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LSH kernel.

The dispatcher at the heart of the interpreter:
- tokenize a command line
- run a builtin in-process, or launch an external program and wait
- report launch failures and signal deaths on stderr
- decide whether the read-eval loop keeps going

Important boundary:
- Kernel does not load YAML or discover defaults.
- Kernel consumes the injected ConfigModel and Launcher.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from . import builtins
from . import config as cfg_module
from .builtins import (
    BuiltinContext,
    Continuation,
    print_error_line,
    print_line,
)
from .config import ANSI_COLORS
from .executor import LaunchFailed, LaunchResult, NormalExit, Signaled
from .interfaces import ConfigModel, Launcher
from .tokenizer import tokenize


def write_crash_log(error: BaseException, raw_command: str = "") -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions or critical failures.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        log_path = cfg_module.crash_log_path(cfg_module.get_data_root())
        log_path.parent.mkdir(parents=True, exist_ok=True)

        lines = [f"{datetime.now().isoformat()}"]
        if raw_command:
            lines.append(f"raw={raw_command}")
        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            ).rstrip()
        )
        lines.append("----")

        with log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already handling a failure; losing the log entry is acceptable.
        pass


@dataclass
class Kernel:
    """LSH session engine."""

    launcher: Launcher
    config: ConfigModel

    running: bool = False
    color: bool = False

    # ---- Output hooks (wired by UI/CLI) ----
    output_fn: Callable[[str], None] = field(default=print_line)
    error_fn: Callable[[str], None] = field(default=print_error_line)

    @property
    def error_prefix(self) -> str:
        sys_cfg = getattr(self.config, "system", {}) or {}
        return str(sys_cfg.get("error_prefix", "lsh"))

    def builtin_context(self) -> BuiltinContext:
        help_cfg = getattr(self.config, "help", {}) or {}
        return BuiltinContext(
            output_fn=self.output_fn,
            error_fn=self.error_fn,
            error_prefix=self.error_prefix,
            help_cfg=help_cfg if isinstance(help_cfg, dict) else {},
        )

    # -----------------------
    # Session
    # -----------------------

    def start(self) -> None:
        """Start an LSH session."""
        self.running = True

    def prompt(self) -> str:
        """Return the prompt string, colored when enabled."""
        sys_cfg = getattr(self.config, "system", {}) or {}
        text = str(sys_cfg.get("prompt", ">"))
        if not self.color:
            return text

        color = ANSI_COLORS.get(
            str(sys_cfg.get("prompt_color", "reset")), ANSI_COLORS["reset"]
        )
        return f"{color}{text}{ANSI_COLORS['reset']}"

    # -----------------------
    # Command handling
    # -----------------------

    def handle_command(self, line: str) -> Continuation:
        """Tokenize and dispatch a single command line."""
        return self.dispatch(tokenize(line))

    def dispatch(self, tokens: list[str]) -> Continuation:
        """Run a builtin or an external program for ``tokens``.

        Returns:
            Continuation.STOP only for the exit builtin
        """
        if not tokens:
            return Continuation.CONTINUE

        handler = builtins.lookup(tokens[0])
        if handler is not None:
            outcome = handler(tokens, self.builtin_context())
            if outcome is Continuation.STOP:
                self.running = False
            return outcome

        result = self.launcher.launch(tokens)
        self._report_launch(tokens[0], result)
        return Continuation.CONTINUE

    def _report_launch(self, command: str, result: LaunchResult) -> None:
        exec_cfg = getattr(self.config, "execution", {}) or {}
        prefix = self.error_prefix

        if isinstance(result, LaunchFailed):
            self.error_fn(f"{prefix}: {result.reason}")
        elif isinstance(result, Signaled):
            if exec_cfg.get("report_signals", True):
                self.error_fn(
                    f"{prefix}: {command}: terminated by {result.signal_name}"
                )
        elif isinstance(result, NormalExit):
            if result.code != 0 and exec_cfg.get("report_exit_status", False):
                self.error_fn(
                    f"{prefix}: {command}: exited with status {result.code}"
                )
