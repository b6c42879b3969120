# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LSH CLI entry point and REPL loop.

Design:
- CLI owns process startup and wiring (config + launcher + kernel + UI).
- Kernel is the dispatcher; the loop only reads lines and feeds it.
- UI is a prompt_toolkit PromptSession when attached to a terminal,
  plain input() otherwise.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

from . import config
from .builtins import Continuation
from .errors import ResourceExhaustedError
from .executor import ProcessLauncher
from .interfaces import LineReader
from .kernel import Kernel, write_crash_log


def _read_line(
    prompt: str,
    ui: LineReader | None,
    input_fn: Callable[[str], str],
) -> str:
    """Read one line; EOFError propagates as the end-of-input signal."""
    try:
        if ui is not None:
            return ui.read(prompt)
        return input_fn(prompt + " ")
    except MemoryError as e:
        raise ResourceExhaustedError("allocation error") from e


def _fresh_line(
    ui: LineReader | None, output_fn: Callable[[str], None]
) -> None:
    if ui is not None:
        ui.write("\n")
    else:
        output_fn("")


def run_repl(
    kernel: Kernel,
    ui: LineReader | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> int:
    """Run the LSH read-eval loop until exit or end of input.

    Returns:
        The process exit status (always success; fatal errors raise)
    """
    if not kernel.running:
        kernel.start()

    while kernel.running:
        try:
            line = _read_line(kernel.prompt(), ui, input_fn)
        except EOFError:
            kernel.running = False
            break
        except KeyboardInterrupt:
            # Drop the partial line and prompt again
            _fresh_line(ui, output_fn)
            continue
        except UnicodeDecodeError:
            kernel.error_fn(f"{kernel.error_prefix}: invalid input encoding")
            continue

        try:
            outcome = kernel.handle_command(line or "")
        except ResourceExhaustedError:
            raise
        except KeyboardInterrupt:
            # Interrupted while a builtin ran or a child was starting
            _fresh_line(ui, output_fn)
            continue
        except Exception as e:
            # Unhandled exception - write crash log
            write_crash_log(e, raw_command=line)
            error_msg = (
                f"[ERROR] Unhandled exception: "
                f"{type(e).__name__}: {e}"
            )
            kernel.error_fn(error_msg)
            # Continue session
            continue

        if outcome is Continuation.STOP:
            kernel.running = False

    return config.EXIT_SUCCESS


def _use_prompt_toolkit() -> bool:
    if os.environ.get("LSH_LEGACY_UI") == "1":
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


def _tolerate_undecodable_input() -> None:
    """Carry undecodable bytes through as surrogates instead of failing.

    Arguments built from such lines encode back to the original bytes
    when handed to a child (os.fsencode).
    """
    for stream in (sys.stdin, sys.stdout):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(errors="surrogateescape")


def main() -> None:
    """Main entry point for LSH."""
    _tolerate_undecodable_input()
    cfg = config.load_system_config()
    launcher = ProcessLauncher()
    kernel = Kernel(launcher=launcher, config=cfg)

    ui = None
    if _use_prompt_toolkit():
        from .ui import PromptToolkitUI

        ui = PromptToolkitUI(kernel)
        kernel.color = True
        # Route builtin output through the UI (keeps prompt redraw clean)
        kernel.output_fn = ui.write_line

    try:
        status = run_repl(kernel, ui=ui)
    except ResourceExhaustedError as e:
        write_crash_log(e)
        print(f"{kernel.error_prefix}: {e.what}", file=sys.stderr)
        sys.exit(config.EXIT_FAILURE)

    sys.exit(status)
