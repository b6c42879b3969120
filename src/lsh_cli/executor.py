# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed process launcher for LSH.

launch() runs one external program in the foreground:
- the child inherits stdin/stdout/stderr and the current directory
- the shell blocks until the child has exited or been killed
- the outcome is classified as NormalExit, Signaled or LaunchFailed

There is no timeout and no background execution. The child is always
reaped before launch() returns.
"""

from __future__ import annotations

import signal
import subprocess
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NormalExit:
    """Child exited on its own."""

    code: int


@dataclass(frozen=True)
class Signaled:
    """Child was terminated by an uncaught signal."""

    signal: Union[signal.Signals, int]

    @property
    def signal_name(self) -> str:
        if isinstance(self.signal, signal.Signals):
            return self.signal.name
        return f"signal {self.signal}"


@dataclass(frozen=True)
class LaunchFailed:
    """The program could not be found or started."""

    reason: str


LaunchResult = Union[NormalExit, Signaled, LaunchFailed]


def _to_signal(signum: int) -> Union[signal.Signals, int]:
    try:
        return signal.Signals(signum)
    except ValueError:
        return signum


def classify_returncode(returncode: int) -> LaunchResult:
    """Map a Popen returncode to a launch result.

    subprocess reports death by signal N as returncode -N.
    """
    if returncode < 0:
        return Signaled(signal=_to_signal(-returncode))
    return NormalExit(code=returncode)


class ProcessLauncher:
    """Subprocess implementation of Launcher protocol."""

    def __init__(self, env: dict[str, str] | None = None):
        """Initialize launcher.

        Args:
            env: Environment for children. None inherits the shell's
                environment, including PATH for executable lookup.
        """
        self.env = env

    def launch(self, args: list[str]) -> LaunchResult:
        """Run a program with full terminal access and wait for it.

        Args:
            args: argv for the child; args[0] is looked up on PATH

        Returns:
            NormalExit(code), Signaled(signal) or LaunchFailed(reason)
        """
        if not args:
            return LaunchFailed(reason="empty command")

        command = args[0]
        proc: subprocess.Popen | None = None
        try:
            proc = subprocess.Popen(
                args,
                stdin=None,  # inherit from parent
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                env=self.env,
            )
            return classify_returncode(self._wait(proc))
        except FileNotFoundError:
            return LaunchFailed(reason=f"{command}: command not found")
        except PermissionError:
            return LaunchFailed(reason=f"{command}: permission denied")
        except (OSError, ValueError) as e:
            return LaunchFailed(reason=f"{command}: {e}")
        finally:
            # An interrupt between spawn and wait must not leave a zombie
            if proc is not None and proc.returncode is None:
                self._wait(proc)

    @staticmethod
    def _wait(proc: subprocess.Popen) -> int:
        """Block until the child terminates; stopped children keep us waiting.

        Ctrl-C reaches the child through the terminal, so an interrupt in
        the shell only means "keep waiting for the child to finish".
        """
        while True:
            try:
                return proc.wait()
            except KeyboardInterrupt:
                continue
