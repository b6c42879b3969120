# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Built-in command registry.

Builtins run inside the interpreter process. Each handler takes the full
token list (``args[0]`` is the command name) and a BuiltinContext, writes
its messages through the context, and returns a Continuation. Only ``exit``
returns Continuation.STOP.

The registry is a read-only mapping built once at import.
"""

from __future__ import annotations

import enum
import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NamedTuple


class Continuation(enum.Enum):
    """Whether the read-eval loop should read another line."""

    CONTINUE = "continue"
    STOP = "stop"


def print_line(text: str) -> None:
    print(text)


def print_error_line(text: str) -> None:
    print(text, file=sys.stderr)


@dataclass(frozen=True)
class BuiltinContext:
    """Output channels and settings handed to every builtin."""

    output_fn: Callable[[str], None] = print_line
    error_fn: Callable[[str], None] = print_error_line
    error_prefix: str = "lsh"
    help_cfg: dict[str, Any] = field(default_factory=dict)

    def error(self, message: str) -> None:
        self.error_fn(f"{self.error_prefix}: {message}")

    def missing_argument(self, command: str) -> None:
        self.error(f'expected argument to "{command}"')


Handler = Callable[[list[str], BuiltinContext], Continuation]


# -----------------------
# mv destination resolution
# -----------------------


class DestinationKind(enum.Enum):
    ABSOLUTE = "absolute"
    DIRECTORY = "directory"
    RENAME = "rename"


class Destination(NamedTuple):
    path: str
    kind: DestinationKind


def resolve_destination(file: str, location: str, cwd: str) -> Destination:
    """Work out where ``mv file location`` should put ``file``.

    Tried in order:
    1. ``location`` is absolute: move into it, keeping the file name
    2. ``location`` names a directory in ``cwd``: move into it, keeping
       the file name
    3. otherwise ``location`` is the new name inside ``cwd``

    Nothing is modified; the only filesystem access is the directory check.
    """
    name = os.path.basename(file.rstrip("/")) or file

    if os.path.isabs(location):
        return Destination(
            os.path.join(location, name), DestinationKind.ABSOLUTE
        )

    candidate = os.path.join(cwd, location)
    if os.path.isdir(candidate):
        return Destination(
            os.path.join(candidate, name), DestinationKind.DIRECTORY
        )

    return Destination(candidate, DestinationKind.RENAME)


_MV_FAILURES: dict[DestinationKind, str] = {
    DestinationKind.ABSOLUTE: "Directory not found",
    DestinationKind.DIRECTORY: "Directory not found in CWD",
    DestinationKind.RENAME: "File not moved",
}


# -----------------------
# Handlers
# -----------------------


def builtin_cd(args: list[str], ctx: BuiltinContext) -> Continuation:
    """Change the working directory to args[1]."""
    if len(args) < 2:
        ctx.missing_argument("cd")
        return Continuation.CONTINUE

    try:
        os.chdir(args[1])
    except OSError as e:
        ctx.error(f"{e.strerror or e}: {args[1]}")
    return Continuation.CONTINUE


def builtin_help(args: list[str], ctx: BuiltinContext) -> Continuation:
    """List the builtins, framed by the configured banner and footer."""
    for line in ctx.help_cfg.get("banner", []) or []:
        ctx.output_fn(str(line))

    for name in BUILTINS:
        ctx.output_fn(f"  {name}")

    footer = ctx.help_cfg.get("footer")
    if footer:
        ctx.output_fn(str(footer))
    return Continuation.CONTINUE


def builtin_exit(args: list[str], ctx: BuiltinContext) -> Continuation:
    return Continuation.STOP


def builtin_pwd(args: list[str], ctx: BuiltinContext) -> Continuation:
    try:
        cwd = os.getcwd()
    except OSError as e:
        ctx.error(f"getcwd() error: {e.strerror or e}")
        return Continuation.CONTINUE

    ctx.output_fn(f"current working directory is: {cwd}")
    return Continuation.CONTINUE


def builtin_touch(args: list[str], ctx: BuiltinContext) -> Continuation:
    """Create args[1], truncating it if it already exists."""
    if len(args) < 2:
        ctx.missing_argument("touch")
        return Continuation.CONTINUE

    try:
        with open(args[1], "w"):
            pass
    except OSError as e:
        ctx.error(f"Unable to create file {args[1]}: {e.strerror or e}")
    return Continuation.CONTINUE


def builtin_ls(args: list[str], ctx: BuiltinContext) -> Continuation:
    """List the current directory, marking subdirectories with '/'."""
    try:
        with os.scandir(".") as it:
            entries = sorted(
                (entry.name, entry.is_dir()) for entry in it
            )
    except OSError as e:
        ctx.error(f"Error opening directory: {e.strerror or e}")
        return Continuation.CONTINUE

    for name, is_dir in entries:
        ctx.output_fn(name + "/" if is_dir else name)
    return Continuation.CONTINUE


def builtin_mkdir(args: list[str], ctx: BuiltinContext) -> Continuation:
    if len(args) < 2:
        ctx.missing_argument("mkdir")
        return Continuation.CONTINUE

    try:
        os.mkdir(args[1], 0o777)
    except OSError as e:
        ctx.error(f"cannot create directory {args[1]}: {e.strerror or e}")
    return Continuation.CONTINUE


def builtin_mv(args: list[str], ctx: BuiltinContext) -> Continuation:
    """Move args[1] to args[2] (see resolve_destination)."""
    if len(args) < 3:
        ctx.missing_argument("mv")
        return Continuation.CONTINUE

    file, location = args[1], args[2]
    try:
        cwd = os.getcwd()
    except OSError as e:
        ctx.error(f"getcwd() error: {e.strerror or e}")
        return Continuation.CONTINUE

    dest = resolve_destination(file, location, cwd)
    try:
        os.rename(file, dest.path)
    except OSError as e:
        ctx.error(f"{_MV_FAILURES[dest.kind]}: {dest.path}: {e.strerror or e}")
    else:
        ctx.output_fn("Successful")
    return Continuation.CONTINUE


# Order here is the order `help` prints.
BUILTINS: Mapping[str, Handler] = MappingProxyType({
    "cd": builtin_cd,
    "help": builtin_help,
    "exit": builtin_exit,
    "pwd": builtin_pwd,
    "touch": builtin_touch,
    "ls": builtin_ls,
    "mkdir": builtin_mkdir,
    "mv": builtin_mv,
})


def lookup(name: str) -> Handler | None:
    """
    Get a builtin handler.

    Args:
        name: The command name (exact, case-sensitive)

    Returns:
        The handler, or None if ``name`` is not a builtin

    Example:
        >>> handler = lookup('cd')
        >>> if handler:
        ...     handler(['cd', '/tmp'], BuiltinContext())
    """
    return BUILTINS.get(name)


def builtin_names() -> list[str]:
    return list(BUILTINS)
