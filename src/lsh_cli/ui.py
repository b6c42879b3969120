# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from . import builtins

if TYPE_CHECKING:
    from .kernel import Kernel  # pragma: no cover


# ----------------------------
# Config helpers (read through kernel.config.get_path)
# ----------------------------


def _cfg_get_path(kernel: Kernel | None, path: str, default):
    if kernel is None:
        return default
    cfg = getattr(kernel, "config", None)
    if cfg is None or not hasattr(cfg, "get_path"):
        return default
    try:
        return cfg.get_path(path, default)
    except Exception:
        return default


def _cfg_bool(kernel: Kernel | None, path: str, default: bool) -> bool:
    return bool(_cfg_get_path(kernel, path, default))


def _cfg_dict(kernel: Kernel | None, path: str, default: dict) -> dict:
    val = _cfg_get_path(kernel, path, default)
    return val if isinstance(val, dict) else default


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    # Conservative: works across prompt_toolkit versions.
    return {
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "completion-menu.meta.completion.current": "bg:#303030 #a0a0a0",
        "scrollbar.background": "bg:#202020",
        "scrollbar.button": "bg:#505050",
    }


def _build_style(kernel: Kernel | None) -> Style:
    base = _default_style_dict()
    overrides = _cfg_dict(kernel, "ui.theme.style", {})
    # only keep string->string
    for k, v in list(overrides.items()):
        if isinstance(k, str) and isinstance(v, str):
            base[k] = v
    return Style.from_dict(base)


def _first_token_before_cursor(text_before_cursor: str) -> str:
    """Return the command-name fragment under the cursor.

    Returns "" once whitespace follows the first token, i.e. the cursor is
    in the arguments.
    """
    s = text_before_cursor.lstrip()
    if any(ch.isspace() for ch in s):
        return ""
    return s


# ----------------------------
# Completers
# ----------------------------


class ExecutableCompleter(Completer):
    """Completes executable names available on PATH (first token)."""

    def __init__(self) -> None:
        self._cache: set[str] | None = None
        self._cache_path: str | None = None

    def load(self) -> set[str]:
        path_val = os.environ.get("PATH", "")
        if self._cache is not None and self._cache_path == path_val:
            return self._cache

        exes: set[str] = set()
        for p in path_val.split(os.pathsep):
            if not p:
                continue
            try:
                for name in os.listdir(p):
                    full = os.path.join(p, name)
                    if os.path.isfile(full) and os.access(full, os.X_OK):
                        exes.add(name)
            except OSError:
                continue

        self._cache = exes
        self._cache_path = path_val
        return exes

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        token = _first_token_before_cursor(document.text_before_cursor or "")
        if not token:
            return

        for exe in sorted(self.load()):
            if exe.startswith(token):
                yield Completion(
                    exe, start_position=-len(token), display_meta="exe"
                )


class PathCompleter(Completer):
    """Filesystem path completion for arguments (after the command)."""

    def _current_arg_token(self, text: str) -> str | None:
        """Extract the argument fragment under the cursor.

        Returns:
            The fragment ("" right after whitespace), or None while the
            cursor is still on the command name
        """
        stripped = text.lstrip()
        if not stripped or not any(ch.isspace() for ch in stripped):
            return None
        if stripped[-1].isspace():
            return ""
        return stripped.split()[-1]

    def _list_dir(self, directory: str) -> list[str]:
        try:
            return sorted(os.listdir(directory))
        except OSError:
            return []

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        token = self._current_arg_token(document.text_before_cursor or "")
        if token is None:
            return

        expanded = os.path.expanduser(token)

        if token == "":
            base_dir = "."
            prefix = ""
            insert_prefix = ""
        elif expanded.endswith("/") or expanded.endswith(os.sep):
            base_dir = expanded
            prefix = ""
            insert_prefix = token
        else:
            base_dir = os.path.dirname(expanded) or "."
            prefix = os.path.basename(expanded)
            insert_prefix = os.path.dirname(token)
            if insert_prefix and not insert_prefix.endswith("/"):
                insert_prefix += "/"

        for name in self._list_dir(base_dir):
            if not name.startswith(prefix):
                continue
            is_dir = os.path.isdir(os.path.join(base_dir, name))
            ins = f"{insert_prefix}{name}" + ("/" if is_dir else "")
            yield Completion(
                ins,
                start_position=-len(token),
                display_meta="dir" if is_dir else "file",
            )


class LshCompleter(Completer):
    """Builtins and executables for the command, paths for arguments."""

    def __init__(self) -> None:
        self._exe = ExecutableCompleter()
        self._path = PathCompleter()

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        token = _first_token_before_cursor(document.text_before_cursor or "")

        if token:
            seen: set[str] = set()
            for name in builtins.builtin_names():
                if name.startswith(token):
                    seen.add(name)
                    yield Completion(
                        name, start_position=-len(token),
                        display_meta="builtin"
                    )
            for completion in self._exe.get_completions(
                document, complete_event
            ):
                if completion.text not in seen:
                    yield completion
            return

        yield from self._path.get_completions(document, complete_event)


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal-friendly line reader:
      - Keeps normal terminal scrollback + drag-select copy.
      - Uses PromptSession for editing and completion menus.
      - Ctrl+D on an empty line raises EOFError (end of input).
    """

    def __init__(self, kernel: Kernel | None = None) -> None:
        self.kernel = kernel
        self.session: PromptSession[str] | None = None
        self._style = _build_style(kernel)

        # Track whether we ended on a newline (to prevent prompt mangling)
        self._needs_newline_before_prompt = False

    def _ensure_session(self) -> None:
        if self.session is not None:
            return

        self.session = PromptSession(
            key_bindings=self.build_key_bindings(),
            completer=LshCompleter(),
            complete_while_typing=_cfg_bool(
                self.kernel, "ui.complete_while_typing", True
            ),
            style=self._style,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.session is not None

        # If last output didn't end with newline, insert one
        # before prompt redraw
        if self._needs_newline_before_prompt:
            print_formatted_text(
                ANSI("\n"), style=self._style, end=""
            )
            self._needs_newline_before_prompt = False

        with patch_stdout():
            # prompt may carry ANSI color from kernel.prompt()
            return self.session.prompt(ANSI(prompt + " "))

    def write(self, text: str) -> None:
        """Write EXACTLY what we receive (no extra newline).

        Track prompt safety.
        """
        if not text:
            return
        print_formatted_text(ANSI(text), style=self._style, end="")
        self._needs_newline_before_prompt = not text.endswith("\n")

    def write_line(self, text: str) -> None:
        self.write(text + "\n")

    # ---------- keybindings ----------

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-l")
        def _(event):
            try:
                event.app.renderer.clear()
            except Exception:
                pass
            event.app.invalidate()

        return kb
