# tests/test_ui.py
from __future__ import annotations

import stat
from pathlib import Path

import pytest

prompt_toolkit = pytest.importorskip("prompt_toolkit")

from prompt_toolkit.document import Document  # noqa: E402
from prompt_toolkit.styles import Style  # noqa: E402

from lsh_cli import ui  # noqa: E402
from lsh_cli.config import YAMLConfig  # noqa: E402


def completions(completer, text: str) -> list[str]:
    return [c.text for c in completer.get_completions(Document(text), None)]


@pytest.fixture
def fake_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    bindir = tmp_path / "bin"
    bindir.mkdir()
    for name in ["mytool", "mytool2", "help-me"]:
        exe = bindir / name
        exe.write_text("#!/bin/sh\n")
        exe.chmod(exe.stat().st_mode | stat.S_IXUSR)
    (bindir / "not-exec").write_text("")
    monkeypatch.setenv("PATH", str(bindir))
    return bindir


def test_first_token_before_cursor():
    assert ui._first_token_before_cursor("  ec") == "ec"
    assert ui._first_token_before_cursor("echo ") == ""
    assert ui._first_token_before_cursor("echo\tfo") == ""


def test_executable_completer_uses_path(fake_path: Path):
    completer = ui.ExecutableCompleter()

    assert completions(completer, "myt") == ["mytool", "mytool2"]
    assert completions(completer, "not") == []


def test_executable_completer_ignores_arguments(fake_path: Path):
    assert completions(ui.ExecutableCompleter(), "mytool myt") == []


def test_lsh_completer_offers_builtins_first(fake_path: Path):
    result = completions(ui.LshCompleter(), "he")

    assert result == ["help", "help-me"]


def test_lsh_completer_does_not_duplicate_builtin_names(
    fake_path: Path, monkeypatch: pytest.MonkeyPatch
):
    exe = fake_path / "pwd"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)

    assert completions(ui.LshCompleter(), "pw") == ["pwd"]


def test_lsh_completer_completes_paths_for_arguments(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "subdir").mkdir()
    (tmp_path / "summary.txt").write_text("")
    (tmp_path / "other").write_text("")

    assert completions(ui.LshCompleter(), "mv su") == ["subdir/", "summary.txt"]


def test_path_completer_after_space_lists_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a").write_text("")
    (tmp_path / "b").mkdir()

    assert completions(ui.PathCompleter(), "cd ") == ["a", "b/"]


def test_path_completer_nested_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner.txt").write_text("")

    assert completions(ui.PathCompleter(), "touch b/in") == ["b/inner.txt"]


def test_path_completer_skips_command_token():
    assert completions(ui.PathCompleter(), "ls") == []


class KernelStub:
    def __init__(self, cfg: dict):
        self.config = YAMLConfig(cfg)


def test_build_style_applies_string_overrides():
    kernel = KernelStub({"ui": {"theme": {"style": {"completion-menu": "bg:#000000", "bad": 3}}}})

    style = ui._build_style(kernel)

    assert isinstance(style, Style)
    assert ("completion-menu", "bg:#000000") in style.style_rules
    assert all(name != "bad" for name, _ in style.style_rules)


def test_cfg_helpers_fall_back_without_kernel():
    assert ui._cfg_bool(None, "ui.complete_while_typing", True) is True
    assert ui._cfg_dict(None, "ui.theme.style", {}) == {}
