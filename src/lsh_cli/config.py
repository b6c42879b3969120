# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and filesystem discovery for LSH.

Handles:
- Data root resolution (LSH_DATA_HOME, ~/.local/share) for the crash log
- Packaged YAML defaults loading (lsh_cli/defaults/*.yaml)
- ANSI coloring constants for the prompt
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

try:
    # Py3.9+
    from importlib import resources as importlib_resources
except Exception:  # pragma: no cover
    import importlib_resources  # type: ignore


# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "cyan": "\033[38;5;69;1m",
    "pink": "\033[38;5;169;1m",
    "magenta": "\033[38;5;126;1m",
    "yellow": "\033[38;5;226;1m",
    "purple": "\033[38;5;96;1m",
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
}

# Exit statuses of the interpreter process itself
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def system(self) -> dict[str, Any]:
        return self._config.get("system", {})

    @property
    def help(self) -> dict[str, Any]:
        return self._config.get("help", {})

    @property
    def execution(self) -> dict[str, Any]:
        return self._config.get("execution", {})

    @property
    def ui(self) -> dict[str, Any]:
        ui_cfg = self._config.get("ui", {})
        return ui_cfg if isinstance(ui_cfg, dict) else {}

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("execution.report_signals", True)
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for LSH.

    Resolution order:
    1. LSH_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    lsh_data_home = os.getenv("LSH_DATA_HOME")
    if lsh_data_home:
        root = Path(lsh_data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/lsh/logs/crash.log"""
    return data_root / "lsh" / "logs" / "crash.log"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("lsh_cli.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from lsh_cli/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
