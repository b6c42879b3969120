# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Command line tokenizer.

Splits a raw line on runs of whitespace delimiters. There is no quoting,
escaping or substitution: ``echo "a b"`` yields ``['echo', '"a', 'b"']``.
"""

from __future__ import annotations

import re

from .errors import ResourceExhaustedError

# space, tab, carriage return, newline, bell
TOKEN_DELIMITERS = " \t\r\n\a"

_DELIMITER_RUN = re.compile("[" + re.escape(TOKEN_DELIMITERS) + "]+")


def tokenize(line: str) -> list[str]:
    """Split a command line into tokens.

    Args:
        line: Raw input line (any length)

    Returns:
        Ordered list of non-empty tokens; empty for a blank line

    Raises:
        ResourceExhaustedError: if token storage cannot be allocated
    """
    try:
        return [tok for tok in _DELIMITER_RUN.split(line) if tok]
    except MemoryError as e:
        raise ResourceExhaustedError("allocation error") from e
