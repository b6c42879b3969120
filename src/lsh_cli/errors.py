# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Error types for LSH.

Everything a builtin or a launched program can get wrong is reported and
recovered inside the kernel. The only condition that stops the interpreter
with a failure status is running out of storage for the input line or its
tokens.
"""

from __future__ import annotations


class LshError(Exception):
    """Base class for interpreter errors."""


class ResourceExhaustedError(LshError):
    """Storage for an input line or its tokens could not be allocated.

    Fatal: the read-eval loop cannot make progress without it.
    """

    def __init__(self, what: str = "allocation error"):
        super().__init__(what)
        self.what = what
