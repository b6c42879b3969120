# LSH — Line-Oriented Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LSH core package.

A line-oriented command interpreter: read a line, split it into words,
run a builtin or launch the named program and wait for it.
"""
from .kernel import Kernel as Kernel  # noqa: F401 (re-export)
