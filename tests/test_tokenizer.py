# tests/test_tokenizer.py
from __future__ import annotations

import itertools

import pytest

import lsh_cli.tokenizer as tokenizer_mod
from lsh_cli.errors import ResourceExhaustedError
from lsh_cli.tokenizer import TOKEN_DELIMITERS, tokenize


def test_splits_on_mixed_whitespace_runs():
    assert tokenize("ls  -la\tfoo") == ["ls", "-la", "foo"]


def test_empty_line_yields_no_tokens():
    assert tokenize("") == []


@pytest.mark.parametrize("length", [1, 2, 3])
def test_all_delimiter_lines_yield_no_tokens(length: int):
    for combo in itertools.product(TOKEN_DELIMITERS, repeat=length):
        assert tokenize("".join(combo)) == []


def test_leading_and_trailing_delimiters_are_dropped():
    assert tokenize("\r\n  pwd \a\n") == ["pwd"]


def test_bell_and_carriage_return_are_delimiters():
    assert tokenize("a\ab\rc") == ["a", "b", "c"]


def test_quotes_are_ordinary_characters():
    """No quoting support: quoted words split like everything else."""
    assert tokenize('echo "hello world"') == ['echo', '"hello', 'world"']


def test_no_variable_or_glob_expansion():
    assert tokenize("echo $HOME *.py") == ["echo", "$HOME", "*.py"]


def test_other_whitespace_is_not_a_delimiter():
    # vertical tab / form feed are not in the delimiter set
    assert tokenize("a\vb\fc") == ["a\vb\fc"]


def test_very_long_line():
    words = [f"arg{i}" for i in range(5000)]
    assert tokenize(" ".join(words)) == words


def test_memory_error_becomes_resource_exhausted(monkeypatch):
    class Exploding:
        def split(self, line):
            raise MemoryError

    monkeypatch.setattr(tokenizer_mod, "_DELIMITER_RUN", Exploding())

    with pytest.raises(ResourceExhaustedError):
        tokenize("ls")


def test_tokenize_does_not_mutate_input():
    line = "mv a.txt dir"
    tokenize(line)
    assert line == "mv a.txt dir"
