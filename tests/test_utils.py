import shlex

import pytest

from qedit.utils import shell_quote


def test_plain_string():
    assert shell_quote("abc") == "'abc'"


def test_single_quote_is_escaped():
    assert shell_quote("it's") == "'it'\\''s'"


def test_empty_string():
    assert shell_quote("") == "''"


@pytest.mark.parametrize(
    "text",
    ["hello world", "a'b'c", "$HOME; rm -rf /", "`cmd`", "tab\tand\nnewline", "''"],
)
def test_roundtrip_through_shell_parser(text):
    assert shlex.split(shell_quote(text)) == [text]