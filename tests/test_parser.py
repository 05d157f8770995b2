# tests/test_parser.py

import pytest

from exline import commands
from exline.errors import ErrorCode, ErrorKind, VimError
from exline.parser import parse


@pytest.mark.parametrize("text, expected_type", [
    ("w", commands.WriteCommand),
    ("wri", commands.WriteCommand),
    ("write", commands.WriteCommand),
    ("wq", commands.WriteQuitCommand),
    ("x", commands.WriteQuitCommand),
    ("xit", commands.WriteQuitCommand),
    ("q", commands.QuitCommand),
    ("quit", commands.QuitCommand),
    ("e", commands.EditCommand),
    ("edit", commands.EditCommand),
    ("noh", commands.NoHighlightCommand),
    ("nohlsearch", commands.NoHighlightCommand),
    ("sor", commands.SortCommand),
    ("sort", commands.SortCommand),
])
def test_resolves_names_and_abbreviations(text, expected_type):
    assert isinstance(parse(text), expected_type)

def test_bang_and_argument_are_split_off():
    cmd = parse("w! /tmp/out.txt")
    assert isinstance(cmd, commands.WriteCommand)
    assert cmd.bang is True
    assert cmd.argument == "/tmp/out.txt"

def test_surrounding_whitespace_is_ignored():
    cmd = parse("  q!  ")
    assert isinstance(cmd, commands.QuitCommand)
    assert cmd.bang is True
    assert cmd.argument == ""

def test_line_number_becomes_goto():
    cmd = parse("42")
    assert isinstance(cmd, commands.GotoLineCommand)
    assert cmd.line_number == 42

def test_xit_only_writes_when_modified():
    assert parse("x").only_if_modified is True
    assert parse("wq").only_if_modified is False

@pytest.mark.parametrize("text", ["unsupportedcmd", "no", "so", "s/foo/bar/", "%d", "wqa"])
def test_unknown_commands_raise_not_an_editor_command(text):
    with pytest.raises(VimError) as exc_info:
        parse(text)
    assert exc_info.value.code is ErrorCode.E492
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED
    assert str(exc_info.value) == "E492: Not an editor command"

def test_only_text_changing_commands_are_neovim_capable():
    # Neovim only hands back the buffer text, so cursor and option changes stay local.
    assert parse("w").neovim_capable is False
    assert parse("q").neovim_capable is False
    assert parse("42").neovim_capable is False
    assert parse("noh").neovim_capable is False
    assert parse("sort").neovim_capable is True


class TestVimError:
    def test_other_codes_are_not_redirectable(self):
        assert VimError(ErrorCode.E32).kind is ErrorKind.OTHER
        assert VimError(ErrorCode.E37).kind is ErrorKind.OTHER

    def test_from_code_appends_detail(self):
        err = VimError.from_code(ErrorCode.E488, "extra")
        assert str(err) == "E488: Trailing characters: extra"
        assert err.code is ErrorCode.E488

    def test_canonical_message(self):
        assert str(VimError(ErrorCode.E32)) == "E32: No file name"
