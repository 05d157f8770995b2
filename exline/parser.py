# exline/parser.py
"""Turns a command line string into a command object for the built-in engine."""
import re
import logging
from typing import Callable, List, Tuple

from exline import commands
from exline.errors import ErrorCode, VimError

logger = logging.getLogger(__name__)

_COMMAND_PATTERN = re.compile(r'^(?P<name>[A-Za-z]+)(?P<bang>!?)\s*(?P<argument>.*)$', re.DOTALL)

# (full name, shortest accepted abbreviation, factory(bang, argument))
COMMAND_TABLE: List[Tuple[str, int, Callable[[bool, str], commands.BaseCommand]]] = [
    ("write", 1, lambda bang, arg: commands.WriteCommand(bang, arg)),
    ("wq", 2, lambda bang, arg: commands.WriteQuitCommand(bang, arg)),
    ("xit", 1, lambda bang, arg: commands.WriteQuitCommand(bang, arg, only_if_modified=True)),
    ("quit", 1, lambda bang, arg: commands.QuitCommand(bang, arg)),
    ("edit", 1, lambda bang, arg: commands.EditCommand(bang, arg)),
    ("nohlsearch", 3, lambda bang, arg: commands.NoHighlightCommand(bang, arg)),
    ("sort", 3, lambda bang, arg: commands.SortCommand(bang, arg)),
]

def parse(text: str) -> commands.BaseCommand:
    """
    Parses one ex command.

    Raises:
        VimError: E492 when the command is not one the built-in engine knows.
    """
    stripped = text.strip()
    if stripped.isdigit():
        return commands.GotoLineCommand(int(stripped))

    match = _COMMAND_PATTERN.match(stripped)
    if not match:
        raise VimError(ErrorCode.E492)

    name = match.group('name')
    for full_name, min_length, factory in COMMAND_TABLE:
        if len(name) >= min_length and full_name.startswith(name):
            command = factory(bool(match.group('bang')), match.group('argument'))
            logger.debug(f"Parsed '{text}' as {command!r}")
            return command

    raise VimError(ErrorCode.E492)
