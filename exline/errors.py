# exline/errors.py
"""Errors raised while parsing and executing ex commands.

``VimError`` is the classified domain error: it carries a Vim error number
and an explicit ``kind`` that the command line uses to decide between
redirecting to Neovim and reporting on the status bar. Everything else that
goes wrong is reported as a plain error message.
"""
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Vim error numbers and their canonical messages."""
    E20 = (20, "Mark not set")
    E32 = (32, "No file name")
    E37 = (37, "No write since last change (add ! to override)")
    E208 = (208, "Error writing to file")
    E212 = (212, "Can't open file for writing")
    E488 = (488, "Trailing characters")
    E492 = (492, "Not an editor command")
    E495 = (495, "No autocommand file name to substitute for \"<afile>\"")

    def __init__(self, number: int, message: str):
        self.number = number
        self.message = message


class ErrorKind(Enum):
    UNSUPPORTED = "unsupported"
    OTHER = "other"


class VimError(Exception):
    """A classified ex command failure."""

    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        self.code = code
        self.message = message or code.message
        super().__init__(str(self))

    @classmethod
    def from_code(cls, code: ErrorCode, extra: Optional[str] = None) -> "VimError":
        message = code.message if not extra else f"{code.message}: {extra}"
        return cls(code, message)

    @property
    def kind(self) -> ErrorKind:
        # E492 is what the built-in engine raises for anything it does not know.
        if self.code is ErrorCode.E492:
            return ErrorKind.UNSUPPORTED
        return ErrorKind.OTHER

    def __str__(self) -> str:
        return f"E{self.code.number}: {self.message}"


class NeovimError(Exception):
    """The headless Neovim fallback could not run a command."""
