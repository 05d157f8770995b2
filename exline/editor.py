# exline/editor.py

import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class Mode(Enum):
    NORMAL = "NORMAL"
    INSERT = "INSERT"
    VISUAL = "VISUAL"
    VISUAL_LINE = "VISUAL LINE"
    REPLACE = "REPLACE"
    COMMAND_LINE = "COMMAND LINE"


class Editor:
    """An editable text buffer, optionally backed by a file on disk."""

    def __init__(self, lines: Optional[List[str]] = None, file_path: Optional[str] = None):
        self.lines: List[str] = list(lines) if lines else [""]
        self.file_path = file_path
        self.cursor_line = 0
        self.modified = False
        self.highlight_search = True

    @classmethod
    def open(cls, file_path: str) -> "Editor":
        """Loads ``file_path``; a file that does not exist yet gives an empty buffer."""
        file_path = os.path.abspath(os.path.expanduser(file_path))
        if not os.path.exists(file_path):
            logger.info(f"Editing new file: {file_path}")
            return cls(file_path=file_path)
        with open(file_path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
        logger.info(f"Opened {file_path} ({len(lines)} lines)")
        return cls(lines, file_path=file_path)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    def set_lines(self, lines: List[str]):
        new_lines = list(lines) or [""]
        if new_lines != self.lines:
            self.lines = new_lines
            self.modified = True
        self.cursor_line = min(self.cursor_line, len(self.lines) - 1)

    def save(self, file_path: Optional[str] = None) -> str:
        """
        Writes the buffer to ``file_path`` (or the buffer's own file).

        Returns the path written. Raises OSError if the file cannot be written;
        the buffer's file name is adopted only when it had none.
        """
        target = file_path or self.file_path
        if target is None:
            raise ValueError("Buffer has no file name")
        target = os.path.abspath(os.path.expanduser(target))
        with open(target, 'w', encoding='utf-8') as f:
            f.write(self.text)
        if self.file_path is None:
            self.file_path = target
        if target == self.file_path:
            self.modified = False
        logger.info(f"Wrote {len(self.lines)} lines to {target}")
        return target


@dataclass
class VimState:
    """The editing session a command line dispatch runs against."""
    editor: Optional[Editor] = None
    nvim: Optional[object] = None
    current_mode: Mode = Mode.NORMAL
    is_recording_macro: bool = False
    quit_requested: bool = False
