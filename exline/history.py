# exline/history.py

import os
import logging
from typing import List, Optional

from prompt_toolkit.history import FileHistory

logger = logging.getLogger(__name__)

HISTORY_FILENAME = ".cmdline_history"
DEFAULT_MAX_ENTRIES = 50

class CommandLineHistory:
    """
    Persistent recall list for the command line.

    Entries are appended to ``<history_dir>/.cmdline_history`` through
    prompt_toolkit's FileHistory. This store is the only writer of the file;
    the input box gets a read-only copy for up/down recall. Past entries are
    never rewritten.
    """
    def __init__(self, history_dir: str, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.history_dir = os.path.expanduser(history_dir)
        self.history_file = os.path.join(self.history_dir, HISTORY_FILENAME)
        self.max_entries = max_entries
        os.makedirs(self.history_dir, exist_ok=True)
        self.pt_history = FileHistory(self.history_file)
        logger.debug(f"Command line history at {self.history_file} (max {self.max_entries} entries).")

    def add(self, command: Optional[str]):
        """Appends ``command``; a cancelled (None) or empty command is accepted and skipped."""
        if not command:
            logger.debug("Nothing to add to command line history.")
            return
        try:
            self.pt_history.append_string(command)
        except OSError as e:
            logger.error(f"Could not append to history file {self.history_file}: {e}", exc_info=True)

    def get(self) -> List[str]:
        """Recorded commands, most recent first, each listed once."""
        try:
            # FileHistory yields the newest entries first.
            all_strings = list(self.pt_history.load_history_strings())
        except OSError as e:
            logger.error(f"Could not read history file {self.history_file}: {e}", exc_info=True)
            return []

        recent: List[str] = []
        for command in all_strings:
            if command not in recent:
                recent.append(command)
            if len(recent) >= self.max_entries:
                break
        return recent
