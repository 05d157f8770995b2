# exline/commands.py
"""
Ex command variants run by the built-in engine.

Each variant is created by ``parser.parse`` for one dispatch. ``neovim_capable``
marks variants that the headless Neovim fallback can run just as well; when
the fallback is enabled the command line prefers it for those. Only the buffer
text comes back from Neovim, so the flag is limited to commands whose whole
effect is on the text.
"""
import logging
from typing import Optional

from exline.editor import Editor, VimState
from exline.errors import ErrorCode, VimError

logger = logging.getLogger(__name__)


class BaseCommand:
    name = ""
    neovim_capable = False

    def __init__(self, bang: bool = False, argument: str = ""):
        self.bang = bang
        self.argument = argument.strip()

    async def execute(self, editor: Optional[Editor], session: VimState):
        raise NotImplementedError

    def _require_no_argument(self):
        if self.argument:
            raise VimError.from_code(ErrorCode.E488, self.argument)

    def __repr__(self):
        bang = "!" if self.bang else ""
        return f"{type(self).__name__}({self.name}{bang} {self.argument!r})"


def _write(editor: Editor, file_path: Optional[str] = None) -> str:
    if not (file_path or editor.file_path):
        raise VimError.from_code(ErrorCode.E32)
    try:
        return editor.save(file_path or None)
    except OSError as e:
        logger.error(f"Could not write {file_path or editor.file_path}: {e}")
        raise VimError(ErrorCode.E212) from e


class WriteCommand(BaseCommand):
    """``:w[rite][!] [file]``"""
    name = "write"

    async def execute(self, editor, session):
        _write(editor, self.argument or None)


class QuitCommand(BaseCommand):
    """``:q[uit][!]``"""
    name = "quit"

    async def execute(self, editor, session):
        self._require_no_argument()
        if editor.modified and not self.bang:
            raise VimError(ErrorCode.E37)
        session.quit_requested = True
        logger.info("Quit requested from the command line.")


class WriteQuitCommand(BaseCommand):
    """``:wq[!] [file]``, and ``:x[it]`` which only writes a modified buffer."""
    name = "wq"

    def __init__(self, bang: bool = False, argument: str = "", only_if_modified: bool = False):
        super().__init__(bang, argument)
        self.only_if_modified = only_if_modified

    async def execute(self, editor, session):
        if editor.modified or not self.only_if_modified:
            _write(editor, self.argument or None)
        session.quit_requested = True


class EditCommand(BaseCommand):
    """``:e[dit][!] [file]``: reloads the buffer, or switches to another file."""
    name = "edit"

    async def execute(self, editor, session):
        if editor.modified and not self.bang:
            raise VimError(ErrorCode.E37)
        target = self.argument or editor.file_path
        if not target:
            raise VimError.from_code(ErrorCode.E32)
        session.editor = Editor.open(target)


class GotoLineCommand(BaseCommand):
    """``:<n>``: moves the cursor to line n (1-based, clamped to the buffer)."""
    name = "goto"

    def __init__(self, line_number: int):
        super().__init__()
        self.line_number = line_number

    async def execute(self, editor, session):
        last = len(editor.lines) - 1
        editor.cursor_line = max(0, min(self.line_number - 1, last))


class NoHighlightCommand(BaseCommand):
    """``:noh[lsearch]``"""
    name = "nohlsearch"

    async def execute(self, editor, session):
        self._require_no_argument()
        editor.highlight_search = False


class SortCommand(BaseCommand):
    """``:sor[t][!] [i][u]``: sorts every line; ``!`` reverses, ``i`` ignores case, ``u`` drops duplicates."""
    name = "sort"
    neovim_capable = True

    SUPPORTED_FLAGS = set("iu")

    async def execute(self, editor, session):
        flags = set(self.argument.replace(" ", ""))
        if not flags <= self.SUPPORTED_FLAGS:
            # Patterns and numeric sorts are left to Neovim.
            raise VimError(ErrorCode.E492)

        key = str.lower if "i" in flags else str
        lines = sorted(editor.lines, key=key, reverse=self.bang)
        if "u" in flags:
            unique = []
            for line in lines:
                if not unique or key(line) != key(unique[-1]):
                    unique.append(line)
            lines = unique
        editor.set_lines(lines)
