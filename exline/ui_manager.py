# exline/ui_manager.py
"""prompt_toolkit surfaces used by the command line: input box, history picker, status bar and error messages."""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import radiolist_dialog
from prompt_toolkit.styles import Style

from exline.editor import Mode

logger = logging.getLogger(__name__)

UI_STYLE = Style.from_dict({
    'prompt': '#00aaff bold',
    'status-bar': 'bg:#333333 #ffffff',
    'status-mode': 'bg:#333333 #ffff00 bold',
    'status-recording': 'bg:#333333 #ff5555',
    'error': '#ff0000 bold',
})

@dataclass
class InputBoxOptions:
    prompt: str = ""
    value: str = ""
    value_selection: Tuple[int, int] = (0, 0)
    ignore_focus_out: bool = False


class UIManager:
    """Asks the user for a command line or a history entry."""

    def __init__(self, config: Optional[dict] = None, recall: Optional[Callable[[], List[str]]] = None,
                 input=None, output=None):
        """
        Args:
            recall: Returns past commands, most recent first, for up/down
                    recall in the input box. The prompt only reads them;
                    recording is left to the command line history store.
            input, output: prompt_toolkit I/O overrides (pipes in tests).
        """
        self.config = config or {}
        self.recall = recall
        self.input = input
        self.output = output
        self.session = None
        self.eof_received = False
        logger.debug("UIManager initialized.")

    async def show_input_box(self, options: InputBoxOptions) -> Optional[str]:
        """Returns the entered text, or None if the prompt was cancelled."""
        cursor = min(options.value_selection[1], len(options.value))
        try:
            self.session = PromptSession(history=self._recall_history(), style=UI_STYLE,
                                         input=self.input, output=self.output)
            return await self.session.prompt_async(
                FormattedText([('class:prompt', f"{options.prompt} ")]) if options.prompt else "",
                default=Document(options.value, cursor_position=cursor),
            )
        except EOFError:
            logger.info("EOF on command line input.")
            self.eof_received = True
            return None
        except KeyboardInterrupt:
            logger.info("Command line input cancelled.")
            return None

    def _recall_history(self) -> InMemoryHistory:
        history = InMemoryHistory()
        # InMemoryHistory expects oldest first.
        for command in reversed(self.recall() if self.recall else []):
            history.append_string(command)
        return history

    async def show_quick_pick(self, items: List[str], placeholder: str = "") -> Optional[str]:
        """Lets the user choose one of ``items``; None when cancelled or there is nothing to pick."""
        if not items:
            logger.info("Quick pick requested with no items.")
            return None
        dialog = radiolist_dialog(
            title=placeholder,
            values=[(item, item) for item in items],
            style=UI_STYLE,
        )
        return await dialog.run_async()


class StatusBar:
    """
    One-line status display.

    A persistent message survives ``clear()`` and is only replaced by the next
    ``set_text``; a transient one is dropped on ``clear()``.
    """
    def __init__(self):
        self.text = ""
        self.persistent = False

    def set_text(self, message: str, current_mode: Mode, is_recording_macro: bool, persistent: bool = False):
        fragments = []
        if current_mode not in (Mode.NORMAL, Mode.COMMAND_LINE):
            fragments.append(('class:status-mode', f"-- {current_mode.value} -- "))
        if is_recording_macro:
            fragments.append(('class:status-recording', "recording "))
        fragments.append(('class:status-bar', message))

        self.text = "".join(text for _, text in fragments)
        self.persistent = persistent
        logger.info(f"STATUS: {self.text}")
        print_formatted_text(FormattedText(fragments), style=UI_STYLE)

    def clear(self, force: bool = False):
        if self.persistent and not force:
            return
        self.text = ""
        self.persistent = False


class Message:
    """Generic error notices."""

    def show_error(self, message: str):
        logger.error(f"UI_ERROR: {message}")
        print_formatted_text(FormattedText([('class:error', message)]), style=UI_STYLE)
