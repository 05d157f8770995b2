# --- API DOCUMENTATION for exline/command_line.py ---
#
# **Purpose:** The command line controller. Prompts for an ex command, records
# it in the recall history, parses it and runs it against the editing session,
# redirecting to the headless Neovim fallback when the built-in engine cannot
# handle it. Failures are reported to the user, never raised to the caller.
#
# **Public Classes:**
#
# class CommandLine:
#     def __init__(self, config, history, ui_manager, status_bar, message, parse_func=parser.parse):
#         """
#         Args:
#             config (dict): Settings; reads `fallback.enable_neovim` and
#                            `behavior.cmd_line_initial_colon`.
#             history (CommandLineHistory): The recall history store.
#             ui_manager (UIManager): Input box and quick pick surfaces.
#             status_bar (StatusBar): Status line for classified errors.
#             message (Message): Surface for all other errors.
#             parse_func (callable): Turns a command string into a command object.
#         """
#
#     async def prompt_and_run(self, initial_text: str, session: VimState) -> None
#     async def run(self, command: Optional[str], session: VimState) -> None
#     async def show_history(self, initial_text: str, session: VimState) -> Optional[str]
#
# --- END API DOCUMENTATION ---
import logging
from typing import Callable, Optional

from exline import parser
from exline.config_handler import get_option
from exline.editor import VimState
from exline.errors import ErrorKind, VimError
from exline.history import CommandLineHistory
from exline.ui_manager import InputBoxOptions, Message, StatusBar, UIManager

logger = logging.getLogger(__name__)

COMMAND_MARKER = ":"

class CommandLine:
    def __init__(self, config: dict, history: CommandLineHistory, ui_manager: UIManager,
                 status_bar: StatusBar, message: Message,
                 parse_func: Callable = parser.parse):
        self.config = config
        self.history = history
        self.ui_manager = ui_manager
        self.status_bar = status_bar
        self.message = message
        self.parse_func = parse_func

    @property
    def enable_neovim(self) -> bool:
        return bool(get_option(self.config, "fallback.enable_neovim", False))

    @property
    def cmd_line_initial_colon(self) -> bool:
        return bool(get_option(self.config, "behavior.cmd_line_initial_colon", True))

    async def prompt_and_run(self, initial_text: str, session: VimState):
        if session.editor is None:
            logger.debug("commandLine : No active document")
            return

        cmd = await self.ui_manager.show_input_box(self._get_input_box_options(initial_text))
        if cmd and cmd.startswith(COMMAND_MARKER) and self.cmd_line_initial_colon:
            cmd = cmd[1:]

        # A cancelled prompt (None) is recorded too; the store decides what to keep.
        self.history.add(cmd)

        await self.run(cmd, session)

    async def run(self, command: Optional[str], session: VimState):
        if not command:
            return

        try:
            await self._dispatch(command, session)
        except Exception as e:
            # Only a failed redirect gets here: the Neovim fallback is not
            # retried or re-classified, just reported.
            logger.error(f"commandLine : fallback failed for cmd={command}. err={e}.", exc_info=True)
            self.message.show_error(str(e))

    async def _dispatch(self, command: str, session: VimState):
        try:
            cmd = self.parse_func(command)
            if cmd.neovim_capable and self._has_fallback(session):
                await session.nvim.run(session, command)
            else:
                await cmd.execute(session.editor, session)
        except Exception as e:
            logger.error(f"commandLine : error executing cmd={command}. err={e}.")
            if isinstance(e, VimError):
                if e.kind is ErrorKind.UNSUPPORTED and self._has_fallback(session):
                    await session.nvim.run(session, command)
                else:
                    self.status_bar.set_text(
                        f"{e}. {command}",
                        session.current_mode,
                        session.is_recording_macro,
                        True,
                    )
            else:
                self.message.show_error(str(e))

    def _has_fallback(self, session: VimState) -> bool:
        if not self.enable_neovim:
            return False
        if session.nvim is None:
            logger.warning("commandLine : fallback.enable_neovim is set but the session has no Neovim engine.")
            return False
        return True

    def _get_input_box_options(self, text: str) -> InputBoxOptions:
        if self.cmd_line_initial_colon:
            value = COMMAND_MARKER + text
        else:
            value = text
        return InputBoxOptions(
            prompt="Vim command line",
            value=value,
            ignore_focus_out=False,
            value_selection=(len(value), len(value)),
        )

    async def show_history(self, initial_text: str, session: VimState) -> Optional[str]:
        if session.editor is None:
            logger.debug("commandLine : No active document.")
            return ""

        self.history.add(initial_text)

        return await self.ui_manager.show_quick_pick(self.history.get(), placeholder="Vim command history")
