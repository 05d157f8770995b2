# main.py

import argparse
import asyncio
import datetime
import logging
import os
import sys
from typing import List, Optional

from exline import config_handler
from exline.command_line import CommandLine
from exline.editor import Editor, VimState
from exline.history import CommandLineHistory, DEFAULT_MAX_ENTRIES
from exline.neovim import create_engine
from exline.ui_manager import Message, StatusBar, UIManager

CONFIG_DIR = "config"
DEFAULT_CONFIG_FILENAME = "default_config.json"
USER_CONFIG_FILENAME = "user_config.json"

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))

logger = logging.getLogger(__name__)

config = {}

def load_configuration():
    """
    Loads the default settings and merges the optional user settings on top.
    The default_config.json file is mandatory.
    """
    global config
    default_config_path = os.path.join(SCRIPT_DIR, CONFIG_DIR, DEFAULT_CONFIG_FILENAME)
    user_config_path = os.path.join(SCRIPT_DIR, CONFIG_DIR, USER_CONFIG_FILENAME)

    base_config = config_handler.load_jsonc_file(default_config_path)
    if base_config is None:
        error_msg = f"CRITICAL ERROR: Default configuration file not found or failed to parse at '{default_config_path}'. Application cannot start."
        logger.critical(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loaded base configuration from {default_config_path}")
    config = base_config

    user_settings = config_handler.load_jsonc_file(user_config_path)
    if user_settings:
        config = config_handler.merge_configs(config, user_settings)
        logger.info(f"Merged user configuration from {user_config_path}")
    else:
        logger.info(f"{user_config_path} not found or is invalid. No user configuration overrides applied.")
    return config

def setup_logging(log_dir: str) -> str:
    if not os.path.isabs(log_dir):
        log_dir = os.path.join(SCRIPT_DIR, log_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "exline.log")
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        handlers=[logging.FileHandler(log_file)]
    )
    return log_file

def build_command_line(cfg: dict) -> CommandLine:
    history = CommandLineHistory(
        config_handler.get_option(cfg, "paths.history_dir", "~/.exline"),
        max_entries=config_handler.get_option(cfg, "behavior.history_max_entries", DEFAULT_MAX_ENTRIES),
    )
    return CommandLine(
        cfg,
        history,
        UIManager(cfg, recall=history.get),
        StatusBar(),
        Message(),
    )

async def main_async_runner(file_path: Optional[str], startup_commands: List[str], show_history: bool = False):
    """Opens the buffer, runs any -c commands, then keeps prompting until the buffer is quit."""
    command_line = build_command_line(config)
    editor = Editor.open(file_path) if file_path else Editor()
    session = VimState(editor=editor, nvim=create_engine(config))

    for command in startup_commands:
        await command_line.run(command, session)

    if show_history and not session.quit_requested:
        selected = await command_line.show_history("", session)
        await command_line.run(selected, session)

    while not session.quit_requested:
        command_line.status_bar.clear()
        await command_line.prompt_and_run("", session)
        if command_line.ui_manager.eof_received:
            logger.info("Input closed; leaving the command loop.")
            break

def parse_args(argv=None):
    arg_parser = argparse.ArgumentParser(description="Vim-style ex command line for a text buffer.")
    arg_parser.add_argument("file", nargs="?", help="file to edit")
    arg_parser.add_argument("-c", dest="commands", action="append", default=[], metavar="COMMAND",
                            help="ex command to run after the file is loaded (may be repeated)")
    arg_parser.add_argument("--history", action="store_true",
                            help="pick a command from the history and run it before prompting")
    return arg_parser.parse_args(argv)

def run_exline(argv=None):
    """ Main entry point. """
    args = parse_args(argv)
    try:
        load_configuration()
    except FileNotFoundError as e:
        print(f"\nFATAL STARTUP ERROR: {e}")
        print(f"Please ensure '{CONFIG_DIR}/{DEFAULT_CONFIG_FILENAME}' exists and is a valid JSON file.")
        return 1

    log_file = setup_logging(config_handler.get_option(config, "paths.log_dir", "logs"))
    logger.info("=" * 80)
    logger.info("  exline Session Started")
    logger.info(f"  Timestamp: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)
    try:
        asyncio.run(main_async_runner(args.file, args.commands, show_history=args.history))
    except (EOFError, KeyboardInterrupt):
        logger.info("Exiting due to EOF or KeyboardInterrupt.")
    except Exception as e:
        print(f"\nUnexpected critical error: {e}. Check logs at {log_file}")
        logger.critical("Critical error in main_async_runner", exc_info=True)
        return 1
    finally:
        logger.info("=" * 80)
        logger.info("  exline Session Ended")
        logger.info(f"  Timestamp: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info("=" * 80)
        logging.shutdown()
    return 0

if __name__ == "__main__":
    sys.exit(run_exline())
