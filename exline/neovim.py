# exline/neovim.py

import asyncio
import os
import logging
import tempfile
from typing import List, Optional

from exline.editor import VimState
from exline.errors import NeovimError

logger = logging.getLogger(__name__)

DEFAULT_NEOVIM_PATH = "nvim"
DEFAULT_TIMEOUT_SECONDS = 10

class NeovimEngine:
    """
    Runs ex commands the built-in engine cannot handle in a headless Neovim.

    The active buffer is handed to ``nvim`` through a temporary file, the
    command is run in silent Ex mode and the resulting text is copied back.
    """
    def __init__(self, neovim_path: str = DEFAULT_NEOVIM_PATH, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.neovim_path = neovim_path
        self.timeout = timeout

    def build_args(self, command: str, file_path: str) -> List[str]:
        return [self.neovim_path, "--clean", "-n", "-Es", "-c", command, "-c", "wq!", file_path]

    async def run(self, session: VimState, command: str):
        editor = session.editor
        text = editor.text if editor else ""

        fd, temp_path = tempfile.mkstemp(prefix="exline-", suffix=".txt")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)

            logger.info(f"Running '{command}' in headless Neovim ({self.neovim_path})")
            stdout, _ = await self._run_process(self.build_args(command, temp_path))

            with open(temp_path, 'r', encoding='utf-8', errors='replace') as f:
                result = f.read()
        finally:
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {temp_path}: {e}")

        if stdout.strip():
            logger.debug(f"Neovim output for '{command}': {stdout.strip()}")
        if editor is not None:
            editor.set_lines(result.splitlines())

    async def _run_process(self, args: List[str]):
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            logger.error(f"Neovim executable not found at '{self.neovim_path}'.")
            raise NeovimError(f"Neovim executable not found: {self.neovim_path}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            logger.error(f"Neovim timed out after {self.timeout} seconds running {args}.")
            raise NeovimError(f"Neovim timed out after {self.timeout} seconds") from e

        stdout_text = stdout.decode(errors='replace') if stdout else ""
        stderr_text = stderr.decode(errors='replace') if stderr else ""
        if process.returncode != 0:
            logger.warning(f"Neovim exited with code {process.returncode}. Stderr: {stderr_text.strip()}")
            detail = stderr_text.strip() or stdout_text.strip() or f"exit code {process.returncode}"
            raise NeovimError(f"Neovim failed: {detail}")
        return stdout_text, stderr_text

def create_engine(config: Optional[dict]) -> NeovimEngine:
    """Builds the engine from the ``fallback`` settings."""
    fallback = (config or {}).get("fallback", {})
    return NeovimEngine(
        neovim_path=fallback.get("neovim_path", DEFAULT_NEOVIM_PATH),
        timeout=fallback.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
    )
