# tests/test_neovim.py

import asyncio
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from exline.editor import VimState
from exline.errors import NeovimError
from exline.neovim import NeovimEngine, create_engine


def make_process(returncode=0, stdout=b"", stderr=b""):
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.fixture
def engine():
    return NeovimEngine(neovim_path="/usr/bin/nvim", timeout=1)


def test_build_args(engine):
    assert engine.build_args("sort", "/tmp/buf.txt") == [
        "/usr/bin/nvim", "--clean", "-n", "-Es", "-c", "sort", "-c", "wq!", "/tmp/buf.txt"
    ]

def test_create_engine_reads_fallback_settings():
    engine = create_engine({"fallback": {"neovim_path": "/opt/nvim", "timeout_seconds": 3}})
    assert engine.neovim_path == "/opt/nvim"
    assert engine.timeout == 3

    defaults = create_engine({})
    assert defaults.neovim_path == "nvim"
    assert defaults.timeout == 10

@pytest.mark.asyncio
async def test_run_copies_result_back_into_editor(engine, editor, session):
    seen = {}

    async def fake_exec(*args, **kwargs):
        temp_path = args[-1]
        with open(temp_path, encoding="utf-8") as f:
            seen["input"] = f.read()
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write("first\nsecond\nthird\nsorted\n")
        seen["path"] = temp_path
        return make_process()

    with patch("asyncio.create_subprocess_exec", side_effect=fake_exec) as mock_exec:
        await engine.run(session, "sort")

    assert seen["input"] == "first\nsecond\nthird\n"
    assert mock_exec.call_args.args[:7] == ("/usr/bin/nvim", "--clean", "-n", "-Es", "-c", "sort", "-c")
    assert editor.lines == ["first", "second", "third", "sorted"]
    assert editor.modified is True
    assert not os.path.exists(seen["path"])

@pytest.mark.asyncio
async def test_unchanged_result_leaves_buffer_unmodified(engine, editor, session):
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process())):
        await engine.run(session, "noh")
    assert editor.lines == ["first", "second", "third"]
    assert editor.modified is False

@pytest.mark.asyncio
async def test_runs_without_active_editor(engine):
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process())) as mock_exec:
        await engine.run(VimState(), "echo 1")
    mock_exec.assert_awaited_once()

@pytest.mark.asyncio
async def test_missing_binary_raises(engine, session):
    with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("nvim"))):
        with pytest.raises(NeovimError, match="not found"):
            await engine.run(session, "sort")

@pytest.mark.asyncio
async def test_non_zero_exit_raises_with_stderr(engine, editor, session):
    process = make_process(returncode=1, stderr=b"E492: Not an editor command: bogus")
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
        with pytest.raises(NeovimError, match="E492"):
            await engine.run(session, "bogus")
    assert editor.modified is False

@pytest.mark.asyncio
async def test_timeout_kills_process(engine, session):
    process = make_process()
    process.kill = MagicMock()

    async def hang():
        await asyncio.sleep(10)

    process.communicate = hang
    engine.timeout = 0.01
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
        with pytest.raises(NeovimError, match="timed out"):
            await engine.run(session, "sleep")
    process.kill.assert_called_once()
    process.wait.assert_awaited_once()
