# tests/conftest.py
#
# Project-wide fixtures for the exline tests.

import sys
import os

import pytest

# Add the project root to the Python path so 'exline' and 'main' import
# without the project being installed.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from exline.editor import Editor, VimState


@pytest.fixture
def editor(tmp_path):
    """A small unmodified buffer backed by a file in a temporary directory."""
    file_path = tmp_path / "notes.txt"
    file_path.write_text("first\nsecond\nthird\n", encoding="utf-8")
    return Editor.open(str(file_path))


@pytest.fixture
def session(editor):
    return VimState(editor=editor)
