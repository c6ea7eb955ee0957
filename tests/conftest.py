"""
Pytest configuration and shared fixtures for sgfedit tests.

This module provides:
- Editors over the sample records in tests/sgf_helpers.py
- A recorder for event handler calls
"""

import pytest

from sgfedit.core.editor import GoEditor
from tests.sgf_helpers import BRANCHED_SGF, GAME_INFO_SGF, LINEAR_SGF, editor_for


@pytest.fixture
def linear_editor() -> GoEditor:
    return editor_for(LINEAR_SGF)


@pytest.fixture
def branched_editor() -> GoEditor:
    return editor_for(BRANCHED_SGF)


@pytest.fixture
def game_info_editor() -> GoEditor:
    return editor_for(GAME_INFO_SGF)


class Recorder:
    """Builds handlers that append ``(name, *args)`` to one shared call list."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, name: str):
        def handler(*args):
            self.calls.append((name, *args))

        return handler

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
