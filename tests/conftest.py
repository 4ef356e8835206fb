# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from toodoo.cli.bootstrap import create_initial_state
from toodoo.core.state import AppState
from toodoo.storage.kv_store import MemoryKeyValueStore
from toodoo.tasks.task_store import TaskStore

from .fakes import ScriptedSpeechInput


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than the real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="toodoo",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_backend="sqlite",
        store_path=tmp_path / "toodoo.sqlite3",
        tasks_key="todos",
        profile_key="toodoo-user",
        max_title_length=100,
        voice_enabled=True,
    )


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def store(kv: MemoryKeyValueStore) -> TaskStore:
    return TaskStore(kv)


@pytest.fixture()
def speech() -> ScriptedSpeechInput:
    return ScriptedSpeechInput()


@pytest.fixture()
def state(settings: SimpleNamespace, speech: ScriptedSpeechInput) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: the SQLite backend is real here because persistence is part of
    what we want to test; only the speech source is faked.
    """
    return create_initial_state(settings=settings, speech_input=speech)
