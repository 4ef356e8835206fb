# src/toodoo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the key-value backend, stores and speech source into AppState,
- loads persisted tasks and the user profile.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore, SpeechInput
from ..core.state import AppState
from ..profile.profile_store import ProfileStore
from ..storage.kv_store import open_store
from ..tasks.task_api import handle_utterance
from ..tasks.task_store import TaskStore
from ..voice.listening import ListeningSession, PromptSpeechInput

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    speech_input: SpeechInput | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backends) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = open_store(settings.storage_backend, settings.store_path)

    state = AppState(
        settings=settings,
        kv=kv,
        task_store=TaskStore(kv, key=settings.tasks_key, max_title_length=settings.max_title_length),
        profile_store=ProfileStore(kv, key=settings.profile_key),
    )
    state.task_store.load()
    state.profile_store.load()

    if speech_input is None:
        speech_input = PromptSpeechInput(enabled=settings.voice_enabled)

    def _on_utterance(text: str) -> None:
        handle_utterance(state, text)

    state.listening = ListeningSession(speech_input, _on_utterance)
    return state
