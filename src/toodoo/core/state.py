# src/toodoo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..profile.profile_store import ProfileStore
from ..tasks.task_models import TaskCategory, TaskFilter
from ..tasks.task_store import TaskStore
from ..voice.listening import ListeningSession
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings are kept on the state for easy access in other modules.
    settings: object

    kv: KeyValueStore
    task_store: TaskStore
    profile_store: ProfileStore

    # Category preselected for the next created task (manual or voice).
    ambient_category: TaskCategory = TaskCategory.NONE
    current_filter: TaskFilter = TaskFilter.ALL

    listening: ListeningSession | None = None

    @property
    def voice_available(self) -> bool:
        return self.listening is not None and self.listening.available
