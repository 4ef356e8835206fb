# src/toodoo/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .interpreter import Interpretation, interpret
from .task_models import Task, TaskCategory

logger = logging.getLogger(__name__)


def submit_task(state: AppState, title: str) -> Task | None:
    """
    Manual entry: create a task with the ambient category.
    After a successful submit the ambient category goes back to none.
    """
    task = state.task_store.add(title, state.ambient_category)
    if task is not None:
        state.ambient_category = TaskCategory.NONE
    return task


def apply_interpretation(state: AppState, result: Interpretation) -> Task | None:
    task = None
    if result.intent is not None:
        task = state.task_store.add(result.intent.title, result.intent.category)

    # The hint only affects tasks created after this utterance.
    if result.category_update is not None:
        state.ambient_category = result.category_update
    return task


def handle_utterance(state: AppState, utterance: str) -> tuple[Interpretation, Task | None]:
    """Interpret one utterance and feed the result into the task store."""
    result = interpret(
        utterance,
        state.ambient_category,
        max_title_length=state.task_store.max_title_length,
    )
    task = apply_interpretation(state, result)
    logger.debug(
        "Utterance handled: intent=%s category_update=%s",
        result.intent is not None,
        result.category_update,
    )
    return result, task
