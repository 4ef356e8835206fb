# src/toodoo/tasks/task_store.py

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import Any

from ..core.ports import KeyValueStore
from .task_models import (
    DEFAULT_MAX_TITLE_LENGTH,
    Task,
    TaskCategory,
    TaskFilter,
    clean_title,
    format_timestamp,
    new_task_id,
    parse_timestamp,
    utc_now_ms,
)

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "todos"

TaskListener = Callable[[tuple[Task, ...]], None]


class TaskView(Sequence[Task]):
    """
    Filtered, display-ordered read of a task snapshot.

    Sorting happens on first access and is reused afterwards; iterating
    twice yields the same tasks in the same order.
    """

    def __init__(self, snapshot: tuple[Task, ...], task_filter: TaskFilter) -> None:
        self._snapshot = snapshot
        self.filter = task_filter
        self._items: tuple[Task, ...] | None = None

    def _materialize(self) -> tuple[Task, ...]:
        if self._items is None:
            picked = (t for t in self._snapshot if t.matches(self.filter))
            self._items = tuple(sorted(picked, key=Task.sort_key))
        return self._items

    def __iter__(self) -> Iterator[Task]:
        return iter(self._materialize())

    def __len__(self) -> int:
        return len(self._materialize())

    def __getitem__(self, index):  # type: ignore[override]
        return self._materialize()[index]

    def __repr__(self) -> str:
        return f"TaskView(filter={self.filter.value}, size={len(self)})"


class TaskStore:
    """
    In-memory task collection synchronized with a key-value store.

    Every mutation replaces the whole collection (tuple of frozen Tasks),
    then writes the serialized collection and notifies subscribers.
    Invalid input (blank title, unknown id) is a silent no-op.

    Persistence is best-effort: read/write failures are logged and the
    in-memory collection stays authoritative.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_TASKS_KEY,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
    ) -> None:
        if max_title_length <= 0:
            raise ValueError("max_title_length must be positive")
        self._kv = kv
        self._key = key
        self.max_title_length = max_title_length

        self._tasks: tuple[Task, ...] = ()
        self._revision = 0
        self._views: dict[TaskFilter, tuple[int, TaskView]] = {}
        self._listeners: list[TaskListener] = []

    # ---- reads ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    @property
    def active_count(self) -> int:
        return len(self._tasks) - self.completed_count

    def view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> TaskView:
        task_filter = TaskFilter(task_filter)
        cached = self._views.get(task_filter)
        if cached is not None and cached[0] == self._revision:
            return cached[1]
        view = TaskView(self._tasks, task_filter)
        self._views[task_filter] = (self._revision, view)
        return view

    # ---- subscriptions ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self._tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task listener %r failed.", listener)

    # ---- mutations ----

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        self._revision += 1
        self._views.clear()
        self._persist()
        self._notify()

    def _replace_one(self, task_id: str, **changes: Any) -> bool:
        found = False
        out: list[Task] = []
        for task in self._tasks:
            if task.id == task_id:
                found = True
                task = replace(task, **changes)
            out.append(task)
        if not found:
            logger.debug("No task id=%s; ignoring %s", task_id, ", ".join(changes))
            return False
        self._commit(tuple(out))
        return True

    def add(self, title: str, category: TaskCategory | str = TaskCategory.NONE) -> Task | None:
        clean = clean_title(title, self.max_title_length)
        if clean is None:
            logger.debug("Ignoring add with blank title.")
            return None

        task = Task(
            id=new_task_id(),
            title=clean,
            created_at=utc_now_ms(),
            order=len(self._tasks),
            category=TaskCategory.from_raw(category),
        )
        self._commit(self._tasks + (task,))
        logger.debug("Task added id=%s category=%s order=%s", task.id, task.category, task.order)
        return task

    def delete(self, task_id: str) -> None:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            logger.debug("No task id=%s; ignoring delete", task_id)
            return
        self._commit(remaining)

    def toggle(self, task_id: str) -> None:
        task = self.get(task_id)
        if task is None:
            logger.debug("No task id=%s; ignoring toggle", task_id)
            return
        self._replace_one(task_id, completed=not task.completed)

    def update(self, task_id: str, new_title: str) -> None:
        clean = clean_title(new_title, self.max_title_length)
        if clean is None:
            logger.debug("Ignoring update of id=%s with blank title.", task_id)
            return
        self._replace_one(task_id, title=clean)

    def set_category(self, task_id: str, category: TaskCategory | str) -> None:
        if isinstance(category, TaskCategory):
            cat = category
        else:
            try:
                cat = TaskCategory(str(category).strip().lower())
            except ValueError:
                logger.warning("Unknown category %r; ignoring set_category for id=%s", category, task_id)
                return
        self._replace_one(task_id, category=cat)

    def clear_completed(self) -> None:
        remaining = tuple(t for t in self._tasks if not t.completed)
        if len(remaining) == len(self._tasks):
            return
        self._commit(remaining)

    # ---- persistence ----

    @staticmethod
    def _task_to_dict(task: Task) -> dict[str, Any]:
        return {
            "id": task.id,
            "title": task.title,
            "completed": task.completed,
            "category": task.category.value,
            "createdAt": format_timestamp(task.created_at),
            "order": task.order,
        }

    def _dict_to_task(self, raw: dict[str, Any]) -> Task | None:
        title = clean_title(raw.get("title") if isinstance(raw.get("title"), str) else None, self.max_title_length)
        if title is None:
            return None

        raw_id = raw.get("id")
        task_id = str(raw_id) if raw_id not in (None, "") else new_task_id()

        order = raw.get("order")
        if isinstance(order, bool) or not isinstance(order, (int, float)):
            order = 0
        elif isinstance(order, float) and not (math.isfinite(order) and order.is_integer()):
            order = 0

        return Task(
            id=task_id,
            title=title,
            completed=raw.get("completed") is True,
            category=TaskCategory.from_raw(raw.get("category")),
            created_at=parse_timestamp(raw.get("createdAt")) or utc_now_ms(),
            order=int(order),
        )

    def dump(self) -> str:
        return json.dumps([self._task_to_dict(t) for t in self._tasks], ensure_ascii=False)

    def _persist(self) -> None:
        try:
            self._kv.set(self._key, self.dump())
        except Exception:
            logger.exception("Failed to persist %d tasks under key=%s", len(self._tasks), self._key)

    def load(self) -> tuple[Task, ...]:
        """
        Read the persisted collection (once, at startup).

        Legacy records missing category/order are backfilled with none/0.
        Unreadable data leaves the collection empty.
        """
        try:
            raw = self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to read tasks under key=%s", self._key)
            raw = None

        tasks: list[Task] = []
        if raw:
            try:
                data = json.loads(raw)
                if not isinstance(data, list):
                    raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            except ValueError:
                logger.exception("Failed to parse persisted tasks under key=%s", self._key)
                data = []

            seen: set[str] = set()
            for item in data:
                if not isinstance(item, dict):
                    continue
                try:
                    task = self._dict_to_task(item)
                except (TypeError, ValueError, OverflowError):
                    logger.warning("Skipping unreadable persisted task: %r", item.get("id"), exc_info=True)
                    continue
                if task is None:
                    logger.warning("Skipping persisted task without a title: %r", item.get("id"))
                    continue
                if task.id in seen:
                    task = replace(task, id=new_task_id())
                seen.add(task.id)
                tasks.append(task)

        self._tasks = tuple(tasks)
        self._revision += 1
        self._views.clear()
        logger.info("TaskStore loaded key=%s total=%d", self._key, len(self._tasks))
        self._notify()
        return self._tasks
