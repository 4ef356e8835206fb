# src/toodoo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import handle_utterance, submit_task
from ..tasks.task_models import Task, TaskCategory, TaskFilter

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandArgs(list[str]):
    """Whitespace-split arguments that also keep the raw rest of the line."""

    def __init__(self, raw: str = "") -> None:
        super().__init__(raw.split())
        self.raw = raw.strip()

    def rest(self, skip: int) -> str:
        """Raw text after the first `skip` arguments, inner spacing kept."""
        text = self.raw
        for _ in range(skip):
            parts = text.split(None, 1)
            text = parts[1] if len(parts) > 1 else ""
        return text


CATEGORY_NAMES = ", ".join(c.value for c in TaskCategory)
FILTER_NAMES = ", ".join(f.value for f in TaskFilter)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = CommandArgs(parts[1] if len(parts) > 1 else "")

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering helpers ----


def format_task(position: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    cat = "" if task.category is TaskCategory.NONE else f" ({task.category.value})"
    return f"{position:>2}. [{mark}] {task.title}{cat}"


def render_view(state: AppState) -> str:
    store = state.task_store
    view = store.view(state.current_filter)
    header = (
        f"{state.current_filter.value.capitalize()} tasks "
        f"(active: {store.active_count}, completed: {store.completed_count})"
    )
    if not len(view):
        return f"{header}\n  No todos yet. Add one above!"
    lines = [header]
    lines.extend(format_task(i, t) for i, t in enumerate(view, start=1))
    return "\n".join(lines)


def resolve_task(state: AppState, ref: str) -> Task | None:
    """
    Resolve a task reference:
    - 1-based position in the current view
    - full id or a unique id prefix
    """
    ref = (ref or "").strip()
    if not ref:
        return None

    if ref.isdigit():
        view = state.task_store.view(state.current_filter)
        idx = int(ref) - 1
        if 0 <= idx < len(view):
            return view[idx]
        return None

    exact = state.task_store.get(ref)
    if exact is not None:
        return exact
    matches = [t for t in state.task_store.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _parse_category(raw: str) -> TaskCategory | None:
    try:
        return TaskCategory(raw.strip().lower())
    except ValueError:
        return None


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    profile = state.profile_store.profile
    voice = "unavailable"
    if state.listening is not None and state.listening.available:
        voice = state.listening.state.value
    return (
        "Status:\n"
        f"  User: {profile.user_name or '(anonymous)'}\n"
        f"  Tasks: {len(store)} (active {store.active_count}, completed {store.completed_count})\n"
        f"  Filter: {state.current_filter.value}\n"
        f"  Next category: {state.ambient_category.value}\n"
        f"  Voice: {voice}\n"
        f"  Storage: {getattr(state.settings, 'storage_backend', '?')}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                 -> show tasks with the current filter
    /list active|...      -> switch filter and show
    """
    if args:
        try:
            state.current_filter = TaskFilter(args[0].lower())
        except ValueError:
            return f"Unknown filter {args[0]!r}. Use one of: {FILTER_NAMES}."
    return render_view(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    title = args.raw if isinstance(args, CommandArgs) else " ".join(args)
    task = submit_task(state, title)
    if task is None:
        return "Nothing to add (empty title)."
    return f"Added: {task.title}\n{render_view(state)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    state.task_store.toggle(task.id)
    return render_view(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <n|id> <new title>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    new_title = args.rest(1) if isinstance(args, CommandArgs) else " ".join(args[1:])
    state.task_store.update(task.id, new_title)
    return render_view(state)


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    state.task_store.delete(task.id)
    return f"Deleted: {task.title}\n{render_view(state)}"


def cmd_cat(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return f"Usage: /cat <n|id> <{'|'.join(c.value for c in TaskCategory)}>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    category = _parse_category(args[1])
    if category is None:
        return f"Unknown category {args[1]!r}. Use one of: {CATEGORY_NAMES}."
    state.task_store.set_category(task.id, category)
    return render_view(state)


def cmd_category(state: AppState, args: list[str]) -> str:
    """
    /category         -> show the category for the next task
    /category work    -> preselect a category for the next task
    """
    if not args:
        return f"Next task category: {state.ambient_category.value}"
    category = _parse_category(args[0])
    if category is None:
        return f"Unknown category {args[0]!r}. Use one of: {CATEGORY_NAMES}."
    state.ambient_category = category
    return f"Next task category: {category.value}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = state.task_store.completed_count
    state.task_store.clear_completed()
    # An empty "completed" list right after clearing is confusing; go back to all.
    if state.current_filter is TaskFilter.COMPLETED:
        state.current_filter = TaskFilter.ALL
    return f"Cleared {removed} completed task(s).\n{render_view(state)}"


def _describe_voice_result(state: AppState, before: int) -> str:
    added = len(state.task_store) - before
    lines = []
    if added:
        task = state.task_store.tasks[-1]
        lines.append(f"Added: {task.title} [{task.category.value}]")
    else:
        lines.append("No task recognized.")
    lines.append(f"Next task category: {state.ambient_category.value}")
    return "\n".join(lines)


def cmd_say(state: AppState, args: list[str]) -> str:
    """/say <utterance> -> run the voice command interpreter on typed text."""
    if not args:
        return 'Usage: /say <utterance>, e.g. /say add call mom to my list'
    before = len(state.task_store)
    handle_utterance(state, " ".join(args))
    return _describe_voice_result(state, before)


def cmd_listen(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = state.listening
    if session is None or not session.available:
        return "Voice input is not available (set TOODOO_VOICE_ENABLED=1)."

    if session.is_listening:
        session.stop()
        return "Stopped listening."

    if emit:
        with contextlib.suppress(Exception):
            emit('Listening... Try saying "add call mom to my list" or "work meeting tomorrow".')

    before = len(state.task_store)
    if not session.start():
        return "Could not start listening."
    if session.is_listening:
        return "Listening..."
    return _describe_voice_result(state, before)


def cmd_name(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Your name: {state.profile_store.profile.user_name or '(not set)'}"
    try:
        profile = state.profile_store.set_user_name(" ".join(args))
    except ValueError as e:
        return str(e)
    return f"Hi, {profile.user_name}!"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show user, counters, filter and voice state.")
registry.register("list", cmd_list, help_text=f"Show tasks: /list [{FILTER_NAMES}].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task with the next-task category: /add <title>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <n|id> <title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n|id>.", aliases=["del"])
registry.register("cat", cmd_cat, help_text="Set a task's category: /cat <n|id> <category>.")
registry.register("category", cmd_category, help_text="Category for the next task: /category [<category>].")
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("say", cmd_say, help_text="Interpret a typed voice command: /say <utterance>.")
registry.register("listen", cmd_listen, help_text="Start/stop voice input.")
registry.register("name", cmd_name, help_text="Show or change your name: /name [<name>].")
