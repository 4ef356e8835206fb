# tests/test_commands.py

from __future__ import annotations

from toodoo.cli.commands import CommandRegistry, registry, resolve_task
from toodoo.tasks.task_models import TaskCategory, TaskFilter

from .fakes import ScriptedSpeechInput


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert "/b - b" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_task_commands_end_to_end(state) -> None:
    registry.handle(state, "/category work")
    assert "buy milk" in (registry.handle(state, "/add buy milk") or "")
    registry.handle(state, "/add call mom")

    titles = [(t.title, t.category) for t in state.task_store.tasks]
    assert titles == [("buy milk", TaskCategory.WORK), ("call mom", TaskCategory.NONE)]

    registry.handle(state, "/done 1")
    # completed tasks move to the bottom of the view
    assert [t.title for t in state.task_store.view()] == ["call mom", "buy milk"]

    registry.handle(state, "/edit 1 call dad")
    registry.handle(state, "/cat 1 urgent")
    call = state.task_store.view()[0]
    assert (call.title, call.category) == ("call dad", TaskCategory.URGENT)

    assert "Unknown category" in (registry.handle(state, "/cat 1 groceries") or "")
    assert "No task" in (registry.handle(state, "/rm 9") or "")

    registry.handle(state, "/list completed")
    assert state.current_filter is TaskFilter.COMPLETED
    reply = registry.handle(state, "/clear") or ""
    assert "Cleared 1" in reply
    assert state.current_filter is TaskFilter.ALL
    assert [t.title for t in state.task_store.tasks] == ["call dad"]

    registry.handle(state, "/rm 1")
    assert len(state.task_store) == 0


def test_state_is_persisted_between_sessions(state, settings) -> None:
    from toodoo.cli.bootstrap import create_initial_state

    registry.handle(state, "/add persisted task")
    registry.handle(state, "/name Ada")

    reopened = create_initial_state(settings=settings, speech_input=ScriptedSpeechInput())
    assert [t.title for t in reopened.task_store.tasks] == ["persisted task"]
    assert reopened.profile_store.profile.user_name == "Ada"


def test_resolve_task_by_id_prefix(state) -> None:
    task = state.task_store.add("by id")
    assert resolve_task(state, task.id) == task
    assert resolve_task(state, task.id[:8]) == task
    assert resolve_task(state, "0") is None
    assert resolve_task(state, "") is None


def test_say_applies_interpreter(state) -> None:
    reply = registry.handle(state, "/say work meeting tomorrow") or ""
    assert "Added: meeting tomorrow" in reply
    assert state.ambient_category is TaskCategory.WORK

    registry.handle(state, "/say add buy milk to my list")
    assert state.task_store.tasks[-1].category is TaskCategory.WORK


def test_listen_uses_speech_session(state, speech) -> None:
    reply = registry.handle(state, "/listen") or ""
    assert reply == "Listening..."
    assert state.listening.is_listening

    speech.deliver("add water plants to my list")
    assert [t.title for t in state.task_store.tasks] == ["water plants"]
    assert not state.listening.is_listening

    registry.handle(state, "/listen")
    assert registry.handle(state, "/listen") == "Stopped listening."


def test_status_and_name(state) -> None:
    assert "at least 2" in (registry.handle(state, "/name A") or "")
    assert registry.handle(state, "/name Ada") == "Hi, Ada!"
    status = registry.handle(state, "/status") or ""
    assert "User: Ada" in status
    assert "Voice: idle" in status


def test_title_commands_keep_inner_spacing(state) -> None:
    registry.handle(state, "/add a   b")
    assert [t.title for t in state.task_store.tasks] == ["a   b"]

    registry.handle(state, "/edit 1   c  d ")
    assert [t.title for t in state.task_store.tasks] == ["c  d"]

    assert "Usage" in (registry.handle(state, "/edit 1") or "")
