# tests/test_console.py

from __future__ import annotations

import pytest

from toodoo.connectors.console_connector import run_console_loop
from toodoo.tasks.task_models import TaskCategory


def _scripted(lines: list[str]):
    it = iter(lines)

    def _input(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return _input


def test_first_run_onboarding_then_manual_entry(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        input_func=_scripted(["A", "Ada", "/category personal", "buy milk", "   ", "call mom", "/exit"]),
        print_func=out.append,
    )

    profile = state.profile_store.profile
    assert profile.user_name == "Ada"
    assert profile.has_completed_onboarding
    assert any("at least 2 characters" in line for line in out)

    tasks = state.task_store.tasks
    assert [(t.title, t.category) for t in tasks] == [
        ("buy milk", TaskCategory.PERSONAL),
        ("call mom", TaskCategory.NONE),
    ]


def test_onboarding_aborted_leaves_first_visit(state) -> None:
    run_console_loop(state, input_func=_scripted([]), print_func=lambda _line: None)
    assert state.profile_store.is_first_visit


def test_returning_user_skips_onboarding(state) -> None:
    state.profile_store.set_user_name("Ada")
    state.profile_store.complete_onboarding()
    out: list[str] = []

    run_console_loop(state, input_func=_scripted(["/unknown", "task one"]), print_func=out.append)

    assert any("Hi Ada!" in line for line in out)
    assert any("Unknown command" in line for line in out)
    assert [t.title for t in state.task_store.tasks] == ["task one"]


def test_loop_unsubscribes_even_when_output_fails(state) -> None:
    state.profile_store.set_user_name("Ada")
    state.profile_store.complete_onboarding()
    listeners_before = len(state.task_store._listeners)

    def _print(line: str) -> None:
        if "buy milk" in line:
            raise RuntimeError("terminal gone")

    with pytest.raises(RuntimeError):
        run_console_loop(state, input_func=_scripted(["buy milk"]), print_func=_print)

    assert len(state.task_store._listeners) == listeners_before


def test_loop_unsubscribes_on_normal_exit(state) -> None:
    state.profile_store.set_user_name("Ada")
    state.profile_store.complete_onboarding()
    listeners_before = len(state.task_store._listeners)

    run_console_loop(state, input_func=_scripted(["/exit"]), print_func=lambda _line: None)

    assert len(state.task_store._listeners) == listeners_before
