# src/toodoo/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState
from ..profile.profile_store import MIN_NAME_LENGTH
from ..tasks.task_api import submit_task

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]
PrintFunc = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def run_onboarding(state: AppState, input_func: InputFunc = input, print_func: PrintFunc = print) -> bool:
    """
    First-run flow: ask for a name (at least MIN_NAME_LENGTH chars), then mark onboarding done.
    Returns False if the user left (EOF / Ctrl+C) before finishing.
    """
    app_name = str(getattr(state.settings, "app_name", "toodoo"))
    print_func(f"Welcome to {app_name}! Let's personalize your experience.")

    while True:
        try:
            name = input_func("Your name: ")
        except (EOFError, KeyboardInterrupt):
            logger.info("Onboarding aborted.")
            return False
        if len((name or "").strip()) < MIN_NAME_LENGTH:
            print_func(f"Please enter a name with at least {MIN_NAME_LENGTH} characters")
            continue
        profile = state.profile_store.set_user_name(name)
        state.profile_store.complete_onboarding()
        print_func(f"Nice to meet you, {profile.user_name}!")
        return True


def run_console_loop(state: AppState, input_func: InputFunc = input, print_func: PrintFunc = print) -> None:
    logger.info("Console connector started (voice=%s).", state.voice_available)

    if state.profile_store.is_first_visit and not run_onboarding(state, input_func, print_func):
        return

    name = state.profile_store.profile.user_name
    greeting = f"Hi {name}! " if name else ""
    print_func(f"[{_ts_local()}] {greeting}Type a task to add it. Use /help for commands, /exit to quit.\n")
    print_func(render_view(state))

    def emit(text: str) -> None:
        print_func(f"[{_ts_local()}] {text}")

    changed = False

    def _on_change(_snapshot) -> None:
        nonlocal changed
        changed = True

    unsubscribe = state.task_store.subscribe(_on_change)

    try:
        while True:
            try:
                user_input = input_func(f"[{state.ambient_category.value}] > ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print_func("")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                # Plain text is a manual task entry.
                changed = False
                submit_task(state, user_input)
                reply = render_view(state) if changed else "Nothing to add."

            print_func(reply)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
