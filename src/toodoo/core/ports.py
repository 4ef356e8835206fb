# src/toodoo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and speech sources swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

ResultCallback = Callable[[str], None]
ErrorCallback = Callable[[Exception], None]


class KeyValueStore(Protocol):
    """
    Opaque persistence medium.

    Durability, quotas and failure modes belong to the implementation;
    callers treat any exception as a persistence fault.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SpeechInput(Protocol):
    """
    Speech-to-text source.

    A started source delivers at most one transcript through on_result,
    or reports a failure through on_error.
    """

    def is_available(self) -> bool: ...

    def start(self, on_result: ResultCallback, on_error: ErrorCallback) -> None: ...

    def stop(self) -> None: ...
