# src/toodoo/voice/listening.py

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from ..core.ports import SpeechInput

logger = logging.getLogger(__name__)

UtteranceHandler = Callable[[str], None]
InputFunc = Callable[[str], str]


class ListeningState(StrEnum):
    IDLE = "idle"
    LISTENING = "listening"


class ListeningSession:
    """
    Two-state wrapper around a speech source.

    - start() is ignored while already listening (not reentrant)
    - one transcript per session is passed to on_utterance, then back to idle
    - errors are logged and also reset to idle
    """

    def __init__(self, source: SpeechInput | None, on_utterance: UtteranceHandler) -> None:
        self._source = source
        self._on_utterance = on_utterance
        self._state = ListeningState.IDLE
        self._session = 0

        try:
            self.available = bool(source is not None and source.is_available())
        except Exception:
            logger.exception("Speech input availability check failed.")
            self.available = False
        logger.info("Speech input available=%s", self.available)

    @property
    def state(self) -> ListeningState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is ListeningState.LISTENING

    def start(self) -> bool:
        if not self.available or self._source is None:
            logger.debug("Speech input unavailable; start ignored.")
            return False
        if self.is_listening:
            logger.debug("Already listening; start ignored.")
            return False

        self._session += 1
        session = self._session
        self._state = ListeningState.LISTENING
        try:
            self._source.start(
                lambda text: self._handle_result(session, text),
                lambda err: self._handle_error(session, err),
            )
        except Exception as e:
            self._handle_error(session, e)
            return False
        return True

    def stop(self) -> None:
        if not self.is_listening:
            return
        self._state = ListeningState.IDLE
        if self._source is None:
            return
        try:
            self._source.stop()
        except Exception:
            logger.exception("Speech input stop failed.")

    def toggle(self) -> bool:
        """Start when idle, stop when listening. Returns True if a session was started."""
        if self.is_listening:
            self.stop()
            return False
        return self.start()

    def _handle_result(self, session: int, text: str) -> None:
        if session != self._session or not self.is_listening:
            logger.debug("Dropping late speech result for session=%s", session)
            return
        self._state = ListeningState.IDLE
        try:
            self._on_utterance(text)
        except Exception:
            logger.exception("Utterance handler failed.")

    def _handle_error(self, session: int, error: Exception) -> None:
        if session != self._session:
            return
        logger.warning("Speech recognition error: %s", error)
        self._state = ListeningState.IDLE


class PromptSpeechInput:
    """
    Console stand-in for speech-to-text: one dictated line per session.

    The transcript comes from `input_func` (input() by default), so the
    same flow runs in a terminal or in tests.
    """

    def __init__(self, enabled: bool, input_func: InputFunc = input, prompt: str = "(listening) say: ") -> None:
        self.enabled = bool(enabled)
        self._input = input_func
        self._prompt = prompt

    def is_available(self) -> bool:
        return self.enabled

    def start(self, on_result: Callable[[str], None], on_error: Callable[[Exception], None]) -> None:
        try:
            text = self._input(self._prompt)
        except (EOFError, KeyboardInterrupt) as e:
            on_error(RuntimeError(f"no speech captured ({type(e).__name__})"))
            return
        on_result(text)

    def stop(self) -> None:
        return
