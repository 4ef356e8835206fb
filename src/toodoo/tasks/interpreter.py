# src/toodoo/tasks/interpreter.py

from __future__ import annotations

"""
Free-text / voice command interpreter.

Turns one utterance into at most one create-intent plus an optional
category hint. Pure pattern matching, no state: the caller owns the
ambient category and decides what to do with the result.

Rules, in order:
1. lowercase + trim
2. "add <text> to my list" -> create <text> with the ambient category
3. first of "work" / "personal" / "urgent" found anywhere -> category hint
   (checked even when rule 2 fired)
4. otherwise strip one leading filler word, a leading hinted category word
   and a trailing "todo"/"task"; whatever remains becomes the title
"""

import re
from dataclasses import dataclass

from .task_models import DEFAULT_MAX_TITLE_LENGTH, TaskCategory, clean_title

EXPLICIT_ADD_RE = re.compile(r"add\s+[\"']?([^\"']+)[\"']?\s+to\s+my\s+list", re.IGNORECASE)

# Order matters: the first keyword found wins.
CATEGORY_KEYWORDS: tuple[tuple[str, TaskCategory], ...] = (
    ("work", TaskCategory.WORK),
    ("personal", TaskCategory.PERSONAL),
    ("urgent", TaskCategory.URGENT),
)

LEADING_FILLERS = ("ok", "okay", "hey", "hi", "umm", "uh", "add", "create", "new", "todo", "task")
TRAILING_FILLERS = ("todo", "task")

_LEADING_FILLER_RE = re.compile(r"^(?:%s)\s+" % "|".join(LEADING_FILLERS), re.IGNORECASE)
_TRAILING_FILLER_RE = re.compile(r"\s+(?:%s)$" % "|".join(TRAILING_FILLERS), re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class CreateIntent:
    title: str
    category: TaskCategory


@dataclass(slots=True, frozen=True)
class Interpretation:
    intent: CreateIntent | None = None
    category_update: TaskCategory | None = None

    @property
    def is_empty(self) -> bool:
        return self.intent is None and self.category_update is None


def detect_category(text: str) -> TaskCategory | None:
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in text:
            return category
    return None


def strip_fillers(text: str, hinted: TaskCategory | None = None) -> str:
    text = _LEADING_FILLER_RE.sub("", text, count=1)
    if hinted is not None:
        text = re.sub(r"^%s\s+" % re.escape(hinted.value), "", text, count=1)
    text = _TRAILING_FILLER_RE.sub("", text, count=1)
    return text.strip()


def interpret(
    utterance: str | None,
    ambient: TaskCategory = TaskCategory.NONE,
    *,
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
) -> Interpretation:
    command = (utterance or "").lower().strip()
    if not command:
        return Interpretation()

    intent: CreateIntent | None = None

    m = EXPLICIT_ADD_RE.search(command)
    if m:
        title = clean_title(m.group(1), max_title_length)
        if title:
            intent = CreateIntent(title=title, category=ambient)

    hinted = detect_category(command)

    if m is None:
        title = clean_title(strip_fillers(command, hinted), max_title_length)
        if title:
            intent = CreateIntent(title=title, category=ambient)

    return Interpretation(intent=intent, category_update=hinted)
