# src/toodoo/profile/profile_store.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace

from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_KEY = "toodoo-user"

# Keys written by the first (browser) version of the app.
LEGACY_NAME_KEY = "toodoo-user-name"
LEGACY_ONBOARDING_KEY = "toodoo-onboarding-completed"

MIN_NAME_LENGTH = 2


@dataclass(slots=True, frozen=True)
class UserProfile:
    user_name: str = ""
    has_completed_onboarding: bool = False


class ProfileStore:
    """
    Owns the user profile that gates first-run onboarding.

    Stored as one JSON object, independently of the tasks.
    Persistence faults are logged; the in-memory profile keeps working.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_PROFILE_KEY) -> None:
        self._kv = kv
        self._key = key
        self._profile = UserProfile()

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def is_first_visit(self) -> bool:
        return not self._profile.has_completed_onboarding

    def load(self) -> UserProfile:
        try:
            raw = self._kv.get(self._key)
            if raw is not None:
                self._profile = self._parse(raw)
            else:
                self._profile = self._load_legacy()
        except Exception:
            logger.exception("Failed to load user profile under key=%s", self._key)
            self._profile = UserProfile()
        return self._profile

    @staticmethod
    def _parse(raw: str) -> UserProfile:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("profile is not a JSON object")
        name = data.get("userName")
        return UserProfile(
            user_name=name if isinstance(name, str) else "",
            has_completed_onboarding=data.get("hasCompletedOnboarding") is True,
        )

    def _load_legacy(self) -> UserProfile:
        name = self._kv.get(LEGACY_NAME_KEY) or ""
        done = self._kv.get(LEGACY_ONBOARDING_KEY) == "true"
        if name or done:
            logger.info("Migrating legacy profile keys into key=%s", self._key)
        return UserProfile(user_name=name, has_completed_onboarding=done)

    def _save(self) -> None:
        payload = {
            "userName": self._profile.user_name,
            "hasCompletedOnboarding": self._profile.has_completed_onboarding,
        }
        try:
            self._kv.set(self._key, json.dumps(payload, ensure_ascii=False))
        except Exception:
            logger.exception("Failed to save user profile under key=%s", self._key)

    def set_user_name(self, name: str) -> UserProfile:
        clean = (name or "").strip()
        if len(clean) < MIN_NAME_LENGTH:
            raise ValueError(f"Please enter a name with at least {MIN_NAME_LENGTH} characters")
        self._profile = replace(self._profile, user_name=clean)
        self._save()
        return self._profile

    def complete_onboarding(self) -> UserProfile:
        self._profile = replace(self._profile, has_completed_onboarding=True)
        self._save()
        return self._profile
