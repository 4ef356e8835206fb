# tests/test_profile_store.py

from __future__ import annotations

import json

import pytest

from toodoo.profile.profile_store import ProfileStore, UserProfile
from toodoo.storage.kv_store import MemoryKeyValueStore

from .fakes import FailingKeyValueStore


def test_defaults_on_first_visit() -> None:
    store = ProfileStore(MemoryKeyValueStore())
    assert store.load() == UserProfile(user_name="", has_completed_onboarding=False)
    assert store.is_first_visit


def test_onboarding_is_persisted_under_one_key() -> None:
    kv = MemoryKeyValueStore()
    store = ProfileStore(kv)
    store.load()
    store.set_user_name("  Ada ")
    store.complete_onboarding()

    assert json.loads(kv.get("toodoo-user") or "{}") == {
        "userName": "Ada",
        "hasCompletedOnboarding": True,
    }

    again = ProfileStore(kv)
    assert again.load() == UserProfile(user_name="Ada", has_completed_onboarding=True)
    assert not again.is_first_visit


@pytest.mark.parametrize("name", ["", " ", "A", " B "])
def test_short_names_are_rejected(name: str) -> None:
    store = ProfileStore(MemoryKeyValueStore())
    with pytest.raises(ValueError, match="at least 2 characters"):
        store.set_user_name(name)
    assert store.profile.user_name == ""


def test_legacy_keys_are_honoured() -> None:
    kv = MemoryKeyValueStore({"toodoo-user-name": "Grace", "toodoo-onboarding-completed": "true"})
    assert ProfileStore(kv).load() == UserProfile(user_name="Grace", has_completed_onboarding=True)


def test_corrupt_profile_falls_back_to_defaults() -> None:
    kv = MemoryKeyValueStore({"toodoo-user": "[1, 2"})
    assert ProfileStore(kv).load() == UserProfile()


def test_persistence_faults_are_swallowed() -> None:
    store = ProfileStore(FailingKeyValueStore())
    assert store.load() == UserProfile()
    store.set_user_name("Linus")
    store.complete_onboarding()
    assert store.profile == UserProfile(user_name="Linus", has_completed_onboarding=True)
