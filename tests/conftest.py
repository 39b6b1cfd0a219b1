"""Pytest configuration and fixtures.

Services are built on the in-memory FakeStore / FakeSender from tests.fakes;
Django settings come from config.settings via pytest-django.
"""

import pytest

from roster import paths
from roster.dispatcher import NotificationDispatcher
from roster.friends import FriendGraphService
from roster.profiles import ProfileDirectory
from roster.secret_contacts import SecretContactMirror
from roster.tokens import TokenRegistry
from tests.fakes import FakeSender, FakeStore

TRIGGER_SECRET = "test-trigger-secret"


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def tokens(store) -> TokenRegistry:
    return TokenRegistry(store)


@pytest.fixture
def dispatcher(store, tokens, sender) -> NotificationDispatcher:
    return NotificationDispatcher(store=store, tokens=tokens, sender=sender)


@pytest.fixture
def profiles(store) -> ProfileDirectory:
    return ProfileDirectory(store)


@pytest.fixture
def friends(store, profiles) -> FriendGraphService:
    return FriendGraphService(store=store, profiles=profiles)


@pytest.fixture
def mirror(store) -> SecretContactMirror:
    return SecretContactMirror(store)


@pytest.fixture
def trigger_secret(monkeypatch) -> str:
    monkeypatch.setenv("ROSTER_TRIGGER_SECRET", TRIGGER_SECRET)
    return TRIGGER_SECRET


def add_public_profile(store, share_code, uid, name):
    store.set(paths.public_profile(share_code), {"userId": uid, "name": name, "shareCode": share_code})
