"""Trigger endpoints: shared secret guard and delegation to the handlers."""

import json

import pytest

from roster import paths
from tests.fakes import FakeSender


@pytest.fixture(autouse=True)
def wired(monkeypatch, dispatcher, mirror):
    monkeypatch.setattr("roster.views.triggers.notification_dispatcher", dispatcher)
    monkeypatch.setattr("roster.views.triggers.secret_contact_mirror", mirror)


def _post(client, url, body, secret):
    return client.post(
        url,
        data=json.dumps(body),
        content_type="application/json",
        HTTP_X_TRIGGER_SECRET=secret,
    )


def test_notification_created_dispatches(client, store, sender, trigger_secret) -> None:
    store.set(paths.notification("n1"), {"recipientUserId": "u1"})

    response = _post(client, "/triggers/notification-created", {"notificationId": "n1"}, trigger_secret)

    assert response.status_code == 200
    assert response.json()["status"] == "no_tokens"
    assert sender.calls == []


def test_notification_created_wrong_secret(client, store, trigger_secret) -> None:
    store.set(paths.notification("n1"), {"recipientUserId": "u1"})

    response = _post(client, "/triggers/notification-created", {"notificationId": "n1"}, "wrong")

    assert response.status_code == 403
    assert "status" not in store.get(paths.notification("n1"))


def test_trigger_without_configured_secret(client, monkeypatch) -> None:
    monkeypatch.delenv("ROSTER_TRIGGER_SECRET", raising=False)

    response = _post(client, "/triggers/notification-created", {"notificationId": "n1"}, "")

    assert response.status_code == 500
    assert response.json()["error"] == "missing_env"


def test_notification_created_missing_id(client, trigger_secret) -> None:
    response = _post(client, "/triggers/notification-created", {}, trigger_secret)

    assert response.status_code == 400
    assert response.json()["error"] == "missing_notification_id"


def test_notification_send_failure_propagates(client, monkeypatch, store, tokens, trigger_secret) -> None:
    from roster.dispatcher import NotificationDispatcher

    store.set(paths.fcm_token("u1", "tok"), {"token": "tok"})
    store.set(paths.notification("n1"), {"recipientUserId": "u1"})
    failing = NotificationDispatcher(store=store, tokens=tokens, sender=FakeSender(error=RuntimeError("fcm down")))
    monkeypatch.setattr("roster.views.triggers.notification_dispatcher", failing)
    client.raise_request_exception = False

    response = _post(client, "/triggers/notification-created", {"notificationId": "n1"}, trigger_secret)

    assert response.status_code == 500
    assert "status" not in store.get(paths.notification("n1"))


def test_secret_request_written(client, store, trigger_secret) -> None:
    store.set(paths.secret_request("r1"), {"from": "a", "to": "b", "status": "accepted"})

    response = _post(client, "/triggers/secret-request-written", {"requestId": "r1"}, trigger_secret)

    assert response.json()["mirrored"] is True
    assert store.get(paths.secret_contact("a", "b"))["friendId"] == "b"


def test_notification_sweep(client, store, trigger_secret) -> None:
    store.set(paths.notification("n1"), {})
    store.set(paths.notification("n2"), {"status": "sent"})

    response = _post(client, "/notifications/sweep", {"limit": 50}, trigger_secret)

    assert response.status_code == 200
    assert response.json()["processed"] == [{"notificationId": "n1", "status": "invalid"}]


@pytest.mark.parametrize("limit", ["many", 0, -3])
def test_notification_sweep_invalid_limit(client, trigger_secret, limit) -> None:
    response = _post(client, "/notifications/sweep", {"limit": limit}, trigger_secret)

    assert response.status_code == 400
