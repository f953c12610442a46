"""Unit tests for utils/notifications.py."""

import pytest
from unittest.mock import MagicMock

from utils.notifications import CONTENT_CREATED, CONTENT_DELETED, EVENTS, NotificationHub, STORAGE_CHANGED


def test_events():
    assert set(EVENTS) == {CONTENT_CREATED, CONTENT_DELETED, STORAGE_CHANGED}


def test_publish_reaches_subscribers_of_the_event_only():
    hub = NotificationHub()
    created, deleted = MagicMock(), MagicMock()
    hub.subscribe(CONTENT_CREATED, created)
    hub.subscribe(CONTENT_DELETED, deleted)
    assert hub.publish(CONTENT_CREATED, {"content_id": "1"}) == 1
    created.assert_called_once_with(CONTENT_CREATED, {"content_id": "1"})
    deleted.assert_not_called()


def test_publish_without_subscribers():
    assert NotificationHub().publish(STORAGE_CHANGED) == 0


def test_unsubscribe():
    hub = NotificationHub()
    handler = MagicMock()
    unsubscribe = hub.subscribe(CONTENT_CREATED, handler)
    unsubscribe()
    unsubscribe()
    hub.publish(CONTENT_CREATED, {})
    handler.assert_not_called()
    assert hub.subscriber_count(CONTENT_CREATED) == 0


def test_failing_handler_does_not_stop_the_others(caplog):
    hub = NotificationHub()
    failing = MagicMock(side_effect=RuntimeError("boom"))
    other = MagicMock()
    hub.subscribe(STORAGE_CHANGED, failing)
    hub.subscribe(STORAGE_CHANGED, other)
    assert hub.publish(STORAGE_CHANGED, {}) == 2
    other.assert_called_once()
    assert "boom" in caplog.text


def test_handler_may_unsubscribe_while_publishing():
    hub = NotificationHub()
    calls = []

    def once(event, payload):
        calls.append(event)
        unsubscribe()

    unsubscribe = hub.subscribe(CONTENT_DELETED, once)
    hub.publish(CONTENT_DELETED)
    hub.publish(CONTENT_DELETED)
    assert calls == [CONTENT_DELETED]


def test_unknown_event():
    hub = NotificationHub()
    with pytest.raises(ValueError):
        hub.subscribe("content.updated", MagicMock())
    with pytest.raises(ValueError):
        hub.publish("content.updated")
