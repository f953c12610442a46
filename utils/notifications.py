"""In-process publish/subscribe channel for catalog notifications.

Components subscribe when they are mounted and call the returned unsubscribe
function when they are torn down. Notifications are fire-and-forget: each
publish reaches every handler subscribed at that moment at most once, and
nothing is stored for late subscribers.
"""

from __future__ import annotations

import logging
import threading
import typing

logger = logging.getLogger(__name__)

CONTENT_CREATED = 'content.created'
CONTENT_DELETED = 'content.deleted'
STORAGE_CHANGED = 'storage.changed'

Event = typing.Literal['content.created', 'content.deleted', 'storage.changed']
EVENTS = typing.get_args(Event)

Handler = typing.Callable[[str, dict], None]


class NotificationHub:
    """Typed publish/subscribe hub, injected into the components that use it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[Handler]] = {event: [] for event in EVENTS}

    def subscribe(self, event: Event, handler: Handler) -> typing.Callable[[], None]:
        """Register *handler* for *event* and return a function that unregisters it."""
        if event not in self._subscribers:
            raise ValueError(f"Unknown event '{event}', expected one of {EVENTS}")
        with self._lock:
            self._subscribers[event].append(handler)

        def unsubscribe():
            with self._lock:
                if handler in self._subscribers[event]:
                    self._subscribers[event].remove(handler)
        return unsubscribe

    def publish(self, event: Event, payload: dict | None = None) -> int:
        """Call every handler subscribed to *event*; returns how many were called.

        A failing handler is logged and does not affect the publisher or the
        other handlers.
        """
        if event not in self._subscribers:
            raise ValueError(f"Unknown event '{event}', expected one of {EVENTS}")
        with self._lock:
            handlers = list(self._subscribers[event])
        for handler in handlers:
            try:
                handler(event, payload or {})
            except Exception as e:
                logger.warning(f"Handler {handler!r} failed on {event}: {e}")
        return len(handlers)

    def subscriber_count(self, event: Event) -> int:
        with self._lock:
            return len(self._subscribers.get(event, []))
