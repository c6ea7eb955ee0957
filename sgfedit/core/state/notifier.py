# sgfedit/core/state/notifier.py
"""Pub-sub for view-level notifications.

StateNotifier delivers :class:`Event` objects to subscribed callbacks. It is
the channel between the headless controller and a GUI: a failing GUI callback
is logged and never stops the remaining callbacks, unlike editor handlers
whose exceptions propagate to the caller.

Snapshot Semantics:
- notify() takes a snapshot of the listener list before notification
- Listeners unsubscribed during notify() still receive the current event
- Next notify() will not call unsubscribed listeners

Logger Injection:
- Logger is optional: Callable[[str], None] or None
- Caller binds the log level via closure
- Logger is called once per error with combined message + traceback
- If logger is None or fails, fallback to stderr
"""

import sys
import threading
import traceback
from collections.abc import Callable

from sgfedit.core.state.events import Event, EventType

# Logger type: level is bound by caller via closure
LoggerType = Callable[[str], None]


class StateNotifier:
    """Change notification system.

    Example:
        >>> notifier = StateNotifier()
        >>> def on_view_changed(event):
        ...     print(f"View changed: {sorted(event.payload)}")
        >>> notifier.subscribe(EventType.VIEW_CHANGED, on_view_changed)
        >>> notifier.notify(Event.create(EventType.VIEW_CHANGED, {"cursor": None}))
        View changed: ['cursor']
    """

    def __init__(self, logger: LoggerType | None = None) -> None:
        """
        Args:
            logger: Optional logger function, called on callback errors.
                   If None, errors are printed to stderr.
        """
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._lock = threading.RLock()
        self._logger = logger

    def subscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """Subscribe a callback to an event type. Duplicate subscriptions are ignored."""
        with self._lock:
            callbacks = self._subscribers.setdefault(event_type, [])
            if callback not in callbacks:
                callbacks.append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> bool:
        """Unsubscribe a callback. Returns False if it was not subscribed."""
        with self._lock:
            callbacks = self._subscribers.get(event_type, [])
            if callback in callbacks:
                callbacks.remove(callback)
                return True
            return False

    def subscriber_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def notify(self, event: Event) -> None:
        """Notify all subscribers of an event.

        Each callback is wrapped in try/except so that one failure doesn't
        prevent other callbacks from being called.
        """
        with self._lock:
            callbacks = self._subscribers.get(event.event_type, [])[:]

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                self._log_error(event, callback, e)

    def _log_error(self, event: Event, callback: Callable[[Event], None], e: Exception) -> None:
        """Reports a failed callback through the injected logger, or stderr."""
        cb_name = getattr(callback, "__name__", repr(callback))
        msg = f"[StateNotifier] {event.event_type.value}: {cb_name} failed: {type(e).__name__}: {e!r}"
        full_msg = f"{msg}\n{traceback.format_exc()}"

        if self._logger:
            try:
                self._logger(full_msg)
            except Exception:
                print(full_msg, file=sys.stderr)
        else:
            print(full_msg, file=sys.stderr)

    def clear(self, event_type: EventType | None = None) -> None:
        """Clear subscribers, of one type or all."""
        with self._lock:
            if event_type is None:
                self._subscribers.clear()
            elif event_type in self._subscribers:
                self._subscribers[event_type].clear()
