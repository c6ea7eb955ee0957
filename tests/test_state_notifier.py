"""Unit tests for StateNotifier, Event, and EventType.

Test categories:
- Basic functionality (subscribe, notify, unsubscribe)
- Safety (exception handling, duplicates, logger fallback)
- Thread safety (concurrent subscribe/notify)
- Snapshot semantics (unsubscribe during notify)
- Event immutability (frozen dataclass, MappingProxyType)
"""

import threading
from dataclasses import FrozenInstanceError
from types import MappingProxyType

import pytest

from sgfedit.core.state import EDITOR_EVENTS, Event, EventType, StateNotifier


class TestStateNotifier:
    """StateNotifier unit tests."""

    def test_subscribe_and_notify(self) -> None:
        notifier = StateNotifier()
        received: list[Event] = []

        notifier.subscribe(EventType.VIEW_CHANGED, received.append)
        notifier.notify(Event.create(EventType.VIEW_CHANGED, {"cursor": 42}))

        assert len(received) == 1
        assert received[0].event_type == EventType.VIEW_CHANGED
        assert received[0].payload is not None
        assert received[0].payload["cursor"] == 42

    def test_unsubscribe(self) -> None:
        notifier = StateNotifier()
        received: list[Event] = []

        notifier.subscribe(EventType.VIEW_CHANGED, received.append)
        assert notifier.unsubscribe(EventType.VIEW_CHANGED, received.append) is True
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert received == []

    def test_unsubscribe_unknown_returns_false(self) -> None:
        notifier = StateNotifier()
        assert notifier.unsubscribe(EventType.VIEW_CHANGED, print) is False

    def test_notify_no_subscribers(self) -> None:
        StateNotifier().notify(Event.create(EventType.VIEW_CHANGED))

    def test_subscribers_called_in_order(self) -> None:
        notifier = StateNotifier()
        results: list[str] = []

        def callback_a(event: Event) -> None:
            results.append("A")

        def callback_b(event: Event) -> None:
            results.append("B")

        notifier.subscribe(EventType.VIEW_CHANGED, callback_a)
        notifier.subscribe(EventType.VIEW_CHANGED, callback_b)
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert results == ["A", "B"]

    def test_other_event_types_not_delivered(self) -> None:
        notifier = StateNotifier()
        received: list[Event] = []
        notifier.subscribe(EventType.NAVIGATION, received.append)

        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert received == []

    def test_duplicate_subscription_ignored(self) -> None:
        notifier = StateNotifier()
        received: list[Event] = []

        notifier.subscribe(EventType.VIEW_CHANGED, received.append)
        notifier.subscribe(EventType.VIEW_CHANGED, received.append)
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert notifier.subscriber_count(EventType.VIEW_CHANGED) == 1
        assert len(received) == 1

    def test_clear_one_type(self) -> None:
        notifier = StateNotifier()
        notifier.subscribe(EventType.VIEW_CHANGED, print)
        notifier.subscribe(EventType.NAVIGATION, print)

        notifier.clear(EventType.VIEW_CHANGED)

        assert notifier.subscriber_count(EventType.VIEW_CHANGED) == 0
        assert notifier.subscriber_count(EventType.NAVIGATION) == 1

    def test_clear_all(self) -> None:
        notifier = StateNotifier()
        notifier.subscribe(EventType.VIEW_CHANGED, print)
        notifier.subscribe(EventType.NAVIGATION, print)

        notifier.clear()

        assert notifier.subscriber_count(EventType.VIEW_CHANGED) == 0
        assert notifier.subscriber_count(EventType.NAVIGATION) == 0


class TestCallbackErrors:
    def test_failing_callback_does_not_stop_others(self) -> None:
        messages: list[str] = []
        notifier = StateNotifier(logger=messages.append)
        results: list[str] = []

        def broken(event: Event) -> None:
            raise RuntimeError("boom")

        notifier.subscribe(EventType.VIEW_CHANGED, broken)
        notifier.subscribe(EventType.VIEW_CHANGED, lambda event: results.append("ok"))
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert results == ["ok"]
        assert len(messages) == 1
        assert "view_changed" in messages[0]
        assert "broken" in messages[0]
        assert "RuntimeError" in messages[0]
        assert "Traceback" in messages[0]

    def test_no_logger_prints_to_stderr(self, capsys) -> None:
        notifier = StateNotifier()

        def broken(event: Event) -> None:
            raise ValueError("bad")

        notifier.subscribe(EventType.VIEW_CHANGED, broken)
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert "ValueError" in capsys.readouterr().err

    def test_failing_logger_falls_back_to_stderr(self, capsys) -> None:
        def bad_logger(message: str) -> None:
            raise OSError("log target gone")

        notifier = StateNotifier(logger=bad_logger)
        notifier.subscribe(EventType.VIEW_CHANGED, lambda event: 1 / 0)
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert "ZeroDivisionError" in capsys.readouterr().err


class TestSnapshotSemantics:
    def test_unsubscribe_during_notify_still_delivers_current_event(self) -> None:
        notifier = StateNotifier()
        results: list[str] = []

        def first(event: Event) -> None:
            results.append("first")
            notifier.unsubscribe(EventType.VIEW_CHANGED, second)

        def second(event: Event) -> None:
            results.append("second")

        notifier.subscribe(EventType.VIEW_CHANGED, first)
        notifier.subscribe(EventType.VIEW_CHANGED, second)

        notifier.notify(Event.create(EventType.VIEW_CHANGED))
        notifier.notify(Event.create(EventType.VIEW_CHANGED))

        assert results == ["first", "second", "first"]


class TestThreadSafety:
    def test_concurrent_subscribe_and_notify(self) -> None:
        notifier = StateNotifier()
        counter = {"n": 0}
        lock = threading.Lock()

        def make_callback():
            def callback(event: Event) -> None:
                with lock:
                    counter["n"] += 1

            return callback

        callbacks = [make_callback() for _ in range(20)]

        def subscribe_all() -> None:
            for callback in callbacks:
                notifier.subscribe(EventType.VIEW_CHANGED, callback)

        def notify_many() -> None:
            for _ in range(50):
                notifier.notify(Event.create(EventType.VIEW_CHANGED))

        threads = [threading.Thread(target=subscribe_all), threading.Thread(target=notify_many)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert notifier.subscriber_count(EventType.VIEW_CHANGED) == 20
        assert counter["n"] <= 20 * 50


class TestEvent:
    def test_payload_is_read_only(self) -> None:
        event = Event.create(EventType.VIEW_CHANGED, {"cursor": 1})
        assert isinstance(event.payload, MappingProxyType)
        with pytest.raises(TypeError):
            event.payload["cursor"] = 2  # type: ignore[index]

    def test_payload_is_copied(self) -> None:
        payload = {"cursor": 1}
        event = Event.create(EventType.VIEW_CHANGED, payload)
        payload["cursor"] = 2
        assert event.payload["cursor"] == 1

    def test_no_payload(self) -> None:
        assert Event.create(EventType.NAVIGATION).payload is None

    def test_frozen(self) -> None:
        event = Event.create(EventType.VIEW_CHANGED)
        with pytest.raises(FrozenInstanceError):
            event.event_type = EventType.NAVIGATION  # type: ignore[misc]


class TestEventType:
    def test_editor_events_exclude_view_changed(self) -> None:
        assert EventType.VIEW_CHANGED not in EDITOR_EVENTS
        assert len(EDITOR_EVENTS) == 4

    def test_values_are_unique(self) -> None:
        values = [event_type.value for event_type in EventType]
        assert len(values) == len(set(values))
