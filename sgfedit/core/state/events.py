# sgfedit/core/state/events.py
"""Event types and the Event record for change notification.

Editor events (child added, game info changed, navigation, properties changed)
are delivered to handlers registered with ``GoEditor.on`` as positional
arguments. VIEW_CHANGED is the controller-level notification and travels as an
:class:`Event` through :class:`~sgfedit.core.state.notifier.StateNotifier`.

Design Notes:
- MappingProxyType provides shallow immutability for payload
- Nested objects in payload are still mutable (shallow copy only)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class EventType(Enum):
    """Event kinds. The string value is used in log messages."""

    CHILD_ADDED = "child_added"  # (index, child_cursor)
    GAME_INFO_CHANGED = "game_info_changed"  # (old_info, new_info)
    NAVIGATION = "navigation"  # (step)
    PROPERTIES_CHANGED = "properties_changed"  # (old_properties, new_properties)
    VIEW_CHANGED = "view_changed"  # controller cursor changed


EDITOR_EVENTS = (
    EventType.CHILD_ADDED,
    EventType.GAME_INFO_CHANGED,
    EventType.NAVIGATION,
    EventType.PROPERTIES_CHANGED,
)


def _freeze_payload(payload: dict[str, Any] | None) -> Mapping[str, Any] | None:
    """Convert payload to an immutable MappingProxyType (shallow copy)."""
    if payload is None:
        return None
    return MappingProxyType(dict(payload))  # Copy then proxy


@dataclass(frozen=True)
class Event:
    """Immutable event record.

    Attributes:
        event_type: The type of event (from EventType enum)
        _payload: Internal storage for the frozen payload

    Example:
        >>> event = Event.create(EventType.VIEW_CHANGED, {"cursor": cursor})
        >>> event.payload["cursor"] is cursor
        True
    """

    event_type: EventType
    _payload: Mapping[str, Any] | None = field(default=None, repr=False)

    @classmethod
    def create(cls, event_type: EventType, payload: dict[str, Any] | None = None) -> "Event":
        """Creates an Event whose payload is shallow-copied and frozen."""
        return cls(event_type=event_type, _payload=_freeze_payload(payload))

    @property
    def payload(self) -> Mapping[str, Any] | None:
        """Read-only access to the payload."""
        return self._payload
