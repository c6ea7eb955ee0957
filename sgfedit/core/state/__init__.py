# sgfedit/core/state/__init__.py
"""Event kinds and view-change notification.

Public API:
    - EventType: CHILD_ADDED, GAME_INFO_CHANGED, NAVIGATION, PROPERTIES_CHANGED, VIEW_CHANGED
    - Event: Immutable event record with optional payload
    - StateNotifier: Pub-sub notification system
"""
from sgfedit.core.state.events import EDITOR_EVENTS, Event, EventType
from sgfedit.core.state.notifier import StateNotifier

__all__ = ["EDITOR_EVENTS", "EventType", "Event", "StateNotifier"]
