"""
Event bus system for SKYFLAP.

The game publishes progress notifications (state changes, score, level,
high score) here; the window, logging and tests subscribe to them.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
from collections import defaultdict
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # State events
    STATE_CHANGED = auto()
    GAME_OVER = auto()

    # Progress events
    SCORE_CHANGED = auto()
    LEVEL_UP = auto()
    HIGH_SCORE = auto()

    # System events
    RESIZED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "game"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Handlers run synchronously in the emitting control flow, which keeps
    them on the single simulation thread.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event to every matching handler."""
        self._add_to_history(event)
        handlers = list(self._handlers.get(event.type, []))
        for handler in handlers:
            handler(event)

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]
