"""
Event bus system for the car runner.

The simulation core records what happened during a frame as events;
hosts subscribe to them for sound, logging or screen effects.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # State events
    STATE_CHANGED = auto()
    RUN_STARTED = auto()
    RUN_ENDED = auto()
    NEW_HIGH_SCORE = auto()

    # Runner events
    OBSTACLE_HIT = auto()
    HIT_ABSORBED = auto()
    PICKUP_COLLECTED = auto()
    STATUS_STARTED = auto()
    STATUS_EXPIRED = auto()
    PLAYER_LANDED = auto()
    SPEED_UP = auto()

    # Boss events
    BOSS_STARTED = auto()
    BOSS_DAMAGED = auto()
    PLAYER_DAMAGED = auto()
    LASER_FIRED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        frame: Simulation frame the event belongs to
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "engine"
    frame: int = 0


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Handlers run synchronously in subscription order. A failing handler
    is logged and skipped so the remaining handlers still run.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

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

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to all events.

        Returns:
            Unsubscribe function
        """
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event immediately."""
        self._add_to_history(event)

        handlers = self._handlers.get(event.type, []) + self._global_handlers
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler: {e}")

    def emit_all(self, events: list[Event]) -> None:
        """Emit a batch of events in order."""
        for event in events:
            self.emit(event)

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]
