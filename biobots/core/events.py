"""Game event sink.

The simulation reports notable moments (creations, deaths, state changes)
to an injected sink. Sinks are fire-and-forget: processors call them through
:func:`emit`, which never lets a sink failure abort a tick.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

class EventType(Enum):
    AGENT_CREATED = "AGENT_CREATED"
    LAND_CREATED = "LAND_CREATED"
    LAND_DECAYED = "LAND_DECAYED"
    LAND_WATERED = "LAND_WATERED"
    AGENT_DIED = "AGENT_DIED"
    STATE_CHANGED = "STATE_CHANGED"
    USER_ACTION = "USER_ACTION"
    LEVEL_UP = "LEVEL_UP"

class EventCategory(Enum):
    LIFECYCLE = "LIFECYCLE"
    ECONOMY = "ECONOMY"
    BEHAVIOR = "BEHAVIOR"
    USER = "USER"

class EventSeverity(Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

class EventSink(Protocol):
    def log(
        self,
        event_type: EventType,
        category: EventCategory,
        severity: EventSeverity,
        payload: Dict[str, Any],
        timestamp: Optional[float] = None,
    ) -> None:
        ...

class NullEventSink:
    """Discards every event."""

    def log(
        self,
        event_type: EventType,
        category: EventCategory,
        severity: EventSeverity,
        payload: Dict[str, Any],
        timestamp: Optional[float] = None,
    ) -> None:
        pass

_SEVERITY_LEVELS = {
    EventSeverity.INFO: logging.INFO,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.CRITICAL: logging.CRITICAL,
}

class LoggingEventSink:
    """Forwards events to a standard library logger."""

    def __init__(self, logger_name: str = "biobots.events") -> None:
        self._logger = logging.getLogger(logger_name)

    def log(
        self,
        event_type: EventType,
        category: EventCategory,
        severity: EventSeverity,
        payload: Dict[str, Any],
        timestamp: Optional[float] = None,
    ) -> None:
        self._logger.log(
            _SEVERITY_LEVELS[severity],
            "%s [%s] %s",
            event_type.value,
            category.value,
            payload,
        )

@dataclass
class GameEvent:
    event_type: EventType
    category: EventCategory
    severity: EventSeverity
    payload: Dict[str, Any]
    timestamp: float = field(default_factory=lambda: time.time() * 1000)

class RecordingEventSink:
    """Keeps events in memory and notifies subscribers as they arrive.

    Args:
        max_events: Oldest events are dropped once this many are held.
    """

    def __init__(self, max_events: Optional[int] = None) -> None:
        self.events: List[GameEvent] = []
        self.max_events = max_events
        self._listeners: List[Callable[[GameEvent], None]] = []

    def log(
        self,
        event_type: EventType,
        category: EventCategory,
        severity: EventSeverity,
        payload: Dict[str, Any],
        timestamp: Optional[float] = None,
    ) -> None:
        event = GameEvent(event_type, category, severity, dict(payload))
        if timestamp is not None:
            event.timestamp = timestamp
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]
        for listener in list(self._listeners):
            listener(event)

    def subscribe(self, listener: Callable[[GameEvent], None]) -> Callable[[], None]:
        """Registers a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.events if e.event_type is event_type]

    def clear(self) -> None:
        self.events.clear()

NULL_SINK = NullEventSink()

def emit(
    sink: Optional[EventSink],
    event_type: EventType,
    category: EventCategory,
    severity: EventSeverity,
    payload: Dict[str, Any],
    timestamp: Optional[float] = None,
) -> None:
    """Sends an event to ``sink`` on a best-effort basis.

    ``timestamp`` is the simulation time in ms the event belongs to; sinks
    fall back to the wall clock when it is omitted.
    """
    if sink is None:
        return
    try:
        sink.log(event_type, category, severity, payload, timestamp=timestamp)
    except Exception:
        logger.exception("Event sink failed while logging %s", event_type.value)
