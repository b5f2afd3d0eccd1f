"""Round events handed to presentation and persistence collaborators."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of round events."""

    # Round lifecycle
    PHASE_CHANGED = auto()
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    ROUND_VOIDED = auto()

    # Wagers
    BET_PLACED = auto()
    SIDE_BET_PLACED = auto()
    INSURANCE_TAKEN = auto()

    # Shoe
    CARD_DEALT = auto()
    SHOE_SHUFFLED = auto()

    # Player hands
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SPLIT = auto()
    PLAYER_SURRENDER = auto()
    PLAYER_BLACKJACK = auto()
    PLAYER_BUSTS = auto()

    # Dealer hand
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    # Settlement
    HAND_SETTLED = auto()
    INSURANCE_SETTLED = auto()
    SIDE_BET_SETTLED = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable round event.

    Events are the only channel from the engine to the presentation layer;
    handlers receive them after the action that produced them has committed.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name} {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter owned by a single round engine.

    Events emitted inside a transaction are held back until ``commit`` and
    discarded by ``rollback``, so subscribers never see a half-applied action.
    """

    def __init__(self) -> None:
        # None is the key for handlers that want every event
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._published: list[GameEvent] = []
        self._pending: list[GameEvent] | None = None

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """
        Register a handler.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Publish an event, or queue it while a transaction is open."""
        if self._pending is not None:
            self._pending.append(event)
        else:
            self._publish(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data and emit it."""
        event = GameEvent(event_type, data)
        self.emit(event)
        return event

    def _publish(self, event: GameEvent) -> None:
        self._published.append(event)
        for handler in [*self._handlers.get(event.event_type, []), *self._handlers.get(None, [])]:
            handler(event)

    def begin(self) -> None:
        """Start holding back events."""
        self._pending = []

    def commit(self) -> None:
        """Publish held-back events in order."""
        pending, self._pending = self._pending or [], None
        for event in pending:
            self._publish(event)

    def rollback(self) -> None:
        """Drop held-back events."""
        self._pending = None

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    @property
    def history(self) -> list[GameEvent]:
        """Events published so far, oldest first."""
        return list(self._published)

    def clear_history(self) -> None:
        self._published.clear()
