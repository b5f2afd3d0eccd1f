"""Round engine and state management."""

from blackjack_engine.game.events import EventType, GameEvent
from blackjack_engine.game.state import RoundPhase
from blackjack_engine.game.results import RoundResult, RoundSnapshot
from blackjack_engine.game.engine import Action, RoundEngine

__all__ = [
    "GameEvent",
    "EventType",
    "RoundPhase",
    "RoundResult",
    "RoundSnapshot",
    "Action",
    "RoundEngine",
]
