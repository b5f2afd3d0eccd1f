"""Blackjack round engine - presentation-agnostic."""

from blackjack_engine.cards import Card, Deck, FaceState, Rank, Suit
from blackjack_engine.errors import (
    BlackjackError,
    IllegalAction,
    InsufficientBalance,
    InvalidConfiguration,
    ShoeEmpty,
)
from blackjack_engine.hand import Hand, HandStatus
from blackjack_engine.rules import GameRules
from blackjack_engine.shoe import Shoe, ShoeManager
from blackjack_engine.shuffle import ShuffleMethod

__all__ = [
    "Card",
    "Deck",
    "FaceState",
    "Rank",
    "Suit",
    "Hand",
    "HandStatus",
    "GameRules",
    "Shoe",
    "ShoeManager",
    "ShuffleMethod",
    "BlackjackError",
    "IllegalAction",
    "InsufficientBalance",
    "InvalidConfiguration",
    "ShoeEmpty",
]
