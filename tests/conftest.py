"""Pytest fixtures for round engine tests."""

import pytest
from decimal import Decimal
from random import Random

from blackjack_engine.cards import Card, Rank, Suit, cards_from_string
from blackjack_engine.game import RoundEngine
from blackjack_engine.hand import Hand
from blackjack_engine.rules import GameRules
from blackjack_engine.shoe import Shoe, ShoeManager


def stacked_shoe(cards: str, cut_card_position: int = 0) -> Shoe:
    """A shoe dealing exactly ``cards`` in order, e.g. 'AS 10H KD 9C'."""
    parsed = tuple(cards_from_string(cards))
    return Shoe(cards=parsed, total_cards=len(parsed), cut_card_position=cut_card_position)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default table rules."""
    return GameRules()


@pytest.fixture
def shoe_manager():
    """A 6-deck shoe manager."""
    return ShoeManager(num_decks=6)


@pytest.fixture
def shoe(shoe_manager):
    """A shuffled 6-deck shoe."""
    return shoe_manager.new_shoe(seed=42)


@pytest.fixture
def make_engine():
    """
    Factory for engines dealing from a stacked shoe.

    Initial deal order is: each hand, dealer up card, each hand, dealer hole
    card; later draws follow in order.
    """

    def _make(cards: str, rules: GameRules | None = None, bankroll: int = 1000, cut_card_position: int = 0, **kwargs):
        return RoundEngine(
            rules=rules,
            bankroll=Decimal(bankroll),
            player_id="player-1",
            rng=Random(42),
            shoe=stacked_shoe(cards, cut_card_position),
            **kwargs,
        )

    return _make


@pytest.fixture
def engine(rng):
    """A new engine with a shuffled shoe."""
    return RoundEngine(bankroll=Decimal("1000"), player_id="player-1", rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)], bet=100)


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)], bet=100)


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=[Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)], bet=100)


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand(cards=[Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)], bet=100)


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(
        cards=[
            Card(Rank.TEN, Suit.SPADES),
            Card(Rank.SIX, Suit.HEARTS),
            Card(Rank.KING, Suit.CLUBS),
        ],
        bet=100,
    )
