"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterator, NamedTuple, Sequence
from uuid import uuid4

from blackjack_engine.cards import Card


class HandStatus(Enum):
    """Lifecycle of a hand within a round."""

    ACTIVE = "active"
    STOOD = "stood"
    BUSTED = "busted"
    BLACKJACK = "blackjack"
    DOUBLED = "doubled"
    SURRENDERED = "surrendered"
    SPLIT = "split"  # replaced by its two children

    @property
    def is_terminal(self) -> bool:
        return self != HandStatus.ACTIVE


class HandValue(NamedTuple):
    """Best total of a hand and whether an Ace is still counted as 11."""

    total: int
    soft: bool


def evaluate(cards: Sequence[Card]) -> HandValue:
    """
    Calculate the best hand value.

    Every Ace starts at 11; Aces are demoted to 1 one at a time while the
    total is over 21. Returns the lowest bust total if every Ace is demoted.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return HandValue(total=total, soft=aces > 0)


def is_blackjack(cards: Sequence[Card], from_split: bool = False) -> bool:
    """A natural: exactly two cards totalling 21, not produced by a split."""
    return len(cards) == 2 and evaluate(cards).total == 21 and not from_split


def is_bust(cards: Sequence[Card]) -> bool:
    return evaluate(cards).total > 21


@dataclass
class Hand:
    """A blackjack hand with its wager and status."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    status: HandStatus = HandStatus.ACTIVE
    seat: int = 0
    splits_so_far: int = 0
    is_split_hand: bool = False
    is_split_aces: bool = False
    is_doubled: bool = False
    id: str = field(default_factory=lambda: uuid4().hex[:12])

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def copy(self) -> "Hand":
        """Return an independent copy (cards list included)."""
        return Hand(
            cards=list(self.cards),
            bet=self.bet,
            status=self.status,
            seat=self.seat,
            splits_so_far=self.splits_so_far,
            is_split_hand=self.is_split_hand,
            is_split_aces=self.is_split_aces,
            is_doubled=self.is_doubled,
            id=self.id,
        )

    @property
    def stake(self) -> Decimal:
        """Total amount wagered on this hand, doubled stakes included."""
        return Decimal(self.bet * 2 if self.is_doubled else self.bet)

    @property
    def value(self) -> int:
        return evaluate(self.cards).total

    @property
    def is_soft(self) -> bool:
        """Check if the hand has an ace counted as 11."""
        return evaluate(self.cards).soft

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return is_blackjack(self.cards, from_split=self.is_split_hand)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return is_bust(self.cards)

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def num_cards(self) -> int:
        return len(self.cards)

    @property
    def visible_cards(self) -> list[Card]:
        """Cards currently face up."""
        return [card for card in self.cards if card.is_face_up]

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value}, status={self.status.name})"
