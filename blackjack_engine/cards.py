"""Card, Deck and face-state types - immutable card representations."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator


class Suit(Enum):
    """Card suits, in deck order."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def color(self) -> str:
        """Return 'red' or 'black'."""
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return "red"
        return "black"

    @property
    def letter(self) -> str:
        """Single-letter code used in card ids."""
        return self.name[0]


class Rank(Enum):
    """Card ranks, in deck order. JOKER only appears in shoes built with jokers."""

    JOKER = 0
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.JOKER: "*",
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10, joker = 0)."""
        if self == Rank.JOKER:
            return 0
        if self == Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10

    @property
    def is_face(self) -> bool:
        """Check if this rank is a Jack, Queen or King."""
        return self in (Rank.JACK, Rank.QUEEN, Rank.KING)


# Playing ranks, excluding the joker
STANDARD_RANKS: tuple[Rank, ...] = tuple(r for r in Rank if r != Rank.JOKER)

CARDS_PER_DECK = 52


class FaceState(Enum):
    """Orientation of a card on the table."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Identity for equality and hashing is the (rank, suit) pair; ``id`` tracks
    a physical card through a shoe and ``face`` its orientation.
    """

    rank: Rank
    suit: Suit
    face: FaceState = field(default=FaceState.UP, compare=False)
    id: str = field(default="", compare=False)

    def __str__(self) -> str:
        if self.rank == Rank.JOKER:
            return f"Joker({self.suit.color})"
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name}, {self.face.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @property
    def is_joker(self) -> bool:
        return self.rank == Rank.JOKER

    @property
    def is_face_up(self) -> bool:
        return self.face == FaceState.UP

    @property
    def color(self) -> str:
        return self.suit.color

    def flip(self) -> "Card":
        """Return a copy of this card turned over."""
        return replace(self, face=FaceState.DOWN if self.is_face_up else FaceState.UP)

    def face_up(self) -> "Card":
        """Return a face-up copy of this card."""
        return replace(self, face=FaceState.UP)

    def face_down(self) -> "Card":
        """Return a face-down copy of this card."""
        return replace(self, face=FaceState.DOWN)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a face-up card from a string like '2♣', 'AS', 'Kh', '10D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "A": Rank.ACE,
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        suit_map = {
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def cards_from_string(s: str) -> list[Card]:
    """Parse a space separated list of cards, e.g. 'AS KH'."""
    return [Card.from_string(part) for part in s.split()]


@dataclass(frozen=True)
class Deck:
    """A standard 52-card deck, created fresh for every shoe."""

    cards: tuple[Card, ...]
    index: int = 0

    @classmethod
    def fresh(cls, index: int = 0) -> "Deck":
        """Create an unshuffled, face-down deck in suit then rank order."""
        cards = tuple(
            Card(rank, suit, FaceState.DOWN, f"{index}-{rank}{suit.letter}")
            for suit in Suit
            for rank in STANDARD_RANKS
        )
        return cls(cards=cards, index=index)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)


def jokers(index: int = 0) -> tuple[Card, Card]:
    """Return a red and a black joker."""
    return (
        Card(Rank.JOKER, Suit.HEARTS, FaceState.DOWN, f"joker-{index}-R"),
        Card(Rank.JOKER, Suit.SPADES, FaceState.DOWN, f"joker-{index}-B"),
    )
