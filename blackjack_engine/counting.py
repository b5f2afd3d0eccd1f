"""Card counting systems: running and true counts over the cards seen."""

from dataclasses import dataclass
from typing import Iterable, Mapping

from blackjack_engine.cards import STANDARD_RANKS, Card, Rank


@dataclass(frozen=True)
class CountingSystem:
    """
    Tag values for a counting system.

    A balanced system sums to 0 over a full deck; an unbalanced one starts
    each shoe from ``initial_count`` so that its pivot lands on 0. Jokers
    and face-down cards are never counted.
    """

    name: str
    tags: Mapping[Rank, float]

    @property
    def full_deck_sum(self) -> float:
        """Sum of tags over one 52-card deck (each rank appears four times)."""
        return sum(self.tags[rank] * 4 for rank in STANDARD_RANKS)

    @property
    def is_balanced(self) -> bool:
        return self.full_deck_sum == 0

    def initial_count(self, num_decks: int) -> float:
        """Running count at the top of a fresh shoe."""
        if self.is_balanced:
            return 0.0
        return -self.full_deck_sum * (num_decks - 1)

    def tag(self, card: Card) -> float:
        """Tag of one card; 0 for jokers and cards not yet turned up."""
        if card.is_joker or not card.is_face_up:
            return 0.0
        return self.tags[card.rank]


def _tags(low: Mapping[int, float], ten: float, ace: float) -> dict[Rank, float]:
    """Expand pip tags plus a ten-value and an ace tag into a rank table."""
    table = {rank: float(low.get(rank.value, 0)) for rank in STANDARD_RANKS if 2 <= rank.value <= 9}
    for rank in (Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING):
        table[rank] = ten
    table[Rank.ACE] = ace
    return table


HI_LO = CountingSystem("Hi-Lo", _tags({2: 1, 3: 1, 4: 1, 5: 1, 6: 1}, ten=-1, ace=-1))

# Unbalanced: the 7 counts +1, so a full deck sums to +4
KNOCK_OUT = CountingSystem("Knock-Out", _tags({2: 1, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1}, ten=-1, ace=-1))

HI_OPT_I = CountingSystem("Hi-Opt I", _tags({3: 1, 4: 1, 5: 1, 6: 1}, ten=-1, ace=0))

HI_OPT_II = CountingSystem("Hi-Opt II", _tags({2: 1, 3: 1, 4: 2, 5: 2, 6: 1, 7: 1}, ten=-2, ace=0))

OMEGA_II = CountingSystem("Omega II", _tags({2: 1, 3: 1, 4: 2, 5: 2, 6: 2, 7: 1, 9: -1}, ten=-2, ace=0))

ZEN = CountingSystem("Zen Count", _tags({2: 1, 3: 1, 4: 2, 5: 2, 6: 2, 7: 1}, ten=-2, ace=-1))

WONG_HALVES = CountingSystem(
    "Wong Halves",
    _tags({2: 0.5, 3: 1, 4: 1, 5: 1.5, 6: 1, 7: 0.5, 9: -0.5}, ten=-1, ace=-1),
)

COUNTING_SYSTEMS: dict[str, CountingSystem] = {
    "hi_lo": HI_LO,
    "ko": KNOCK_OUT,
    "hi_opt_1": HI_OPT_I,
    "hi_opt_2": HI_OPT_II,
    "omega_2": OMEGA_II,
    "zen": ZEN,
    "halves": WONG_HALVES,
}


def running_count(cards: Iterable[Card], system: CountingSystem = HI_LO) -> float:
    """Sum the tags of the face-up cards."""
    return sum((system.tag(card) for card in cards), 0.0)


def true_count(count: float, decks_left: float) -> float:
    """
    Running count per remaining deck.

    Args:
        count: Running count
        decks_left: Decks still in the shoe

    Returns:
        The true count, or 0.0 once the shoe is empty
    """
    if decks_left <= 0:
        return 0.0
    return count / decks_left
