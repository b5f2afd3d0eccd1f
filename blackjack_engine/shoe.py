"""Multi-deck shoe: build, shuffle, cut card placement and drawing."""

import logging
import math
from dataclasses import dataclass, field, replace
from random import Random
from typing import Iterator, Sequence
from uuid import uuid4

from blackjack_engine.cards import CARDS_PER_DECK, Card, Deck, jokers
from blackjack_engine.errors import InvalidConfiguration, ShoeEmpty
from blackjack_engine.shuffle import ShuffleMethod, shuffle_cards

logger = logging.getLogger(__name__)

DEFAULT_PENETRATION = 0.75


@dataclass(frozen=True)
class Shoe:
    """
    Immutable shoe value.

    Every operation returns a new ``Shoe``; references to earlier shoes stay
    valid for audit. ``cards[0]`` is the next card to be dealt.
    """

    cards: tuple[Card, ...]
    total_cards: int
    penetration: float = DEFAULT_PENETRATION
    cut_card_position: int = 0
    shuffled: bool = False
    seed: int | None = None
    id: str = field(default_factory=lambda: uuid4().hex, compare=False)

    @property
    def remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self.cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return self.total_cards - len(self.cards)

    @property
    def decks_remaining(self) -> float:
        """Return the estimated number of decks remaining."""
        return len(self.cards) / CARDS_PER_DECK

    @property
    def needs_reshuffle(self) -> bool:
        """Check if the cut card has been reached."""
        return needs_reshuffle(self)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)


def _check_penetration(penetration: float) -> None:
    if not 0.0 < penetration <= 1.0:
        raise InvalidConfiguration("Penetration must be between 0 and 1")


def build_shoe(
    num_decks: int,
    custom_cards: Sequence[Card] = (),
    include_jokers: bool = False,
    penetration: float = DEFAULT_PENETRATION,
) -> Shoe:
    """
    Build an unshuffled shoe.

    Args:
        num_decks: Number of fresh decks, concatenated in deck order
        custom_cards: Extra cards appended after the decks
        include_jokers: Append a red and a black joker
        penetration: Fraction of the shoe dealt before the cut card

    Returns:
        A shoe of ``52 * num_decks + len(custom_cards)`` (+2) cards
    """
    if num_decks < 1:
        raise InvalidConfiguration("Shoe must have at least 1 deck")
    _check_penetration(penetration)

    cards: list[Card] = []
    for index in range(num_decks):
        cards.extend(Deck.fresh(index))
    cards.extend(custom_cards)
    if include_jokers:
        cards.extend(jokers())

    shoe = Shoe(cards=tuple(cards), total_cards=len(cards))
    logger.debug("Built %d-deck shoe %s with %d cards", num_decks, shoe.id, len(cards))
    return place_cut_card(shoe, penetration)


def shuffle_shoe(
    shoe: Shoe,
    method: ShuffleMethod | str = ShuffleMethod.FISHER_YATES,
    seed: int | None = None,
    passes: int | None = None,
) -> Shoe:
    """Return a new shoe with the remaining cards reordered."""
    cards = shuffle_cards(shoe.cards, method, seed=seed, passes=passes)
    logger.debug("Shuffled shoe %s (%s, seed=%s)", shoe.id, ShuffleMethod.parse(method).value, seed)
    return replace(shoe, cards=tuple(cards), shuffled=True, seed=seed, id=uuid4().hex)


def place_cut_card(shoe: Shoe, penetration: float) -> Shoe:
    """
    Place the cut card, counted from the bottom of the shoe.

    The shoe is used up once ``remaining <= cut_card_position``.
    """
    _check_penetration(penetration)
    position = math.floor(len(shoe.cards) * (1 - penetration))
    return replace(shoe, penetration=penetration, cut_card_position=position)


def draw(shoe: Shoe) -> tuple[Card, Shoe]:
    """Remove the next card; returns the card and the shoe without it."""
    if not shoe.cards:
        raise ShoeEmpty()
    return shoe.cards[0], replace(shoe, cards=shoe.cards[1:])


def needs_reshuffle(shoe: Shoe) -> bool:
    """Advisory: true once the cut card has been reached."""
    return shoe.remaining <= shoe.cut_card_position


@dataclass(frozen=True)
class ShoeManager:
    """
    Shoe configuration for a session.

    Builds, shuffles and cuts new shoes; the round engine asks it for a fresh
    shoe at session start and whenever cleanup finds the cut card reached.
    """

    num_decks: int = 6
    penetration: float = DEFAULT_PENETRATION
    shuffle_method: ShuffleMethod = ShuffleMethod.FISHER_YATES
    shuffle_passes: int | None = None
    custom_cards: tuple[Card, ...] = ()
    include_jokers: bool = False

    def __post_init__(self) -> None:
        if self.num_decks < 1:
            raise InvalidConfiguration("Shoe must have at least 1 deck")
        _check_penetration(self.penetration)
        if self.shuffle_passes is not None and self.shuffle_passes < 1:
            raise InvalidConfiguration("shuffle_passes must be at least 1")
        object.__setattr__(self, "shuffle_method", ShuffleMethod.parse(self.shuffle_method))

    def build(self) -> Shoe:
        return build_shoe(
            self.num_decks,
            custom_cards=self.custom_cards,
            include_jokers=self.include_jokers,
            penetration=self.penetration,
        )

    def shuffle(self, shoe: Shoe, seed: int | None = None) -> Shoe:
        return shuffle_shoe(shoe, self.shuffle_method, seed=seed, passes=self.shuffle_passes)

    def new_shoe(self, seed: int | None = None, rng: Random | None = None) -> Shoe:
        """
        Build, shuffle and cut a new shoe.

        Args:
            seed: Shuffle seed; drawn from ``rng`` when omitted and an RNG is given

        Returns:
            A shuffled shoe with the cut card placed
        """
        if seed is None and rng is not None:
            seed = rng.getrandbits(64)
        shoe = place_cut_card(self.shuffle(self.build(), seed=seed), self.penetration)
        logger.info(
            "New %d-deck shoe %s (%s, %d cards, cut card at %d)",
            self.num_decks,
            shoe.id,
            self.shuffle_method.value,
            shoe.total_cards,
            shoe.cut_card_position,
        )
        return shoe

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        extras = len(self.custom_cards) + (2 if self.include_jokers else 0)
        return self.num_decks * CARDS_PER_DECK + extras
