"""
Shuffle algorithms.

Every function is pure: it returns a new list and never reorders its input.
Randomness comes from an explicit ``random.Random`` handle or a seed. With
neither, a ``SystemRandom`` is used and the result is not reproducible.
"""

from enum import Enum
from random import Random, SystemRandom
from typing import Callable, Sequence, TypeVar

from blackjack_engine.errors import InvalidConfiguration

T = TypeVar("T")

DEFAULT_PASSES = 3


class ShuffleMethod(Enum):
    """Supported shuffle algorithms."""

    FISHER_YATES = "fisher_yates"
    RIFFLE = "riffle"
    OVERHAND = "overhand"
    STRIP_CUT = "strip_cut"

    @classmethod
    def parse(cls, value: "str | ShuffleMethod") -> "ShuffleMethod":
        """Resolve a method from its tag, e.g. 'riffle' or 'fisher-yates'."""
        if isinstance(value, cls):
            return value
        tag = str(value).strip().lower().replace("-", "_")
        try:
            return cls(tag)
        except ValueError:
            raise InvalidConfiguration(f"Unknown shuffle method: {value!r}") from None


def make_rng(seed: int | None = None, rng: Random | None = None) -> Random:
    """Return the given RNG, a seeded one, or a non-deterministic one."""
    if rng is not None:
        return rng
    if seed is None:
        return SystemRandom()
    return Random(seed)


def fisher_yates(
    cards: Sequence[T],
    rng: Random | None = None,
    seed: int | None = None,
) -> list[T]:
    """Uniform random permutation (Durstenfeld's in-place variant on a copy)."""
    rng = make_rng(seed, rng)
    result = list(cards)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def _riffle_once(cards: list[T], rng: Random) -> list[T]:
    n = len(cards)
    if n < 2:
        return list(cards)

    jitter = max(1, n // 10)
    cut = min(n - 1, max(1, n // 2 + rng.randint(-jitter, jitter)))
    halves = [cards[:cut], cards[cut:]]
    positions = [0, 0]

    result: list[T] = []
    side = rng.randint(0, 1)
    while len(result) < n:
        pile = halves[side]
        start = positions[side]
        if start < len(pile):
            run = rng.randint(1, 3)
            result.extend(pile[start:start + run])
            positions[side] = min(len(pile), start + run)
        side = 1 - side
    return result


def riffle_shuffle(
    cards: Sequence[T],
    passes: int = DEFAULT_PASSES,
    rng: Random | None = None,
    seed: int | None = None,
) -> list[T]:
    """
    Simulate a physical riffle shuffle.

    The pack is split near its midpoint with some jitter, then the halves
    are interleaved in runs of one to three cards. Not uniform for a small
    number of passes.
    """
    rng = make_rng(seed, rng)
    result = list(cards)
    for _ in range(passes):
        result = _riffle_once(result, rng)
    return result


def overhand_shuffle(
    cards: Sequence[T],
    passes: int = DEFAULT_PASSES,
    rng: Random | None = None,
    seed: int | None = None,
) -> list[T]:
    """Move random packets from the top of the pack onto a new pile."""
    rng = make_rng(seed, rng)
    result = list(cards)
    for _ in range(passes):
        source = result
        pile: list[T] = []
        while source:
            packet_size = max(1, int(rng.random() * len(source) * 0.4))
            packet, source = source[:packet_size], source[packet_size:]
            pile = packet + pile
        result = pile
    return result


def strip_cut(
    cards: Sequence[T],
    cuts: int | None = None,
    rng: Random | None = None,
    seed: int | None = None,
) -> list[T]:
    """Repeatedly move a top block of 30-70% of the pack to the bottom."""
    rng = make_rng(seed, rng)
    if cuts is None:
        cuts = rng.randint(3, 5)
    result = list(cards)
    n = len(result)
    if n < 2:
        return result
    for _ in range(cuts):
        position = int(n * 0.3 + rng.random() * n * 0.4)
        position = max(1, min(position, n - 1))
        result = result[position:] + result[:position]
    return result


Shuffler = Callable[[Sequence[T], int | None, Random], list[T]]


def _fisher_yates_entry(cards, passes, rng):
    return fisher_yates(cards, rng=rng)


def _riffle_entry(cards, passes, rng):
    return riffle_shuffle(cards, DEFAULT_PASSES if passes is None else passes, rng=rng)


def _overhand_entry(cards, passes, rng):
    return overhand_shuffle(cards, DEFAULT_PASSES if passes is None else passes, rng=rng)


def _strip_cut_entry(cards, passes, rng):
    return strip_cut(cards, passes, rng=rng)


SHUFFLERS: dict[ShuffleMethod, Shuffler] = {
    ShuffleMethod.FISHER_YATES: _fisher_yates_entry,
    ShuffleMethod.RIFFLE: _riffle_entry,
    ShuffleMethod.OVERHAND: _overhand_entry,
    ShuffleMethod.STRIP_CUT: _strip_cut_entry,
}


def shuffle_cards(
    cards: Sequence[T],
    method: ShuffleMethod | str = ShuffleMethod.FISHER_YATES,
    seed: int | None = None,
    rng: Random | None = None,
    passes: int | None = None,
) -> list[T]:
    """
    Shuffle with the chosen method.

    Args:
        cards: Cards to reorder (left untouched)
        method: Algorithm, or its tag
        seed: Seed for a reproducible shuffle
        rng: Explicit random source, takes precedence over ``seed``
        passes: Passes for riffle/overhand, cuts for strip cut
    """
    shuffler = SHUFFLERS[ShuffleMethod.parse(method)]
    return shuffler(cards, passes, make_rng(seed, rng))
