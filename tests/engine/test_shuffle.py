"""Tests for shuffle algorithms."""

import pytest
from collections import Counter
from random import Random

from blackjack_engine.cards import Deck
from blackjack_engine.errors import InvalidConfiguration
from blackjack_engine.shuffle import (
    SHUFFLERS,
    ShuffleMethod,
    fisher_yates,
    overhand_shuffle,
    riffle_shuffle,
    shuffle_cards,
    strip_cut,
)


@pytest.fixture
def cards():
    return list(Deck.fresh())


class TestShuffleMethod:
    def test_parse_tags(self):
        assert ShuffleMethod.parse("riffle") == ShuffleMethod.RIFFLE
        assert ShuffleMethod.parse("Fisher-Yates") == ShuffleMethod.FISHER_YATES
        assert ShuffleMethod.parse(ShuffleMethod.OVERHAND) == ShuffleMethod.OVERHAND

    def test_parse_unknown_tag(self):
        with pytest.raises(InvalidConfiguration):
            ShuffleMethod.parse("mongean")

    def test_every_method_has_a_shuffler(self):
        assert set(SHUFFLERS) == set(ShuffleMethod)


class TestShuffleProperties:
    """Properties every shuffle method shares."""

    @pytest.mark.parametrize("method", list(ShuffleMethod))
    def test_is_permutation(self, cards, method):
        """Test that shuffling neither adds nor loses cards."""
        shuffled = shuffle_cards(cards, method, seed=7)
        assert len(shuffled) == len(cards)
        assert Counter(c.id for c in shuffled) == Counter(c.id for c in cards)

    @pytest.mark.parametrize("method", list(ShuffleMethod))
    def test_input_untouched(self, cards, method):
        original = list(cards)
        shuffle_cards(cards, method, seed=7)
        assert cards == original
        assert [c.id for c in cards] == [c.id for c in original]

    @pytest.mark.parametrize("method", list(ShuffleMethod))
    def test_same_seed_same_order(self, cards, method):
        first = shuffle_cards(cards, method, seed=1234)
        second = shuffle_cards(cards, method, seed=1234)
        assert [c.id for c in first] == [c.id for c in second]

    @pytest.mark.parametrize(
        "method", [ShuffleMethod.FISHER_YATES, ShuffleMethod.RIFFLE, ShuffleMethod.OVERHAND]
    )
    def test_changes_order(self, cards, method):
        shuffled = shuffle_cards(cards, method, seed=99)
        assert [c.id for c in shuffled] != [c.id for c in cards]

    def test_explicit_rng_takes_precedence(self, cards):
        by_rng = shuffle_cards(cards, "fisher_yates", seed=1, rng=Random(5))
        by_seed = shuffle_cards(cards, "fisher_yates", seed=5)
        assert [c.id for c in by_rng] == [c.id for c in by_seed]

    @pytest.mark.parametrize("method", list(ShuffleMethod))
    def test_tiny_inputs(self, method):
        assert shuffle_cards([], method, seed=1) == []
        assert shuffle_cards(["x"], method, seed=1) == ["x"]


class TestFisherYates:
    def test_approximately_uniform(self):
        """Chi-square on the final position of one card over many shuffles."""
        rng = Random(42)
        trials = 5000
        counts = Counter(fisher_yates(range(5), rng=rng).index(0) for _ in range(trials))

        expected = trials / 5
        chi_square = sum((counts[i] - expected) ** 2 / expected for i in range(5))
        # 4 degrees of freedom, p = 0.001
        assert chi_square < 18.47


class TestPhysicalShuffles:
    def test_riffle_passes_are_cumulative(self, cards):
        one = riffle_shuffle(cards, passes=1, seed=3)
        three = riffle_shuffle(cards, passes=3, seed=3)
        assert [c.id for c in one] != [c.id for c in three]

    def test_overhand_reverses_packets(self):
        """A single overhand pass moves the top packet to the bottom."""
        shuffled = overhand_shuffle(list(range(20)), passes=1, seed=11)
        start = shuffled.index(0)
        assert shuffled[start:] == list(range(20 - start))
        assert sorted(shuffled) == list(range(20))

    def test_strip_cut_is_a_rotation(self):
        """Cuts keep the cyclic order of the pack."""
        pack = list(range(30))
        cut = strip_cut(pack, cuts=1, seed=2)
        start = cut.index(0)
        assert cut[start:] + cut[:start] == pack
        assert 9 <= cut.index(0) <= 21
