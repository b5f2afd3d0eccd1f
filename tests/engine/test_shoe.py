"""Tests for shoe building, cutting and drawing."""

import pytest
from random import Random

from blackjack_engine.cards import Card, Rank, Suit
from blackjack_engine.errors import InvalidConfiguration, ShoeEmpty
from blackjack_engine.shoe import (
    ShoeManager,
    build_shoe,
    draw,
    needs_reshuffle,
    place_cut_card,
    shuffle_shoe,
)
from blackjack_engine.shuffle import ShuffleMethod


class TestBuildShoe:
    """Tests for build_shoe."""

    def test_card_count(self):
        assert build_shoe(6).total_cards == 312
        assert build_shoe(1).remaining == 52

    def test_unshuffled_deck_order(self):
        shoe = build_shoe(2)
        assert not shoe.shuffled
        assert shoe.cards[0].id == "0-AH"
        assert shoe.cards[52].id == "1-AH"

    def test_custom_cards_and_jokers(self):
        extra = (Card(Rank.ACE, Suit.SPADES),)
        shoe = build_shoe(1, custom_cards=extra, include_jokers=True)
        assert shoe.total_cards == 55
        assert shoe.cards[52] == Card(Rank.ACE, Suit.SPADES)
        assert sum(1 for card in shoe if card.is_joker) == 2

    def test_invalid_configuration(self):
        with pytest.raises(InvalidConfiguration):
            build_shoe(0)
        with pytest.raises(InvalidConfiguration):
            build_shoe(6, penetration=0)
        with pytest.raises(InvalidConfiguration):
            build_shoe(6, penetration=1.5)


class TestCutCard:
    def test_cut_card_position(self):
        """Counted from the bottom: 312 * 0.25 cards stay behind the cut card."""
        shoe = place_cut_card(build_shoe(6), 0.75)
        assert shoe.cut_card_position == 78

    def test_full_penetration(self):
        shoe = place_cut_card(build_shoe(1), 1.0)
        assert shoe.cut_card_position == 0

    def test_needs_reshuffle_at_cut_card(self):
        """Penetration 0.75 on one deck: reshuffle due after the 39th card."""
        shoe = build_shoe(1, penetration=0.75)
        for _ in range(38):
            _, shoe = draw(shoe)
        assert not needs_reshuffle(shoe)
        _, shoe = draw(shoe)
        assert needs_reshuffle(shoe)
        assert shoe.needs_reshuffle


class TestDraw:
    """Tests for drawing from a shoe."""

    def test_draw_returns_first_card(self):
        shoe = build_shoe(1)
        card, rest = draw(shoe)
        assert card.id == "0-AH"
        assert rest.remaining == 51
        assert shoe.remaining == 52

    def test_conservation(self):
        """Test that dealt plus remaining always equals the total."""
        shoe = build_shoe(2)
        for _ in range(30):
            _, shoe = draw(shoe)
            assert shoe.cards_dealt + shoe.remaining == shoe.total_cards
        assert shoe.cards_dealt == 30

    def test_draw_from_empty_shoe(self):
        shoe = build_shoe(1)
        for _ in range(52):
            _, shoe = draw(shoe)
        with pytest.raises(ShoeEmpty):
            draw(shoe)

    def test_shoe_empty_is_an_index_error(self):
        assert issubclass(ShoeEmpty, IndexError)


class TestShuffleShoe:
    def test_shuffle_returns_new_shoe(self):
        shoe = build_shoe(1)
        shuffled = shuffle_shoe(shoe, ShuffleMethod.RIFFLE, seed=5)
        assert shuffled.shuffled
        assert shuffled.seed == 5
        assert shuffled.id != shoe.id
        assert not shoe.shuffled

    def test_shuffle_is_deterministic(self):
        shoe = build_shoe(6)
        first = shuffle_shoe(shoe, "fisher_yates", seed=77)
        second = shuffle_shoe(shoe, "fisher_yates", seed=77)
        assert [c.id for c in first] == [c.id for c in second]


class TestShoeManager:
    """Tests for ShoeManager."""

    def test_new_shoe(self):
        manager = ShoeManager(num_decks=6, penetration=0.8)
        shoe = manager.new_shoe(seed=1)
        assert shoe.shuffled
        assert shoe.total_cards == manager.total_cards == 312
        assert shoe.cut_card_position == 62

    def test_seed_from_rng_is_reproducible(self):
        manager = ShoeManager(num_decks=2)
        first = manager.new_shoe(rng=Random(3))
        second = manager.new_shoe(rng=Random(3))
        assert first.seed == second.seed
        assert [c.id for c in first] == [c.id for c in second]

    def test_method_tag_is_parsed(self):
        assert ShoeManager(shuffle_method="overhand").shuffle_method == ShuffleMethod.OVERHAND

    def test_invalid_configuration(self):
        with pytest.raises(InvalidConfiguration):
            ShoeManager(num_decks=0)
        with pytest.raises(InvalidConfiguration):
            ShoeManager(shuffle_method="mongean")
        with pytest.raises(InvalidConfiguration):
            ShoeManager(shuffle_passes=0)
