"""Property-based tests for shoes, shuffles and hand valuation."""

from collections import Counter
from decimal import Decimal
from random import Random

from hypothesis import given, settings
from hypothesis import strategies as st

from blackjack_engine.cards import STANDARD_RANKS, Card, Suit
from blackjack_engine.game import Action, RoundEngine, RoundPhase
from blackjack_engine.hand import Hand, evaluate
from blackjack_engine.shoe import build_shoe, draw
from blackjack_engine.shuffle import ShuffleMethod, shuffle_cards


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(STANDARD_RANKS))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    return Hand(cards=cards, bet=10)


class TestShoeProperties:
    @given(num_decks=st.integers(min_value=1, max_value=8), dealt=st.integers(min_value=0, max_value=52))
    def test_card_conservation(self, num_decks, dealt):
        shoe = build_shoe(num_decks)
        for _ in range(dealt):
            _, shoe = draw(shoe)
        assert shoe.cards_dealt + shoe.remaining == shoe.total_cards == 52 * num_decks

    @given(
        method=st.sampled_from(list(ShuffleMethod)),
        seed=st.integers(min_value=0, max_value=2**32),
    )
    @settings(max_examples=50)
    def test_shuffle_is_deterministic_permutation(self, method, seed):
        cards = list(build_shoe(1))
        first = shuffle_cards(cards, method, seed=seed)
        second = shuffle_cards(cards, method, seed=seed)
        assert [c.id for c in first] == [c.id for c in second]
        assert Counter(c.id for c in first) == Counter(c.id for c in cards)


class TestHandProperties:
    @given(hand=hand_strategy())
    def test_value_in_range(self, hand):
        total, soft = evaluate(hand.cards)
        assert total >= 2
        if soft:
            assert total <= 21

    @given(hand=hand_strategy())
    def test_total_matches_hard_count(self, hand):
        """The best total is the all-aces-as-one count, plus 10 when soft."""
        hard = sum(1 if card.is_ace else card.value for card in hand.cards)
        total, soft = evaluate(hand.cards)
        assert total == hard + (10 if soft else 0)

    @given(hand=hand_strategy(min_cards=3, max_cards=5))
    def test_three_or_more_cards_is_never_blackjack(self, hand):
        assert not hand.is_blackjack


class TestRoundProperties:
    @given(seed=st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=30, deadline=None)
    def test_standing_round_keeps_money_consistent(self, seed):
        """Balance after a round equals the starting balance plus the net."""
        engine = RoundEngine(bankroll=Decimal("1000"), rng=Random(seed))
        snapshot = engine.place_bet(100)
        while snapshot.current_hand_id:
            snapshot = engine.submit_action(snapshot.current_hand_id, Action.STAND)

        assert engine.phase == RoundPhase.COMPLETED
        assert engine.balance == Decimal("1000") + engine.last_result.net
        assert engine.last_result.shoe.cards_dealt >= 4
