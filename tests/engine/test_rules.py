"""Tests for table rules."""

import pytest

from blackjack_engine.errors import InvalidConfiguration
from blackjack_engine.rules import GameRules


class TestGameRules:
    """Tests for GameRules."""

    def test_defaults(self, rules):
        assert rules.num_decks == 6
        assert rules.blackjack_payout == 1.5
        assert rules.dealer_hits_soft_17
        assert rules.max_splits == 3

    def test_rules_are_immutable(self, rules):
        with pytest.raises(AttributeError):
            rules.num_decks = 2

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_decks": 0},
            {"num_decks": 9},
            {"min_bet": 0},
            {"min_bet": 100, "max_bet": 50},
            {"blackjack_payout": 2.0},
            {"max_splits": -1},
            {"side_bet_min": 10, "side_bet_max": 5},
        ],
    )
    def test_invalid_rules(self, kwargs):
        with pytest.raises(InvalidConfiguration):
            GameRules(**kwargs)

    def test_invalid_configuration_is_a_value_error(self):
        with pytest.raises(ValueError):
            GameRules(num_decks=0)


class TestPresets:
    def test_classic(self):
        rules = GameRules.classic()
        assert rules.num_decks == 6
        assert rules.dealer_hits_soft_17
        assert rules.max_splits == 3

    def test_vegas_strip(self):
        assert not GameRules.vegas_strip().dealer_hits_soft_17

    def test_atlantic_city(self):
        rules = GameRules.atlantic_city()
        assert rules.num_decks == 8
        assert not rules.dealer_hits_soft_17

    def test_european(self):
        rules = GameRules.european()
        assert rules.num_decks == 2
        assert not rules.surrender
        assert not rules.insurance_available
        assert not rules.double_after_split

    def test_single_deck(self):
        rules = GameRules.single_deck()
        assert rules.num_decks == 1
        assert rules.blackjack_payout == 1.2
