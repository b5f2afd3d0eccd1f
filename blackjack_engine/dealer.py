"""Dealer drawing policy."""

from enum import Enum
from typing import Sequence

from blackjack_engine.cards import Card
from blackjack_engine.hand import Hand, HandValue, evaluate
from blackjack_engine.rules import GameRules


class DealerAction(Enum):
    HIT = "hit"
    STAND = "stand"


def next_action(dealer: Hand | Sequence[Card] | HandValue, rules: GameRules) -> DealerAction:
    """
    Decide the dealer's next move.

    Stands on any bust and on 17 or more, except soft 17 under H17 rules.
    Pure: the caller draws and asks again until STAND.
    """
    if isinstance(dealer, HandValue):
        total, soft = dealer
    else:
        cards = dealer.cards if isinstance(dealer, Hand) else dealer
        total, soft = evaluate(cards)

    if total > 21:
        return DealerAction.STAND
    if total == 17 and soft and rules.dealer_hits_soft_17:
        return DealerAction.HIT
    if total >= 17:
        return DealerAction.STAND
    return DealerAction.HIT
