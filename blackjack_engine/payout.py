"""
Payout engine.

Settles main bets, insurance and side bets into signed balance deltas.
Positive deltas are winnings on top of the returned stake, negative deltas
are the amount lost; a push is zero.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Sequence

from blackjack_engine.cards import Card, Rank, Suit
from blackjack_engine.errors import IllegalAction
from blackjack_engine.hand import Hand, HandStatus, evaluate
from blackjack_engine.rules import GameRules


class MainBetOutcome(Enum):
    SURRENDER = "surrender"
    BUST = "bust"
    BLACKJACK = "blackjack"
    WIN = "win"
    PUSH = "push"
    LOSE = "lose"


def main_bet_outcome(player_hand: Hand, dealer_hand: Hand) -> MainBetOutcome:
    """Compare a finished player hand against the dealer."""
    if player_hand.status == HandStatus.SURRENDERED:
        return MainBetOutcome.SURRENDER

    # A player bust loses even if the dealer busts later
    if player_hand.is_busted:
        return MainBetOutcome.BUST

    player_bj = player_hand.is_blackjack
    dealer_bj = dealer_hand.is_blackjack

    if player_bj and not dealer_bj:
        return MainBetOutcome.BLACKJACK
    if player_bj and dealer_bj:
        return MainBetOutcome.PUSH
    if dealer_hand.is_busted:
        return MainBetOutcome.WIN
    if dealer_bj:
        return MainBetOutcome.LOSE

    player_value = player_hand.value
    dealer_value = dealer_hand.value
    if player_value > dealer_value:
        return MainBetOutcome.WIN
    if player_value == dealer_value:
        return MainBetOutcome.PUSH
    return MainBetOutcome.LOSE


def settle_main_bet(player_hand: Hand, dealer_hand: Hand, rules: GameRules) -> Decimal:
    """
    Settle the main wager of one player hand.

    Doubled hands win or lose their full doubled stake.
    """
    outcome = main_bet_outcome(player_hand, dealer_hand)
    bet = Decimal(player_hand.bet)
    stake = player_hand.stake

    if outcome == MainBetOutcome.SURRENDER:
        return -bet / 2
    if outcome == MainBetOutcome.BLACKJACK:
        return bet * Decimal(str(rules.blackjack_payout))
    if outcome == MainBetOutcome.WIN:
        return stake
    if outcome == MainBetOutcome.PUSH:
        return Decimal("0")
    return -stake


def settle_insurance(
    stake: Decimal | int,
    dealer_hand: Hand,
    *,
    bet: Decimal | int | None = None,
) -> Decimal:
    """
    Settle an insurance wager at 2:1.

    Args:
        stake: Insurance stake
        dealer_hand: The dealer's final hand
        bet: The insured main bet; when given, the stake is checked against half of it

    Raises:
        IllegalAction: dealer up card is not an Ace, or the stake is not positive
            or exceeds half the bet
    """
    stake = Decimal(stake)
    if not dealer_hand.cards or not dealer_hand.cards[0].is_ace:
        raise IllegalAction("Insurance requires a dealer Ace showing")
    if stake <= 0:
        raise IllegalAction("Insurance stake must be positive")
    if bet is not None and stake > Decimal(bet) / 2:
        raise IllegalAction(f"Insurance stake must be between 0 and {Decimal(bet) / 2}")

    if dealer_hand.is_blackjack:
        return stake * 2
    return -stake


# Side bets


class SideBetType(Enum):
    PERFECT_PAIRS = "perfect_pairs"
    TWENTY_ONE_PLUS_THREE = "21+3"
    LUCKY_LADIES = "lucky_ladies"
    ROYAL_MATCH = "royal_match"


SIDE_BET_PAYOUTS: dict[SideBetType, dict[str, Decimal]] = {
    SideBetType.PERFECT_PAIRS: {
        "mixed_pair": Decimal("5"),  # Different color, same rank
        "colored_pair": Decimal("10"),  # Same color, different suit
        "perfect_pair": Decimal("30"),  # Same suit, same rank
    },
    SideBetType.TWENTY_ONE_PLUS_THREE: {
        "flush": Decimal("5"),
        "straight": Decimal("10"),
        "three_of_a_kind": Decimal("30"),
        "straight_flush": Decimal("40"),
    },
    SideBetType.LUCKY_LADIES: {
        "queen_of_hearts": Decimal("50"),
        "queen_pair": Decimal("20"),
        "any_queen": Decimal("10"),
        "twenty_total": Decimal("4"),
    },
    SideBetType.ROYAL_MATCH: {
        "royal_match": Decimal("25"),  # King and Queen of same suit
        "suited_blackjack": Decimal("5"),
        "suited_pair": Decimal("3"),
        "suited_cards": Decimal("2.5"),
    },
}


def _poker_rank(rank: Rank, ace_high: bool) -> int:
    if rank == Rank.ACE and ace_high:
        return 14
    return rank.value


def _is_straight(cards: Sequence[Card]) -> bool:
    for ace_high in (False, True):
        values = sorted(_poker_rank(c.rank, ace_high) for c in cards)
        if all(b - a == 1 for a, b in zip(values, values[1:])):
            return True
    return False


def perfect_pairs(first_two: Sequence[Card], dealer_up: Card | None = None) -> str | None:
    first, second = first_two
    if first.rank != second.rank:
        return None
    if first.suit == second.suit:
        return "perfect_pair"
    if first.color == second.color:
        return "colored_pair"
    return "mixed_pair"


def twenty_one_plus_three(first_two: Sequence[Card], dealer_up: Card | None = None) -> str | None:
    if dealer_up is None:
        raise IllegalAction("21+3 needs the dealer up card")
    cards = [*first_two, dealer_up]
    same_suit = len({c.suit for c in cards}) == 1
    straight = _is_straight(cards)

    if straight and same_suit:
        return "straight_flush"
    if len({c.rank for c in cards}) == 1:
        return "three_of_a_kind"
    if straight:
        return "straight"
    if same_suit:
        return "flush"
    return None


def lucky_ladies(first_two: Sequence[Card], dealer_up: Card | None = None) -> str | None:
    queen_of_hearts = Card(Rank.QUEEN, Suit.HEARTS)
    queens = [c for c in first_two if c.rank == Rank.QUEEN]

    if queen_of_hearts in first_two:
        return "queen_of_hearts"
    if len(queens) == 2:
        return "queen_pair"
    if queens:
        return "any_queen"
    if evaluate(first_two).total == 20:
        return "twenty_total"
    return None


def royal_match(first_two: Sequence[Card], dealer_up: Card | None = None) -> str | None:
    first, second = first_two
    if first.suit != second.suit:
        return None
    if {first.rank, second.rank} == {Rank.KING, Rank.QUEEN}:
        return "royal_match"
    if (first.is_ace and second.is_ten_value) or (second.is_ace and first.is_ten_value):
        return "suited_blackjack"
    if first.rank == second.rank:
        return "suited_pair"
    return "suited_cards"


SideBetEvaluator = Callable[[Sequence[Card], Card | None], str | None]

SIDE_BET_EVALUATORS: dict[SideBetType, SideBetEvaluator] = {
    SideBetType.PERFECT_PAIRS: perfect_pairs,
    SideBetType.TWENTY_ONE_PLUS_THREE: twenty_one_plus_three,
    SideBetType.LUCKY_LADIES: lucky_ladies,
    SideBetType.ROYAL_MATCH: royal_match,
}


@dataclass(frozen=True)
class SideBetResult:
    """Settled side bet."""

    bet_type: SideBetType
    stake: Decimal
    outcome: str | None
    multiplier: Decimal
    delta: Decimal

    @property
    def won(self) -> bool:
        return self.outcome is not None


def resolve_side_bet(
    bet_type: SideBetType,
    stake: Decimal | int,
    first_two: Sequence[Card],
    dealer_up: Card | None = None,
) -> SideBetResult:
    """
    Evaluate a side bet on the player's first two cards.

    Args:
        bet_type: Side bet family
        stake: Amount wagered
        first_two: The player's first two cards; later hits never count
        dealer_up: Dealer up card, used by 21+3

    Returns:
        The matched outcome (or None) and the signed delta
    """
    stake = Decimal(stake)
    if len(first_two) != 2:
        raise IllegalAction("Side bets settle on exactly two player cards")

    cards = [*first_two] + ([dealer_up] if dealer_up is not None else [])
    if any(card.is_joker for card in cards):
        outcome = None
    else:
        outcome = SIDE_BET_EVALUATORS[bet_type](first_two, dealer_up)

    if outcome is None:
        return SideBetResult(bet_type, stake, None, Decimal("0"), -stake)
    multiplier = SIDE_BET_PAYOUTS[bet_type][outcome]
    return SideBetResult(bet_type, stake, outcome, multiplier, stake * multiplier)


def settle_side_bet(
    bet_type: SideBetType,
    stake: Decimal | int,
    first_two: Sequence[Card],
    dealer_up: Card | None = None,
) -> Decimal:
    """Signed delta for a side bet; ``-stake`` when nothing matches."""
    return resolve_side_bet(bet_type, stake, first_two, dealer_up).delta
