"""Immutable values handed out of the engine: round results and snapshots."""

from dataclasses import dataclass
from decimal import Decimal

from blackjack_engine.cards import Card
from blackjack_engine.counting import true_count
from blackjack_engine.game.state import RoundPhase
from blackjack_engine.hand import Hand, HandStatus
from blackjack_engine.payout import MainBetOutcome, SideBetResult, SideBetType
from blackjack_engine.shoe import Shoe


@dataclass(frozen=True)
class ShoeSummary:
    """State of the shoe at the end of a round."""

    shoe_id: str
    seed: int | None
    total_cards: int
    remaining: int
    cards_dealt: int
    cut_card_position: int
    reshuffle_due: bool
    running_count: float = 0.0
    true_count: float = 0.0

    @classmethod
    def from_shoe(cls, shoe: Shoe, running_count: float = 0.0) -> "ShoeSummary":
        return cls(
            shoe_id=shoe.id,
            seed=shoe.seed,
            total_cards=shoe.total_cards,
            remaining=shoe.remaining,
            cards_dealt=shoe.cards_dealt,
            cut_card_position=shoe.cut_card_position,
            reshuffle_due=shoe.needs_reshuffle,
            running_count=running_count,
            true_count=true_count(running_count, shoe.decks_remaining),
        )


@dataclass(frozen=True)
class HandResult:
    """Settlement of one player hand."""

    hand_id: str
    cards: tuple[Card, ...]
    total: int
    bet: int
    stake: Decimal
    status: HandStatus
    outcome: MainBetOutcome
    delta: Decimal


@dataclass(frozen=True)
class InsuranceResult:
    stake: Decimal
    delta: Decimal


@dataclass(frozen=True)
class RoundResult:
    """
    Final, immutable record of a settled round.

    This is the only value that survives cleanup; it is handed to the
    persistence collaborator via the ``ROUND_ENDED`` event.
    """

    round_number: int
    player_id: str | None
    dealer_cards: tuple[Card, ...]
    dealer_total: int
    hands: tuple[HandResult, ...]
    insurance: InsuranceResult | None
    side_bets: tuple[SideBetResult, ...]
    net: Decimal
    balance_after: Decimal
    shoe: ShoeSummary

    @property
    def total_staked(self) -> Decimal:
        stakes = sum((h.stake for h in self.hands), Decimal("0"))
        stakes += sum((s.stake for s in self.side_bets), Decimal("0"))
        if self.insurance is not None:
            stakes += self.insurance.stake
        return stakes


@dataclass(frozen=True)
class HandView:
    """Read-only view of a live hand."""

    hand_id: str
    cards: tuple[Card, ...]
    total: int
    soft: bool
    bet: int
    stake: Decimal
    status: HandStatus
    is_split_hand: bool

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandView":
        return cls(
            hand_id=hand.id,
            cards=tuple(hand.cards),
            total=hand.value,
            soft=hand.is_soft,
            bet=hand.bet,
            stake=hand.stake,
            status=hand.status,
            is_split_hand=hand.is_split_hand,
        )


@dataclass(frozen=True)
class RoundSnapshot:
    """Point-in-time view of the round for presentation."""

    phase: RoundPhase
    round_number: int
    hands: tuple[HandView, ...]
    current_hand_id: str | None
    legal_actions: frozenset
    dealer_cards: tuple[Card | None, ...]  # None for a face-down card
    dealer_visible_total: int
    balance: Decimal
    side_bets: tuple[tuple[SideBetType, Decimal], ...]
    insurance_stake: Decimal
    shoe_remaining: int
    running_count: float
    true_count: float
    last_result: RoundResult | None
