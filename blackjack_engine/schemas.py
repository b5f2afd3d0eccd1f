"""Pydantic schemas for round snapshots and results handed to collaborators."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from blackjack_engine.cards import Card
from blackjack_engine.game.results import (
    HandResult,
    HandView,
    RoundResult,
    RoundSnapshot,
)
from blackjack_engine.payout import SideBetResult


class CardModel(BaseModel):
    """Card representation; face-down cards carry no rank or suit."""

    rank: str | None
    suit: str | None
    value: int | None
    face_up: bool

    @classmethod
    def from_card(cls, card: Card | None) -> "CardModel":
        if card is None or not card.is_face_up:
            return cls(rank=None, suit=None, value=None, face_up=False)
        return cls(
            rank=str(card.rank),
            suit=card.suit.value,
            value=card.value,
            face_up=True,
        )


class HandViewModel(BaseModel):
    """Live hand representation."""

    hand_id: str
    cards: list[CardModel]
    total: int
    soft: bool
    bet: int
    stake: Decimal
    status: str
    is_split_hand: bool

    @classmethod
    def from_view(cls, view: HandView) -> "HandViewModel":
        return cls(
            hand_id=view.hand_id,
            cards=[CardModel.from_card(card) for card in view.cards],
            total=view.total,
            soft=view.soft,
            bet=view.bet,
            stake=view.stake,
            status=view.status.value,
            is_split_hand=view.is_split_hand,
        )


class HandResultModel(BaseModel):
    """Settled hand."""

    hand_id: str
    cards: list[CardModel]
    total: int
    bet: int
    stake: Decimal
    status: str
    outcome: str
    delta: Decimal

    @classmethod
    def from_result(cls, result: HandResult) -> "HandResultModel":
        return cls(
            hand_id=result.hand_id,
            cards=[CardModel.from_card(card) for card in result.cards],
            total=result.total,
            bet=result.bet,
            stake=result.stake,
            status=result.status.value,
            outcome=result.outcome.value,
            delta=result.delta,
        )


class SideBetResultModel(BaseModel):
    """Settled side bet."""

    bet_type: str
    stake: Decimal
    outcome: str | None
    multiplier: Decimal
    delta: Decimal

    @classmethod
    def from_result(cls, result: SideBetResult) -> "SideBetResultModel":
        return cls(
            bet_type=result.bet_type.value,
            stake=result.stake,
            outcome=result.outcome,
            multiplier=result.multiplier,
            delta=result.delta,
        )


class ShoeSummaryModel(BaseModel):
    """Shoe state at the end of a round."""

    model_config = ConfigDict(from_attributes=True)

    shoe_id: str
    seed: int | None
    total_cards: int
    remaining: int
    cards_dealt: int
    cut_card_position: int
    reshuffle_due: bool
    running_count: float = 0.0
    true_count: float = 0.0


class RoundResultModel(BaseModel):
    """Round result, as persisted by the session store."""

    round_number: int
    player_id: str | None
    dealer_cards: list[CardModel]
    dealer_total: int
    hands: list[HandResultModel]
    insurance_stake: Decimal | None = None
    insurance_delta: Decimal | None = None
    side_bets: list[SideBetResultModel] = Field(default_factory=list)
    net: Decimal
    balance_after: Decimal
    shoe: ShoeSummaryModel

    @classmethod
    def from_result(cls, result: RoundResult) -> "RoundResultModel":
        return cls(
            round_number=result.round_number,
            player_id=result.player_id,
            dealer_cards=[CardModel.from_card(card) for card in result.dealer_cards],
            dealer_total=result.dealer_total,
            hands=[HandResultModel.from_result(hand) for hand in result.hands],
            insurance_stake=result.insurance.stake if result.insurance else None,
            insurance_delta=result.insurance.delta if result.insurance else None,
            side_bets=[SideBetResultModel.from_result(bet) for bet in result.side_bets],
            net=result.net,
            balance_after=result.balance_after,
            shoe=ShoeSummaryModel.model_validate(result.shoe),
        )


class RoundSnapshotModel(BaseModel):
    """Current round state for a presentation layer."""

    phase: str
    round_number: int
    hands: list[HandViewModel]
    current_hand_id: str | None
    legal_actions: list[str]
    dealer_cards: list[CardModel]
    dealer_visible_total: int
    balance: Decimal
    side_bets: dict[str, Decimal]
    insurance_stake: Decimal
    shoe_remaining: int
    running_count: float
    true_count: float
    last_result: RoundResultModel | None = None

    @classmethod
    def from_snapshot(cls, snapshot: RoundSnapshot) -> "RoundSnapshotModel":
        return cls(
            phase=snapshot.phase.name.lower(),
            round_number=snapshot.round_number,
            hands=[HandViewModel.from_view(view) for view in snapshot.hands],
            current_hand_id=snapshot.current_hand_id,
            legal_actions=sorted(action.value for action in snapshot.legal_actions),
            dealer_cards=[CardModel.from_card(card) for card in snapshot.dealer_cards],
            dealer_visible_total=snapshot.dealer_visible_total,
            balance=snapshot.balance,
            side_bets={bet_type.value: stake for bet_type, stake in snapshot.side_bets},
            insurance_stake=snapshot.insurance_stake,
            shoe_remaining=snapshot.shoe_remaining,
            running_count=snapshot.running_count,
            true_count=snapshot.true_count,
            last_result=(
                RoundResultModel.from_result(snapshot.last_result)
                if snapshot.last_result
                else None
            ),
        )

