"""Blackjack round engine with state machine."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from random import Random
from typing import Iterator, Mapping, Sequence

from transitions import Machine

from blackjack_engine.cards import Card
from blackjack_engine.counting import HI_LO, CountingSystem, true_count
from blackjack_engine.dealer import DealerAction, next_action
from blackjack_engine.errors import IllegalAction, InsufficientBalance, InvalidConfiguration
from blackjack_engine.game.events import EventEmitter, EventHandler, EventType
from blackjack_engine.game.results import (
    HandResult,
    HandView,
    InsuranceResult,
    RoundResult,
    RoundSnapshot,
    ShoeSummary,
)
from blackjack_engine.game.state import LIVE_PHASES, RoundPhase
from blackjack_engine.hand import Hand, HandStatus, evaluate
from blackjack_engine.payout import (
    SideBetType,
    main_bet_outcome,
    resolve_side_bet,
    settle_insurance,
    settle_main_bet,
)
from blackjack_engine.rules import GameRules
from blackjack_engine.shoe import Shoe, ShoeManager, draw, needs_reshuffle

logger = logging.getLogger(__name__)


class Action(Enum):
    """Player actions during the player turn."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"
    INSURANCE = "insurance"


@dataclass(frozen=True)
class _Checkpoint:
    """Everything a failed operation must put back."""

    phase: RoundPhase
    shoe: Shoe
    hands: tuple[Hand, ...]
    dealer_hand: Hand
    balance: Decimal
    side_bets: tuple[tuple[SideBetType, Decimal], ...]
    insurance: tuple[Decimal, int] | None
    first_two: tuple[Card, ...]
    seat_splits: tuple[tuple[int, int], ...]
    round_number: int
    round_acted: bool
    last_result: RoundResult | None
    running_count: float


def _whole_chips(amount: object, what: str) -> int:
    """Bets are whole chips; integral Decimals and floats are accepted."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        raise IllegalAction(f"{what} must be a number, got {amount!r}")
    try:
        chips = int(amount)
    except (ValueError, OverflowError) as e:
        raise IllegalAction(f"{what} must be finite, got {amount!r}") from e
    if chips != amount:
        raise IllegalAction(f"{what} must be a whole number of chips, got {amount!r}")
    return chips


class RoundEngine:
    """
    Blackjack round engine using a state machine.

    Owns one shoe and the hands of the round in progress. A caller drives it
    with bets and actions; every public operation either applies completely
    or raises and leaves the engine exactly as it was.
    """

    # State machine states
    STATES = [phase.machine_state for phase in RoundPhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_dealing", "source": "betting", "dest": "dealing"},
        {"trigger": "deal", "source": "dealing", "dest": "player_turn"},
        {"trigger": "finish_player_turn", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "finish_dealer_turn", "source": "dealer_turn", "dest": "settlement"},
        {"trigger": "settle", "source": "settlement", "dest": "cleanup"},
        {"trigger": "clean_up", "source": "cleanup", "dest": "completed"},
        {"trigger": "new_round", "source": "completed", "dest": "betting"},
        {"trigger": "void", "source": ["dealing", "player_turn", "dealer_turn"], "dest": "cleanup"},
    ]

    _ACTION_HANDLERS = {
        Action.HIT: "_hit",
        Action.STAND: "_stand",
        Action.DOUBLE: "_double_down",
        Action.SPLIT: "_split",
        Action.SURRENDER: "_surrender",
        Action.INSURANCE: "_take_insurance",
    }

    def __init__(
        self,
        rules: GameRules | None = None,
        shoe_manager: ShoeManager | None = None,
        bankroll: Decimal | int = Decimal("1000"),
        player_id: str | None = None,
        rng: Random | None = None,
        shoe: Shoe | None = None,
        counting_system: CountingSystem = HI_LO,
    ) -> None:
        """
        Initialize a session.

        Args:
            rules: Table rules (uses defaults if not provided)
            shoe_manager: Shoe configuration; defaults to the rules' deck count
            bankroll: Available balance as reported by the account service
            player_id: Authenticated player identity, copied into results
            rng: Random source every shoe seed is drawn from; None is not reproducible
            shoe: Starting shoe, replacing the initial shuffle
            counting_system: Tags for the running count of cards seen this shoe
        """
        self.rules = rules or GameRules()
        self.shoe_manager = shoe_manager or ShoeManager(num_decks=self.rules.num_decks)
        if self.shoe_manager.num_decks != self.rules.num_decks:
            raise InvalidConfiguration(
                f"Shoe has {self.shoe_manager.num_decks} decks but rules require {self.rules.num_decks}"
            )

        self.player_id = player_id
        self._rng = rng
        self.shoe = shoe if shoe is not None else self.shoe_manager.new_shoe(rng=rng)
        self.counting_system = counting_system
        self._running_count = counting_system.initial_count(self.rules.num_decks)

        self._balance = Decimal(bankroll)
        self.hands: list[Hand] = []
        self.dealer_hand = Hand()
        self.side_bets: dict[SideBetType, Decimal] = {}
        self._insurance: tuple[Decimal, int] | None = None
        self._first_two: tuple[Card, ...] = ()
        self._seat_splits: dict[int, int] = {}
        self._round_number = 0
        self._round_acted = False
        self._last_result: RoundResult | None = None
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=RoundPhase.BETTING.machine_state,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_on_phase_change",
        )

    # Accessors

    @property
    def phase(self) -> RoundPhase:
        """Get current phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore[attr-defined]

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def last_result(self) -> RoundResult | None:
        return self._last_result

    @property
    def running_count(self) -> float:
        """Count of the face-up cards seen since the last shuffle."""
        return self._running_count

    @property
    def true_count(self) -> float:
        return true_count(self._running_count, self.shoe.decks_remaining)

    @property
    def insurance_stake(self) -> Decimal:
        return self._insurance[0] if self._insurance else Decimal("0")

    @property
    def current_hand(self) -> Hand | None:
        """The hand to act on: the first active hand, in order."""
        if self.phase != RoundPhase.PLAYER_TURN:
            return None
        for hand in self.hands:
            if hand.status == HandStatus.ACTIVE:
                return hand
        return None

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    def snapshot(self) -> RoundSnapshot:
        """
        Return an immutable view of the round.

        The dealer's face-down card is given as ``None`` so the snapshot is
        safe to hand to any presentation layer.
        """
        current = self.current_hand
        return RoundSnapshot(
            phase=self.phase,
            round_number=self._round_number,
            hands=tuple(HandView.from_hand(hand) for hand in self.hands),
            current_hand_id=current.id if current else None,
            legal_actions=self.legal_actions(current.id) if current else frozenset(),
            dealer_cards=tuple(card if card.is_face_up else None for card in self.dealer_hand.cards),
            dealer_visible_total=evaluate(self.dealer_hand.visible_cards).total,
            balance=self._balance,
            side_bets=tuple(self.side_bets.items()),
            insurance_stake=self.insurance_stake,
            shoe_remaining=self.shoe.remaining,
            running_count=self._running_count,
            true_count=self.true_count,
            last_result=self._last_result,
        )

    # Transactions

    def _checkpoint(self) -> _Checkpoint:
        return _Checkpoint(
            phase=self.phase,
            shoe=self.shoe,
            hands=tuple(hand.copy() for hand in self.hands),
            dealer_hand=self.dealer_hand.copy(),
            balance=self._balance,
            side_bets=tuple(self.side_bets.items()),
            insurance=self._insurance,
            first_two=self._first_two,
            seat_splits=tuple(self._seat_splits.items()),
            round_number=self._round_number,
            round_acted=self._round_acted,
            last_result=self._last_result,
            running_count=self._running_count,
        )

    def _restore(self, checkpoint: _Checkpoint) -> None:
        self.machine.set_state(checkpoint.phase.machine_state, model=self)
        self.shoe = checkpoint.shoe
        self.hands = [hand.copy() for hand in checkpoint.hands]
        self.dealer_hand = checkpoint.dealer_hand.copy()
        self._balance = checkpoint.balance
        self.side_bets = dict(checkpoint.side_bets)
        self._insurance = checkpoint.insurance
        self._first_two = checkpoint.first_two
        self._seat_splits = dict(checkpoint.seat_splits)
        self._round_number = checkpoint.round_number
        self._round_acted = checkpoint.round_acted
        self._last_result = checkpoint.last_result
        self._running_count = checkpoint.running_count

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Apply an operation completely or not at all."""
        checkpoint = self._checkpoint()
        self.events.begin()
        try:
            yield
        except Exception:
            self._restore(checkpoint)
            self.events.rollback()
            raise
        self.events.commit()

    def _on_phase_change(self) -> None:
        logger.debug("Round %d entered %s", self._round_number, self.phase.name)
        self.events.emit_new(
            EventType.PHASE_CHANGED,
            phase=self.phase.name,
            round_number=self._round_number,
        )

    def _require_funds(self, amount: Decimal | int) -> None:
        required = Decimal(amount)
        if required > self._balance:
            raise InsufficientBalance(required=required, available=self._balance)

    # Betting

    def place_bet(
        self,
        amounts: int | Decimal | Sequence[int | Decimal],
        side_bets: Mapping[SideBetType | str, int | Decimal] | None = None,
    ) -> RoundSnapshot:
        """
        Place main bet(s) and side bets, then deal.

        Args:
            amounts: One main bet, or one per hand
            side_bets: Side bet stakes by type, settled on the first hand

        Returns:
            Snapshot after dealing

        Raises:
            IllegalAction: wrong phase, an unknown side bet, or a stake that is not
                whole chips within the table limits
            InsufficientBalance: total stake exceeds the balance
        """
        with self._transaction():
            if self.phase == RoundPhase.COMPLETED:
                self.new_round()
            if self.phase != RoundPhase.BETTING:
                raise IllegalAction(f"Cannot bet during {self.phase}")

            if isinstance(amounts, (int, float, Decimal)):
                amounts = [amounts]
            try:
                bets = [_whole_chips(amount, "Bet") for amount in amounts]
            except TypeError as e:
                raise IllegalAction(f"Bet must be a number or a list of numbers, got {amounts!r}") from e
            if not bets:
                raise IllegalAction("At least one main bet is required")
            for amount in bets:
                if not self.rules.min_bet <= amount <= self.rules.max_bet:
                    raise IllegalAction(
                        f"Bet must be between {self.rules.min_bet} and {self.rules.max_bet}"
                    )

            stakes: dict[SideBetType, Decimal] = {}
            for tag, stake in (side_bets or {}).items():
                try:
                    bet_type = SideBetType(tag)
                except ValueError as e:
                    raise IllegalAction(f"Unknown side bet: {tag!r}") from e
                stake = _whole_chips(stake, "Side bet")
                if not self.rules.side_bet_min <= stake <= self.rules.side_bet_max:
                    raise IllegalAction(
                        f"Side bet must be between {self.rules.side_bet_min} and {self.rules.side_bet_max}"
                    )
                stakes[bet_type] = Decimal(stake)

            total = Decimal(sum(bets)) + sum(stakes.values(), Decimal("0"))
            self._require_funds(total)

            # Debit and create hands together
            self._balance -= total
            self.hands = [Hand(bet=amount, seat=seat) for seat, amount in enumerate(bets)]
            self.side_bets = stakes
            self._round_number += 1
            self._round_acted = False

            self.events.emit_new(EventType.BET_PLACED, amounts=bets, total=float(total))
            for bet_type, stake in stakes.items():
                self.events.emit_new(EventType.SIDE_BET_PLACED, bet_type=bet_type.value, amount=float(stake))

            self.start_dealing()
            self._deal_initial_cards()

        return self.snapshot()

    def _deal_initial_cards(self) -> None:
        """Deal: each hand, dealer up card, each hand, dealer hole card."""
        self.dealer_hand = Hand()
        for hand in self.hands:
            self._deal_card_to_hand(hand)
        self._deal_card_to_hand(self.dealer_hand)
        for hand in self.hands:
            self._deal_card_to_hand(hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)

        self._first_two = tuple(self.hands[0].cards)
        self.events.emit_new(EventType.ROUND_STARTED, round_number=self._round_number)

        for hand in self.hands:
            if hand.is_blackjack:
                hand.status = HandStatus.BLACKJACK
                self.events.emit_new(EventType.PLAYER_BLACKJACK, hand_id=hand.id)

        self.deal()  # Move to player turn
        self._advance()

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Draw the next card from the shoe onto a hand."""
        card, self.shoe = draw(self.shoe)
        card = card.face_up() if face_up else card.face_down()
        hand.add_card(card)
        self._running_count += self.counting_system.tag(card)
        is_dealer = hand is self.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if is_dealer else hand.id,
            hand_value=evaluate(hand.visible_cards).total,
        )
        return card

    # Player actions

    def legal_actions(self, hand_id: str) -> frozenset[Action]:
        """
        Actions the rules allow on a hand right now.

        Balance is not considered here; an uncovered double, split or
        insurance fails with ``InsufficientBalance`` when submitted.
        """
        hand = self._find_hand(hand_id)
        if hand is None or hand is not self.current_hand:
            return frozenset()

        actions = {Action.STAND}
        two_cards = len(hand.cards) == 2
        can_draw = not hand.is_split_aces or self.rules.hit_split_aces

        if can_draw:
            actions.add(Action.HIT)
        if (
            two_cards
            and can_draw
            and self.rules.double_allowed
            and (not hand.is_split_hand or self.rules.double_after_split)
        ):
            actions.add(Action.DOUBLE)
        if self._can_split(hand):
            actions.add(Action.SPLIT)
        if two_cards and self.rules.surrender and not hand.is_split_hand:
            actions.add(Action.SURRENDER)
        if self._can_insure():
            actions.add(Action.INSURANCE)
        return frozenset(actions)

    def _can_split(self, hand: Hand) -> bool:
        if not hand.is_pair:
            return False
        if self._seat_splits.get(hand.seat, 0) >= self.rules.max_splits:
            return False
        # Check resplit aces
        if hand.cards[0].is_ace and hand.is_split_hand and not self.rules.resplit_aces:
            return False
        return True

    def _can_insure(self) -> bool:
        up_card = self.dealer_hand.cards[0] if self.dealer_hand.cards else None
        return (
            self.rules.insurance_available
            and up_card is not None
            and up_card.is_ace
            and self._insurance is None
            and not self._round_acted
        )

    def _find_hand(self, hand_id: str) -> Hand | None:
        for hand in self.hands:
            if hand.id == hand_id:
                return hand
        return None

    def submit_action(
        self,
        hand_id: str,
        action: Action | str,
        amount: int | Decimal | None = None,
    ) -> RoundSnapshot:
        """
        Apply a player action to the current hand.

        Args:
            hand_id: Hand to act on; must be the current hand
            action: The action to take
            amount: Insurance stake (defaults to half the bet)

        Returns:
            Snapshot after the action and anything it triggered

        Raises:
            IllegalAction: wrong phase, hand or rule
            InsufficientBalance: the extra stake is not covered
        """
        try:
            action = Action(action)
        except ValueError as e:
            raise IllegalAction(f"Unknown action: {action}") from e
        with self._transaction():
            if self.phase != RoundPhase.PLAYER_TURN:
                raise IllegalAction(f"Cannot {action.value} during {self.phase}")
            hand = self._find_hand(hand_id)
            if hand is None:
                raise IllegalAction(f"Unknown hand: {hand_id}")
            if hand.status != HandStatus.ACTIVE:
                raise IllegalAction(f"Hand {hand_id} is {hand.status.value}")
            if hand is not self.current_hand:
                raise IllegalAction("Hands must be played in order")
            if action not in self.legal_actions(hand_id):
                raise IllegalAction(f"Cannot {action.value} this hand")

            getattr(self, self._ACTION_HANDLERS[action])(hand, amount)
            self._round_acted = True
            self._advance()

        return self.snapshot()

    def _hit(self, hand: Hand, amount: int | Decimal | None) -> None:
        """Player hits (takes another card)."""
        self._deal_card_to_hand(hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_id=hand.id, hand_value=hand.value)
        if hand.is_busted:
            hand.status = HandStatus.BUSTED
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_id=hand.id)

    def _stand(self, hand: Hand, amount: int | Decimal | None) -> None:
        hand.status = HandStatus.STOOD
        self.events.emit_new(EventType.PLAYER_STAND, hand_id=hand.id, hand_value=hand.value)

    def _double_down(self, hand: Hand, amount: int | Decimal | None) -> None:
        """Double the bet and take exactly one card."""
        self._require_funds(hand.bet)
        self._balance -= hand.bet
        hand.is_doubled = True

        self._deal_card_to_hand(hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_id=hand.id,
            hand_value=hand.value,
            new_stake=float(hand.stake),
        )
        if hand.is_busted:
            hand.status = HandStatus.BUSTED
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_id=hand.id)
        else:
            hand.status = HandStatus.DOUBLED

    def _split(self, hand: Hand, amount: int | Decimal | None) -> None:
        """Replace a pair with two hands, each dealt a second card."""
        self._require_funds(hand.bet)
        self._balance -= hand.bet

        splits = self._seat_splits.get(hand.seat, 0) + 1
        self._seat_splits[hand.seat] = splits
        split_aces = hand.cards[0].is_ace
        children = [
            Hand(
                cards=[card],
                bet=hand.bet,
                seat=hand.seat,
                splits_so_far=splits,
                is_split_hand=True,
                is_split_aces=split_aces,
            )
            for card in hand.cards
        ]

        index = self.hands.index(hand)
        hand.status = HandStatus.SPLIT
        self.hands[index:index + 1] = children

        # Deal one card to each hand
        for child in children:
            self._deal_card_to_hand(child)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_id=hand.id,
            new_hand_ids=[child.id for child in children],
            hand_values=[child.value for child in children],
        )

        # Split aces get one card each unless they can draw or re-split
        if split_aces and not self.rules.hit_split_aces:
            for child in children:
                if not self._can_split(child):
                    child.status = HandStatus.STOOD

    def _surrender(self, hand: Hand, amount: int | Decimal | None) -> None:
        hand.status = HandStatus.SURRENDERED
        self.events.emit_new(EventType.PLAYER_SURRENDER, hand_id=hand.id)

    def _take_insurance(self, hand: Hand, amount: int | Decimal | None) -> None:
        """Insurance stake is up to half the hand's bet."""
        max_insurance = Decimal(hand.bet) / 2
        if amount is None:
            stake = Decimal(hand.bet // 2)
        else:
            if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
                raise IllegalAction(f"Insurance must be a number, got {amount!r}")
            stake = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
            if not stake.is_finite():
                raise IllegalAction(f"Insurance must be finite, got {amount!r}")
        if stake <= 0 or stake > max_insurance:
            raise IllegalAction(f"Insurance must be more than 0 and at most {max_insurance}")

        self._require_funds(stake)
        self._balance -= stake
        self._insurance = (stake, hand.bet)
        self.events.emit_new(EventType.INSURANCE_TAKEN, hand_id=hand.id, amount=float(stake))

    def _advance(self) -> None:
        """Move on to the dealer once no hand is active."""
        if self.current_hand is not None:
            return
        self.finish_player_turn()
        self._play_dealer()

    # Dealer, settlement, cleanup

    def _play_dealer(self) -> None:
        """Reveal the hole card and draw per the dealer policy."""
        for card in self.dealer_hand.cards:
            if not card.is_face_up:
                self._running_count += self.counting_system.tag(card.face_up())
        self.dealer_hand.cards = [card.face_up() for card in self.dealer_hand.cards]
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand.cards[-1]),
            hand_value=self.dealer_hand.value,
        )

        live = [
            hand for hand in self.hands
            if hand.status not in (HandStatus.BUSTED, HandStatus.SURRENDERED)
        ]
        if live:
            while next_action(self.dealer_hand, self.rules) == DealerAction.HIT:
                self._deal_card_to_hand(self.dealer_hand)
                self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

            if self.dealer_hand.is_busted:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
            else:
                self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        if self.dealer_hand.is_blackjack:
            self.dealer_hand.status = HandStatus.BLACKJACK
        elif self.dealer_hand.is_busted:
            self.dealer_hand.status = HandStatus.BUSTED
        else:
            self.dealer_hand.status = HandStatus.STOOD

        self.finish_dealer_turn()
        self._settle_round()

    def _settle_round(self) -> None:
        """Pay or collect every wager and record the result."""
        net = Decimal("0")
        returned = Decimal("0")

        hand_results = []
        for hand in self.hands:
            delta = settle_main_bet(hand, self.dealer_hand, self.rules)
            outcome = main_bet_outcome(hand, self.dealer_hand)
            net += delta
            returned += hand.stake + delta
            hand_results.append(
                HandResult(
                    hand_id=hand.id,
                    cards=tuple(hand.cards),
                    total=hand.value,
                    bet=hand.bet,
                    stake=hand.stake,
                    status=hand.status,
                    outcome=outcome,
                    delta=delta,
                )
            )
            self.events.emit_new(
                EventType.HAND_SETTLED,
                hand_id=hand.id,
                outcome=outcome.value,
                amount=float(delta),
            )

        insurance = None
        if self._insurance is not None:
            stake, insured_bet = self._insurance
            delta = settle_insurance(stake, self.dealer_hand, bet=insured_bet)
            net += delta
            returned += stake + delta
            insurance = InsuranceResult(stake=stake, delta=delta)
            self.events.emit_new(EventType.INSURANCE_SETTLED, amount=float(delta))

        dealer_up = self.dealer_hand.cards[0]
        side_results = []
        for bet_type, stake in self.side_bets.items():
            result = resolve_side_bet(bet_type, stake, self._first_two, dealer_up)
            net += result.delta
            returned += stake + result.delta
            side_results.append(result)
            self.events.emit_new(
                EventType.SIDE_BET_SETTLED,
                bet_type=bet_type.value,
                outcome=result.outcome,
                amount=float(result.delta),
            )

        self._balance += returned
        result = RoundResult(
            round_number=self._round_number,
            player_id=self.player_id,
            dealer_cards=tuple(self.dealer_hand.cards),
            dealer_total=self.dealer_hand.value,
            hands=tuple(hand_results),
            insurance=insurance,
            side_bets=tuple(side_results),
            net=net,
            balance_after=self._balance,
            shoe=ShoeSummary.from_shoe(self.shoe, self._running_count),
        )
        self._last_result = result
        logger.info(
            "Round %d settled: net %s, balance %s",
            self._round_number,
            net,
            self._balance,
        )

        self.settle()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            round_number=self._round_number,
            result=result,
            net=float(net),
            balance=float(self._balance),
        )
        self._cleanup()

    def _cleanup(self) -> None:
        """Discard the round's hands; replace the shoe once the cut card is out."""
        self.hands = []
        self.dealer_hand = Hand()
        self.side_bets = {}
        self._insurance = None
        self._first_two = ()
        self._seat_splits = {}

        if needs_reshuffle(self.shoe):
            self._fresh_shoe()

        self.clean_up()

    def _fresh_shoe(self, seed: int | None = None) -> None:
        """Shuffle a new shoe and start the count over."""
        self.shoe = self.shoe_manager.new_shoe(seed=seed, rng=self._rng)
        self._running_count = self.counting_system.initial_count(self.rules.num_decks)
        self.events.emit_new(EventType.SHOE_SHUFFLED, shoe_id=self.shoe.id, seed=self.shoe.seed)

    # Between rounds

    def start_next_round(self) -> RoundSnapshot:
        """Return from COMPLETED to BETTING."""
        with self._transaction():
            if self.phase != RoundPhase.COMPLETED:
                raise IllegalAction(f"No completed round to leave ({self.phase})")
            self.new_round()
        return self.snapshot()

    def void_round(self) -> RoundSnapshot:
        """
        Cancel the round in progress.

        Every escrowed stake is refunded; cards already dealt stay out of the
        shoe. This is the way out after ``ShoeEmpty`` interrupts a round.
        """
        with self._transaction():
            if self.phase not in LIVE_PHASES:
                raise IllegalAction(f"No round in progress ({self.phase})")

            refund = sum((hand.stake for hand in self.hands), Decimal("0"))
            refund += sum(self.side_bets.values(), Decimal("0"))
            refund += self.insurance_stake
            self._balance += refund

            self.events.emit_new(
                EventType.ROUND_VOIDED,
                round_number=self._round_number,
                refunded=float(refund),
            )
            logger.warning("Round %d voided, %s refunded", self._round_number, refund)
            self.void()
            self._cleanup()
        return self.snapshot()

    def replace_shoe(self, seed: int | None = None) -> Shoe:
        """
        Swap in a freshly shuffled shoe between rounds.

        Returns:
            The new shoe; the old one is left untouched
        """
        with self._transaction():
            if self.phase not in (RoundPhase.BETTING, RoundPhase.COMPLETED):
                raise IllegalAction("The shoe can only be replaced between rounds")
            self._fresh_shoe(seed)
        return self.shoe
