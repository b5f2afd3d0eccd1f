"""Round phase enumeration."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → DEALING → PLAYER_TURN → DEALER_TURN → SETTLEMENT → CLEANUP → COMPLETED
    """

    # Waiting for the main bet and side bets
    BETTING = auto()

    # Initial two cards to every hand and the dealer
    DEALING = auto()

    # Player acts on each hand in order
    PLAYER_TURN = auto()

    # Hole card revealed, dealer draws
    DEALER_TURN = auto()

    # Bets paid or collected
    SETTLEMENT = auto()

    # Hands discarded, shoe replaced if the cut card was reached
    CLEANUP = auto()

    # Round finished, next bet starts a new round
    COMPLETED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def machine_state(self) -> str:
        """Name of the matching state in the transitions machine."""
        return self.name.lower()


# Valid phase transitions, including voiding a live round
VALID_TRANSITIONS: dict[RoundPhase, list[RoundPhase]] = {
    RoundPhase.BETTING: [RoundPhase.DEALING],
    RoundPhase.DEALING: [RoundPhase.PLAYER_TURN, RoundPhase.CLEANUP],
    RoundPhase.PLAYER_TURN: [RoundPhase.DEALER_TURN, RoundPhase.CLEANUP],
    RoundPhase.DEALER_TURN: [RoundPhase.SETTLEMENT, RoundPhase.CLEANUP],
    RoundPhase.SETTLEMENT: [RoundPhase.CLEANUP],
    RoundPhase.CLEANUP: [RoundPhase.COMPLETED],
    RoundPhase.COMPLETED: [RoundPhase.BETTING],
}

# Phases during which hands and stakes are live
LIVE_PHASES = frozenset({RoundPhase.DEALING, RoundPhase.PLAYER_TURN, RoundPhase.DEALER_TURN})


def is_valid_transition(from_phase: RoundPhase, to_phase: RoundPhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])
