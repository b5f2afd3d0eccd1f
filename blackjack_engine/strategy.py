"""Basic strategy advisor, with optional count-based deviations."""

from typing import Mapping

from blackjack_engine.cards import Card
from blackjack_engine.errors import IllegalAction
from blackjack_engine.game.engine import Action
from blackjack_engine.hand import Hand
from blackjack_engine.rules import GameRules

# Each row is one decision per dealer up card: 2 3 4 5 6 7 8 9 10 A
#   H hit, S stand, P split
#   D double (else hit), d double (else stand)
#   R surrender (else hit), Q surrender (else split)
#   p split only with double after split, - no split (play the total)
_HARD = {
    8: "HHHHHHHHHH",
    9: "HDDDDHHHHH",
    10: "DDDDDDDDHH",
    11: "DDDDDDDDDD",
    12: "HHSSSHHHHH",
    13: "SSSSSHHHHH",
    14: "SSSSSHHHHH",
    15: "SSSSSHHHRH",
    16: "SSSSSHHRRR",
    17: "SSSSSSSSSS",
}

_SOFT = {
    12: "HHHHHHHHHH",
    13: "HHHDDHHHHH",
    14: "HHHDDHHHHH",
    15: "HHDDDHHHHH",
    16: "HHDDDHHHHH",
    17: "HDDDDHHHHH",
    18: "dddddSSHHH",
    19: "SSSSSSSSSS",
    20: "SSSSSSSSSS",
    21: "SSSSSSSSSS",
}

# Keyed by the pair's card value (Ace = 11)
_PAIRS = {
    2: "ppPPPP----",
    3: "ppPPPP----",
    4: "---pp-----",
    5: "----------",
    6: "pPPPP-----",
    7: "PPPPPP----",
    8: "PPPPPPPPPP",
    9: "PPPPP-PP--",
    10: "----------",
    11: "PPPPPPPPPP",
}

# (hard total, dealer up value): (true count at or above which to play, action)
DEVIATIONS: Mapping[tuple[int, int], tuple[float, Action]] = {
    (16, 10): (0, Action.STAND),
    (15, 10): (4, Action.STAND),
    (12, 2): (3, Action.STAND),
    (12, 3): (2, Action.STAND),
    (13, 2): (-1, Action.STAND),
    (16, 9): (5, Action.STAND),
    (10, 11): (4, Action.DOUBLE),
    (9, 2): (1, Action.DOUBLE),
}

INSURANCE_TRUE_COUNT = 3


def _column(up_card: Card) -> int:
    return min(max(up_card.value, 2), 11) - 2


class BasicStrategy:
    """
    Basic strategy for a set of table rules.

    Tables are adjusted once for the rules; ``recommend`` only ever returns
    an action from the legal set it is given.
    """

    def __init__(self, rules: GameRules | None = None) -> None:
        self.rules = rules or GameRules()
        self._hard = dict(_HARD)
        self._soft = dict(_SOFT)
        self._pairs = dict(_PAIRS)

        if self.rules.dealer_hits_soft_17:
            self._hard[15] = "SSSSSHHHRR"
            self._soft[19] = "SSSSdSSSSS"
            self._pairs[8] = "PPPPPPPPPQ"
        else:
            self._hard[11] = "DDDDDDDDDH"
            self._soft[18] = "SddddSSHHH"

    def recommend(
        self,
        hand: Hand,
        up_card: Card,
        legal_actions: frozenset[Action],
        true_count: float | None = None,
    ) -> Action:
        """
        Recommend an action for a hand.

        Args:
            hand: The player hand to act on
            up_card: The dealer's face-up card
            legal_actions: Actions the engine allows right now
            true_count: Apply count deviations when given

        Returns:
            A member of ``legal_actions``; STAND when nothing else fits
        """
        if not legal_actions:
            raise IllegalAction("No legal actions to choose from")
        column = _column(up_card)
        counted = true_count is not None

        if counted and Action.INSURANCE in legal_actions and true_count >= INSURANCE_TRUE_COUNT:
            return Action.INSURANCE

        if hand.is_pair and Action.SPLIT in legal_actions:
            code = self._pairs[hand.cards[0].value][column]
            if code == "P" or (code == "p" and self.rules.double_after_split):
                return Action.SPLIT
            if code == "Q":
                return Action.SURRENDER if Action.SURRENDER in legal_actions else Action.SPLIT

        total = hand.value
        deviation = DEVIATIONS.get((total, column + 2))
        if counted and deviation and not hand.is_soft and true_count >= deviation[0]:
            if deviation[1] in legal_actions:
                return deviation[1]

        if hand.is_soft and total in self._soft:
            code = self._soft[total][column]
        else:
            code = self._hard[min(max(total, 8), 17)][column]
        return self._resolve(code, legal_actions)

    @staticmethod
    def _resolve(code: str, legal: frozenset[Action]) -> Action:
        """Turn a table code into a legal action."""
        fallback = Action.HIT if code in "HDR" else Action.STAND
        preferred = {"D": Action.DOUBLE, "d": Action.DOUBLE, "R": Action.SURRENDER}.get(code, fallback)

        for action in (preferred, fallback):
            if action in legal:
                return action
        # Split aces that may not draw
        return Action.STAND
