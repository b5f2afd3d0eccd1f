"""Blackjack table rules."""

from dataclasses import dataclass

from blackjack_engine.errors import InvalidConfiguration

SUPPORTED_BLACKJACK_PAYOUTS = (1.5, 1.2, 1.0)


@dataclass(frozen=True)
class GameRules:
    """
    Blackjack table rules configuration.

    Immutable for the lifetime of a session and validated once at
    construction.
    """

    # Deck configuration
    num_decks: int = 6

    # Betting limits
    min_bet: int = 10
    max_bet: int = 1000
    side_bet_min: int = 5
    side_bet_max: int = 100

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2, even money = 1.0)
    blackjack_payout: float = 1.5

    # Double down rules
    double_allowed: bool = True
    double_after_split: bool = True  # DAS

    # Split rules
    max_splits: int = 3  # Splits per round, so up to four hands
    resplit_aces: bool = False  # RSA
    hit_split_aces: bool = False  # Usually only one card to split aces

    # Late surrender on the first two cards
    surrender: bool = True

    insurance_available: bool = True

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise InvalidConfiguration("num_decks must be between 1 and 8")
        if self.min_bet < 1:
            raise InvalidConfiguration("min_bet must be at least 1")
        if self.max_bet < self.min_bet:
            raise InvalidConfiguration("max_bet must not be below min_bet")
        if self.side_bet_min < 1 or self.side_bet_max < self.side_bet_min:
            raise InvalidConfiguration("side bet limits must satisfy 1 <= min <= max")
        if self.blackjack_payout not in SUPPORTED_BLACKJACK_PAYOUTS:
            raise InvalidConfiguration(
                f"blackjack_payout must be one of {SUPPORTED_BLACKJACK_PAYOUTS}"
            )
        if self.max_splits < 0:
            raise InvalidConfiguration("max_splits must not be negative")

    @classmethod
    def classic(cls) -> "GameRules":
        """Classic six-deck H17 game."""
        return cls(
            num_decks=6,
            min_bet=5,
            max_bet=500,
            dealer_hits_soft_17=True,
            blackjack_payout=1.5,
            double_after_split=True,
            resplit_aces=False,
            surrender=True,
            max_splits=3,
        )

    @classmethod
    def vegas_strip(cls) -> "GameRules":
        """Standard Vegas Strip rules."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=True,
            resplit_aces=False,
            surrender=True,
        )

    @classmethod
    def atlantic_city(cls) -> "GameRules":
        """Atlantic City rules."""
        return cls(
            num_decks=8,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=True,
            resplit_aces=False,
            surrender=True,
        )

    @classmethod
    def european(cls) -> "GameRules":
        """European rules: two decks, no surrender, no insurance, no DAS."""
        return cls(
            num_decks=2,
            min_bet=5,
            max_bet=500,
            dealer_hits_soft_17=False,
            blackjack_payout=1.5,
            double_after_split=False,
            resplit_aces=False,
            surrender=False,
            insurance_available=False,
            max_splits=2,
        )

    @classmethod
    def single_deck(cls) -> "GameRules":
        """Single deck rules."""
        return cls(
            num_decks=1,
            dealer_hits_soft_17=True,
            blackjack_payout=1.2,
            double_after_split=False,
            resplit_aces=False,
            surrender=False,
        )
