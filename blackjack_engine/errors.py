"""Engine error taxonomy."""

from decimal import Decimal


class BlackjackError(Exception):
    """Base class for every error raised by the round engine."""


class ShoeEmpty(BlackjackError, IndexError):
    """A draw was attempted on a shoe with no cards remaining."""

    def __init__(self, message: str = "Cannot draw from empty shoe") -> None:
        super().__init__(message)


class IllegalAction(BlackjackError):
    """Action not valid for the current phase, hand status or rules."""


class InsufficientBalance(BlackjackError):
    """A bet, double, split or insurance stake exceeds available funds."""

    def __init__(self, required: Decimal, available: Decimal) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Stake of {required} exceeds available balance of {available}")


class InvalidConfiguration(BlackjackError, ValueError):
    """Malformed rules or shoe configuration, rejected at construction."""
