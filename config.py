"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field

from blackjack_engine.rules import GameRules
from blackjack_engine.shoe import DEFAULT_PENETRATION, ShoeManager


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass(frozen=True)
class ShoeConfig:
    """Shoe construction and shuffling."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("SHOE_DECKS", "6")))
    penetration: float = field(
        default_factory=lambda: float(os.getenv("SHOE_PENETRATION", str(DEFAULT_PENETRATION)))
    )
    shuffle_method: str = field(
        default_factory=lambda: os.getenv("SHUFFLE_METHOD", "fisher_yates")
    )
    shuffle_passes: int | None = field(default_factory=lambda: _env_optional_int("SHUFFLE_PASSES"))
    include_jokers: bool = field(default_factory=lambda: _env_bool("INCLUDE_JOKERS", "false"))

    def to_manager(self) -> ShoeManager:
        """Build the shoe manager; raises InvalidConfiguration on bad values."""
        return ShoeManager(
            num_decks=self.num_decks,
            penetration=self.penetration,
            shuffle_method=self.shuffle_method,
            shuffle_passes=self.shuffle_passes,
            include_jokers=self.include_jokers,
        )


@dataclass(frozen=True)
class TableConfig:
    """Default table rules."""

    min_bet: int = field(default_factory=lambda: int(os.getenv("MIN_BET", "10")))
    max_bet: int = field(default_factory=lambda: int(os.getenv("MAX_BET", "1000")))
    blackjack_payout: float = field(
        default_factory=lambda: float(os.getenv("BLACKJACK_PAYOUT", "1.5"))
    )
    dealer_hits_soft_17: bool = field(
        default_factory=lambda: _env_bool("DEALER_HITS_SOFT_17", "true")
    )
    double_after_split: bool = field(
        default_factory=lambda: _env_bool("DOUBLE_AFTER_SPLIT", "true")
    )
    surrender_allowed: bool = field(default_factory=lambda: _env_bool("SURRENDER_ALLOWED", "true"))
    max_splits: int = field(default_factory=lambda: int(os.getenv("MAX_SPLITS", "3")))
    resplit_aces: bool = field(default_factory=lambda: _env_bool("RESPLIT_ACES", "false"))
    hit_split_aces: bool = field(default_factory=lambda: _env_bool("HIT_SPLIT_ACES", "false"))
    insurance_available: bool = field(
        default_factory=lambda: _env_bool("INSURANCE_AVAILABLE", "true")
    )

    def to_rules(self, num_decks: int) -> GameRules:
        """Build table rules for a shoe of ``num_decks``."""
        return GameRules(
            num_decks=num_decks,
            min_bet=self.min_bet,
            max_bet=self.max_bet,
            blackjack_payout=self.blackjack_payout,
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            double_after_split=self.double_after_split,
            surrender=self.surrender_allowed,
            max_splits=self.max_splits,
            resplit_aces=self.resplit_aces,
            hit_split_aces=self.hit_split_aces,
            insurance_available=self.insurance_available,
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration for applications embedding the engine."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    shoe: ShoeConfig = field(default_factory=ShoeConfig)
    table: TableConfig = field(default_factory=TableConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def rules(self) -> GameRules:
        return self.table.to_rules(self.shoe.num_decks)

    def shoe_manager(self) -> ShoeManager:
        return self.shoe.to_manager()


def load_config() -> AppConfig:
    """Read configuration from the current environment."""
    return AppConfig()


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Attach a stream handler to the root logger at the configured level."""
    config = config or LoggingConfig()
    logging.basicConfig(level=config.level, format=config.format)
