"""
Game configuration.

Defaults reproduce the house: a 1000-unit starting bankroll and a deck that is
rebuilt once fewer than 17 cards remain. Everything can be overridden from the
environment:

    BLACKJACK_BANKROLL      starting bankroll (positive int)
    BLACKJACK_RESHUFFLE_AT  rebuild the deck below this many cards (int, 0-52)
    BLACKJACK_SEED          seed for the shuffle generator (int)
    NO_COLOR                any non-empty value disables ANSI colors
    LOG_LEVEL               DEBUG / INFO / WARNING / ERROR

The payout odds are not configurable; they live in engine/rules.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .engine.deck import DECK_SIZE

DEFAULT_STARTING_BANKROLL: int = 1000

# Most cards one round can consume: a non-bust player hand and a dealer hand
# together total at most 21 + 26 points, and the 18 lowest cards in a deck
# already sum to 50.
MAX_CARDS_PER_ROUND: int = 17


@dataclass(frozen=True)
class GameConfig:
    starting_bankroll: int = DEFAULT_STARTING_BANKROLL
    reshuffle_threshold: int = MAX_CARDS_PER_ROUND
    seed: int | None = None
    color: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.starting_bankroll <= 0:
            raise ValueError(
                f"starting_bankroll must be positive, got {self.starting_bankroll}"
            )
        if not 0 <= self.reshuffle_threshold <= DECK_SIZE:
            raise ValueError(
                f"reshuffle_threshold must be within 0..{DECK_SIZE}, "
                f"got {self.reshuffle_threshold}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GameConfig:
        """Build a config from environment variables, falling back to defaults.

        Raises:
            ValueError: If a numeric variable is not an integer or out of range.
        """
        env = os.environ if environ is None else environ
        seed = _int_from_env(env, "BLACKJACK_SEED", None)
        return cls(
            starting_bankroll=_int_from_env(
                env, "BLACKJACK_BANKROLL", DEFAULT_STARTING_BANKROLL
            ),
            reshuffle_threshold=_int_from_env(
                env, "BLACKJACK_RESHUFFLE_AT", MAX_CARDS_PER_ROUND
            ),
            seed=seed,
            color=not env.get("NO_COLOR"),
            log_level=env.get("LOG_LEVEL", "WARNING").upper(),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
