"""
Session controller: bankroll and deck ownership across rounds.

The deck is built and shuffled once when the session starts. Before every
round, if fewer than ``config.reshuffle_threshold`` cards remain, a fresh deck
is built and shuffled, so a round never starts on a deck that could run dry.
With the default threshold (17, the most cards a single round can consume) a
mid-round DeckExhaustedError cannot occur; with a lower threshold it is raised
rather than papered over.

The session ends when the player quits or the bankroll reaches exactly zero.
"""

from __future__ import annotations

import numpy as np

from ..config import GameConfig
from ..logging_utils import get_logger
from .deck import Deck, create_shuffled_deck
from .game_state import PlayerStrategy, RoundObserver, RoundResult, play_round

log = get_logger(__name__)


def parse_continue(answer: str) -> bool:
    """Interpret a continue-or-quit answer.

    'y'/'yes' continue and 'n'/'no' stop; anything else (including an empty
    answer) continues. Case-insensitive, surrounding whitespace ignored.

    Examples:
        >>> parse_continue('No')
        False
        >>> parse_continue('')
        True
        >>> parse_continue('maybe')
        True
    """
    return answer.strip().lower() not in ('n', 'no')


class Session:
    """A single player's sitting at the table.

    Args:
        config: Game configuration (bankroll, reshuffle threshold, seed).
        rng: Generator used for every shuffle. Built from ``config.seed``
             when omitted.
        deck: Optional pre-built deck (tests, replays). It is used as-is and
              is still subject to the reshuffle threshold.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
        deck: Deck | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.bankroll: int = self.config.starting_bankroll
        self.deck = deck if deck is not None else create_shuffled_deck(self.rng)
        self.rounds_played = 0
        self.reshuffles = 0
        self.history: list[RoundResult] = []

    @property
    def is_broke(self) -> bool:
        return self.bankroll == 0

    def prepare_deck(self) -> bool:
        """Rebuild and reshuffle the deck if it is below the threshold.

        Returns:
            True if a fresh deck was put in play.
        """
        if self.deck.remaining >= self.config.reshuffle_threshold:
            return False
        log.info(
            "Only %d cards left (threshold %d); shuffling a fresh deck",
            self.deck.remaining, self.config.reshuffle_threshold,
        )
        self.deck = create_shuffled_deck(self.rng)
        self.reshuffles += 1
        return True

    def play_round(
        self,
        bet: int,
        player_strategy: PlayerStrategy,
        observer: RoundObserver | None = None,
    ) -> RoundResult:
        """Play one round with the session's deck and bankroll.

        Raises:
            InvalidBetError: If the bet is not within 1..bankroll.
            RuntimeError: If the session is already broke.
        """
        if self.is_broke:
            raise RuntimeError("Cannot play a round with an empty bankroll.")
        self.prepare_deck()
        result = play_round(self.deck, self.bankroll, bet, player_strategy, observer)
        self.bankroll = result.bankroll_after
        self.rounds_played += 1
        self.history.append(result)
        log.info(
            "Round %d: bet %d, %s, net %+d, bankroll %d",
            self.rounds_played, bet, result.outcome.name, result.net, self.bankroll,
        )
        return result
