"""
House rules: bet validation, dealer draw policy, settlement, and payout.

Settlement order:
    1. Player bust        -> LOSS (dealer never plays)
    2. Dealer bust        -> WIN
    3. Best-total compare -> WIN / LOSS / PUSH

Payout convention: calculate_payout() returns the amount CREDITED back to the
bankroll at resolution. The bet itself is deducted when it is placed, so
    WIN  -> bet + bet * 3 // 2   (3:2 on every win, truncated)
    PUSH -> bet
    LOSS -> 0
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Sequence

from .cards import Card
from .hand import BLACKJACK, best_score, hand_scores, is_bust

DEALER_STAND_TOTAL: int = 17

# Fixed 3:2 odds
PAYOUT_NUMERATOR: int = 3
PAYOUT_DENOMINATOR: int = 2


class Outcome(Enum):
    WIN = auto()
    LOSS = auto()
    PUSH = auto()


class InvalidBetError(ValueError):
    """Raised when a bet is not a positive integer within the bankroll."""


def validate_bet(bet: int, bankroll: int) -> None:
    """Raise InvalidBetError unless 0 < bet <= bankroll.

    Examples:
        >>> validate_bet(100, 1000)
        >>> validate_bet(0, 1000)
        Traceback (most recent call last):
        ...
        blackjack.engine.rules.InvalidBetError: Bet must be positive, got 0.
    """
    if isinstance(bet, bool) or not isinstance(bet, int):
        raise InvalidBetError(f"Bet must be an integer, got {bet!r}.")
    if bet <= 0:
        raise InvalidBetError(f"Bet must be positive, got {bet}.")
    if bet > bankroll:
        raise InvalidBetError(f"Bet of {bet} exceeds bankroll of {bankroll}.")


def dealer_should_hit(dealer_cards: Sequence[Card]) -> bool:
    """Dealer draws while its best total is below 17 (stands on all 17s).

    A busted dealer hand always has a best total above 17, so the draw loop
    stops there too.
    """
    return best_score(dealer_cards) < DEALER_STAND_TOTAL


def settle_round(
    player_cards: Sequence[Card],
    dealer_cards: Sequence[Card],
) -> Outcome:
    """Decide the outcome of a finished round from the player's perspective.

    Args:
        player_cards: Player's final hand.
        dealer_cards: Dealer's final hand (after the dealer's draw loop, or the
                      initial two cards if the player busted).

    Returns:
        Outcome.WIN, Outcome.LOSS or Outcome.PUSH.
    """
    if is_bust(player_cards):
        return Outcome.LOSS

    dealer_best = max(hand_scores(dealer_cards))
    player_best = max(hand_scores(player_cards))

    if dealer_best > BLACKJACK:
        return Outcome.WIN
    if dealer_best > player_best:
        return Outcome.LOSS
    if dealer_best < player_best:
        return Outcome.WIN
    return Outcome.PUSH


def calculate_payout(outcome: Outcome, bet: int) -> int:
    """Return the amount credited back to the bankroll for a settled bet.

    Examples:
        >>> calculate_payout(Outcome.WIN, 100)
        250
        >>> calculate_payout(Outcome.WIN, 15)     # 15 + 22
        37
        >>> calculate_payout(Outcome.PUSH, 100)
        100
        >>> calculate_payout(Outcome.LOSS, 100)
        0
    """
    if outcome is Outcome.WIN:
        return bet + bet * PAYOUT_NUMERATOR // PAYOUT_DENOMINATOR
    if outcome is Outcome.PUSH:
        return bet
    return 0


def net_result(outcome: Outcome, bet: int) -> int:
    """Signed bankroll change over the whole round (credit minus the bet)."""
    return calculate_payout(outcome, bet) - bet
