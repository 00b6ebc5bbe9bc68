"""
Hand evaluation: the score set of a hand under the dual ace-value rule.

Every card is first counted at its low face value (ace = 1, J/Q/K = 10).
If the hand holds at least one ace and adding 10 does not bust, the hand has a
second, "soft" total. Only one ace is ever promoted, so a score set holds at
most two totals no matter how many aces are present:

    5-8       -> (13,)
    A-10      -> (11, 21)
    5-A-A     -> (7, 17)
    10-9-A    -> (20,)        20 + 10 would bust

Score sets are returned as ascending tuples, low total first. The result
depends only on the multiset of cards, never on their order.
"""

from __future__ import annotations

from typing import Sequence

from .cards import Card, card_value

BLACKJACK: int = 21
SOFT_BONUS: int = 10

ScoreSet = tuple[int, ...]


def hand_scores(cards: Sequence[Card]) -> ScoreSet:
    """Return every legitimate total for a hand.

    Args:
        cards: Non-empty sequence of cards.

    Returns:
        Ascending tuple of one or two distinct totals.

    Raises:
        ValueError: If the hand is empty.

    Examples:
        >>> from blackjack.engine.cards import str_to_card
        >>> hand_scores([str_to_card('AH'), str_to_card('10H')])
        (11, 21)
        >>> hand_scores([str_to_card('10C'), str_to_card('9C'), str_to_card('AC')])
        (20,)
    """
    if not cards:
        raise ValueError("Cannot score an empty hand.")

    base_total = 0
    seen_ace = False
    for card in cards:
        base_total += card_value(card)
        if card.is_ace:
            seen_ace = True

    if seen_ace and base_total + SOFT_BONUS <= BLACKJACK:
        return (base_total, base_total + SOFT_BONUS)
    return (base_total,)


def lowest_score(cards: Sequence[Card]) -> int:
    return hand_scores(cards)[0]


def best_score(cards: Sequence[Card]) -> int:
    """Return the highest total in the score set.

    The soft total is only ever present when it does not bust, so this is
    also the best playable total of a live hand.
    """
    return hand_scores(cards)[-1]


def is_bust(cards: Sequence[Card]) -> bool:
    """Return True if every total of the hand exceeds 21."""
    return all(score > BLACKJACK for score in hand_scores(cards))


def is_soft(cards: Sequence[Card]) -> bool:
    """Return True if an ace can currently be counted as 11."""
    return len(hand_scores(cards)) == 2


def has_twenty_one(cards: Sequence[Card]) -> bool:
    return BLACKJACK in hand_scores(cards)


def is_blackjack(cards: Sequence[Card]) -> bool:
    """Return True for a two-card 21 (a natural).

    Examples:
        >>> from blackjack.engine.cards import str_to_card
        >>> is_blackjack([str_to_card('AS'), str_to_card('KH')])
        True
        >>> is_blackjack([str_to_card('7S'), str_to_card('7H'), str_to_card('7D')])
        False
    """
    return len(cards) == 2 and has_twenty_one(cards)


def format_scores(scores: ScoreSet) -> str:
    """Format a score set for display: '13' or '11 or 21'."""
    return ' or '.join(str(s) for s in scores)
