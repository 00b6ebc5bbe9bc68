"""
Shared pytest fixtures for the blackjack tests.

Provides convenience wrappers around str_to_card for building known hands,
stacked decks with a fixed draw order, and scripted player strategies.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pytest

from blackjack.engine.cards import Card, str_to_card
from blackjack.engine.deck import Deck, create_deck
from blackjack.engine.game_state import PlayerAction


def hand(*card_strs: str) -> tuple[Card, ...]:
    """Build a hand tuple from human-readable card strings.

    Examples:
        >>> [str(c) for c in hand('AH', '10C')]
        ['A♥', '10♣']
    """
    return tuple(str_to_card(s) for s in card_strs)


def stacked(*card_strs: str) -> Deck:
    """Deck that deals the given cards in order (deal order: P, D, P, D, ...)."""
    return Deck.stacked_from_str(*card_strs)


class ScriptedStrategy:
    """Player strategy that replays a fixed list of answers and records calls.

    Answers may be PlayerAction values or None (an unrecognised answer).
    Raises AssertionError if asked more often than scripted.
    """

    def __init__(self, answers: Iterable[PlayerAction | None]) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[tuple[Card, ...], Card]] = []

    def __call__(self, player_cards: tuple[Card, ...], dealer_upcard: Card) -> PlayerAction | None:
        self.calls.append((player_cards, dealer_upcard))
        assert self.answers, "strategy asked for more decisions than scripted"
        return self.answers.pop(0)


HIT = PlayerAction.HIT
STAND = PlayerAction.STAND


@pytest.fixture
def fresh_deck() -> Deck:
    """Return a full, unshuffled 52-card deck."""
    return create_deck()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
