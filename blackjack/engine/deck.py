"""
Deck creation, shuffling, and dealing.

A Deck is an ordered list of Card objects. Cards are dealt from the END of the
list, so a freshly built deck deals the king of spades first and a shuffled
deck deals whatever permutation the generator produced.

Shuffling uses a numpy Generator so simulations can be seeded and reproduced.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .cards import MAX_RANK, MIN_RANK, SUITS, Card, str_to_card

DECK_SIZE: int = 52


class DeckExhaustedError(ValueError):
    """Raised when a card is drawn from an empty deck."""


def standard_cards() -> list[Card]:
    """Return the 52 unique cards in build order (suit by suit, ace to king)."""
    return [Card(rank, suit) for suit in SUITS for rank in range(MIN_RANK, MAX_RANK + 1)]


class Deck:
    """Sequential draw-without-replacement container of cards.

    Examples:
        >>> deck = Deck()
        >>> len(deck)
        52
        >>> str(deck.draw())
        'K♠'
        >>> len(deck)
        51
    """

    def __init__(self, cards: Iterable[Card] | None = None) -> None:
        self._cards: list[Card] = list(cards) if cards is not None else standard_cards()

    @classmethod
    def stacked(cls, draw_order: Iterable[Card]) -> Deck:
        """Build a deck that deals exactly ``draw_order``, first card first.

        Used for deterministic test setups and replaying recorded rounds.
        """
        return cls(reversed(list(draw_order)))

    @classmethod
    def stacked_from_str(cls, *card_strs: str) -> Deck:
        """Like stacked(), with human-readable card strings ('AH', '10C')."""
        return cls.stacked(str_to_card(s) for s in card_strs)

    def shuffle(self, rng: np.random.Generator | None = None) -> None:
        """Replace the card order with a random permutation.

        Args:
            rng: Generator to draw the permutation from. A fresh, OS-seeded
                 generator is used when omitted.
        """
        if rng is None:
            rng = np.random.default_rng()
        order = rng.permutation(len(self._cards))
        self._cards = [self._cards[i] for i in order]

    def draw(self) -> Card:
        """Remove and return the last card.

        Raises:
            DeckExhaustedError: If no cards remain.
        """
        if not self._cards:
            raise DeckExhaustedError("Cannot draw from an empty deck.")
        return self._cards.pop()

    @property
    def remaining(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(remaining={len(self._cards)})"


def create_deck() -> Deck:
    """Create a fresh, unshuffled 52-card deck."""
    return Deck()


def create_shuffled_deck(rng: np.random.Generator | None = None) -> Deck:
    """Create a fresh 52-card deck and shuffle it once.

    Examples:
        >>> deck = create_shuffled_deck(np.random.default_rng(7))
        >>> len(deck)
        52
    """
    deck = Deck()
    deck.shuffle(rng)
    return deck
