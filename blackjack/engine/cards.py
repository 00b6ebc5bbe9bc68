"""
Card type, rank/suit symbols, and human-readable I/O helpers.

A card is an immutable (rank, suit) pair:
    rank: 1-13  ->  1=A, 2..10 numeric, 11=J, 12=Q, 13=K
    suit: Suit  ->  hearts, diamonds, clubs, spades

Rank is validated at construction, so every Card in circulation is legal.
String forms are '<rank><suit letter>' for parsing ('AH', '10C') and
'<rank><suit glyph>' for display ('A♥', '10♣').
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MIN_RANK: int = 1
MAX_RANK: int = 13

RANK_ACE: int = 1
RANK_JACK: int = 11
RANK_QUEEN: int = 12
RANK_KING: int = 13

# Ranks that count as 10 points
FACE_RANKS: frozenset[int] = frozenset({RANK_JACK, RANK_QUEEN, RANK_KING})

RANK_SYMBOLS: dict[int, str] = {
    RANK_ACE: 'A',
    RANK_JACK: 'J',
    RANK_QUEEN: 'Q',
    RANK_KING: 'K',
}


class Suit(Enum):
    HEARTS = '♥'
    DIAMONDS = '♦'
    CLUBS = '♣'
    SPADES = '♠'

    @property
    def letter(self) -> str:
        """Single ASCII letter used in parseable card strings."""
        return self.name[0]


# Deck build order
SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)

_SUIT_BY_LETTER: dict[str, Suit] = {s.letter: s for s in Suit}


@dataclass(frozen=True)
class Card:
    """A single playing card. Raises ValueError for a rank outside 1-13."""

    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if isinstance(self.rank, bool) or not isinstance(self.rank, int):
            raise ValueError(f"Invalid card rank: {self.rank!r}")
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"Invalid card rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid card suit: {self.suit!r}")

    @property
    def is_ace(self) -> bool:
        return self.rank == RANK_ACE

    def __str__(self) -> str:
        return card_to_str(self)


def rank_symbol(rank: int) -> str:
    """Return the display symbol for a rank.

    Examples:
        >>> rank_symbol(1)
        'A'
        >>> rank_symbol(10)
        '10'
        >>> rank_symbol(12)
        'Q'
    """
    return RANK_SYMBOLS.get(rank, str(rank))


def card_value(card: Card) -> int:
    """Return the face value of a card with the ace counted low.

    Examples:
        >>> card_value(Card(1, Suit.SPADES))
        1
        >>> card_value(Card(13, Suit.HEARTS))
        10
        >>> card_value(Card(7, Suit.CLUBS))
        7
    """
    if card.rank in FACE_RANKS:
        return 10
    return card.rank


def card_to_str(card: Card) -> str:
    """Render a card as '<rank-symbol><suit-glyph>', e.g. 'A♥' or '10♣'."""
    return rank_symbol(card.rank) + card.suit.value


def str_to_card(s: str) -> Card:
    """Parse '<rank><suit letter>' into a Card.

    Rank is 'A', '2'-'10', 'J', 'Q' or 'K'; suit is 'H', 'D', 'C' or 'S'.
    Both are case-insensitive.

    Examples:
        >>> str_to_card('AH')
        Card(rank=1, suit=<Suit.HEARTS: '♥'>)
        >>> str_to_card('10c').rank
        10

    Raises:
        ValueError: If the rank or suit is not recognised.
    """
    s = s.strip().upper()
    if len(s) < 2:
        raise ValueError(f"Cannot parse card string: {s!r}")
    rank_str, suit_char = s[:-1], s[-1]
    suit = _SUIT_BY_LETTER.get(suit_char)
    if suit is None:
        raise ValueError(f"Unknown suit in card string: {s!r}")
    for rank, symbol in RANK_SYMBOLS.items():
        if rank_str == symbol:
            return Card(rank, suit)
    if not rank_str.isdigit() or not 2 <= int(rank_str) <= 10:
        raise ValueError(f"Unknown rank in card string: {s!r}")
    return Card(int(rank_str), suit)


def hand_to_str(cards: tuple[Card, ...] | list[Card]) -> str:
    """Render a sequence of cards separated by spaces.

    Examples:
        >>> hand_to_str((str_to_card('AH'), str_to_card('10S')))
        'A♥ 10♠'
    """
    return ' '.join(card_to_str(c) for c in cards)
