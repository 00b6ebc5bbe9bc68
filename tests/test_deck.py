"""Tests for blackjack/engine/deck.py: deck creation, shuffling, and dealing."""

from __future__ import annotations

import numpy as np
import pytest

from blackjack.engine.cards import Card, Suit
from blackjack.engine.deck import (
    DECK_SIZE,
    Deck,
    DeckExhaustedError,
    create_deck,
    create_shuffled_deck,
    standard_cards,
)
from tests.conftest import hand


class TestCreateDeck:
    def test_length(self, fresh_deck):
        assert len(fresh_deck) == DECK_SIZE == 52

    def test_unique_cards(self):
        cards = standard_cards()
        assert len(set(cards)) == 52

    def test_thirteen_per_suit(self):
        cards = standard_cards()
        for suit in Suit:
            assert sum(1 for c in cards if c.suit is suit) == 13

    def test_independent_between_calls(self):
        d1 = create_deck()
        d2 = create_deck()
        d1.draw()
        assert len(d2) == 52

    def test_draws_from_end(self, fresh_deck):
        # build order ends with the spades, ace to king
        assert fresh_deck.draw() == Card(13, Suit.SPADES)
        assert fresh_deck.draw() == Card(12, Suit.SPADES)


class TestDraw:
    def test_decrements(self, fresh_deck):
        fresh_deck.draw()
        assert fresh_deck.remaining == 51

    def test_draw_all_without_replacement(self, fresh_deck):
        drawn = [fresh_deck.draw() for _ in range(52)]
        assert len(set(drawn)) == 52
        assert len(fresh_deck) == 0

    def test_empty_deck_raises(self, fresh_deck):
        for _ in range(52):
            fresh_deck.draw()
        with pytest.raises(DeckExhaustedError):
            fresh_deck.draw()

    def test_exhausted_error_is_value_error(self):
        with pytest.raises(ValueError):
            Deck([]).draw()


class TestShuffle:
    def test_shuffle_keeps_cards(self, fresh_deck, rng):
        fresh_deck.shuffle(rng)
        drawn = {fresh_deck.draw() for _ in range(52)}
        assert drawn == set(standard_cards())

    def test_shuffle_changes_order(self, rng):
        deck = create_shuffled_deck(rng)
        drawn = [deck.draw() for _ in range(52)]
        assert drawn != list(reversed(standard_cards()))

    def test_same_seed_same_order(self):
        d1 = create_shuffled_deck(np.random.default_rng(99))
        d2 = create_shuffled_deck(np.random.default_rng(99))
        assert [d1.draw() for _ in range(52)] == [d2.draw() for _ in range(52)]

    def test_shuffle_without_rng(self, fresh_deck):
        fresh_deck.shuffle()
        assert len(fresh_deck) == 52


class TestStacked:
    def test_deals_in_given_order(self):
        cards = hand('AH', '10C', '5D')
        deck = Deck.stacked(cards)
        assert (deck.draw(), deck.draw(), deck.draw()) == cards
        assert len(deck) == 0

    def test_from_strings(self):
        deck = Deck.stacked_from_str('KS', '2H')
        assert deck.draw() == Card(13, Suit.SPADES)
        assert deck.draw() == Card(2, Suit.HEARTS)

    def test_repr(self):
        assert repr(Deck.stacked_from_str('KS')) == "Deck(remaining=1)"
