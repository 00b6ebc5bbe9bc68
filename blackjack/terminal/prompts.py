# blackjack/terminal/prompts.py
"""
Blocking prompts for the three player decisions: bet, hit/stand, continue.

Each prompt loops until it gets an answer it can use. Read failures
(EOFError, KeyboardInterrupt) are not caught here; they end the session.
"""

from __future__ import annotations

import re
from typing import Callable

from ..engine.cards import Card
from ..engine.game_state import PlayerAction, PlayerStrategy, parse_player_action
from ..engine.session import parse_continue
from .display import Display

InputFn = Callable[[str], str]

# Optional sign and ASCII digits only: no digit separators, no non-ASCII digits
BET_PATTERN = re.compile(r"[+-]?[0-9]+")


def ask(question: str, input_fn: InputFn = input) -> str:
    return input_fn(f"{question} ")


def read_bet_amount(max_bet: int, display: Display, input_fn: InputFn = input) -> int:
    """Ask until the player enters an integer in 1..max_bet.

    Unparseable and non-positive answers re-prompt silently; a bet above the
    bankroll gets a message first.
    """
    while True:
        raw = ask("How much would you like to bet?", input_fn).strip()
        if not BET_PATTERN.fullmatch(raw):
            continue
        bet = int(raw)
        if bet > max_bet:
            display.not_enough_money()
            continue
        if bet <= 0:
            continue
        return bet


def ask_player_action(input_fn: InputFn = input) -> PlayerAction | None:
    """Ask once; None means the answer was neither hit nor stand."""
    return parse_player_action(ask("[h]it or [s]tand?", input_fn))


def terminal_player_strategy(input_fn: InputFn = input) -> PlayerStrategy:
    """Player strategy that asks a human at the terminal."""

    def _strategy(player_cards: tuple[Card, ...], dealer_upcard: Card) -> PlayerAction | None:
        return ask_player_action(input_fn)

    return _strategy


def confirm(prompt: str, input_fn: InputFn = input) -> bool:
    return parse_continue(ask(f"{prompt} [Y/n]", input_fn))
