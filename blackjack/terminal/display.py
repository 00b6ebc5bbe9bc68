# blackjack/terminal/display.py
"""Text rendering for the terminal game: ANSI colors, hands, round messages."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from ..engine.cards import Card, card_to_str
from ..engine.game_state import EventKind, RoundEvent
from ..engine.hand import format_scores, hand_scores
from ..engine.rules import Outcome

CSI = "\033["


class Colors:
    RESET = CSI + "0m"
    BOLD = CSI + "1m"
    RED = CSI + "31m"
    GREEN = CSI + "32m"
    YELLOW = CSI + "33m"


HIDDEN_CARD = "??"
BANNER_RULE = "$" * 21


class Display:
    """Writes game text to a stream, optionally colored."""

    def __init__(self, out: TextIO | None = None, color: bool = True) -> None:
        self.out = out if out is not None else sys.stdout
        self.color = color

    # ── Primitives ────────────────────────────────────────────────────────────

    def paint(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        return "".join(styles) + text + Colors.RESET

    def line(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    # ── Screens ───────────────────────────────────────────────────────────────

    def banner(self) -> None:
        self.line(self.paint(BANNER_RULE, Colors.GREEN))
        self.line("Welcome to Blackjack!")
        self.line(self.paint(BANNER_RULE, Colors.GREEN))
        self.line()

    def bankroll(self, amount: int) -> None:
        self.line(f"You have {self.paint(f'${amount}', Colors.GREEN)}")

    def not_enough_money(self) -> None:
        self.line("You don't have that much money")

    def broke(self) -> None:
        self.line(self.paint("You're broke! Goodbye!", Colors.RED, Colors.BOLD))

    def goodbye(self) -> None:
        self.line("Thanks for playing!")

    # ── Rounds ────────────────────────────────────────────────────────────────

    def on_round_event(self, event: RoundEvent) -> None:
        """RoundObserver hook: render each visible step of a round."""
        if event.kind is EventKind.DEALT:
            self.line(f"Dealer: {render_dealer_hidden(event.dealer_cards)}")
            self.line(f"You: {render_hand(event.player_cards)}")
        elif event.kind is EventKind.PLAYER_DREW:
            self.line(render_hand(event.player_cards))
        elif event.kind is EventKind.PLAYER_BUST:
            self.line(self.paint("You bust!", Colors.RED))
        elif event.kind is EventKind.DEALER_DONE:
            self.line()
            self.line("Dealer's Play")
            self.line(f"Dealer: {render_hand(event.dealer_cards)}")
        elif event.kind is EventKind.SETTLED and event.result is not None:
            self.line(self.outcome_message(event.result.outcome, event.result.dealer_busted))

    def outcome_message(self, outcome: Outcome, dealer_busted: bool) -> str:
        if outcome is Outcome.WIN:
            won = self.paint("You win!", Colors.GREEN)
            return f"Dealer busts! {won}" if dealer_busted else won
        if outcome is Outcome.LOSS:
            return self.paint("Dealer wins!", Colors.RED)
        return f"{self.paint('Push!', Colors.YELLOW)} Bet is returned."


def render_hand(cards: Sequence[Card]) -> str:
    """'A♥ 10♥  score: 11 or 21'"""
    shown = " ".join(card_to_str(c) for c in cards)
    return f"{shown}  score: {format_scores(hand_scores(cards))}"


def render_dealer_hidden(cards: Sequence[Card]) -> str:
    """Show the dealer's upcard and mask the rest: 'K♠ ??'"""
    return " ".join([card_to_str(cards[0])] + [HIDDEN_CARD] * (len(cards) - 1))
