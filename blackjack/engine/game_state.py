"""
Round state machine and complete round play.

A round moves through:
    BETTING -> PLAYER_TURN -> DEALER_TURN -> RESOLUTION -> DONE

with one shortcut: a player bust goes straight from PLAYER_TURN to DONE and
the dealer never plays.

Round rules modelled here:
    - The bet is deducted from the bankroll when it is placed.
    - Deal order is player, dealer, player, dealer. The dealer's first card is
      the upcard; the second is hidden from display only.
    - The player may act while the lowest total is below 21 and no total is
      exactly 21. Reaching 21 (or busting) ends the turn automatically.
    - The dealer draws while its best total is below 17.
    - Wins pay 3:2 (truncated), pushes return the bet, losses return nothing.

Round is the explicit state machine; play_round() drives one to completion
using a player strategy callable and an optional observer for rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from ..logging_utils import get_logger
from .cards import Card, hand_to_str
from .deck import Deck
from .hand import BLACKJACK, ScoreSet, hand_scores, is_blackjack, is_bust
from .rules import (
    Outcome,
    calculate_payout,
    dealer_should_hit,
    settle_round,
    validate_bet,
)

log = get_logger(__name__)


# ─── Enumerations ─────────────────────────────────────────────────────────────

class Phase(Enum):
    BETTING = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    RESOLUTION = auto()
    DONE = auto()


class PlayerAction(Enum):
    HIT = auto()
    STAND = auto()


class EventKind(Enum):
    DEALT = auto()          # initial four cards are out
    PLAYER_DREW = auto()    # player hit and received a card
    PLAYER_BUST = auto()    # round over, dealer does not play
    DEALER_DONE = auto()    # dealer finished drawing
    SETTLED = auto()        # outcome decided, bankroll credited


class IllegalActionError(RuntimeError):
    """Raised when a round transition is attempted in the wrong phase."""


# ─── Event / Result types ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class RoundEvent:
    """Snapshot handed to observers at each visible step of a round."""
    kind: EventKind
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    result: Optional[RoundResult] = None


@dataclass(frozen=True)
class RoundResult:
    """Result of a completed round, from the player's perspective."""
    bet: int
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    outcome: Outcome
    player_busted: bool
    dealer_played: bool
    dealer_busted: bool
    player_blackjack: bool
    credit: int              # amount returned to the bankroll at resolution
    bankroll_before: int     # before the bet was deducted
    bankroll_after: int

    @property
    def net(self) -> int:
        """Signed bankroll change over the round."""
        return self.bankroll_after - self.bankroll_before

    @property
    def player_scores(self) -> ScoreSet:
        return hand_scores(self.player_cards)

    @property
    def dealer_scores(self) -> ScoreSet:
        return hand_scores(self.dealer_cards)

    def __str__(self) -> str:
        return (
            f"Player: {hand_to_str(self.player_cards)} "
            f"(best={max(self.player_scores)}) | "
            f"Dealer: {hand_to_str(self.dealer_cards)} "
            f"(best={max(self.dealer_scores)}) | "
            f"{self.outcome.name} {self.net:+d}"
        )


# ─── Strategy / observer type aliases ─────────────────────────────────────────

# player_strategy(player_cards, dealer_upcard) -> PlayerAction, or None for an
# unrecognised answer (the player is simply asked again)
PlayerStrategy = Callable[[tuple[Card, ...], Card], Optional[PlayerAction]]

RoundObserver = Callable[[RoundEvent], None]


def parse_player_action(answer: str) -> PlayerAction | None:
    """Map a typed answer to an action: 'h...' hits, 's...' stands.

    Case-insensitive prefix match. Anything else returns None.

    Examples:
        >>> parse_player_action('Hit me')
        <PlayerAction.HIT: 1>
        >>> parse_player_action('s')
        <PlayerAction.STAND: 2>
        >>> parse_player_action('double') is None
        True
    """
    answer = answer.lower()
    if answer.startswith('h'):
        return PlayerAction.HIT
    if answer.startswith('s'):
        return PlayerAction.STAND
    return None


# ─── Round state machine ──────────────────────────────────────────────────────

class Round:
    """One round of blackjack against the house.

    Examples:
        >>> deck = Deck.stacked_from_str('10H', '9C', 'QS', '7D', '8H')
        >>> rnd = Round(deck, bankroll=1000)
        >>> rnd.place_bet(100)
        >>> rnd.bankroll
        900
        >>> rnd.stand()
        >>> rnd.play_dealer()
        >>> rnd.resolve().bankroll_after
        1150
    """

    def __init__(self, deck: Deck, bankroll: int) -> None:
        self.deck = deck
        self.bankroll = bankroll
        self.bankroll_before = bankroll
        self.bet = 0
        self.player_cards: list[Card] = []
        self.dealer_cards: list[Card] = []
        self.phase = Phase.BETTING
        self.dealer_played = False
        self._result: RoundResult | None = None

    # ── Views ─────────────────────────────────────────────────────────────────

    @property
    def player_scores(self) -> ScoreSet:
        return hand_scores(self.player_cards)

    @property
    def dealer_scores(self) -> ScoreSet:
        return hand_scores(self.dealer_cards)

    @property
    def dealer_upcard(self) -> Card:
        return self.dealer_cards[0]

    @property
    def player_can_act(self) -> bool:
        """True while the player's lowest total is below 21 and none is 21."""
        if self.phase is not Phase.PLAYER_TURN:
            return False
        scores = self.player_scores
        return scores[0] < BLACKJACK and BLACKJACK not in scores

    @property
    def result(self) -> RoundResult:
        if self._result is None:
            raise IllegalActionError(f"Round is not finished (phase={self.phase.name}).")
        return self._result

    def _require(self, phase: Phase, action: str) -> None:
        if self.phase is not phase:
            raise IllegalActionError(
                f"Cannot {action} during {self.phase.name}; expected {phase.name}."
            )

    # ── Transitions ───────────────────────────────────────────────────────────

    def place_bet(self, bet: int) -> None:
        """Take the bet and deal the opening hands.

        Raises:
            InvalidBetError: If the bet is not within 1..bankroll.
            IllegalActionError: If the bet was already placed.
        """
        self._require(Phase.BETTING, "place a bet")
        validate_bet(bet, self.bankroll)

        self.bet = bet
        self.bankroll -= bet

        self.player_cards.append(self.deck.draw())
        self.dealer_cards.append(self.deck.draw())
        self.player_cards.append(self.deck.draw())
        self.dealer_cards.append(self.deck.draw())

        self.phase = Phase.PLAYER_TURN
        log.debug(
            "Bet %d placed; player %s, dealer upcard %s",
            bet, hand_to_str(self.player_cards), self.dealer_upcard,
        )

        # A natural 21 leaves nothing to decide
        if not self.player_can_act:
            self._finish_player_turn()

    def hit(self) -> Card:
        """Draw one card for the player and return it.

        Ends the player's turn automatically on a bust or a total of 21.
        """
        self._require(Phase.PLAYER_TURN, "hit")
        card = self.deck.draw()
        self.player_cards.append(card)
        log.debug("Player hits: %s -> %s", card, self.player_scores)
        if not self.player_can_act:
            self._finish_player_turn()
        return card

    def stand(self) -> None:
        self._require(Phase.PLAYER_TURN, "stand")
        log.debug("Player stands on %s", self.player_scores)
        self._finish_player_turn()

    def _finish_player_turn(self) -> None:
        if is_bust(self.player_cards):
            log.debug("Player busts with %s", self.player_scores)
            self._settle(Outcome.LOSS)
        else:
            self.phase = Phase.DEALER_TURN

    def play_dealer(self) -> None:
        """Run the dealer's fixed draw policy: hit while best total < 17."""
        self._require(Phase.DEALER_TURN, "play the dealer")
        while dealer_should_hit(self.dealer_cards):
            self.dealer_cards.append(self.deck.draw())
        self.dealer_played = True
        self.phase = Phase.RESOLUTION
        log.debug("Dealer finishes on %s", self.dealer_scores)

    def resolve(self) -> RoundResult:
        """Compare hands, credit the bankroll, and finish the round."""
        self._require(Phase.RESOLUTION, "resolve")
        return self._settle(settle_round(self.player_cards, self.dealer_cards))

    def _settle(self, outcome: Outcome) -> RoundResult:
        credit = calculate_payout(outcome, self.bet)
        self.bankroll += credit
        self.phase = Phase.DONE
        self._result = RoundResult(
            bet=self.bet,
            player_cards=tuple(self.player_cards),
            dealer_cards=tuple(self.dealer_cards),
            outcome=outcome,
            player_busted=is_bust(self.player_cards),
            dealer_played=self.dealer_played,
            dealer_busted=self.dealer_played and is_bust(self.dealer_cards),
            player_blackjack=is_blackjack(self.player_cards),
            credit=credit,
            bankroll_before=self.bankroll_before,
            bankroll_after=self.bankroll,
        )
        log.debug("Round settled: %s", self._result)
        return self._result

    def snapshot(self, kind: EventKind) -> RoundEvent:
        return RoundEvent(
            kind=kind,
            player_cards=tuple(self.player_cards),
            dealer_cards=tuple(self.dealer_cards),
            result=self._result,
        )


# ─── Core round driver ────────────────────────────────────────────────────────

def play_round(
    deck: Deck,
    bankroll: int,
    bet: int,
    player_strategy: PlayerStrategy,
    observer: RoundObserver | None = None,
) -> RoundResult:
    """Play one complete round and return the result.

    Args:
        deck: Deck to draw from; cards dealt this round are removed from it.
        bankroll: Player's bankroll before the bet.
        bet: Wager, 1..bankroll.
        player_strategy: Callable for hit/stand decisions. Returning None
                         means "ask again" and leaves the hand unchanged.
        observer: Optional callable notified at each visible step.

    Returns:
        RoundResult; ``result.bankroll_after`` is the new bankroll.

    Raises:
        InvalidBetError: If the bet is out of range.
        DeckExhaustedError: If the deck runs out mid-round.
    """
    def notify(kind: EventKind) -> None:
        if observer is not None:
            observer(rnd.snapshot(kind))

    rnd = Round(deck, bankroll)
    rnd.place_bet(bet)
    notify(EventKind.DEALT)

    # ── Player turn ───────────────────────────────────────────────────────────
    while rnd.player_can_act:
        action = player_strategy(tuple(rnd.player_cards), rnd.dealer_upcard)
        if action is PlayerAction.HIT:
            rnd.hit()
            notify(EventKind.PLAYER_DREW)
        elif action is PlayerAction.STAND:
            rnd.stand()
        # None: unrecognised answer, ask again

    # ── Player bust: settled already, dealer does not play ────────────────────
    if rnd.phase is Phase.DONE:
        notify(EventKind.PLAYER_BUST)
        return rnd.result

    # ── Dealer turn and resolution ────────────────────────────────────────────
    rnd.play_dealer()
    notify(EventKind.DEALER_DONE)
    result = rnd.resolve()
    notify(EventKind.SETTLED)
    return result
