"""
Monte Carlo simulator for the house rules.

Plays automated rounds through the real engine (play_round) and accumulates
per-round net payouts to produce EV statistics with confidence intervals.

Payouts are reported per unit bet: a round played for ``bet`` chips that nets
+150 on a 100-chip bet counts as +1.5. Possible per-round values are therefore
-1 (loss), 0 (push) and +1.5 (any win; 3:2 is paid on every win). A bet that
is not a multiple of 2 loses a fraction of a unit to integer truncation.

Rounds share one deck, which is rebuilt by the same threshold rule the
session uses, so results reflect card removal within a deck. The bankroll is
treated as unlimited.

Usage:
    python -m blackjack.analysis.simulator [n_rounds]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from blackjack.config import MAX_CARDS_PER_ROUND
from blackjack.engine.cards import Card
from blackjack.engine.deck import create_shuffled_deck
from blackjack.engine.game_state import PlayerAction, PlayerStrategy, play_round
from blackjack.engine.hand import best_score, lowest_score
from blackjack.engine.rules import Outcome
from blackjack.logging_utils import get_logger, setup_logging

log = get_logger(__name__)

# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate statistics from a Monte Carlo run.

    Attributes:
        n_rounds:       Number of rounds simulated.
        mean_ev:        Mean net payout per unit bet (positive = player wins).
        std_ev:         Sample standard deviation of per-round payouts.
        ci_95_low:      Lower bound of the 95% confidence interval for mean_ev.
        ci_95_high:     Upper bound of the 95% confidence interval for mean_ev.
        house_edge_pct: -mean_ev * 100. Negative means the player has the edge.
        n_wins:         Rounds the player won.
        n_losses:       Rounds the player lost (busts included).
        n_pushes:       Rounds that pushed.
        n_player_busts: Rounds lost to a player bust (dealer never played).
        n_dealer_busts: Rounds where the dealer drew past 21.
        n_blackjacks:   Rounds where the player was dealt a two-card 21.
        n_reshuffles:   Times a fresh deck was put in play.
        payouts:        Per-round payout array (float64, length n_rounds), or
                        None unless return_payouts=True.
    """

    n_rounds: int
    mean_ev: float
    std_ev: float
    ci_95_low: float
    ci_95_high: float
    house_edge_pct: float
    n_wins: int
    n_losses: int
    n_pushes: int
    n_player_busts: int = 0
    n_dealer_busts: int = 0
    n_blackjacks: int = 0
    n_reshuffles: int = 0
    payouts: np.ndarray | None = None

    @property
    def win_rate(self) -> float:
        return self.n_wins / self.n_rounds if self.n_rounds else 0.0

    def __str__(self) -> str:
        sign = "+" if self.mean_ev >= 0 else ""
        return (
            f"Rounds: {self.n_rounds:,} | "
            f"EV: {sign}{self.mean_ev:.4f} ({sign}{self.mean_ev * 100:.2f}%) | "
            f"95% CI: [{self.ci_95_low:.4f}, {self.ci_95_high:.4f}] | "
            f"W/L/P: {self.n_wins:,}/{self.n_losses:,}/{self.n_pushes:,} | "
            f"House edge: {self.house_edge_pct:+.2f}%"
        )


# ─── Core simulation loop ─────────────────────────────────────────────────────


def simulate_rounds(
    player_strategy: PlayerStrategy,
    n_rounds: int = 100_000,
    bet: int = 100,
    seed: int | None = 42,
    reshuffle_threshold: int = MAX_CARDS_PER_ROUND,
    return_payouts: bool = False,
) -> SimulationResult:
    """Simulate n_rounds against the dealer and return aggregate statistics.

    Args:
        player_strategy:     Callable matching PlayerStrategy. It must return
                             an action; None would loop forever.
        n_rounds:            Number of rounds to play (must be >= 2).
        bet:                 Chips wagered each round. Even values avoid
                             truncation of the 3:2 payout.
        seed:                Seed for the shuffle generator; None for a
                             non-deterministic run.
        reshuffle_threshold: Rebuild the deck before a round when fewer cards
                             than this remain.
        return_payouts:      Attach the raw per-round payout array.

    Returns:
        SimulationResult for the run.

    Raises:
        ValueError: If n_rounds < 2 or bet <= 0.
    """
    if n_rounds < 2:
        raise ValueError(f"n_rounds must be at least 2, got {n_rounds}")
    if bet <= 0:
        raise ValueError(f"bet must be positive, got {bet}")

    rng = np.random.default_rng(seed)
    deck = create_shuffled_deck(rng)
    payouts = np.empty(n_rounds, dtype=np.float64)
    n_wins = n_losses = n_pushes = 0
    n_player_busts = n_dealer_busts = n_blackjacks = n_reshuffles = 0

    for i in range(n_rounds):
        if deck.remaining < reshuffle_threshold:
            deck = create_shuffled_deck(rng)
            n_reshuffles += 1

        # The bankroll only has to cover the bet; the net is what we record.
        result = play_round(deck, bet, bet, player_strategy)
        payouts[i] = result.net / bet

        if result.outcome is Outcome.WIN:
            n_wins += 1
        elif result.outcome is Outcome.LOSS:
            n_losses += 1
        else:
            n_pushes += 1
        n_player_busts += result.player_busted
        n_dealer_busts += result.dealer_busted
        n_blackjacks += result.player_blackjack

    mean = float(np.mean(payouts))
    std = float(np.std(payouts, ddof=1))
    ci_margin = 1.96 * std / math.sqrt(n_rounds)

    log.info("Simulated %d rounds: mean %.4f, std %.4f", n_rounds, mean, std)

    return SimulationResult(
        n_rounds=n_rounds,
        mean_ev=mean,
        std_ev=std,
        ci_95_low=mean - ci_margin,
        ci_95_high=mean + ci_margin,
        house_edge_pct=-mean * 100.0,
        n_wins=n_wins,
        n_losses=n_losses,
        n_pushes=n_pushes,
        n_player_busts=n_player_busts,
        n_dealer_busts=n_dealer_busts,
        n_blackjacks=n_blackjacks,
        n_reshuffles=n_reshuffles,
        payouts=payouts if return_payouts else None,
    )


# ─── Strategy factories ───────────────────────────────────────────────────────


def make_simple_player_strategy(stand_threshold: int = 17) -> PlayerStrategy:
    """Stand once the best total reaches stand_threshold, hit otherwise.

    With the default threshold this mirrors the dealer's own policy.
    """

    def _strategy(player_cards: tuple[Card, ...], dealer_upcard: Card) -> PlayerAction:
        if best_score(player_cards) >= stand_threshold:
            return PlayerAction.STAND
        return PlayerAction.HIT

    return _strategy


def make_never_bust_strategy() -> PlayerStrategy:
    """Hit only while no single card can bust the hand (lowest total <= 11)."""

    def _strategy(player_cards: tuple[Card, ...], dealer_upcard: Card) -> PlayerAction:
        if lowest_score(player_cards) <= 11:
            return PlayerAction.HIT
        return PlayerAction.STAND

    return _strategy


def compare_strategies(
    strategies: dict[str, PlayerStrategy],
    n_rounds: int = 50_000,
    seed: int = 42,
) -> dict[str, SimulationResult]:
    """Run each named strategy with the same seed and return the results."""
    return {
        name: simulate_rounds(strategy, n_rounds=n_rounds, seed=seed)
        for name, strategy in strategies.items()
    }


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    setup_logging()
    n = int(sys.argv[1]) if len(sys.argv) > 1 else 200_000
    print(f"Blackjack Monte Carlo: {n:,} rounds per strategy\n")
    results = compare_strategies(
        {
            "stand on 17 (mimic dealer)": make_simple_player_strategy(17),
            "stand on 15": make_simple_player_strategy(15),
            "never bust": make_never_bust_strategy(),
        },
        n_rounds=n,
    )
    for name, res in results.items():
        print(f"{name:<28} {res}")
