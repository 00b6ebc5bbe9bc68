"""Bankroll analysis over simulated blackjack payouts.

Everything here answers one question for the table: what happens to a
1000-chip stack when the player bets a flat amount every round?

Provides:
- Distribution statistics of the per-round payout (mean, std, skewness,
  kurtosis, percentiles), in units of one bet
- Flat-bet risk: long-run chance of losing the whole stack at a given bet,
  and the largest bet that keeps that chance under a target
- Session projections in chips (CLT): where the stack is likely to be after
  a number of rounds
- Bootstrap drawdown analysis (max drawdown distribution)
- Bootstrap session ruin: how often a sitting goes broke before a given
  number of rounds

Usage (standalone report):
    python -m blackjack.analysis.bankroll [n_rounds]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import stats

from blackjack.config import DEFAULT_STARTING_BANKROLL

PERCENTILES: tuple[int, ...] = (1, 5, 25, 50, 75, 95, 99)
DEFAULT_SESSION_LENGTHS: tuple[int, ...] = (10, 50, 100, 500, 1000)

# ─── Dataclasses ──────────────────────────────────────────────────────────────


@dataclass
class VarianceStats:
    """Shape of the per-round payout distribution, one bet = 1.0.

    Attributes:
        mean:        Average net per round (player's edge when positive).
        std:         Sample standard deviation.
        variance:    std squared.
        skewness:    Fisher skewness.
        kurtosis:    Excess kurtosis (normal = 0).
        percentiles: 'p1' .. 'p99' -> payout at that percentile.
        n_rounds:    Rounds in the sample.
    """

    mean: float
    std: float
    variance: float
    skewness: float
    kurtosis: float
    percentiles: dict[str, float]
    n_rounds: int


@dataclass
class FlatBetRisk:
    """Long-run ruin odds for one flat bet from a chip stack.

    Attributes:
        bet:               Chips wagered every round.
        starting_bankroll: Chips at the start.
        bets_in_bankroll:  How many bets the stack covers.
        ruin_prob:         Chance of ever losing the stack if play never stops.
        max_ruin:          Ruin chance the player is willing to accept.
        max_safe_bet:      Largest whole-chip bet whose ruin_prob stays within
                           max_ruin, or None if no bet does.
    """

    bet: int
    starting_bankroll: int
    bets_in_bankroll: float
    ruin_prob: float
    max_ruin: float
    max_safe_bet: int | None


@dataclass
class SessionProjection:
    """Where the stack is expected to be after n_rounds at a flat bet."""

    n_rounds: int
    bet: int
    expected_chips: float
    chips_low: float
    chips_high: float
    prob_ahead: float


@dataclass
class DrawdownStats:
    mean_max_drawdown: float
    median_max_drawdown: float
    p95_max_drawdown: float
    n_trajectories: int


@dataclass
class SessionRuinStats:
    """Outcome of bootstrapped sessions played at a flat bet.

    Attributes:
        starting_bankroll: Chips at the start of each session.
        bet:               Flat bet in chips.
        max_rounds:        Session length cap.
        ruin_prob:         Fraction of sessions that could no longer cover a bet.
        median_rounds_to_ruin: Median round of ruin among ruined sessions
                           (None if no session was ruined).
        mean_final_bankroll: Mean bankroll at the end (ruined sessions
                           included at the value where they stopped).
        n_sessions:        Number of bootstrap sessions.
    """

    starting_bankroll: int
    bet: int
    max_rounds: int
    ruin_prob: float
    median_rounds_to_ruin: float | None
    mean_final_bankroll: float
    n_sessions: int


# ─── Computation functions ────────────────────────────────────────────────────


def _check_bet(bet: int, starting_bankroll: int) -> None:
    if not 0 < bet <= starting_bankroll:
        raise ValueError(f"bet must be within 1..{starting_bankroll}, got {bet}")


def compute_variance_stats(payouts: np.ndarray) -> VarianceStats:
    """Summarise a per-round payout array from simulate_rounds."""
    std = float(np.std(payouts, ddof=1))
    cuts = np.percentile(payouts, PERCENTILES)
    return VarianceStats(
        mean=float(np.mean(payouts)),
        std=std,
        variance=std**2,
        skewness=float(stats.skew(payouts)),
        kurtosis=float(stats.kurtosis(payouts)),
        percentiles={f"p{p}": float(v) for p, v in zip(PERCENTILES, cuts)},
        n_rounds=len(payouts),
    )


def flat_bet_risk(
    vstats: VarianceStats,
    bet: int,
    starting_bankroll: int = DEFAULT_STARTING_BANKROLL,
    max_ruin: float = 0.05,
) -> FlatBetRisk:
    """Ruin odds of betting ``bet`` chips every round from ``starting_bankroll``.

    Treats the stack as a random walk with drift ``mean * bet`` and step
    variance ``variance * bet**2``. The chance of ever hitting zero is then

        exp(-2 * mean * starting_bankroll / (variance * bet))

    so halving the bet squares the ruin probability. With no positive edge
    the walk eventually hits zero whatever the bet.

    Raises:
        ValueError: If bet is not within 1..starting_bankroll, or max_ruin is
            not strictly between 0 and 1.
    """
    _check_bet(bet, starting_bankroll)
    if not 0.0 < max_ruin < 1.0:
        raise ValueError(f"max_ruin must be between 0 and 1, got {max_ruin}")

    edge, variance = vstats.mean, vstats.variance
    if edge <= 0:
        ruin, safe_bet = 1.0, None
    elif variance == 0:
        ruin, safe_bet = 0.0, starting_bankroll
    else:
        ruin = math.exp(-2.0 * edge * starting_bankroll / (variance * bet))
        limit = math.floor(2.0 * edge * starting_bankroll / (variance * -math.log(max_ruin)))
        safe_bet = min(limit, starting_bankroll) if limit >= 1 else None

    return FlatBetRisk(
        bet=bet,
        starting_bankroll=starting_bankroll,
        bets_in_bankroll=starting_bankroll / bet,
        ruin_prob=ruin,
        max_ruin=max_ruin,
        max_safe_bet=safe_bet,
    )


def project_sessions(
    vstats: VarianceStats,
    bet: int,
    session_lengths: tuple[int, ...] = DEFAULT_SESSION_LENGTHS,
    confidence: float = 0.95,
) -> list[SessionProjection]:
    """Chip result after each session length, assuming the stack never runs dry.

    Net chips after n rounds is roughly Normal(n * mean * bet,
    n * variance * bet**2).
    """
    z = stats.norm.ppf(0.5 + confidence / 2.0)
    edge_chips = vstats.mean * bet
    spread_chips = vstats.std * bet
    out = []
    for n in session_lengths:
        centre = n * edge_chips
        half_width = z * spread_chips * math.sqrt(n)
        if spread_chips > 0:
            ahead = float(stats.norm.sf(0.0, loc=centre, scale=spread_chips * math.sqrt(n)))
        else:
            ahead = 1.0 if centre > 0 else 0.0
        out.append(
            SessionProjection(
                n_rounds=n,
                bet=bet,
                expected_chips=centre,
                chips_low=centre - half_width,
                chips_high=centre + half_width,
                prob_ahead=ahead,
            )
        )
    return out


def compute_drawdown_stats(
    payouts: np.ndarray,
    n_trajectories: int = 1000,
    trajectory_length: int = 200,
    seed: int = 0,
) -> DrawdownStats:
    """Bootstrap trajectories from observed payouts and measure max drawdown.

    Each trajectory resamples ``trajectory_length`` rounds with replacement;
    its max drawdown is the largest peak-to-trough fall of the running sum.
    """
    rng = np.random.default_rng(seed)
    samples = rng.choice(payouts, size=(n_trajectories, trajectory_length), replace=True)
    cumsum = np.cumsum(samples, axis=1)
    running_max = np.maximum.accumulate(np.maximum(cumsum, 0.0), axis=1)
    max_drawdowns = np.max(running_max - cumsum, axis=1)

    return DrawdownStats(
        mean_max_drawdown=float(np.mean(max_drawdowns)),
        median_max_drawdown=float(np.median(max_drawdowns)),
        p95_max_drawdown=float(np.percentile(max_drawdowns, 95)),
        n_trajectories=n_trajectories,
    )


def estimate_session_ruin(
    payouts: np.ndarray,
    bet: int,
    starting_bankroll: int = DEFAULT_STARTING_BANKROLL,
    max_rounds: int = 200,
    n_sessions: int = 2000,
    seed: int = 0,
) -> SessionRuinStats:
    """Bootstrap whole sessions at a flat bet from a starting bankroll.

    A session is ruined at the first round after which the bankroll can no
    longer cover the bet; it stops there. Per-round chip results are
    ``payout * bet`` truncated toward zero, matching the integer payout.

    Args:
        payouts:           Per-round payouts in units (from simulate_rounds).
        bet:               Flat bet in chips (1..starting_bankroll).
        starting_bankroll: Chips at the start of each session.
        max_rounds:        Rounds per session if never ruined.
        n_sessions:        Number of bootstrap sessions.
        seed:              Seed for the resampling generator.

    Raises:
        ValueError: If bet is not within 1..starting_bankroll.
    """
    _check_bet(bet, starting_bankroll)

    rng = np.random.default_rng(seed)
    samples = rng.choice(payouts, size=(n_sessions, max_rounds), replace=True)
    chips = np.trunc(samples * bet)
    bankrolls = starting_bankroll + np.cumsum(chips, axis=1)

    ruined_mask = bankrolls < bet
    ruined = ruined_mask.any(axis=1)
    # First ruined round per session (1-based); only meaningful where ruined
    first_ruin = np.argmax(ruined_mask, axis=1)

    rows = np.nonzero(ruined)[0]
    final = bankrolls[:, -1].copy()
    final[rows] = bankrolls[rows, first_ruin[rows]]

    median_ruin = float(np.median(first_ruin[rows] + 1)) if rows.size else None

    return SessionRuinStats(
        starting_bankroll=starting_bankroll,
        bet=bet,
        max_rounds=max_rounds,
        ruin_prob=float(np.mean(ruined)),
        median_rounds_to_ruin=median_ruin,
        mean_final_bankroll=float(np.mean(final)),
        n_sessions=n_sessions,
    )


# ─── Output functions ─────────────────────────────────────────────────────────


def print_variance_report(
    vstats: VarianceStats,
    risks: list[FlatBetRisk],
    projections: list[SessionProjection],
    drawdown: DrawdownStats,
    sessions: list[SessionRuinStats] | None = None,
    *,
    label: str = "",
) -> str:
    """Format and print a full variance and bankroll report.

    Returns:
        The formatted report string (also printed to stdout).
    """
    title = "Variance & Bankroll Report" + (f": {label}" if label else "")
    pct = vstats.percentiles
    lines = [
        "=" * 70,
        title,
        "=" * 70,
        "",
        "── Payout per round (1 bet = 1.0) ──────────────────────────────────",
        f"  Rounds           : {vstats.n_rounds:>10,}",
        f"  Mean             : {vstats.mean:>+10.4f}  ({vstats.mean * 100:+.2f}% of the bet)",
        f"  Std deviation    : {vstats.std:>10.4f}",
        f"  Skew / kurtosis  : {vstats.skewness:>10.4f} / {vstats.kurtosis:.4f}",
        f"  p5 / p50 / p95   : {pct['p5']:.2f} / {pct['p50']:.2f} / {pct['p95']:.2f}",
        "",
        "── Flat-Bet Risk (play forever) ─────────────────────────────────────",
    ]
    for r in risks:
        safe = f"{r.max_safe_bet:,}" if r.max_safe_bet is not None else "none"
        lines.append(
            f"  bet {r.bet:>4} of {r.starting_bankroll} ({r.bets_in_bankroll:>5.1f} bets): "
            f"ruin {r.ruin_prob:>6.1%}, largest bet within {r.max_ruin:.0%}: {safe}"
        )
    if vstats.mean <= 0:
        lines.append("  (no positive edge: every flat bet goes broke eventually)")

    if projections:
        lines += [
            "",
            f"── Session Projections (chips, bet {projections[0].bet}) ───────────────────────",
            f"  {'Rounds':>8}  {'Expected':>10}  {'Low':>10}  {'High':>10}  {'Ahead':>6}",
        ]
        for p in projections:
            lines.append(
                f"  {p.n_rounds:>8,}  {p.expected_chips:>+10.0f}  "
                f"{p.chips_low:>+10.0f}  {p.chips_high:>+10.0f}  {p.prob_ahead:>6.1%}"
            )
    lines += [
        "",
        "── Drawdown Analysis (bootstrap, bets) ──────────────────────────────",
        f"  Trajectories     : {drawdown.n_trajectories:,}",
        f"  Mean max DD      : {drawdown.mean_max_drawdown:.2f}",
        f"  p95 max DD       : {drawdown.p95_max_drawdown:.2f}",
    ]
    if sessions:
        lines += [
            "",
            "── Session Ruin (bootstrap) ─────────────────────────────────────────",
        ]
        for s in sessions:
            lines.append(
                f"  bet {s.bet:>4} of {s.starting_bankroll}, {s.max_rounds} rounds: "
                f"ruin {s.ruin_prob:>6.1%}, mean final {s.mean_final_bankroll:>8.1f}"
            )
    lines.append("")
    report = "\n".join(lines)
    print(report)
    return report


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from blackjack.analysis.simulator import make_simple_player_strategy, simulate_rounds
    from blackjack.logging_utils import setup_logging

    setup_logging()
    n_rounds = int(sys.argv[1]) if len(sys.argv) > 1 else 50_000
    print(f"Blackjack Variance & Bankroll Analysis: {n_rounds:,} rounds\n")

    result = simulate_rounds(
        make_simple_player_strategy(17), n_rounds=n_rounds, return_payouts=True
    )
    payouts = result.payouts
    bets = (50, 100, 250)

    vs = compute_variance_stats(payouts)
    print_variance_report(
        vs,
        [flat_bet_risk(vs, bet) for bet in bets],
        project_sessions(vs, 100),
        compute_drawdown_stats(payouts),
        [estimate_session_ruin(payouts, bet) for bet in bets],
        label="stand on 17",
    )
