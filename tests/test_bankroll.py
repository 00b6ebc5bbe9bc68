"""Tests for blackjack/analysis/bankroll.py: variance and bankroll analysis.

A module-scoped fixture runs simulate_rounds(n_rounds=10_000,
return_payouts=True) once to keep the suite fast.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from blackjack.analysis.bankroll import (
    DrawdownStats,
    FlatBetRisk,
    SessionProjection,
    SessionRuinStats,
    VarianceStats,
    compute_drawdown_stats,
    compute_variance_stats,
    estimate_session_ruin,
    flat_bet_risk,
    print_variance_report,
    project_sessions,
)
from blackjack.analysis.simulator import make_simple_player_strategy, simulate_rounds


def make_stats(mean: float, std: float) -> VarianceStats:
    """Hand-built stats for closed-form checks."""
    return VarianceStats(mean, std, std**2, 0.0, 0.0, {}, 1000)


# ─── Module-scoped fixtures ───────────────────────────────────────────────────


@pytest.fixture(scope="module")
def payouts() -> np.ndarray:
    result = simulate_rounds(
        make_simple_player_strategy(17), n_rounds=10_000, seed=42, return_payouts=True
    )
    assert result.payouts is not None
    return result.payouts


@pytest.fixture(scope="module")
def vstats(payouts: np.ndarray) -> VarianceStats:
    return compute_variance_stats(payouts)


# ─── TestComputeVarianceStats ─────────────────────────────────────────────────


class TestComputeVarianceStats:
    def test_returns_variance_stats(self, vstats):
        assert isinstance(vstats, VarianceStats)

    def test_mean_matches_payouts(self, payouts, vstats):
        assert abs(vstats.mean - float(np.mean(payouts))) < 1e-10

    def test_variance_is_std_squared(self, vstats):
        assert vstats.variance == pytest.approx(vstats.std**2)

    def test_percentiles_ordered(self, vstats):
        keys = ["p1", "p5", "p25", "p50", "p75", "p95", "p99"]
        vals = [vstats.percentiles[k] for k in keys]
        assert vals == sorted(vals)

    def test_percentiles_within_payout_range(self, vstats):
        assert vstats.percentiles["p1"] >= -1.0
        assert vstats.percentiles["p99"] <= 1.5

    def test_moments_finite(self, vstats):
        assert math.isfinite(vstats.skewness)
        assert math.isfinite(vstats.kurtosis)

    def test_n_rounds(self, payouts, vstats):
        assert vstats.n_rounds == len(payouts)


# ─── TestFlatBetRisk ──────────────────────────────────────────────────────────


class TestFlatBetRisk:
    def test_matches_drift_formula(self):
        risk = flat_bet_risk(make_stats(0.05, 1.2), bet=100)
        assert isinstance(risk, FlatBetRisk)
        assert risk.bets_in_bankroll == 10.0
        assert risk.ruin_prob == pytest.approx(math.exp(-2 * 0.05 * 1000 / (1.44 * 100)))

    def test_halving_bet_squares_ruin(self):
        vs = make_stats(0.05, 1.2)
        big = flat_bet_risk(vs, bet=100).ruin_prob
        small = flat_bet_risk(vs, bet=50).ruin_prob
        assert small == pytest.approx(big**2)

    def test_no_edge_is_certain_ruin(self):
        for mean in (0.0, -0.02):
            risk = flat_bet_risk(make_stats(mean, 1.2), bet=10)
            assert risk.ruin_prob == 1.0
            assert risk.max_safe_bet is None

    def test_max_safe_bet_is_the_boundary(self):
        vs = make_stats(0.05, 1.2)
        risk = flat_bet_risk(vs, bet=100, max_ruin=0.05)
        assert risk.max_safe_bet == 23
        assert flat_bet_risk(vs, bet=23).ruin_prob <= 0.05
        assert flat_bet_risk(vs, bet=24).ruin_prob > 0.05

    def test_max_safe_bet_capped_at_bankroll(self):
        risk = flat_bet_risk(make_stats(1.0, 0.5), bet=10)
        assert risk.max_safe_bet == 1000

    def test_tiny_edge_has_no_safe_bet(self):
        assert flat_bet_risk(make_stats(0.0001, 1.2), bet=1).max_safe_bet is None

    def test_no_variance(self):
        risk = flat_bet_risk(make_stats(0.1, 0.0), bet=500)
        assert risk.ruin_prob == 0.0
        assert risk.max_safe_bet == 1000

    @pytest.mark.parametrize("kwargs", [{"bet": 0}, {"bet": 1001}, {"bet": 10, "max_ruin": 1.0}])
    def test_rejects_bad_arguments(self, kwargs):
        with pytest.raises(ValueError):
            flat_bet_risk(make_stats(0.05, 1.2), **kwargs)


# ─── TestProjectSessions ──────────────────────────────────────────────────────


class TestProjectSessions:
    def test_defaults(self, vstats):
        result = project_sessions(vstats, bet=100)
        assert [p.n_rounds for p in result] == [10, 50, 100, 500, 1000]
        assert all(isinstance(p, SessionProjection) and p.bet == 100 for p in result)

    def test_expected_chips_scale_with_rounds_and_bet(self):
        result = project_sessions(make_stats(0.1, 1.0), bet=10, session_lengths=(100, 200))
        assert result[0].expected_chips == pytest.approx(100.0)
        assert result[1].expected_chips == pytest.approx(200.0)

    def test_interval_widens(self, vstats):
        result = project_sessions(vstats, bet=100, session_lengths=(10, 100, 1000))
        widths = [p.chips_high - p.chips_low for p in result]
        assert widths[0] < widths[1] < widths[2]

    def test_negative_edge_usually_behind(self):
        (p,) = project_sessions(make_stats(-0.05, 1.0), bet=100, session_lengths=(1000,))
        assert p.prob_ahead < 0.5

    def test_zero_std(self):
        (p,) = project_sessions(make_stats(0.1, 0.0), bet=100, session_lengths=(10,))
        assert p.prob_ahead == 1.0
        assert p.chips_low == p.chips_high == pytest.approx(100.0)


# ─── TestDrawdown ─────────────────────────────────────────────────────────────


class TestDrawdown:
    def test_stats(self, payouts):
        dd = compute_drawdown_stats(payouts, n_trajectories=200, trajectory_length=100)
        assert isinstance(dd, DrawdownStats)
        assert dd.n_trajectories == 200
        assert 0 <= dd.median_max_drawdown <= dd.p95_max_drawdown

    def test_all_wins_no_drawdown(self):
        dd = compute_drawdown_stats(np.full(10, 1.5), n_trajectories=10, trajectory_length=20)
        assert dd.p95_max_drawdown == 0.0

    def test_all_losses_drawdown_is_length(self):
        dd = compute_drawdown_stats(np.full(10, -1.0), n_trajectories=5, trajectory_length=20)
        assert dd.mean_max_drawdown == pytest.approx(20.0)


# ─── TestSessionRuin ──────────────────────────────────────────────────────────


class TestSessionRuin:
    def test_always_losing_goes_broke_on_schedule(self):
        stats = estimate_session_ruin(
            np.full(5, -1.0), bet=100, starting_bankroll=1000, max_rounds=50, n_sessions=20
        )
        assert isinstance(stats, SessionRuinStats)
        assert stats.ruin_prob == 1.0
        assert stats.median_rounds_to_ruin == 10
        assert stats.mean_final_bankroll == 0.0

    def test_always_winning_never_broke(self):
        stats = estimate_session_ruin(
            np.full(5, 1.5), bet=100, starting_bankroll=1000, max_rounds=10, n_sessions=20
        )
        assert stats.ruin_prob == 0.0
        assert stats.median_rounds_to_ruin is None
        assert stats.mean_final_bankroll == 1000 + 10 * 150

    def test_bigger_bets_ruin_more(self, payouts):
        small = estimate_session_ruin(payouts, bet=10, max_rounds=200, n_sessions=500)
        large = estimate_session_ruin(payouts, bet=500, max_rounds=200, n_sessions=500)
        assert small.ruin_prob <= large.ruin_prob

    @pytest.mark.parametrize("bet", [0, 1001])
    def test_rejects_bad_bet(self, payouts, bet):
        with pytest.raises(ValueError):
            estimate_session_ruin(payouts, bet=bet)


# ─── TestReport ───────────────────────────────────────────────────────────────


class TestReport:
    def test_report_sections(self, payouts, vstats, capsys):
        report = print_variance_report(
            vstats,
            [flat_bet_risk(vstats, bet) for bet in (50, 100)],
            project_sessions(vstats, bet=100),
            compute_drawdown_stats(payouts, n_trajectories=50),
            [estimate_session_ruin(payouts, bet=100, n_sessions=50)],
            label="test",
        )
        assert "Variance & Bankroll Report: test" in report
        assert "Flat-Bet Risk" in report
        assert "Session Projections (chips, bet 100)" in report
        assert "Session Ruin" in report
        assert report in capsys.readouterr().out

    def test_report_without_edge(self, payouts):
        vs = make_stats(-0.02, 1.2)
        report = print_variance_report(
            vs,
            [flat_bet_risk(vs, 100)],
            [],
            compute_drawdown_stats(payouts, n_trajectories=50),
        )
        assert "every flat bet goes broke eventually" in report
        assert "Session Ruin" not in report
