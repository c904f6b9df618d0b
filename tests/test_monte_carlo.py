"""
Unit Tests -- Lookback Monte Carlo Engine
==========================================
Tests parameter validation, antithetic GBM path generation, the discounted
pricer, lookback payoffs and the pathwise / re-simulated Greeks.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import dataclasses
import tracemalloc
import numpy as np
import pytest

from lookback_mc.config import EngineConfig, GreekConfig
from lookback_mc.exceptions import (
    InvalidDomainError, InvalidOptionKindError, InvalidParameterError, LookbackError,
)
from lookback_mc.models.market import MarketParameters, OptionKind
from lookback_mc.models.path_generator import GBMPathGenerator
from lookback_mc.models.pricer import DiscountedPricer
from lookback_mc.models.lookback_options import (
    LookbackCall, LookbackPut, create_option, option_from_params,
)
from lookback_mc.models.analytic import (
    black_scholes_price, lookback_floating_call, lookback_floating_put,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def base_params():
    """Standard GBM parameters for testing."""
    return {
        "t": 0.0,
        "T": 1.0,
        "S0": 100.0,
        "r": 0.05,
        "sigma": 0.20,
    }


@pytest.fixture(scope="module")
def ref_call():
    """Reference scenario: one year, 10k paths, seed 42."""
    return create_option("call", t=0.0, T=1.0, S0=100.0, r=0.05, sigma=0.20,
                         N=10_000, seed=42)


@pytest.fixture(scope="module")
def ref_put():
    return create_option("put", t=0.0, T=1.0, S0=100.0, r=0.05, sigma=0.20,
                         N=10_000, seed=42)


@pytest.fixture(scope="module")
def quarter_options():
    """Smaller three-month instruments for the bump comparisons."""
    kw = dict(t=0.0, T=0.25, S0=100.0, r=0.03, sigma=0.25, N=2_000, seed=7)
    return create_option("call", **kw), create_option("put", **kw)


# ---------------------------------------------------------------------------
# Market Parameter Set
# ---------------------------------------------------------------------------
class TestMarketParameters:
    """Validation, immutability and the spot grid."""

    @pytest.mark.parametrize("token", ["call", "CALL", "CaLl", " call "])
    def test_kind_case_insensitive(self, token):
        assert OptionKind.parse(token) is OptionKind.CALL

    @pytest.mark.parametrize("token", ["straddle", "", "c", None])
    def test_invalid_kind(self, token, base_params):
        with pytest.raises(InvalidOptionKindError):
            MarketParameters(token, N=100, **base_params)

    @pytest.mark.parametrize("override", [
        {"t": -0.1},
        {"T": -0.5},
        {"S0": -1.0},
        {"sigma": -0.2},
        {"N": 0},
        {"N": -5},
        {"N": 10.5},
        {"dS": 0.0},
        {"M": 0},
        {"seed": -1},
        {"S0": float("nan")},
        {"r": float("inf")},
    ])
    def test_invalid_parameters(self, base_params, override):
        kw = dict(base_params, N=100, dS=1.0, M=10, seed=1)
        kw.update(override)
        with pytest.raises(InvalidParameterError):
            MarketParameters("call", **kw)

    def test_errors_are_value_errors(self, base_params):
        with pytest.raises(ValueError):
            MarketParameters("call", **dict(base_params, N=0))
        assert issubclass(InvalidDomainError, LookbackError)

    def test_integral_floats_accepted(self, base_params):
        p = MarketParameters("put", N=100.0, M=4.0, seed=3.0, **base_params)
        assert (p.N, p.M, p.seed) == (100, 4, 3)
        assert isinstance(p.N, int)

    def test_frozen(self, base_params):
        p = MarketParameters("call", N=100, **base_params)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.S0 = 50.0

    def test_price_grid_centred(self, base_params):
        p = MarketParameters("call", N=100, dS=5.0, M=10, **base_params)
        grid = p.price_grid()
        assert p.S_min == 75.0 and p.S_max == 125.0
        assert len(grid) == 11
        np.testing.assert_allclose(grid, np.arange(75.0, 126.0, 5.0))

    def test_price_grid_floored_at_zero(self, base_params):
        p = MarketParameters("call", N=100, dS=5.0, M=10, **dict(base_params, S0=10.0))
        assert p.S_min == 0.0
        assert p.price_grid()[0] == 0.0


# ---------------------------------------------------------------------------
# Path Generator
# ---------------------------------------------------------------------------
class TestPathGenerator:
    """Tests for antithetic GBM path generation."""

    def _gen(self, base_params, **kw):
        params = dict(base_params, N=1_000, seed=42)
        params.update(kw)
        return GBMPathGenerator(MarketParameters("call", **params))

    def test_path_shape(self, base_params):
        """Verify output dimensions match (N, Nt+1) with daily steps."""
        assert self._gen(base_params).generate().shape == (1_000, 366)
        assert self._gen(base_params, T=0.25, N=11).generate().shape == (11, 92)

    def test_initial_value(self, base_params):
        """All paths must start at S0."""
        paths = self._gen(base_params).generate()
        np.testing.assert_array_equal(paths[:, 0], base_params["S0"])

    def test_positive_prices(self, base_params):
        """GBM paths must remain strictly positive."""
        assert np.all(self._gen(base_params).generate() > 0)

    def test_time_grid(self, base_params):
        gen = self._gen(base_params, t=0.5, T=1.0)
        assert len(gen.time_grid) == gen.n_steps + 1 == 183
        assert gen.time_grid[0] == 0.5
        np.testing.assert_allclose(np.diff(gen.time_grid), 1.0 / 365.0)

    def test_reproducibility(self, base_params):
        """Same seed must produce identical paths."""
        p1 = self._gen(base_params, seed=123).generate()
        p2 = self._gen(base_params, seed=123).generate()
        np.testing.assert_array_equal(p1, p2)

    def test_seed_changes_paths(self, base_params):
        p1 = self._gen(base_params, seed=1).generate()
        p2 = self._gen(base_params, seed=2).generate()
        assert not np.array_equal(p1, p2)

    def test_antithetic_symmetry(self, base_params):
        """Paired log-returns share the drift and flip the diffusion term."""
        gen = self._gen(base_params, N=200)
        lr = np.diff(np.log(gen.generate()), axis=1)
        np.testing.assert_allclose(lr[0::2] + lr[1::2], 2.0 * gen.drift, atol=1e-12)
        assert np.abs(lr[0::2] - lr[1::2]).max() > 1e-3

    def test_odd_count_last_path_plain(self, base_params):
        gen = self._gen(base_params, N=5)
        draws = gen.normal_draws()
        np.testing.assert_array_equal(draws[2], -draws[3])
        assert not np.allclose(draws[4], -draws[3])
        assert gen.generate().shape[0] == 5

    def test_draws_shared_across_horizons(self, base_params):
        """Step k sees the same shock whatever the horizon."""
        long = self._gen(base_params, T=1.0).normal_draws()
        short = self._gen(base_params, T=0.5).normal_draws()
        np.testing.assert_array_equal(short, long[:, :short.shape[1]])

    def test_step_draws_match_matrix(self, base_params):
        gen = self._gen(base_params, T=0.1, N=7)
        steps = list(gen.step_draws())
        assert len(steps) == gen.n_steps
        np.testing.assert_array_equal(np.column_stack(steps), gen.normal_draws())

    def test_whole_day_horizon_truncation(self, base_params):
        """(T - t) * 365 is floored as a float: 3/365 lands just under 3 days."""
        assert self._gen(base_params, T=3.0 / 365.0).n_steps == 2
        assert self._gen(base_params, T=3.5 / 365.0).n_steps == 3

    def test_read_only(self, base_params):
        paths = self._gen(base_params, N=10).generate()
        with pytest.raises(ValueError):
            paths[0, 1] = 0.0

    def test_expected_terminal_value(self, base_params):
        """E[S_T] under risk-neutral measure = S0 * exp(r*T)."""
        paths = self._gen(base_params, N=20_000).generate()
        expected = base_params["S0"] * np.exp(base_params["r"] * base_params["T"])
        assert abs(paths[:, -1].mean() - expected) / expected < 0.01

    @pytest.mark.parametrize("t, T", [(0.0, 0.002), (0.5, 0.5), (0.3, 0.3 + 0.9 / 365)])
    def test_domain_failure(self, base_params, t, T):
        with pytest.raises(InvalidDomainError):
            self._gen(base_params, t=t, T=T)


# ---------------------------------------------------------------------------
# Discounted Pricer
# ---------------------------------------------------------------------------
class TestDiscountedPricer:

    def test_statistics(self):
        res = DiscountedPricer(0.5).summarize(np.array([1.0, 2.0, 3.0, 4.0]))
        assert res.payoff_mean == pytest.approx(2.5)
        assert res.payoff_std == pytest.approx(np.sqrt(5.0 / 3.0))
        assert res.payoff_stderr == pytest.approx(np.sqrt(5.0 / 3.0) / 2.0)
        assert res.price == pytest.approx(1.25)
        assert res.ci_lower < res.price < res.ci_upper

    def test_single_path_zero_std(self):
        res = DiscountedPricer(0.9).summarize(np.array([7.0]))
        assert res.payoff_std == 0.0 and res.payoff_stderr == 0.0
        assert res.price == pytest.approx(6.3)

    def test_empty_path_set(self):
        res = DiscountedPricer(0.9).evaluate(np.empty((0, 5)), lambda p: p[:, -1])
        assert res.price == 0.0 and res.n_paths == 0

    def test_evaluate_applies_payoff(self):
        paths = np.array([[100.0, 90.0, 110.0], [100.0, 105.0, 120.0]])
        res = DiscountedPricer(1.0).evaluate(paths, lambda p: p[:, -1] - p.min(axis=1))
        assert res.payoff_mean == pytest.approx((20.0 + 20.0) / 2)


# ---------------------------------------------------------------------------
# Lookback Options: payoff and price
# ---------------------------------------------------------------------------
class TestLookbackPricing:
    """Payoffs, price bounds and closed-form checks."""

    def test_single_path_payoff(self):
        opt_c = create_option("call", 0, 0.1, 100, 0.01, 0.2, 10, seed=1)
        opt_p = create_option("put", 0, 0.1, 100, 0.01, 0.2, 10, seed=1)
        path = np.array([100.0, 90.0, 110.0, 105.0])
        assert opt_c.payoff(path) == pytest.approx(15.0)
        assert opt_p.payoff(path) == pytest.approx(5.0)

    def test_payoff_floor(self, ref_call, ref_put):
        assert np.all(ref_call.payoff(ref_call.paths) >= 0.0)
        assert np.all(ref_put.payoff(ref_put.paths) >= 0.0)

    def test_factory_dispatch(self, ref_call, ref_put):
        assert isinstance(ref_call, LookbackCall)
        assert isinstance(ref_put, LookbackPut)

    def test_kind_mismatch(self, base_params):
        with pytest.raises(InvalidOptionKindError):
            LookbackPut(MarketParameters("call", N=10, **base_params))

    def test_lookback_call_geq_european(self, ref_call, base_params):
        """Lookback call >= European call (optimal strike is better)."""
        p = base_params
        bs_call = black_scholes_price(p["S0"], p["S0"], p["T"], p["r"], p["sigma"], "call")
        assert ref_call.price() > bs_call

    def test_discrete_below_continuous(self, ref_call, ref_put, base_params):
        """Daily monitoring misses part of the extreme."""
        p = base_params
        cont_c = lookback_floating_call(p["S0"], p["T"], p["r"], p["sigma"])
        cont_p = lookback_floating_put(p["S0"], p["T"], p["r"], p["sigma"])
        assert 0.9 * cont_c < ref_call.price() < cont_c
        assert 0.9 * cont_p < ref_put.price() < cont_p

    def test_zero_volatility_closed_form(self, base_params):
        """sigma = 0: monotone path, min = S0, payoff = S0 (exp(rT) - 1)."""
        opt = create_option("call", **dict(base_params, sigma=0.0), N=51, seed=3)
        expected = base_params["S0"] * np.expm1(base_params["r"] * base_params["T"])
        np.testing.assert_allclose(opt.payoff(opt.paths), expected, rtol=1e-10)
        assert opt.payoff_std() == pytest.approx(0.0, abs=1e-9)

    def test_result_comes_from_pricer(self, ref_put):
        pricer = DiscountedPricer(ref_put.params.discount)
        assert ref_put.result == pricer.evaluate(ref_put.paths, ref_put.payoff)
        assert ref_put.result.n_paths == 10_000

    def test_zero_spot(self, base_params):
        opt = create_option("call", **dict(base_params, S0=0.0), N=200, seed=5)
        unit = create_option("call", **dict(base_params, S0=1.0), N=200, seed=5)
        assert opt.price() == 0.0
        assert opt.delta() == pytest.approx(unit.price())
        assert opt.vega() == 0.0

    def test_standard_error_shrinkage(self):
        """Monte Carlo 1/sqrt(N) law: four times the paths, half the error."""
        kw = dict(t=0.0, T=0.25, S0=100.0, r=0.05, sigma=0.2, seed=11)
        se_n = create_option("call", N=2_000, **kw).payoff_stderr()
        se_4n = create_option("call", N=8_000, **kw).payoff_stderr()
        assert 1.6 < se_n / se_4n < 2.5

    def test_single_path_instrument(self, base_params):
        opt = create_option("put", **base_params, N=1, seed=9)
        assert opt.payoff_std() == 0.0 and opt.payoff_stderr() == 0.0
        assert opt.price() == pytest.approx(opt.params.discount * opt.payoff_mean())


# ---------------------------------------------------------------------------
# Greeks
# ---------------------------------------------------------------------------
class TestGreeks:
    """Pathwise and re-simulated sensitivities."""

    def test_gamma_identity(self, ref_call, ref_put):
        assert ref_call.gamma() == 0.0
        assert ref_put.gamma() == 0.0

    def test_delta_homogeneity(self, ref_call):
        assert ref_call.delta() == pytest.approx(ref_call.price() / 100.0, rel=1e-12)

    @pytest.mark.parametrize("which", [0, 1])
    def test_delta_matches_central_difference(self, quarter_options, which):
        opt = quarter_options[which]
        assert opt.delta() == pytest.approx(opt.delta_bump(), rel=1e-6)

    @pytest.mark.parametrize("which", [0, 1])
    def test_vega_matches_central_difference(self, quarter_options, which):
        opt = quarter_options[which]
        assert opt.vega() == pytest.approx(opt.vega_bump(), rel=2e-2)

    def test_vega_positive(self, ref_call, ref_put):
        assert ref_call.vega() > 0
        assert ref_put.vega() > 0

    def test_vega_zero_volatility_call(self, base_params):
        """sigma = 0, r > 0: the minimum stays at S0, so only dS_T/dsigma counts."""
        opt = create_option("call", **dict(base_params, sigma=0.0), N=51, seed=3)
        gen = opt.generator
        z_sum = gen.normal_draws().sum(axis=1)
        expected = opt.params.discount * np.mean(opt.paths[:, -1] * np.sqrt(gen.dt) * z_sum)
        assert opt.vega() == pytest.approx(expected, rel=1e-10)
        assert opt.vega() != 0.0

    def test_vega_zero_volatility_put(self, base_params):
        """sigma = 0, r > 0: the maximum is S_T itself, so the sensitivities cancel."""
        opt = create_option("put", **dict(base_params, sigma=0.0), N=51, seed=3)
        assert opt.vega() == 0.0

    def test_vega_keeps_per_step_memory(self, ref_call):
        """Vega allocates per-step vectors only, never another path-sized matrix."""
        tracemalloc.start()
        try:
            tracemalloc.reset_peak()
            ref_call.vega()
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()
        assert peak < 0.1 * ref_call.paths.nbytes

    def test_gamma_bump_is_noise(self, quarter_options):
        """Bumped gamma only measures rounding around the analytic zero."""
        assert abs(quarter_options[0].gamma_bump()) < 1e-4

    def test_theta_contract(self, ref_call):
        """Same seed, valuation time moved one trading day forward."""
        eps = 1.0 / 252.0
        up = create_option("call", t=eps, T=1.0, S0=100.0, r=0.05, sigma=0.20,
                           N=10_000, seed=42)
        assert ref_call.theta() == pytest.approx((up.price() - ref_call.price()) / eps)

    def test_theta_negative(self, ref_call, ref_put):
        """Less time left, shallower extremes."""
        assert ref_call.theta() < 0
        assert ref_put.theta() < 0

    def test_theta_clamped_bump_fails_domain(self):
        """Horizon under one trading day: the halved bump leaves < 1 day."""
        opt = create_option("call", 0.0, 0.0035, 100, 0.05, 0.2, 100, seed=1)
        with pytest.raises(InvalidDomainError):
            opt.theta()

    def test_rho_contract(self, ref_put):
        up = create_option("put", t=0.0, T=1.0, S0=100.0, r=0.05 + 1e-4, sigma=0.20,
                           N=10_000, seed=42)
        assert ref_put.rho() == pytest.approx((up.price() - ref_put.price()) / 1e-4)

    def test_rho_matches_central_difference(self, quarter_options):
        opt = quarter_options[0]
        h = 1e-3
        up = option_from_params(dataclasses.replace(opt.params, r=opt.params.r + h))
        dn = option_from_params(dataclasses.replace(opt.params, r=opt.params.r - h))
        assert opt.rho() == pytest.approx((up.price() - dn.price()) / (2 * h), rel=5e-2)

    def test_custom_bump_config(self, quarter_options):
        cfg = EngineConfig(greeks=GreekConfig(rho_bump=1e-3))
        opt = option_from_params(quarter_options[0].params, cfg)
        up = option_from_params(dataclasses.replace(opt.params, r=opt.params.r + 1e-3))
        assert opt.rho() == pytest.approx((up.price() - opt.price()) / 1e-3)

    def test_theta_bump_follows_trading_calendar(self):
        cfg = EngineConfig(greeks=GreekConfig(theta_bump=None), trading_days_per_year=250)
        assert cfg.greeks.theta_bump == pytest.approx(1.0 / 250.0)
        fixed = EngineConfig(greeks=GreekConfig(theta_bump=0.01), trading_days_per_year=250)
        assert fixed.greeks.theta_bump == 0.01

    def test_determinism(self):
        kw = dict(t=0.1, T=0.6, S0=95.0, r=0.02, sigma=0.3, N=500, seed=2024)
        a, b = create_option("put", **kw), create_option("put", **kw)
        np.testing.assert_array_equal(a.paths, b.paths)
        assert a.greeks() == b.greeks()


# ---------------------------------------------------------------------------
# Closed forms
# ---------------------------------------------------------------------------
class TestAnalytic:

    def test_black_scholes_known_value(self):
        assert abs(black_scholes_price(100, 100, 1.0, 0.05, 0.20) - 10.4506) < 0.01

    def test_lookback_textbook_values(self):
        """Hull's example: S=50, sigma=40%, r=10%, three months."""
        assert lookback_floating_call(50, 0.25, 0.10, 0.40) == pytest.approx(8.04, abs=0.01)
        assert lookback_floating_put(50, 0.25, 0.10, 0.40) == pytest.approx(7.79, abs=0.01)

    def test_zero_rate_rejected(self):
        with pytest.raises(ValueError):
            lookback_floating_call(100, 1.0, 0.0, 0.2)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
