"""
Lookback Option Pricing via Monte Carlo
==========================================

Floating strike call: S_T - min(S_t)
Floating strike put:  max(S_t) - S_T

Both extremes run over the whole path, S0 included. Greeks:
    Delta  pathwise, from homogeneity of GBM paths in S0
    Gamma  identically zero (payoff is piecewise linear in S0)
    Vega   pathwise, replaying dS_k/dsigma along each path
    Theta  forward difference in t, full re-simulation with the same seed
    Rho    forward difference in r, full re-simulation with the same seed

References:
    Broadie, M., & Glasserman, P. (1996). Estimating Security Price
    Derivatives Using Simulation. Management Science, 42(2), 269-285.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np
from dataclasses import replace
from typing import Dict, Optional

from .market import MarketParameters, OptionKind
from .path_generator import GBMPathGenerator
from .pricer import DiscountedPricer, PricingResult
from ..config import CONFIG, EngineConfig
from ..exceptions import InvalidOptionKindError
from ..utils import get_logger

log = get_logger(__name__)


class LookbackOption:
    """
    Floating-strike lookback option priced on its own simulated path set.

    Construction simulates and prices eagerly; every estimator afterwards
    reads the stored, read-only paths or builds a separate bumped instance.
    Subclasses only choose the running extreme and the payoff orientation.

    Usage:
        >>> opt = create_option("call", t=0, T=1, S0=100, r=0.05,
        ...                     sigma=0.2, N=10_000, seed=42)
        >>> opt.price(), opt.delta(), opt.vega()
    """

    kind: OptionKind
    # payoff = sign * (S_T - extreme)
    sign: float

    def __init__(self, params: MarketParameters, config: Optional[EngineConfig] = None):
        if params.kind is not self.kind:
            raise InvalidOptionKindError(
                f"{type(self).__name__} needs kind={self.kind.value}, got {params.kind.value}")
        self.params = params
        self.config = config or CONFIG
        self.generator = GBMPathGenerator(params, self.config.days_per_year)
        self.paths = self.generator.generate()
        self.time_grid = self.generator.time_grid
        self.pricer = DiscountedPricer(params.discount)
        self.result: PricingResult = self.pricer.evaluate(self.paths, self._record_payoffs)

    def _record_payoffs(self, paths: np.ndarray) -> np.ndarray:
        # kept for the pathwise delta
        self._payoffs = self.payoff(paths)
        return self._payoffs

    def __repr__(self):
        p = self.params
        return (f"{type(self).__name__}(t={p.t}, T={p.T}, S0={p.S0}, r={p.r}, "
                f"sigma={p.sigma}, N={p.N}, seed={p.seed})")

    # ------------------------------------------------------------------
    # Payoff
    # ------------------------------------------------------------------
    def extreme(self, paths: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def extreme_index(self, paths: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def payoff(self, paths: np.ndarray) -> np.ndarray:
        """Payoff of one trajectory (1-D) or of every row of a path matrix."""
        paths = np.asarray(paths, dtype=float)
        return self.sign * (paths[..., -1] - self.extreme(paths))

    # ------------------------------------------------------------------
    # Price and statistics
    # ------------------------------------------------------------------
    def price(self) -> float:
        return self.result.price

    def payoff_mean(self) -> float:
        return self.result.payoff_mean

    def payoff_std(self) -> float:
        return self.result.payoff_std

    def payoff_stderr(self) -> float:
        return self.result.payoff_stderr

    # ------------------------------------------------------------------
    # Greeks
    # ------------------------------------------------------------------
    def delta(self) -> float:
        """
        Pathwise delta. Paths are homogeneous of degree one in S0 for fixed
        draws, so dpayoff/dS0 = payoff / S0 on every path.
        """
        p = self.params
        if p.S0 == 0.0:
            # zero paths carry no scale; price the unit-spot instrument instead
            return self._bumped(S0=1.0).price()
        return float(self.pricer.discount * np.mean(self._payoffs / p.S0))

    def gamma(self) -> float:
        """Zero: the payoff is a max/min of functions linear in S0."""
        return 0.0

    def vega(self) -> float:
        """
        Pathwise vega.

        Each step is inverted to recover its normal draw,
            Z_k = (ln(S_k / S_{k-1}) - (r - sigma^2/2) dt) / (sigma sqrt(dt)),
        and the sensitivity of the simulated values is replayed forward,
            dS_k = dS_{k-1} * exp((r - sigma^2/2) dt + sigma sqrt(dt) Z_k)
                   + S_k * (-sigma dt + sqrt(dt) Z_k),     dS_0 = 0.
        The payoff derivative is sign * (dS_T - dS_k*) with k* the index of
        the running extreme used by the payoff. Only per-step vectors are
        held besides the stored paths.
        """
        p = self.params
        if p.S0 == 0.0:
            return 0.0

        gen = self.generator
        paths = self.paths
        dt, sqrt_dt = gen.dt, np.sqrt(gen.dt)

        # flat diffusion leaves no trace of the draws; replay them from the seed
        replay = gen.step_draws() if p.sigma == 0.0 else None

        k_star = self.extreme_index(paths)
        sens = np.zeros(p.N)
        sens_extreme = np.zeros(p.N)
        for k in range(1, gen.n_steps + 1):
            if replay is None:
                growth = paths[:, k] / paths[:, k - 1]
                z = (np.log(growth) - gen.drift) / gen.diffusion
            else:
                z = next(replay)
                growth = np.exp(gen.drift + gen.diffusion * z)
            sens = sens * growth + paths[:, k] * (-p.sigma * dt + sqrt_dt * z)
            hit = k_star == k
            sens_extreme[hit] = sens[hit]

        payoff_sens = self.sign * (sens - sens_extreme)
        return float(self.pricer.discount * np.mean(payoff_sens))

    def theta(self) -> float:
        """
        Forward difference in valuation time over one trading day, same seed.
        The bump is halved-horizon when t + eps would reach T.
        """
        p = self.params
        eps = self.config.greeks.theta_bump
        if p.t + eps >= p.T:
            eps = 0.5 * p.horizon
        up = self._bumped(t=p.t + eps)
        return (up.price() - self.price()) / eps

    def rho(self) -> float:
        """Forward difference in the risk-free rate, same seed."""
        eps = self.config.greeks.rho_bump
        up = self._bumped(r=self.params.r + eps)
        return (up.price() - self.price()) / eps

    def greeks(self) -> Dict[str, float]:
        """Price and all five sensitivities, in host output order."""
        return {
            "price": self.price(),
            "delta": self.delta(),
            "gamma": self.gamma(),
            "theta": self.theta(),
            "rho":   self.rho(),
            "vega":  self.vega(),
        }

    # ------------------------------------------------------------------
    # Bump-and-revalue diagnostics
    # ------------------------------------------------------------------
    def _spot_bump(self) -> float:
        g = self.config.greeks
        return max(self.params.S0 * g.spot_bump, g.min_spot_bump)

    def delta_bump(self) -> float:
        """Central difference in S0 with common random numbers."""
        S0, h = self.params.S0, self._spot_bump()
        up = self._bumped(S0=S0 + h).price()
        if S0 - h < 0.0:
            return (up - self.price()) / h
        down = self._bumped(S0=S0 - h).price()
        return (up - down) / (2.0 * h)

    def gamma_bump(self) -> float:
        """Second difference in S0; noise around zero for this payoff."""
        S0, h = self.params.S0, self._spot_bump()
        if S0 - h < 0.0:
            p1 = self._bumped(S0=S0 + h).price()
            p2 = self._bumped(S0=S0 + 2.0 * h).price()
            return (p2 - 2.0 * p1 + self.price()) / (h * h)
        up = self._bumped(S0=S0 + h).price()
        down = self._bumped(S0=S0 - h).price()
        return (up - 2.0 * self.price() + down) / (h * h)

    def vega_bump(self) -> float:
        """Central difference in sigma with common random numbers."""
        sigma, h = self.params.sigma, self.config.greeks.vol_bump
        up = self._bumped(sigma=sigma + h).price()
        if sigma - h < 0.0:
            return (up - self.price()) / h
        down = self._bumped(sigma=sigma - h).price()
        return (up - down) / (2.0 * h)

    def _bumped(self, **changes) -> "LookbackOption":
        """Independent instance with one parameter moved, same seed."""
        log.debug("Re-simulating %s with %s", type(self).__name__, changes)
        return type(self)(replace(self.params, **changes), self.config)


class LookbackCall(LookbackOption):
    """Payoff = S_T - min(S_t): buy at the lowest observed price."""
    kind = OptionKind.CALL
    sign = 1.0

    def extreme(self, paths):
        return np.min(paths, axis=-1)

    def extreme_index(self, paths):
        return np.argmin(paths, axis=-1)


class LookbackPut(LookbackOption):
    """Payoff = max(S_t) - S_T: sell at the highest observed price."""
    kind = OptionKind.PUT
    sign = -1.0

    def extreme(self, paths):
        return np.max(paths, axis=-1)

    def extreme_index(self, paths):
        return np.argmax(paths, axis=-1)


_OPTIONS = {OptionKind.CALL: LookbackCall, OptionKind.PUT: LookbackPut}


def option_from_params(params: MarketParameters,
                       config: Optional[EngineConfig] = None) -> LookbackOption:
    """Instrument matching ``params.kind``."""
    return _OPTIONS[params.kind](params, config)


def create_option(kind, t, T, S0, r, sigma, N, dS=1.0, M=100, seed=0,
                  config: Optional[EngineConfig] = None) -> LookbackOption:
    """
    Validate the inputs and build the priced instrument.

    Raises:
        InvalidOptionKindError: kind is neither "call" nor "put"
        InvalidParameterError: a parameter is out of range
        InvalidDomainError: T - t floors to fewer than one simulated day
    """
    params = MarketParameters(kind, t, T, S0, r, sigma, N, dS, M, seed)
    return option_from_params(params, config)
