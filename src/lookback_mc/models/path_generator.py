"""
Geometric Brownian Motion Path Generator
==========================================

Daily GBM simulation under the risk-neutral measure Q with antithetic
variates:
    S(k) = S(k-1) * exp((r - 0.5*sigma^2)*dt + sigma*sqrt(dt)*Z_k),  dt = 1/365

Paths 2j and 2j+1 are driven by Z and -Z; an odd trailing path takes plain
draws. Normals come from one generator owned by the instance and are drawn
step by step, one per pair, so two generators with the same seed and N see
the same draws at step k whatever their horizon.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np
from typing import Iterator

from .market import MarketParameters
from ..config import CONFIG
from ..exceptions import InvalidDomainError
from ..utils import get_logger, timeit

log = get_logger(__name__)


class GBMPathGenerator:
    """
    Antithetic GBM path generator on a daily grid.
    Output shape: (N, Nt + 1) where column 0 = S0 and Nt = floor((T - t) * 365).

    The floor is applied to the binary float (T - t) * 365, so a horizon
    meant as a whole number of days can lose one: T = 3/365 gives Nt = 2.
    Hosts that count in days should pass a horizon slightly above the
    intended day count (e.g. (d + 0.5) / 365).

    Usage:
        >>> gen = GBMPathGenerator(params)
        >>> paths = gen.generate()  # (10000, 366) for a one-year horizon
    """

    def __init__(self, params: MarketParameters,
                 days_per_year: int = CONFIG.days_per_year):
        self.params = params
        self.dt = 1.0 / days_per_year
        self.n_steps = int(np.floor(params.horizon * days_per_year))
        if self.n_steps <= 0:
            raise InvalidDomainError(
                "Invalid time domain: T must exceed t by at least one day "
                f"(t={params.t}, T={params.T})")
        self.time_grid = params.t + self.dt * np.arange(self.n_steps + 1)
        self.time_grid.flags.writeable = False

    @property
    def drift(self) -> float:
        """Per-step log drift (r - 0.5*sigma^2)*dt."""
        c = self.params
        return (c.r - 0.5 * c.sigma**2) * self.dt

    @property
    def diffusion(self) -> float:
        """Per-step log diffusion scale sigma*sqrt(dt)."""
        return self.params.sigma * np.sqrt(self.dt)

    def step_draws(self) -> Iterator[np.ndarray]:
        """
        Yield the shocks of steps 1..Nt in order, one (N,) vector per step.

        Every call restarts the stream from the seed; only one step is held
        in memory at a time.
        """
        c = self.params
        n_pairs, odd = divmod(c.N, 2)
        rng = np.random.default_rng(c.seed)
        for _ in range(self.n_steps):
            half = rng.standard_normal(n_pairs + odd)
            z = np.empty(c.N)
            z[0::2] = half
            z[1::2] = -half[:n_pairs]
            yield z

    def normal_draws(self) -> np.ndarray:
        """
        Standard normal shocks per path, shape (N, Nt).

        Rebuilt from the seed on every call, so the result is a pure
        function of (seed, N, Nt).
        """
        draws = np.empty((self.params.N, self.n_steps))
        for k, z in enumerate(self.step_draws()):
            draws[:, k] = z
        return draws

    @timeit
    def generate(self) -> np.ndarray:
        """Generate full read-only price paths with the GBM recursion."""
        c = self.params
        paths = np.empty((c.N, self.n_steps + 1))
        paths[:, 0] = c.S0
        for k, z in enumerate(self.step_draws(), start=1):
            paths[:, k] = paths[:, k - 1] * np.exp(self.drift + self.diffusion * z)

        paths.flags.writeable = False
        log.debug("Simulated %d paths x %d steps | seed=%d S0=%.4f sigma=%.4f",
                  c.N, self.n_steps, c.seed, c.S0, c.sigma)
        return paths
