"""
Closed-Form Reference Prices
==============================

Benchmarks for the Monte Carlo engine:
    - Black-Scholes European call/put (no dividends)
    - Continuously monitored floating-strike lookback call/put
      (Goldman, Sosin & Gatto, 1979)

Daily monitoring sees a shallower extreme than continuous monitoring, so the
simulated lookback prices sit slightly below the continuous closed forms.

References:
    Goldman, M. B., Sosin, H. B., & Gatto, M. A. (1979). Path Dependent
    Options: "Buy at the Low, Sell at the High". Journal of Finance, 34(5).
    Hull, J. C. (2018). Options, Futures, and Other Derivatives, ch. 26.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np
from scipy.stats import norm
from typing import Optional, Union

from .market import OptionKind


def _check(T: float, sigma: float):
    if T <= 0:
        raise ValueError(f"Time to expiration must be positive, got {T}")
    if sigma <= 0:
        raise ValueError(f"Volatility must be positive, got {sigma}")


def black_scholes_price(S: float, K: float, T: float, r: float, sigma: float,
                        kind: Union[str, OptionKind] = OptionKind.CALL) -> float:
    """
    European option price.

        C = S N(d1) - K exp(-rT) N(d2)
        P = K exp(-rT) N(-d2) - S N(-d1)
    """
    _check(T, sigma)
    kind = OptionKind.parse(kind)
    sqrt_T = np.sqrt(T)
    d1 = (np.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    d2 = d1 - sigma * sqrt_T
    disc = np.exp(-r * T)
    if kind is OptionKind.CALL:
        return float(S * norm.cdf(d1) - K * disc * norm.cdf(d2))
    return float(K * disc * norm.cdf(-d2) - S * norm.cdf(-d1))


def lookback_floating_call(S: float, T: float, r: float, sigma: float,
                           S_min: Optional[float] = None) -> float:
    """
    Continuous floating-strike lookback call, payoff S_T - min(S_t).

        a1 = [ln(S/S_min) + (r + sigma^2/2) T] / (sigma sqrt(T))
        a2 = a1 - sigma sqrt(T)
        a3 = [ln(S/S_min) + (-r + sigma^2/2) T] / (sigma sqrt(T))
        Y1 = -2 (r - sigma^2/2) ln(S/S_min) / sigma^2

        c = S N(a1) - S sigma^2/(2r) N(-a1)
            - S_min exp(-rT) [N(a2) - sigma^2/(2r) exp(Y1) N(-a3)]
    """
    _check(T, sigma)
    if r == 0:
        raise ValueError("Closed form requires a non-zero rate")
    S_min = S if S_min is None else S_min
    sqrt_T = np.sqrt(T)
    ln = np.log(S / S_min)
    k = sigma**2 / (2.0 * r)

    a1 = (ln + (r + 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    a2 = a1 - sigma * sqrt_T
    a3 = (ln + (-r + 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    Y1 = -2.0 * (r - 0.5 * sigma**2) * ln / sigma**2

    return float(S * norm.cdf(a1) - S * k * norm.cdf(-a1)
                 - S_min * np.exp(-r * T) * (norm.cdf(a2) - k * np.exp(Y1) * norm.cdf(-a3)))


def lookback_floating_put(S: float, T: float, r: float, sigma: float,
                          S_max: Optional[float] = None) -> float:
    """
    Continuous floating-strike lookback put, payoff max(S_t) - S_T.

        b1 = [ln(S_max/S) + (-r + sigma^2/2) T] / (sigma sqrt(T))
        b2 = b1 - sigma sqrt(T)
        b3 = [ln(S_max/S) + (r - sigma^2/2) T] / (sigma sqrt(T))
        Y2 = 2 (r - sigma^2/2) ln(S_max/S) / sigma^2

        p = S_max exp(-rT) [N(b1) - sigma^2/(2r) exp(Y2) N(-b3)]
            + S sigma^2/(2r) N(-b2) - S N(b2)
    """
    _check(T, sigma)
    if r == 0:
        raise ValueError("Closed form requires a non-zero rate")
    S_max = S if S_max is None else S_max
    sqrt_T = np.sqrt(T)
    ln = np.log(S_max / S)
    k = sigma**2 / (2.0 * r)

    b1 = (ln + (-r + 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    b2 = b1 - sigma * sqrt_T
    b3 = (ln + (r - 0.5 * sigma**2) * T) / (sigma * sqrt_T)
    Y2 = 2.0 * (r - 0.5 * sigma**2) * ln / sigma**2

    return float(S_max * np.exp(-r * T) * (norm.cdf(b1) - k * np.exp(Y2) * norm.cdf(-b3))
                 + S * k * norm.cdf(-b2) - S * norm.cdf(b2))


def lookback_floating_price(S: float, T: float, r: float, sigma: float,
                            kind: Union[str, OptionKind] = OptionKind.CALL) -> float:
    """Continuous lookback price at inception (running extreme = S)."""
    if OptionKind.parse(kind) is OptionKind.CALL:
        return lookback_floating_call(S, T, r, sigma)
    return lookback_floating_put(S, T, r, sigma)
