"""
Market Parameter Set
=====================

Immutable, validated inputs shared by the path generator, the pricer and
the lookback instruments: valuation time, maturity, spot, rate, volatility,
simulation count, random seed and option kind. The (dS, M) pair describes
a spot grid centred on S0, consumed by the host spot sweep.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..exceptions import InvalidOptionKindError, InvalidParameterError


class OptionKind(Enum):
    """Floating-strike lookback option kinds."""
    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, token: Union[str, "OptionKind"]) -> "OptionKind":
        """Case-insensitive conversion of ``"call"`` / ``"put"``."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            key = token.strip().lower()
            for kind in cls:
                if kind.value == key:
                    return kind
        raise InvalidOptionKindError(
            f"Option type must be 'call' or 'put' (any casing), got {token!r}")


def _as_int(name: str, value) -> int:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)) and math.isfinite(value) \
            and float(value).is_integer():
        return int(value)
    raise InvalidParameterError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class MarketParameters:
    """
    Attributes:
        kind: OptionKind.CALL or OptionKind.PUT (strings are parsed)
        t: Valuation time in years (t >= 0)
        T: Maturity in years (T >= t)
        S0: Spot price of the underlying (S0 >= 0)
        r: Annualized risk-free rate (continuous compounding)
        sigma: Annualized volatility (sigma >= 0)
        N: Number of simulated paths (N > 0)
        dS: Spot grid step (dS > 0)
        M: Number of spot grid intervals (M > 0)
        seed: Non-negative random seed

    Example:
        >>> params = MarketParameters("call", t=0.0, T=1.0, S0=100, r=0.05,
        ...                           sigma=0.20, N=10_000, seed=42)
    """
    kind: OptionKind
    t: float
    T: float
    S0: float
    r: float
    sigma: float
    N: int
    dS: float = 1.0
    M: int = 100
    seed: int = 0

    def __post_init__(self):
        """Normalise types, then validate. Instances are frozen afterwards."""
        object.__setattr__(self, "kind", OptionKind.parse(self.kind))
        for name in ("t", "T", "S0", "r", "sigma", "dS"):
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidParameterError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)
        for name in ("N", "M", "seed"):
            object.__setattr__(self, name, _as_int(name, getattr(self, name)))
        self._validate()

    def _validate(self):
        if self.t < 0.0:
            raise InvalidParameterError(f"t must be non-negative, got {self.t}")
        if self.T < self.t:
            raise InvalidParameterError(
                f"T must not be smaller than t, got T={self.T}, t={self.t}")
        if self.S0 < 0.0:
            raise InvalidParameterError(f"S0 must be non-negative, got {self.S0}")
        if self.sigma < 0.0:
            raise InvalidParameterError(f"sigma must be non-negative, got {self.sigma}")
        if self.N <= 0:
            raise InvalidParameterError(f"N must be a positive integer, got {self.N}")
        if self.dS <= 0.0:
            raise InvalidParameterError(f"dS must be positive, got {self.dS}")
        if self.M <= 0:
            raise InvalidParameterError(f"M must be a positive integer, got {self.M}")
        if self.seed < 0:
            raise InvalidParameterError(f"seed must be non-negative, got {self.seed}")

    @property
    def horizon(self) -> float:
        """Remaining life T - t in years."""
        return self.T - self.t

    @property
    def discount(self) -> float:
        """exp(-r * (T - t))."""
        return float(np.exp(-self.r * self.horizon))

    @property
    def S_min(self) -> float:
        """Lower end of the spot grid, floored at zero."""
        return max(0.0, self.S0 - self.M * self.dS / 2.0)

    @property
    def S_max(self) -> float:
        return self.S_min + self.M * self.dS

    def price_grid(self) -> np.ndarray:
        """M + 1 spot nodes S_min + i * dS."""
        return self.S_min + self.dS * np.arange(self.M + 1)
