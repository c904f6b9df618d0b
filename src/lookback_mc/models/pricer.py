"""
Discounted Monte Carlo Pricer
===============================

Reduces a path matrix and a payoff rule to a discounted price estimate and
payoff statistics:
    price  = exp(-r*(T-t)) * mean(payoff)
    stderr = std(payoff, ddof=1) / sqrt(N)

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PricingResult:
    price: float
    payoff_mean: float
    payoff_std: float
    payoff_stderr: float
    ci_lower: float
    ci_upper: float
    n_paths: int


class DiscountedPricer:
    """
    Usage:
        >>> pricer = DiscountedPricer(discount=np.exp(-0.05))
        >>> result = pricer.evaluate(paths, lambda p: p[:, -1] - p.min(axis=1))
    """

    def __init__(self, discount: float):
        self.discount = discount

    def evaluate(self, paths: np.ndarray,
                 payoff_fn: Callable[[np.ndarray], np.ndarray]) -> PricingResult:
        """Apply ``payoff_fn`` row-wise (vectorised) and aggregate."""
        if paths.shape[0] == 0:
            return PricingResult(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0)
        return self.summarize(payoff_fn(paths))

    def summarize(self, payoffs: np.ndarray) -> PricingResult:
        """Statistics of an array of undiscounted per-path payoffs."""
        n = len(payoffs)
        if n == 0:
            return PricingResult(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0)

        mean = float(np.mean(payoffs))
        std = float(np.std(payoffs, ddof=1)) if n >= 2 else 0.0
        se = std / np.sqrt(n)

        p = self.discount * mean
        half = 1.96 * self.discount * se
        return PricingResult(p, mean, std, se, p - half, p + half, n)
