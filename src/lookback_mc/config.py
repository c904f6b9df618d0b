"""
config.py
---------
Centralised configuration for the lookback Monte Carlo engine.
Tunables are read from environment variables with sensible defaults, so a
host process (spreadsheet, batch job) can adjust them without code changes.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GreekConfig:
    """Bump sizes for the finite-difference estimators."""
    # None: one trading day, filled in by EngineConfig
    theta_bump:    Optional[float] = (float(os.environ["LOOKBACK_THETA_BUMP"])
                                      if os.getenv("LOOKBACK_THETA_BUMP") else None)
    rho_bump:      float = float(os.getenv("LOOKBACK_RHO_BUMP",   "1e-4"))
    spot_bump:     float = float(os.getenv("LOOKBACK_SPOT_BUMP",  "0.01"))   # relative to S0
    min_spot_bump: float = 1e-4
    vol_bump:      float = float(os.getenv("LOOKBACK_VOL_BUMP",   "1e-3"))


@dataclass
class OutputConfig:
    """Host output formatting."""
    precision: int = int(os.getenv("LOOKBACK_PRECISION", "6"))
    separator: str = ";"


@dataclass
class EngineConfig:
    """Master configuration aggregating all sub-configs."""
    greeks: GreekConfig  = field(default_factory=GreekConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Calendar
    days_per_year:         int = 365    # simulation step is one calendar day
    trading_days_per_year: int = 252

    # Logging
    log_level: str           = os.getenv("LOOKBACK_LOG_LEVEL", "WARNING")
    log_dir:   Optional[str] = os.getenv("LOOKBACK_LOG_DIR") or None

    def __post_init__(self):
        if self.greeks.theta_bump is None:
            self.greeks.theta_bump = 1.0 / self.trading_days_per_year


# Singleton instance used throughout the project
CONFIG = EngineConfig()
