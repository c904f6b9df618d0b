"""
interface.py
------------
Command-line bridge between a host program (e.g. a spreadsheet macro) and
the pricing engine.

Usage
-----
    lookback-mc call 0 1 100 0.05 0.2 10000 1 20 42
    python -m lookback_mc put 0 0.5 100 0.03 0.25 5000 2 10 7 --mode price

Output (stdout, six fixed decimals, ';' separated)
------
    price;delta;gamma;theta;rho;vega          one valuation line
    spot;price;delta                          one line per sweep point

The sweep walks the M + 1 spot nodes centred on S0 (spacing dS), re-seeding
point i with seed + i. Nothing reaches stdout unless every line was computed.

Exit codes
----------
    0  success
    1  invalid input (parameter, option kind, time domain)
    2  malformed command line (argparse)
    3  unexpected failure
"""

import sys
import argparse
from dataclasses import replace
from typing import List, Optional

from .config import CONFIG, EngineConfig
from .exceptions import LookbackError
from .models.market import MarketParameters
from .models.lookback_options import LookbackOption, option_from_params
from .utils import get_logger, set_log_level, format_decimal

log = get_logger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_RUNTIME_ERROR = 3


# =============================================================================
# Argument parsing
# =============================================================================

def _decimal(token: str) -> float:
    """Locale-independent decimal ('.' separator only)."""
    try:
        return float(token)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a decimal number: {token!r}")


def _integer(token: str) -> int:
    """Integer token; integral decimals such as '1000.0' are accepted."""
    try:
        return int(token)
    except ValueError:
        pass
    value = _decimal(token)
    if not value.is_integer():
        raise argparse.ArgumentTypeError(f"not an integer: {token!r}")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lookback-mc",
        description="Monte Carlo pricer for floating-strike lookback options",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lookback-mc call 0 1 100 0.05 0.2 10000 1 20 42              # valuation + sweep
  lookback-mc put 0 0.5 100 0.03 0.25 5000 2 10 7 --mode price  # valuation only
        """,
    )
    p.add_argument("kind",  help="Option kind: call | put (any casing)")
    p.add_argument("t",     type=_decimal, help="Valuation time (years)")
    p.add_argument("T",     type=_decimal, help="Maturity (years)")
    p.add_argument("S0",    type=_decimal, help="Spot price")
    p.add_argument("r",     type=_decimal, help="Risk-free rate")
    p.add_argument("sigma", type=_decimal, help="Volatility")
    p.add_argument("N",     type=_integer, help="Number of simulated paths")
    p.add_argument("dS",    type=_decimal, help="Spot sweep step")
    p.add_argument("M",     type=_integer, help="Number of spot sweep intervals")
    p.add_argument("seed",  type=_integer, help="Random seed")
    p.add_argument("--mode", default="all", choices=["all", "price", "sweep"],
                   help="Output selection (default: valuation then sweep)")
    p.add_argument("--log-level", default=CONFIG.log_level,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log verbosity")
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


# =============================================================================
# Output
# =============================================================================

def valuation_line(option: LookbackOption,
                   config: Optional[EngineConfig] = None) -> str:
    """price;delta;gamma;theta;rho;vega"""
    out = (config or CONFIG).output
    g = option.greeks()
    fields = [g["price"], g["delta"], g["gamma"], g["theta"], g["rho"], g["vega"]]
    return out.separator.join(format_decimal(v, out.precision) for v in fields)


def sweep_lines(params: MarketParameters,
                config: Optional[EngineConfig] = None) -> List[str]:
    """spot;price;delta for every node of the spot grid, seed + i per node."""
    cfg = config or CONFIG
    out = cfg.output
    lines = []
    for i, spot in enumerate(params.price_grid()):
        option = option_from_params(
            replace(params, S0=float(spot), seed=params.seed + i), cfg)
        row = [spot, option.price(), option.delta()]
        lines.append(out.separator.join(format_decimal(v, out.precision) for v in row))
    return lines


def run(params: MarketParameters, mode: str = "all",
        config: Optional[EngineConfig] = None) -> List[str]:
    """All output lines for one host request."""
    lines = []
    if mode in ("all", "price"):
        lines.append(valuation_line(option_from_params(params, config), config))
    if mode in ("all", "sweep"):
        lines.extend(sweep_lines(params, config))
    log.info("Run complete | kind=%s mode=%s N=%d seed=%d lines=%d",
             params.kind.value, mode, params.N, params.seed, len(lines))
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_log_level(args.log_level)

    try:
        params = MarketParameters(args.kind, args.t, args.T, args.S0, args.r,
                                  args.sigma, args.N, args.dS, args.M, args.seed)
        lines = run(params, args.mode)
    except LookbackError as exc:
        log.debug("Rejected input", exc_info=True)
        print(f"Input Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except Exception as exc:
        log.error("Pricing failed: %s", exc, exc_info=True)
        print(f"Runtime Error: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    sys.stdout.write("\n".join(lines) + "\n")
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
