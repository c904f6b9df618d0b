"""
Lookback Monte Carlo Engine - Main Analysis
=============================================

Demonstrates: floating-strike lookback call and put, pathwise vs
bump-and-revalue Greeks, comparison with closed forms, convergence analysis.

    python main.py            # report only
    python main.py --plot     # report + figures in outputs/figures

Host integration (spreadsheet / batch) goes through the CLI instead:
    lookback-mc call 0 1 100 0.05 0.2 10000 1 20 42

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import sys, os
import argparse
import numpy as np
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from lookback_mc.models.market import MarketParameters
from lookback_mc.models.lookback_options import option_from_params
from lookback_mc.models.analytic import black_scholes_price, lookback_floating_price
from lookback_mc.interface import sweep_lines


def header(t):
    print(f"\n{'='*70}\n  {t}\n{'='*70}")

def pr(opt, indent="    "):
    r = opt.result
    print(f"{indent}Price:   {r.price:.6f}")
    print(f"{indent}SE:      {opt.pricer.discount * r.payoff_stderr:.6f}")
    print(f"{indent}95% CI:  [{r.ci_lower:.6f}, {r.ci_upper:.6f}]")


def main():
    p = argparse.ArgumentParser(description="Lookback Monte Carlo demo report")
    p.add_argument("--plot", action="store_true", help="Write figures")
    p.add_argument("--paths", type=int, default=20000, help="Simulated paths")
    args = p.parse_args()

    header("LOOKBACK MONTE CARLO ENGINE")
    base = dict(t=0.0, T=1.0, S0=100.0, r=0.05, sigma=0.20, N=args.paths,
                dS=5.0, M=12, seed=42)
    print(f"\n  S0={base['S0']}, T={base['T']}y, r={base['r']:.1%}, "
          f"sigma={base['sigma']:.1%}, paths={base['N']:,}")

    # --- 1. PRICES ---
    header("1. FLOATING-STRIKE LOOKBACKS")
    options = {}
    for kind in ("call", "put"):
        opt = option_from_params(MarketParameters(kind, **base))
        options[kind] = opt
        cont = lookback_floating_price(base["S0"], base["T"], base["r"], base["sigma"], kind)
        vanilla = black_scholes_price(base["S0"], base["S0"], base["T"],
                                      base["r"], base["sigma"], kind)
        print(f"\n  Floating {kind.title()}:")
        pr(opt)
        print(f"    Continuous closed form: {cont:.6f}")
        print(f"    Vanilla ATM {kind}:       {vanilla:.6f}")

    # --- 2. GREEKS ---
    header("2. GREEKS: PATHWISE vs BUMP-AND-REVALUE")
    for kind, opt in options.items():
        print(f"\n  {kind.title()}:")
        print(f"    Delta  pathwise {opt.delta():10.6f}   bump {opt.delta_bump():10.6f}")
        print(f"    Gamma  exact    {opt.gamma():10.6f}   bump {opt.gamma_bump():10.6f}")
        print(f"    Vega   pathwise {opt.vega():10.6f}   bump {opt.vega_bump():10.6f}")
        print(f"    Theta  {opt.theta():10.6f}")
        print(f"    Rho    {opt.rho():10.6f}")

    # --- 3. CONVERGENCE ---
    header("3. CONVERGENCE")
    ns = [1000, 2000, 5000, 10000, 20000, 50000]
    ps, ss = [], []
    for n in ns:
        opt = option_from_params(MarketParameters("call", **dict(base, N=n)))
        ps.append(opt.price()); ss.append(opt.pricer.discount * opt.payoff_stderr())
        print(f"    N={n:>6,}  price={ps[-1]:.6f}  SE={ss[-1]:.6f}")

    if args.plot:
        from lookback_mc.visualization.lookback_plots import (
            plot_sample_paths, plot_spot_sweep, plot_convergence_analysis)
        header("4. VISUALIZATIONS")
        out = "outputs/figures"
        call = options["call"]
        plot_sample_paths(call.paths, call.time_grid, output_dir=out, n_show=100)

        rows = np.array([[float(x) for x in line.split(";")]
                         for line in sweep_lines(call.params)])
        plot_spot_sweep(rows[:, 0], rows[:, 1], rows[:, 2], output_dir=out)

        ref = lookback_floating_price(base["S0"], base["T"], base["r"], base["sigma"])
        plot_convergence_analysis(ns, ps, ss, output_dir=out, reference=ref)
        print(f"\n  Outputs: {out}/")

    header("ANALYSIS COMPLETE")


if __name__ == "__main__":
    main()
