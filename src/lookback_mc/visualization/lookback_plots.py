"""
Figures for the lookback Monte Carlo engine.

Figures generated:
    01_sample_paths.png         - GBM paths with running minimum / maximum
    02_spot_sweep.png           - Price and pathwise delta across the spot grid
    03_convergence_analysis.png - Price and standard error vs N simulations

Author: Jose Orlando Bobadilla Fuentes, CQF
"""
import os
import numpy as np
import matplotlib.pyplot as plt

NAVY = "#1a1a2e"; TEAL = "#16697a"; CORAL = "#db6400"
GOLD = "#c5a880"

plt.rcParams.update({
    "figure.facecolor": "white", "axes.facecolor": "white",
    "axes.grid": True, "grid.alpha": 0.3, "grid.linestyle": "--",
    "savefig.facecolor": "white",
})

def _wm(fig):
    fig.text(0.99, 0.01, "J. Bobadilla | CQF", fontsize=7,
             color="gray", alpha=0.5, ha="right", va="bottom")

def _sv(fig, output_dir, name):
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, name)
    fig.savefig(path, dpi=120); plt.close(fig); return path


def plot_sample_paths(paths, time_grid, output_dir="outputs/figures", n_show=50):
    fig, ax = plt.subplots(figsize=(11, 6))
    n = min(n_show, paths.shape[0])
    for i in range(n):
        ax.plot(time_grid, paths[i], lw=0.5, alpha=0.5, color=TEAL)
    ax.plot(time_grid, np.minimum.accumulate(paths[0]), color=CORAL, lw=2,
            label="Running Min (path 0)")
    ax.plot(time_grid, np.maximum.accumulate(paths[0]), color=GOLD, lw=2,
            label="Running Max (path 0)")
    ax.plot(time_grid, paths.mean(axis=0), color=NAVY, lw=3, label="Mean Path")
    ax.fill_between(time_grid, np.percentile(paths, 5, axis=0),
                    np.percentile(paths, 95, axis=0), alpha=0.1, color=NAVY)
    ax.set_xlabel("Time (Years)")
    ax.set_ylabel("Asset Price ($)")
    ax.set_title(f"Antithetic GBM Sample Paths ({n} of {paths.shape[0]})")
    ax.legend(loc="upper left")
    _wm(fig)
    return _sv(fig, output_dir, "01_sample_paths.png")


def plot_spot_sweep(spots, prices, deltas, output_dir="outputs/figures",
                    title="Lookback Option: Spot Sweep"):
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
    ax1.plot(spots, prices, "o-", color=TEAL, lw=2, ms=4)
    ax1.set_xlabel("Spot ($)"); ax1.set_ylabel("Price ($)")
    ax1.set_title("Price vs Spot")

    ax2.plot(spots, deltas, "o-", color=CORAL, lw=2, ms=4)
    ax2.set_xlabel("Spot ($)")
    ax2.set_title("Pathwise Delta")
    fig.suptitle(title, fontsize=15, fontweight="bold", y=1.02)
    fig.tight_layout()
    _wm(fig)
    return _sv(fig, output_dir, "02_spot_sweep.png")


def plot_convergence_analysis(ns, prices, stderrs, output_dir="outputs/figures",
                              reference=None, title="Lookback Call: MC Convergence"):
    ns = np.asarray(ns, dtype=float)
    prices = np.asarray(prices); stderrs = np.asarray(stderrs)
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

    ax1.semilogx(ns, prices, "o-", color=TEAL, lw=2, label="MC Estimate")
    ax1.fill_between(ns, prices - 1.96*stderrs, prices + 1.96*stderrs,
                     alpha=0.2, color=TEAL)
    if reference is not None:
        ax1.axhline(reference, color=CORAL, ls="--", lw=2,
                    label=f"Continuous Closed Form = {reference:.4f}")
    ax1.set_xlabel("Number of Simulations")
    ax1.set_ylabel("Option Price ($)")
    ax1.set_title("Price Convergence")
    ax1.legend()

    ax2.loglog(ns, stderrs, "o-", color=NAVY, lw=2, label="Standard Error")
    ax2.loglog(ns, stderrs[0] * np.sqrt(ns[0] / ns), "--", color=GOLD, lw=2,
               label=r"$O(1/\sqrt{N})$")
    ax2.set_xlabel("Number of Simulations")
    ax2.set_ylabel("Standard Error ($)")
    ax2.set_title("Convergence Rate Analysis")
    ax2.legend()
    fig.suptitle(title, fontsize=15, fontweight="bold", y=1.02)
    fig.tight_layout()
    _wm(fig)
    return _sv(fig, output_dir, "03_convergence_analysis.png")
