"""Matplotlib figures for paths, spot sweeps and convergence."""
