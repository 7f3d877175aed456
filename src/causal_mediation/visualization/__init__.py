"""Plots for indexed mediation results."""

from .plots import MediationPlotSpec, build_plot_spec, plot_mediation_index, autoplot

__all__ = [
    "MediationPlotSpec",
    "build_plot_spec",
    "plot_mediation_index",
    "autoplot",
]
