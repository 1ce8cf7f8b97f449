"""Utility modules."""

from .visualization import (
    plot_density_of_states,
    plot_visit_histogram,
    plot_sample_trace,
    create_summary_plot
)

__all__ = [
    "plot_density_of_states",
    "plot_visit_histogram",
    "plot_sample_trace",
    "create_summary_plot",
]
