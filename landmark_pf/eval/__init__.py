"""
Visualization helpers for the landmark particle filter.
"""

from .plots import plot_particles, save_figure

__all__ = [
    "plot_particles",
    "save_figure",
]
