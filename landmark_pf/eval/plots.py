"""
Visualization utilities for the particle population.

All functions return matplotlib Figure objects for flexible display/saving.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from landmark_pf.types import LandmarkMap, Particle


def plot_particles(
    particles: Sequence[Particle],
    landmark_map: Optional[LandmarkMap] = None,
    best: Optional[Particle] = None,
    title: str = "Particle Population",
) -> plt.Figure:
    """
    Plot particle positions, map landmarks, and the best particle's associations.

    Particles are colored by normalized weight. For `best`, its heading is
    drawn as an arrow and its diagnostic annotation (world-frame observed
    points) is drawn with lines to the associated landmarks.

    Args:
        particles: Particle population.
        landmark_map: Known landmarks (optional).
        best: Particle to highlight, e.g. ParticleFilter.best_particle() (optional).
        title: Plot title.

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 8))

    if len(particles) > 0:
        xy = np.array([[p.x, p.y] for p in particles])
        weights = np.array([p.weight for p in particles], dtype=float)
        total = weights.sum()
        w_norm = weights / total if total > 0 else np.full(len(weights), 1.0 / len(weights))
        sc = ax.scatter(
            xy[:, 0],
            xy[:, 1],
            c=w_norm,
            cmap="viridis",
            s=8,
            alpha=0.6,
            label="Particles",
            zorder=3,
        )
        fig.colorbar(sc, ax=ax, label="Normalized weight")

    if landmark_map is not None and len(landmark_map) > 0:
        lm_xy = landmark_map.xy
        ax.plot(
            lm_xy[:, 0],
            lm_xy[:, 1],
            "s",
            color="black",
            markersize=7,
            label="Landmarks",
            zorder=5,
        )

    if best is not None:
        ax.plot(best.x, best.y, "ro", markersize=10, label="Best particle", zorder=11)
        ax.arrow(
            best.x,
            best.y,
            np.cos(best.theta),
            np.sin(best.theta),
            color="red",
            width=0.05,
            zorder=11,
        )
        if best.sense_x:
            ax.plot(
                best.sense_x,
                best.sense_y,
                "x",
                color="orange",
                markersize=8,
                label="Observations (world)",
                zorder=10,
            )
            if landmark_map is not None:
                for lm_id, sx, sy in zip(best.associations, best.sense_x, best.sense_y):
                    landmark = landmark_map.get(lm_id)
                    if landmark is None:
                        continue
                    ax.plot([sx, landmark.x], [sy, landmark.y], "--", color="orange", linewidth=1)

    ax.set_xlabel("X (m)", fontsize=12)
    ax.set_ylabel("Y (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.axis("equal")

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "pdf", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
