"""
Visualization of bodies and their trajectories.

- plot_bodies: scatter of the current body list, marker size by mass
- plot_trajectories: paths recorded by a TrajectoryRecorder
- LiveBodyView: an on_step callback that redraws a figure every few steps

All plots use matplotlib; the view is square and covers [0, 2R)² by default,
the region bodies are generated in.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure

from nbodysim.core.errors import ConfigurationError

if TYPE_CHECKING:
    from nbodysim.analysis.recording import TrajectoryRecorder
    from nbodysim.core.body import Body
    from nbodysim.core.settings import Settings


def _create_mass_cmap():
    """Colormap for body mass: cool blue (light) → warm white (heavy)."""
    colors = [
        (0.192, 0.407, 0.556),   # Blue
        (0.127, 0.566, 0.550),   # Teal
        (0.565, 0.820, 0.376),   # Light green
        (0.993, 0.978, 0.925),   # Warm white
    ]
    return LinearSegmentedColormap.from_list("mass", colors)


CMAP_MASS = _create_mass_cmap()
BACKGROUND = "black"


def _body_arrays(bodies: Sequence["Body"]) -> tuple[np.ndarray, np.ndarray]:
    positions = np.array([(b.position.x, b.position.y) for b in bodies], dtype=np.float64)
    masses = np.array([b.mass for b in bodies], dtype=np.float64)
    return positions, masses


def _marker_sizes(masses: np.ndarray, base: float = 10.0) -> np.ndarray:
    """Marker area grows with log-mass; the lightest body gets `base`."""
    log_mass = np.log10(masses)
    return base * (1.0 + log_mass - log_mass.min())


def _view_limits(settings: "Settings | None") -> tuple[float, float] | None:
    if settings is None:
        return None
    return 0.0, 2.0 * settings.space_radius


def plot_bodies(
    bodies: Sequence["Body"],
    settings: "Settings | None" = None,
    title: str = "Bodies",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
) -> tuple[Figure, Axes]:
    """
    Scatter plot of body positions.

    Args:
        bodies: Bodies to draw
        settings: If given, the view is fixed to [0, 2R)²
        title: Plot title
        ax: Existing axes (creates new if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    positions, masses = _body_arrays(bodies)
    ax.set_facecolor(BACKGROUND)
    ax.scatter(
        positions[:, 0], positions[:, 1],
        s=_marker_sizes(masses),
        c=np.log10(masses),
        cmap=CMAP_MASS,
        edgecolors="none",
    )

    limits = _view_limits(settings)
    if limits is not None:
        ax.set_xlim(*limits)
        ax.set_ylim(*limits)
    ax.set_aspect("equal")
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return fig, ax


def plot_trajectories(
    recorder: "TrajectoryRecorder",
    settings: "Settings | None" = None,
    title: str = "Trajectories",
    figsize: tuple[float, float] = (10, 10),
    indices: Sequence[int] | None = None,
    show_end: bool = True,
) -> Figure:
    """
    Plot recorded body paths.

    Args:
        recorder: TrajectoryRecorder filled during a run
        settings: If given, the view is fixed to [0, 2R)²
        indices: Bodies to draw (all if None)
        show_end: Mark final positions

    Returns:
        Figure
    """
    fig, ax = plt.subplots(figsize=figsize)
    ax.set_facecolor(BACKGROUND)

    positions = recorder.positions()
    if positions.size > 0:
        n_bodies = positions.shape[1]
        if indices is None:
            indices = range(n_bodies)

        cmap_lines = plt.get_cmap("tab10")
        for k, i in enumerate(indices):
            color = cmap_lines(k % 10)
            ax.plot(positions[:, i, 0], positions[:, i, 1], color=color, linewidth=1, zorder=2)
            if show_end:
                ax.scatter(
                    [positions[-1, i, 0]], [positions[-1, i, 1]],
                    color=color, s=20, marker="o", zorder=3,
                )

    limits = _view_limits(settings)
    if limits is not None:
        ax.set_xlim(*limits)
        ax.set_ylim(*limits)
    ax.set_aspect("equal")
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")

    fig.tight_layout()
    return fig


class LiveBodyView:
    """
    Repaint callback for interactive runs.

    Pass an instance as a scheduler's on_step. Every `every` steps it moves
    the scatter points to the current positions and lets the GUI event loop
    draw them.
    """

    def __init__(
        self,
        bodies: Sequence["Body"],
        settings: "Settings | None" = None,
        every: int = 1,
        pause: float = 0.001,
        figsize: tuple[float, float] = (8, 8),
    ):
        if every < 1:
            raise ConfigurationError(f"every must be >= 1, got {every}")
        self.every = every
        self.pause = pause
        self.fig, self.ax = plot_bodies(bodies, settings, title="N-body simulation", figsize=figsize)
        self._scatter = self.ax.collections[0]

    def __call__(self, step: int, bodies: Sequence["Body"]) -> None:
        if step % self.every != 0:
            return
        positions, _ = _body_arrays(bodies)
        self._scatter.set_offsets(positions)
        self.ax.set_title(f"N-body simulation: step {step + 1}")
        self.fig.canvas.draw_idle()
        plt.pause(self.pause)

    def close(self) -> None:
        plt.close(self.fig)


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
