"""
Visualization utilities.

- Body scatter plots
- Trajectory plots
- Live repaint callback
"""

from nbodysim.viz.bodies import (
    plot_bodies,
    plot_trajectories,
    LiveBodyView,
    save_figure,
)

__all__ = [
    "plot_bodies",
    "plot_trajectories",
    "LiveBodyView",
    "save_figure",
]
