"""Matplotlib top-down rendering of a level and an agent's pose trace."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.image import AxesImage
from matplotlib.patches import Patch

from gridbot.domain.pose import AgentPose
from gridbot.domain.world import CellKind, GridWorld

CELL_COLORS: dict[CellKind, str] = {
    CellKind.EMPTY: "#f5f5f0",
    CellKind.WALL: "#4a4a4a",
    CellKind.PICKUP: "#f2b134",
    CellKind.DROPOFF: "#3fa34d",
}
GRID_LINE_COLOR = "#cccccc"
PATH_COLOR = "#1f77b4"
CARGO_PATH_COLOR = "#d62728"


def _cell_cmap() -> tuple[ListedColormap, BoundaryNorm]:
    kinds = list(CellKind)
    cmap = ListedColormap([CELL_COLORS[kind] for kind in kinds])
    norm = BoundaryNorm(np.arange(len(kinds) + 1) - 0.5, cmap.N)
    return cmap, norm


def _draw_cell_grid(ax: plt.Axes, world: GridWorld) -> AxesImage:
    """imshow the kind matrix with row ``j = 0`` at the bottom."""
    cmap, norm = _cell_cmap()
    img = ax.imshow(world.kind_matrix(), cmap=cmap, norm=norm, origin="lower", aspect="equal")
    for x in range(world.width + 1):
        ax.axvline(x - 0.5, color=GRID_LINE_COLOR, linewidth=0.5)
    for y in range(world.height + 1):
        ax.axhline(y - 0.5, color=GRID_LINE_COLOR, linewidth=0.5)
    ax.set_xticks(range(world.width))
    ax.set_yticks(range(world.height))
    return img


def render_trace(
    world: GridWorld,
    poses: Sequence[AgentPose],
    output_path: Path,
    title: str | None = None,
) -> Path:
    """Save a top-down image of ``world`` with the agent's path drawn over it.

    Path segments travelled while carrying cargo are drawn in a second color.
    """
    fig, ax = plt.subplots(figsize=(5, 5))
    _draw_cell_grid(ax, world)
    if poses:
        xs = np.array([pose.x for pose in poses])
        ys = np.array([pose.y for pose in poses])
        cargo = np.array([pose.carrying_cargo for pose in poses])
        for start in range(len(poses) - 1):
            color = CARGO_PATH_COLOR if cargo[start + 1] else PATH_COLOR
            ax.plot(xs[start : start + 2], ys[start : start + 2], color=color, linewidth=2)
        ax.scatter([xs[0]], [ys[0]], marker="o", color=PATH_COLOR, zorder=3, label="start")
        ax.scatter([xs[-1]], [ys[-1]], marker="s", color="black", zorder=3, label="end")
    handles = [Patch(color=CELL_COLORS[kind], label=kind.value) for kind in CellKind]
    ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.02, 1.0), fontsize=8)
    if title:
        ax.set_title(title)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return output_path
