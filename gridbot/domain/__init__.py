"""Domain layer: static grid world, built-in levels, and agent pose."""

from gridbot.domain.levels import LEVELS, first_level_grid, get_level, initial_grid
from gridbot.domain.pose import AgentPose, Direction, shortest_turn
from gridbot.domain.reachability import (
    build_cell_graph,
    level_is_solvable,
    shortest_path_length,
)
from gridbot.domain.world import Cell, CellKind, GridWorld

__all__ = [
    "AgentPose",
    "Cell",
    "CellKind",
    "Direction",
    "GridWorld",
    "LEVELS",
    "build_cell_graph",
    "first_level_grid",
    "get_level",
    "initial_grid",
    "level_is_solvable",
    "shortest_path_length",
]
