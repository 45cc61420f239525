"""Built-in level layouts."""

from __future__ import annotations

from collections.abc import Callable

from gridbot.config.constants import GRID_HEIGHT, GRID_WIDTH, WALL_HEIGHT
from gridbot.domain.world import Cell, CellKind, GridWorld

# Wall cells shared by the sandbox and level 1, as (i, j).
_COMMON_WALLS: tuple[tuple[int, int], ...] = ((3, 2), (2, 7), (4, 0), (7, 3))


def _build(pickup: tuple[int, int], dropoff: tuple[int, int]) -> GridWorld:
    cells: dict[tuple[int, int], Cell] = {}
    for index, pos in enumerate(_COMMON_WALLS):
        meta = {"height": WALL_HEIGHT} if index == 0 else {}
        cells[pos] = Cell(kind=CellKind.WALL, meta=meta)
    cells[pickup] = Cell(kind=CellKind.PICKUP, meta={"id": "P1"})
    cells[dropoff] = Cell(kind=CellKind.DROPOFF, meta={"id": "D1"})
    return GridWorld.from_cells(GRID_WIDTH, GRID_HEIGHT, cells)


def initial_grid() -> GridWorld:
    """Sandbox layout shown before any level is selected."""
    return _build(pickup=(1, 1), dropoff=(6, 6))


def first_level_grid() -> GridWorld:
    """Level 1: carry the cargo from P1 to D1 around the walls."""
    return _build(pickup=(1, 5), dropoff=(5, 5))


LEVELS: dict[str, Callable[[], GridWorld]] = {
    "sandbox": initial_grid,
    "level1": first_level_grid,
}


def get_level(name: str) -> GridWorld:
    """Return a fresh grid for the named built-in level."""
    try:
        factory = LEVELS[name]
    except KeyError as exc:
        known = ", ".join(sorted(LEVELS))
        raise ValueError(f"unknown level {name!r} (known: {known})") from exc
    return factory()
