"""Static grid world: cell kinds and occupancy/adjacency/collision queries.

Cells are addressed as ``(i, j)`` with ``i`` the column (x) and ``j`` the row
(y). The grid never changes during a run; every query here is pure.
Out-of-range coordinates are rejected (never wrapped).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from gridbot.errors import LevelFormatError


class CellKind(Enum):
    """What occupies a grid cell."""

    EMPTY = "empty"
    WALL = "wall"
    PICKUP = "pickup"
    DROPOFF = "dropoff"

    @property
    def code(self) -> int:
        return _KIND_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> CellKind:
        return _CODE_KINDS[code]


_KIND_CODES: dict[CellKind, int] = {kind: code for code, kind in enumerate(CellKind)}
_CODE_KINDS: dict[int, CellKind] = {code: kind for kind, code in _KIND_CODES.items()}

_ASCII_KINDS: dict[str, CellKind] = {
    ".": CellKind.EMPTY,
    "#": CellKind.WALL,
    "P": CellKind.PICKUP,
    "D": CellKind.DROPOFF,
}

# Orthogonal neighbour offsets used for adjacency.
_NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass(frozen=True)
class Cell:
    """A single grid cell with optional metadata (wall height, pickup id, ...)."""

    kind: CellKind
    meta: Mapping[str, Any] = field(default_factory=dict)


class GridWorld:
    """Fixed-size grid of cells answering occupancy and adjacency queries."""

    def __init__(
        self,
        kinds: np.ndarray,
        meta: Mapping[tuple[int, int], Mapping[str, Any]] | None = None,
    ) -> None:
        if kinds.ndim != 2 or kinds.shape[0] < 1 or kinds.shape[1] < 1:
            raise LevelFormatError(f"grid must be a non-empty 2D array, got shape {kinds.shape}")
        valid_codes = set(_CODE_KINDS)
        if not set(np.unique(kinds).tolist()) <= valid_codes:
            raise LevelFormatError("grid contains unknown cell codes")
        self._kinds = kinds.astype(np.int8, copy=True)
        self._kinds.setflags(write=False)
        self._meta: dict[tuple[int, int], dict[str, Any]] = {
            pos: dict(values) for pos, values in (meta or {}).items()
        }

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def empty(cls, width: int, height: int) -> GridWorld:
        if width < 1 or height < 1:
            raise LevelFormatError("grid dimensions must be >= 1")
        return cls(np.full((height, width), CellKind.EMPTY.code, dtype=np.int8))

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Mapping[tuple[int, int], Cell]) -> GridWorld:
        """Build a grid from sparse ``(i, j) -> Cell`` entries; the rest are empty."""
        if width < 1 or height < 1:
            raise LevelFormatError("grid dimensions must be >= 1")
        kinds = np.full((height, width), CellKind.EMPTY.code, dtype=np.int8)
        meta: dict[tuple[int, int], Mapping[str, Any]] = {}
        for (i, j), cell in cells.items():
            if not (0 <= i < width and 0 <= j < height):
                raise LevelFormatError(f"cell ({i}, {j}) is outside a {width}x{height} grid")
            kinds[j, i] = cell.kind.code
            if cell.meta:
                meta[(i, j)] = cell.meta
        return cls(kinds, meta)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Mapping[str, Any]]]) -> GridWorld:
        """Build a grid from row lists of ``{"type": ..., "meta": {...}}`` dicts.

        ``rows[j][i]`` describes cell ``(i, j)``; every row must have the same width.
        """
        if not rows or not rows[0]:
            raise LevelFormatError("rows must be a non-empty list of non-empty rows")
        width = len(rows[0])
        cells: dict[tuple[int, int], Cell] = {}
        for j, row in enumerate(rows):
            if len(row) != width:
                raise LevelFormatError(f"row {j} has {len(row)} cells, expected {width}")
            for i, entry in enumerate(row):
                raw_type = entry.get("type", CellKind.EMPTY.value)
                try:
                    kind = CellKind(raw_type)
                except ValueError as exc:
                    raise LevelFormatError(f"unknown cell type {raw_type!r} at ({i}, {j})") from exc
                cells[(i, j)] = Cell(kind=kind, meta=dict(entry.get("meta") or {}))
        return cls.from_cells(width, len(rows), cells)

    @classmethod
    def from_ascii(cls, lines: Iterable[str]) -> GridWorld:
        """Build a grid from a text picture; the first line is the top row.

        ``.`` empty, ``#`` wall, ``P`` pickup, ``D`` dropoff.
        """
        picture = [line.strip() for line in lines if line.strip()]
        if not picture:
            raise LevelFormatError("ascii level is empty")
        height, width = len(picture), len(picture[0])
        kinds = np.empty((height, width), dtype=np.int8)
        for row_index, line in enumerate(picture):
            if len(line) != width:
                raise LevelFormatError(f"ascii row {row_index} has width {len(line)}, expected {width}")
            j = height - 1 - row_index
            for i, char in enumerate(line):
                kind = _ASCII_KINDS.get(char)
                if kind is None:
                    raise LevelFormatError(f"unknown ascii cell {char!r}")
                kinds[j, i] = kind.code
        return cls(kinds)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    @property
    def width(self) -> int:
        return int(self._kinds.shape[1])

    @property
    def height(self) -> int:
        return int(self._kinds.shape[0])

    def in_bounds(self, i: int, j: int) -> bool:
        return 0 <= i < self.width and 0 <= j < self.height

    def cell_kind(self, i: int, j: int) -> Cell | None:
        """Return the cell at ``(i, j)``, or ``None`` when out of bounds."""
        if not self.in_bounds(i, j):
            return None
        kind = CellKind.from_code(int(self._kinds[j, i]))
        return Cell(kind=kind, meta=dict(self._meta.get((i, j), {})))

    def _kind_at(self, i: int, j: int) -> CellKind | None:
        if not self.in_bounds(i, j):
            return None
        return CellKind.from_code(int(self._kinds[j, i]))

    def is_wall(self, i: int, j: int) -> bool:
        """True only for in-bounds wall cells; out of bounds is not a wall."""
        return self._kind_at(i, j) is CellKind.WALL

    def is_adjacent(self, i: int, j: int, kind: CellKind) -> bool:
        """True if any orthogonal neighbour of ``(i, j)`` has ``kind``."""
        for di, dj in _NEIGHBOR_OFFSETS:
            if self._kind_at(i + di, j + dj) is kind:
                return True
        return False

    def is_adjacent_to_pickup(self, i: int, j: int) -> bool:
        return self.is_adjacent(i, j, CellKind.PICKUP)

    def is_adjacent_to_dropoff(self, i: int, j: int) -> bool:
        return self.is_adjacent(i, j, CellKind.DROPOFF)

    def can_enter(self, i: int, j: int) -> bool:
        """False out of bounds or on a wall; true otherwise."""
        kind = self._kind_at(i, j)
        return kind is not None and kind is not CellKind.WALL

    def neighbors(self, i: int, j: int) -> Iterator[tuple[int, int]]:
        """Yield in-bounds orthogonal neighbours of ``(i, j)``."""
        for di, dj in _NEIGHBOR_OFFSETS:
            if self.in_bounds(i + di, j + dj):
                yield (i + di, j + dj)

    def cells_of_kind(self, kind: CellKind) -> list[tuple[int, int]]:
        """Return ``(i, j)`` positions of every cell of ``kind``, row-major."""
        rows, cols = np.nonzero(self._kinds == kind.code)
        return sorted((int(i), int(j)) for j, i in zip(rows, cols, strict=True))

    def kind_matrix(self) -> np.ndarray:
        """Return a writable ``(height, width)`` copy of the cell-kind codes."""
        return self._kinds.copy()

    def to_rows(self) -> list[list[dict[str, Any]]]:
        """Inverse of :meth:`from_rows`."""
        rows: list[list[dict[str, Any]]] = []
        for j in range(self.height):
            row: list[dict[str, Any]] = []
            for i in range(self.width):
                entry: dict[str, Any] = {"type": CellKind.from_code(int(self._kinds[j, i])).value}
                if (i, j) in self._meta:
                    entry["meta"] = dict(self._meta[(i, j)])
                row.append(entry)
            rows.append(row)
        return rows

    def __repr__(self) -> str:
        return f"GridWorld(width={self.width}, height={self.height})"
