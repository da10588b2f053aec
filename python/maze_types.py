"""
Shared type definitions for the maze generators and solvers.

The maze is an index-addressed arena: cells live in one flat list and refer to
their neighbours and tunnel partners by index, never by object reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from topology import TopologyPolicy


class Direction(Enum):
    """Compass direction between two cells."""

    N = "N"  # Up (decreasing row)
    NE = "NE"  # Hex only
    E = "E"  # Right (increasing col)
    SE = "SE"  # Hex only
    S = "S"  # Down (increasing row)
    SW = "SW"  # Hex only
    W = "W"  # Left (decreasing col)
    NW = "NW"  # Hex only


class Topology(Enum):
    """Shape of the cell grid."""

    NORMAL = "normal"  # Rectangular, 4 neighbours
    TUNNEL = "tunnel"  # Rectangular plus teleport links
    HEX = "hex"  # Hexagonal, 6 neighbours, skewed column range per row


class UnsupportedTopologyError(ValueError):
    """Raised when an algorithm cannot run on the requested topology."""

    def __init__(self, algorithm: str, topology: Topology) -> None:
        super().__init__(f"{algorithm} does not support {topology.value} mazes")
        self.algorithm = algorithm
        self.topology = topology


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class CellPosition:
    """A (row, col) address in the maze."""

    row: int
    col: int


# Type alias for the visited-cell callback used by solvers
VisitFn = Callable[[CellPosition], None]


@dataclass(eq=False)
class Wall:
    """A wall between two cells. present=False means a passage was carved."""

    present: bool = True


@dataclass(eq=False)
class Cell:
    """A maze cell with direction-indexed walls and neighbour indices."""

    row: int
    col: int
    walls: dict[Direction, Wall] = field(default_factory=dict)
    neighbors: dict[Direction, int] = field(default_factory=dict)
    tunnel_to: int | None = None

    @property
    def position(self) -> CellPosition:
        return CellPosition(self.row, self.col)


@dataclass(frozen=True)
class Edge:
    """Candidate wall between (row, col) and its neighbour in direction."""

    row: int
    col: int
    direction: Direction


@dataclass
class Maze:
    """
    A fully linked maze grid.

    Cells are stored row by row in `cells`; `index_of` maps a position to its
    slot. Hex rows are skewed, so row r holds columns
    [(r + 1) // 2, cols + (r + 1) // 2) but still occupies `cols` slots.
    """

    policy: TopologyPolicy
    cells: list[Cell]
    entrance: int
    exit: int

    @property
    def topology(self) -> Topology:
        return self.policy.topology

    @property
    def rows(self) -> int:
        return self.policy.rows

    @property
    def cols(self) -> int:
        return self.policy.cols

    def index_of(self, row: int, col: int) -> int:
        """Arena index of the cell at (row, col)."""
        return row * self.cols + (col - self.policy.column_offset(row))

    def cell_at(self, row: int, col: int) -> Cell:
        return self.cells[self.index_of(row, col)]

    def position(self, index: int) -> CellPosition:
        return self.cells[index].position

    def neighbor(self, index: int, direction: Direction) -> int | None:
        """Index of the neighbour in direction, or None at the grid edge."""
        return self.cells[index].neighbors.get(direction)

    def tunnel(self, index: int) -> int | None:
        return self.cells[index].tunnel_to

    def is_open(self, index: int, direction: Direction) -> bool:
        cell = self.cells[index]
        return direction in cell.neighbors and not cell.walls[direction].present

    def carve(self, index: int, direction: Direction) -> int:
        """Open the wall in direction and return the neighbour's index."""
        cell = self.cells[index]
        cell.walls[direction].present = False
        return cell.neighbors[direction]

    def open_neighbors(self, index: int) -> Iterator[tuple[Direction, int]]:
        """Yield (direction, neighbour index) for every carved wall of a cell."""
        cell = self.cells[index]
        for direction, neighbor in cell.neighbors.items():
            if not cell.walls[direction].present:
                yield direction, neighbor

    def tunnel_pairs(self) -> list[tuple[int, int]]:
        """Each tunnel link once, as (lower index, higher index)."""
        return [
            (i, cell.tunnel_to)
            for i, cell in enumerate(self.cells)
            if cell.tunnel_to is not None and i < cell.tunnel_to
        ]

    def carved_walls(self) -> list[tuple[int, int]]:
        """Each open wall once, as (lower index, higher index)."""
        seen: set[tuple[int, int]] = set()
        for i in range(len(self.cells)):
            for _, neighbor in self.open_neighbors(i):
                seen.add((min(i, neighbor), max(i, neighbor)))
        return sorted(seen)
