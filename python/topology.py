"""
Per-topology direction tables and bounds predicates.

Every algorithm asks the policy for its direction set and in-bounds test
instead of branching on the topology itself.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator

from maze_types import CellPosition, Direction, Topology

# Direction deltas: (row_delta, col_delta)
DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
    # Hex rows are skewed half a cell right per row going down
    Direction.NE: (-1, 0),
    Direction.NW: (-1, -1),
    Direction.SE: (1, 1),
    Direction.SW: (1, 0),
}

OPPOSITES: dict[Direction, Direction] = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
    Direction.NE: Direction.SW,
    Direction.SW: Direction.NE,
    Direction.NW: Direction.SE,
    Direction.SE: Direction.NW,
}


@dataclass(frozen=True)
class TopologyPolicy:
    """Direction set and bounds for one maze shape."""

    topology: Topology
    rows: int
    cols: int
    directions: tuple[Direction, ...]
    edge_directions: tuple[Direction, ...]  # One side of every internal wall
    skewed: bool

    def delta(self, direction: Direction) -> tuple[int, int]:
        return DELTAS[direction]

    def opposite(self, direction: Direction) -> Direction:
        return OPPOSITES[direction]

    def column_offset(self, row: int) -> int:
        return (row + 1) // 2 if self.skewed else 0

    def column_range(self, row: int) -> range:
        offset = self.column_offset(row)
        return range(offset, self.cols + offset)

    def contains(self, row: int, col: int) -> bool:
        if not 0 <= row < self.rows:
            return False
        offset = self.column_offset(row)
        return offset <= col < self.cols + offset

    def step(self, row: int, col: int, direction: Direction) -> CellPosition | None:
        """Position one step away in direction, or None if it leaves the grid."""
        dr, dc = DELTAS[direction]
        if self.contains(row + dr, col + dc):
            return CellPosition(row + dr, col + dc)
        return None

    def positions(self) -> Iterator[CellPosition]:
        """All valid positions, row by row."""
        for row in range(self.rows):
            for col in self.column_range(row):
                yield CellPosition(row, col)

    def random_position(self, rng: random.Random) -> CellPosition:
        """
        Uniformly random valid position.

        Hex mazes sample the bounding box of the skewed rows and reject picks
        outside the row's column range.
        """
        width = self.cols + self.column_offset(self.rows - 1)
        while True:
            row = rng.randrange(self.rows)
            col = rng.randrange(width)
            if self.contains(row, col):
                return CellPosition(row, col)


RECTANGULAR_DIRECTIONS = (Direction.N, Direction.E, Direction.S, Direction.W)
HEX_DIRECTIONS = (Direction.NE, Direction.NW, Direction.E, Direction.SE, Direction.SW, Direction.W)


def policy_for(topology: Topology, rows: int, cols: int) -> TopologyPolicy:
    """Select the policy for a maze shape."""
    if topology is Topology.HEX:
        return TopologyPolicy(
            topology,
            rows,
            cols,
            HEX_DIRECTIONS,
            (Direction.NE, Direction.NW, Direction.E),
            skewed=True,
        )
    return TopologyPolicy(
        topology,
        rows,
        cols,
        RECTANGULAR_DIRECTIONS,
        (Direction.N, Direction.E),
        skewed=False,
    )
