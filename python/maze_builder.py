"""
Maze construction and tunnel parsing.

Builds the fully linked cell arena that generators and solvers consume:
every wall starts present, neighbours are linked in both directions, and the
two cells on either side of a wall share a single Wall object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from maze_types import Cell, CellPosition, Maze, Topology, Wall
from topology import policy_for

__all__ = ["MazeConfig", "build_maze", "parse_tunnels"]

logger = logging.getLogger(__name__)

TunnelPair = tuple[CellPosition, CellPosition]


@dataclass(frozen=True)
class MazeConfig:
    """Shape and fixtures of a maze to build."""

    rows: int
    cols: int
    topology: Topology = Topology.NORMAL
    tunnels: tuple[TunnelPair, ...] = ()
    entrance: CellPosition | None = None  # None = first cell of the top row
    exit: CellPosition | None = None  # None = last cell of the bottom row


def parse_tunnels(definition: str) -> tuple[TunnelPair, ...]:
    """
    Parse tunnel pairs from a compact string format.

    Format:
    - Pairs separated by whitespace
    - Each pair is "row,col-row,col"

    Example:
        "0,0-4,4 1,3-3,0"
        Creates:
        - Tunnel between (0, 0) and (4, 4)
        - Tunnel between (1, 3) and (3, 0)

    Args:
        definition: Tunnel definition string (may be empty)

    Returns:
        Tuple of (CellPosition, CellPosition) pairs
    """
    pairs: list[TunnelPair] = []

    for pair_idx, pair_str in enumerate(definition.split()):
        ends = pair_str.split("-")
        try:
            if len(ends) != 2:
                raise ValueError("expected exactly one '-'")
            first, second = (_parse_position(end) for end in ends)
        except ValueError as e:
            error_msg = (
                f"Invalid tunnel string: '{pair_str}'\n"
                f"  Pair {pair_idx} of \"{definition}\"\n"
                f"  Problem: {e}\n"
                f"  Valid format: row,col-row,col (e.g., '0,0-4,4')"
            )
            raise ValueError(error_msg) from e
        pairs.append((first, second))

    return tuple(pairs)


def _parse_position(text: str) -> CellPosition:
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"expected 'row,col', got '{text}'")
    return CellPosition(int(parts[0]), int(parts[1]))


def build_maze(config: MazeConfig) -> Maze:
    """
    Build a fully walled maze with linked neighbours.

    Raises:
        ValueError: If the dimensions, entrance, exit or tunnels are invalid
    """
    if config.rows < 1 or config.cols < 1:
        raise ValueError(f"Maze must be at least 1x1, got {config.rows}x{config.cols}")
    if config.tunnels and config.topology is not Topology.TUNNEL:
        raise ValueError(
            f"Tunnels given for a {config.topology.value} maze\n"
            f"  Only {Topology.TUNNEL.value} mazes may contain tunnels"
        )

    policy = policy_for(config.topology, config.rows, config.cols)
    cells = [Cell(pos.row, pos.col) for pos in policy.positions()]
    entrance = config.entrance or CellPosition(0, policy.column_range(0).start)
    exit_ = config.exit or CellPosition(config.rows - 1, policy.column_range(config.rows - 1)[-1])

    for name, pos in (("Entrance", entrance), ("Exit", exit_)):
        if not policy.contains(pos.row, pos.col):
            raise ValueError(f"{name} ({pos.row}, {pos.col}) lies outside the {config.rows}x{config.cols} maze")

    maze = Maze(
        policy,
        cells,
        entrance=0,
        exit=0,
    )
    maze.entrance = maze.index_of(entrance.row, entrance.col)
    maze.exit = maze.index_of(exit_.row, exit_.col)

    # Link neighbours. Each wall is created once and shared with the neighbour.
    for index, cell in enumerate(cells):
        for direction in policy.directions:
            if direction in cell.walls:
                continue
            wall = Wall()
            cell.walls[direction] = wall
            step = policy.step(cell.row, cell.col, direction)
            if step is None:
                continue
            neighbor = maze.index_of(step.row, step.col)
            cell.neighbors[direction] = neighbor
            opposite = policy.opposite(direction)
            cells[neighbor].walls[opposite] = wall
            cells[neighbor].neighbors[opposite] = index

    _link_tunnels(maze, config.tunnels)

    logger.debug(
        "build_maze: %s %dx%d, %d cells, %d tunnels",
        config.topology.value,
        config.rows,
        config.cols,
        len(cells),
        len(config.tunnels),
    )
    return maze


def _link_tunnels(maze: Maze, tunnels: tuple[TunnelPair, ...]) -> None:
    for first, second in tunnels:
        for pos in (first, second):
            if not maze.policy.contains(pos.row, pos.col):
                raise ValueError(
                    f"Tunnel end ({pos.row}, {pos.col}) lies outside the {maze.rows}x{maze.cols} maze"
                )
        if first == second:
            raise ValueError(f"Tunnel from ({first.row}, {first.col}) to itself")

        a = maze.index_of(first.row, first.col)
        b = maze.index_of(second.row, second.col)
        taken = [pos for pos, i in ((first, a), (second, b)) if maze.cells[i].tunnel_to is not None]
        if taken:
            error_msg = f"Cells already have a tunnel:\n"
            for pos in taken:
                error_msg += f"    ({pos.row}, {pos.col})\n"
            error_msg += f"  Each cell may hold at most one tunnel end"
            raise ValueError(error_msg)

        maze.cells[a].tunnel_to = b
        maze.cells[b].tunnel_to = a
