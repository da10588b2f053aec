"""
ASCII rendering for mazes.

Cells are drawn as glyphs on a passage grid and every carved wall as a
connector between two glyphs:

    S---o   o        Rectangular: cell (r, c) at text (2r, 4c)
        |   |
    o---o---X

Hex rows are skewed half a cell per row, so cell (r, c) sits at text
(2r, 4c - 2r) and diagonal passages are drawn as '/' and '\\'.
"""

from __future__ import annotations

import logging
from string import ascii_lowercase
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from maze_types import CellPosition, Maze, Topology

logger = logging.getLogger(__name__)


class VisitRecorder:
    """
    Visited-cell callback that records the step number of every visit.

    Usage:
        recorder = VisitRecorder()
        solver = BiDirectionalBFSSolver(on_visit=recorder)
        solver.solve(maze)
        print(render_maze(maze, recorder.visit_map))
    """

    def __init__(self) -> None:
        self.visit_map: dict[tuple[int, int], list[int]] = {}
        self.order: list[CellPosition] = []

    def __call__(self, pos: CellPosition) -> None:
        self.visit_map.setdefault((pos.row, pos.col), []).append(len(self.order))
        self.order.append(pos)


def glyph_origin(maze: Maze, pos: CellPosition) -> tuple[int, int]:
    """Text (line, column) of a cell's glyph."""
    if maze.topology is Topology.HEX:
        return (2 * pos.row, 4 * pos.col - 2 * pos.row)
    return (2 * pos.row, 4 * pos.col)


def _connector(dy: int, dx: int) -> str:
    if dy == 0:
        return "-"
    if dx == 0:
        return "|"
    return "\\" if (dy > 0) == (dx > 0) else "/"


def tunnel_labels(maze: Maze) -> dict[int, str]:
    """Label both ends of each tunnel with a shared letter."""
    labels: dict[int, str] = {}
    for i, (a, b) in enumerate(maze.tunnel_pairs()):
        letter = ascii_lowercase[i % len(ascii_lowercase)]
        labels[a] = letter
        labels[b] = letter
    return labels


def render_maze(
    maze: Maze,
    visit_map: dict[tuple[int, int], list[int]] | None = None,
    path: list[CellPosition] | None = None,
    color: bool = True,
) -> str:
    """
    Render a maze to ASCII.

    Glyphs, in priority order: S entrance, X exit, tunnel letter, * path cell,
    . visited cell, o anything else.

    Args:
        maze: The maze to draw
        visit_map: (row, col) -> visit steps, e.g. VisitRecorder.visit_map
        path: Cells of a solution walk to highlight
        color: If False, emit plain text with no ANSI codes

    Returns:
        Multi-line string
    """
    visit_map = visit_map or {}
    path_cells = {(p.row, p.col) for p in path or []}
    labels = tunnel_labels(maze)

    def paint(style: Callable[[str], str]) -> Callable[[str], str]:
        return style if color else (lambda s: s)

    height = 2 * maze.rows - 1
    width = 4 * maze.cols - 1
    buffer: list[list[str]] = [[" " for _ in range(width)] for _ in range(height)]

    # Passages
    wall_color = paint(chalk.white)
    for a, b in maze.carved_walls():
        y1, x1 = glyph_origin(maze, maze.position(a))
        y2, x2 = glyph_origin(maze, maze.position(b))
        char = wall_color(_connector(y2 - y1, x2 - x1))
        if y1 == y2:
            for x in range(min(x1, x2) + 1, max(x1, x2)):
                buffer[y1][x] = char
        else:
            buffer[(y1 + y2) // 2][(x1 + x2) // 2] = char

    # Cells
    for index, cell in enumerate(maze.cells):
        key = (cell.row, cell.col)
        if index == maze.entrance:
            glyph = paint(chalk.cyan)("S")
        elif index == maze.exit:
            glyph = paint(chalk.cyan)("X")
        elif index in labels:
            glyph = paint(chalk.magenta)(labels[index])
        elif key in path_cells:
            glyph = paint(chalk.green)("*")
        elif key in visit_map:
            glyph = paint(chalk.yellow)(".")
        else:
            glyph = "o"
        y, x = glyph_origin(maze, cell.position)
        buffer[y][x] = glyph

    logger.debug("render_maze: %dx%d characters", width, height)
    return "\n".join("".join(row).rstrip() for row in buffer)
