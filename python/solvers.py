"""
Maze solvers.

A solver walks a carved maze from entrance to exit through open walls and
tunnels, reporting each visited cell to an optional callback.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import ClassVar

from maze_types import CellPosition, Maze, VisitFn

logger = logging.getLogger(__name__)


class MazeSolver:
    """Base class: solve(maze), then query is_solved() and cells_explored()."""

    name: ClassVar[str]

    def __init__(self, on_visit: VisitFn | None = None, rng: random.Random | None = None) -> None:
        self.on_visit = on_visit
        self.rng = rng if rng is not None else random.Random()
        self._maze: Maze | None = None
        self._count = 0

    def solve(self, maze: Maze) -> None:
        self._maze = maze
        self._solve(maze)
        logger.info(
            "%s: solved=%s, cells explored=%d",
            type(self).__name__,
            self.is_solved(),
            self._count,
        )

    def _solve(self, maze: Maze) -> None:
        raise NotImplementedError

    def is_solved(self) -> bool:
        raise NotImplementedError

    def cells_explored(self) -> int:
        """Running count of visit events. Never reset."""
        self._require_solved()
        return self._count

    def _require_solved(self) -> Maze:
        if self._maze is None:
            raise RuntimeError(f"{type(self).__name__}: solve() must be called before querying results")
        return self._maze

    def _report(self, maze: Maze, index: int) -> None:
        if self.on_visit is not None:
            self.on_visit(maze.position(index))


# =============================================================================
# Bidirectional breadth-first search
# =============================================================================


class _Frontier:
    """One side of the bidirectional search."""

    def __init__(self, start: int) -> None:
        self.queue: deque[int] = deque([start])
        self.queued: set[int] = {start}  # Every cell this side has ever enqueued
        self.visited: set[int] = set()


class BiDirectionalBFSSolver(MazeSolver):
    """
    Two breadth-first searches, one from the entrance and one from the exit.

    Each step advances both sides by one cell. The search stops as soon as one
    side marks a cell the other side has already marked.
    """

    name = "bidirectional_bfs"

    def __init__(self, on_visit: VisitFn | None = None, rng: random.Random | None = None) -> None:
        super().__init__(on_visit, rng)
        self._from_entrance = _Frontier(0)
        self._from_exit = _Frontier(0)

    def _solve(self, maze: Maze) -> None:
        self._from_entrance = _Frontier(maze.entrance)
        self._from_exit = _Frontier(maze.exit)
        sides = ((self._from_entrance, self._from_exit), (self._from_exit, self._from_entrance))

        while self._from_entrance.queue or self._from_exit.queue:
            met = False
            for side, other in sides:
                if not side.queue:
                    continue
                marked = self._advance(maze, side)
                met = met or any(index in other.visited for index in marked)
            self._count += 1
            if met:
                break

    def _advance(self, maze: Maze, side: _Frontier) -> list[int]:
        """Dequeue and mark one cell plus its tunnel partner. Returns the marked cells."""
        index = side.queue.popleft()
        marked = [index]
        self._mark(maze, side, index)

        # Tunnels are followed unconditionally
        partner = maze.tunnel(index)
        if partner is not None:
            self._mark(maze, side, partner)
            side.queued.add(partner)
            self._count += 1
            marked.append(partner)

        for cell in marked:
            for _, neighbor in maze.open_neighbors(cell):
                if neighbor not in side.visited and neighbor not in side.queued:
                    side.queued.add(neighbor)
                    side.queue.append(neighbor)
        return marked

    def _mark(self, maze: Maze, side: _Frontier, index: int) -> None:
        side.visited.add(index)
        self._report(maze, index)

    def is_solved(self) -> bool:
        self._require_solved()
        return not self._from_entrance.visited.isdisjoint(self._from_exit.visited)


# =============================================================================
# Recursive backtracker (randomized depth-first search)
# =============================================================================


class RecursiveBacktrackerSolver(MazeSolver):
    """
    Randomized depth-first walk through open walls and tunnels.

    Tunnels are taken when the far end is unvisited. A dead end may also jump
    through its tunnel once; each tunnel carries its own consumed flag so two
    tunnel-linked dead ends cannot bounce forever.

    Every move pushes the cell it leaves, so the stack plus the current cell
    is always a contiguous walk from the entrance.
    """

    name = "recursive_backtracker"

    def __init__(self, on_visit: VisitFn | None = None, rng: random.Random | None = None) -> None:
        super().__init__(on_visit, rng)
        self._visited: set[int] = set()
        self._stack: list[int] = []
        self._current: int | None = None

    def _solve(self, maze: Maze) -> None:
        self._visited = set()
        self._stack = []
        consumed: set[int] = set()  # Tunnels keyed by the lower index of the pair
        current = maze.entrance
        self._arrive(maze, current)

        while current != maze.exit:
            partner = maze.tunnel(current)
            if partner is not None and partner not in self._visited and min(current, partner) not in consumed:
                consumed.add(min(current, partner))
                current = self._jump(maze, current, partner)
                continue

            candidates = [
                neighbor
                for _, neighbor in maze.open_neighbors(current)
                if neighbor not in self._visited
            ]
            if candidates:
                self._stack.append(current)
                current = self.rng.choice(candidates)
                self._arrive(maze, current)
            elif partner is not None and min(current, partner) not in consumed:
                # One-shot jump out of a dead end
                consumed.add(min(current, partner))
                current = self._jump(maze, current, partner)
            elif self._stack:
                current = self._stack.pop()
            else:
                break

        self._current = current

    def _arrive(self, maze: Maze, index: int) -> None:
        if index not in self._visited:
            self._count += 1
        self._visited.add(index)
        self._report(maze, index)

    def _jump(self, maze: Maze, origin: int, partner: int) -> int:
        """Move through a tunnel. Every traversal counts, even onto a visited end."""
        self._stack.append(origin)
        self._visited.add(partner)
        self._report(maze, partner)
        self._count += 1
        return partner

    def is_solved(self) -> bool:
        maze = self._require_solved()
        return maze.entrance in self._visited and maze.exit in self._visited

    def path(self) -> list[CellPosition]:
        """Walk from the entrance to where the search stopped (the exit when solved)."""
        maze = self._require_solved()
        if self._current is None:
            return []
        return [maze.position(index) for index in self._stack + [self._current]]


# =============================================================================
# Registry
# =============================================================================


SOLVERS: dict[str, type[MazeSolver]] = {
    cls.name: cls for cls in (BiDirectionalBFSSolver, RecursiveBacktrackerSolver)
}


def make_solver(
    name: str,
    on_visit: VisitFn | None = None,
    rng: random.Random | None = None,
) -> MazeSolver:
    """
    Create a solver by name.

    Raises:
        ValueError: If no solver has that name
    """
    try:
        cls = SOLVERS[name]
    except KeyError:
        raise ValueError(f"Unknown solver '{name}', expected one of {sorted(SOLVERS)}") from None
    return cls(on_visit, rng)
