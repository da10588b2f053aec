"""
Perfect-maze generators.

Each generator carves a spanning tree over a fully walled maze in place:
afterwards there is exactly one route between any two cells. Tunnel links
count as edges of that tree.
"""

from __future__ import annotations

import logging
import random
from typing import ClassVar

from maze_types import Edge, Maze, Topology, UnsupportedTopologyError

logger = logging.getLogger(__name__)


class DisjointSet:
    """Union-find over arena indices, with path compression and union by rank."""

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        # Compress the path walked
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: int, b: int) -> bool:
        """Join the sets of a and b. Returns False if they were already joined."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1
        return True


def is_perfect(maze: Maze) -> bool:
    """
    Check that carved walls and tunnels form a spanning tree.

    True iff every cell is connected and no carved wall or tunnel closes a
    cycle, i.e. there is exactly one route between any two cells.
    """
    sets = DisjointSet(len(maze.cells))
    links = maze.tunnel_pairs() + maze.carved_walls()
    for a, b in links:
        if not sets.union(a, b):
            return False
    return len(links) == len(maze.cells) - 1


class MazeGenerator:
    """Base class: carve a perfect maze in place."""

    name: ClassVar[str]
    supported_topologies: ClassVar[frozenset[Topology]] = frozenset(Topology)

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def generate(self, maze: Maze) -> None:
        if maze.topology not in self.supported_topologies:
            raise UnsupportedTopologyError(self.name, maze.topology)
        self._generate(maze)

    def _generate(self, maze: Maze) -> None:
        raise NotImplementedError


# =============================================================================
# Kruskal: random edge order, carve when it joins two trees
# =============================================================================


class KruskalGenerator(MazeGenerator):
    """
    Randomized Kruskal.

    1. List every internal wall once as an Edge
    2. Shuffle the edges (uniform permutation)
    3. Pop edges in order; carve an edge iff its two cells are not yet
       connected by carved walls or tunnels
    """

    name = "kruskal"

    def _generate(self, maze: Maze) -> None:
        policy = maze.policy
        edges = [
            Edge(pos.row, pos.col, direction)
            for pos in policy.positions()
            for direction in policy.edge_directions
            if policy.step(pos.row, pos.col, direction) is not None
        ]
        self.rng.shuffle(edges)
        logger.debug("KruskalGenerator: %d candidate edges", len(edges))

        sets = DisjointSet(len(maze.cells))
        # Tunnels already connect their ends
        for a, b in maze.tunnel_pairs():
            sets.union(a, b)

        carved = 0
        while edges:
            edge = edges.pop()
            current = maze.index_of(edge.row, edge.col)
            neighbor = maze.neighbor(current, edge.direction)
            if neighbor is not None and sets.union(current, neighbor):
                maze.carve(current, edge.direction)
                carved += 1

        logger.info("KruskalGenerator: carved %d walls over %d cells", carved, len(maze.cells))


# =============================================================================
# Prim: grow a visited region from a random cell
# =============================================================================


class PrimsGenerator(MazeGenerator):
    """
    Randomized (modified) Prim.

    Grows the visited set Z from a random cell. The frontier holds cells
    adjacent to Z but not in it. A random frontier cell is joined to Z by
    carving towards a random neighbour already in Z.

    Tunnel mazes are rejected: a tunnel would join cells the frontier never
    sees as adjacent.
    """

    name = "prim"
    supported_topologies = frozenset({Topology.NORMAL, Topology.HEX})

    def _generate(self, maze: Maze) -> None:
        policy = maze.policy
        start = policy.random_position(self.rng)
        logger.debug("PrimsGenerator: starting at (%d, %d)", start.row, start.col)

        in_tree = [False] * len(maze.cells)
        frontier: list[int] = []
        in_frontier: set[int] = set()

        added = maze.index_of(start.row, start.col)
        in_tree[added] = True
        while True:
            for neighbor in maze.cells[added].neighbors.values():
                if not in_tree[neighbor] and neighbor not in in_frontier:
                    in_frontier.add(neighbor)
                    frontier.append(neighbor)
            if not frontier:
                break

            # Swap remove a random frontier cell
            pick = self.rng.randrange(len(frontier))
            frontier[pick], frontier[-1] = frontier[-1], frontier[pick]
            added = frontier.pop()
            in_frontier.discard(added)

            # Rejection sample a direction pointing into the tree
            while True:
                direction = self.rng.choice(policy.directions)
                neighbor = maze.neighbor(added, direction)
                if neighbor is not None and in_tree[neighbor]:
                    break
            maze.carve(added, direction)
            in_tree[added] = True

        logger.info("PrimsGenerator: joined %d cells", sum(in_tree))


# =============================================================================
# Recursive backtracker: randomized depth-first carving
# =============================================================================


class RecursiveBacktrackerGenerator(MazeGenerator):
    """
    Randomized depth-first carving with an explicit stack.

    Arriving at a cell whose tunnel partner is unvisited jumps straight through
    the tunnel; nothing is carved for the jump. Each tunnel is used at most
    once, so the walk cannot bounce between two tunnel ends.
    """

    name = "recursive_backtracker"
    steps = 0  # Loop iterations of the last run

    def _generate(self, maze: Maze) -> None:
        start = maze.policy.random_position(self.rng)
        logger.debug("RecursiveBacktrackerGenerator: starting at (%d, %d)", start.row, start.col)

        visited = [False] * len(maze.cells)
        used_tunnels: set[int] = set()  # Keyed by the lower index of the pair
        stack: list[int] = []

        current = maze.index_of(start.row, start.col)
        visited[current] = True
        carved = 0
        steps = 0

        while True:
            steps += 1
            partner = self._open_tunnel(maze, current, visited, used_tunnels)
            if partner is not None:
                stack.append(current)
                current = partner
                visited[current] = True
                continue

            candidates = [
                (direction, neighbor)
                for direction, neighbor in maze.cells[current].neighbors.items()
                if not visited[neighbor]
            ]
            if candidates:
                stack.append(current)
                direction, current = self.rng.choice(candidates)
                maze.carve(stack[-1], direction)
                visited[current] = True
                carved += 1
            elif stack:
                current = stack.pop()
            else:
                break

        self.steps = steps
        logger.info(
            "RecursiveBacktrackerGenerator: carved %d walls, %d tunnels, %d steps",
            carved,
            len(used_tunnels),
            steps,
        )

    @staticmethod
    def _open_tunnel(
        maze: Maze,
        index: int,
        visited: list[bool],
        used_tunnels: set[int],
    ) -> int | None:
        """Consume and return this cell's tunnel partner if it is unvisited."""
        partner = maze.tunnel(index)
        if partner is None or visited[partner]:
            return None
        key = min(index, partner)
        if key in used_tunnels:
            return None
        used_tunnels.add(key)
        return partner


# =============================================================================
# Registry
# =============================================================================


GENERATORS: dict[str, type[MazeGenerator]] = {
    cls.name: cls for cls in (KruskalGenerator, PrimsGenerator, RecursiveBacktrackerGenerator)
}


def make_generator(name: str, topology: Topology, rng: random.Random | None = None) -> MazeGenerator:
    """
    Create a generator by name for a topology.

    Raises:
        ValueError: If no generator has that name
        UnsupportedTopologyError: If the generator cannot build that topology
    """
    try:
        cls = GENERATORS[name]
    except KeyError:
        raise ValueError(f"Unknown generator '{name}', expected one of {sorted(GENERATORS)}") from None
    if topology not in cls.supported_topologies:
        raise UnsupportedTopologyError(name, topology)
    return cls(rng)
