"""Tests for the maze solvers."""

import random

import pytest

from ascii_render import VisitRecorder
from generators import KruskalGenerator, make_generator
from maze_builder import MazeConfig, build_maze, parse_tunnels
from maze_types import CellPosition, Direction, Maze, Topology
from solvers import (
    SOLVERS,
    BiDirectionalBFSSolver,
    RecursiveBacktrackerSolver,
    make_solver,
)

GENERATED = [
    ("kruskal", Topology.NORMAL, ""),
    ("prim", Topology.NORMAL, ""),
    ("recursive_backtracker", Topology.NORMAL, ""),
    ("kruskal", Topology.HEX, ""),
    ("prim", Topology.HEX, ""),
    ("recursive_backtracker", Topology.HEX, ""),
    ("kruskal", Topology.TUNNEL, "0,5-5,0 1,4-4,1"),
    ("recursive_backtracker", Topology.TUNNEL, "0,5-5,0 1,4-4,1"),
]


def generated_maze(name: str, topology: Topology, tunnels: str, seed: int) -> Maze:
    maze = build_maze(MazeConfig(6, 6, topology, tunnels=parse_tunnels(tunnels)))
    make_generator(name, topology, random.Random(seed)).generate(maze)
    return maze


def corridor(tunnels: str = "") -> Maze:
    """1x4 tunnel maze with (0,0)-(0,1) and (0,2)-(0,3) carved and nothing else."""
    maze = build_maze(MazeConfig(1, 4, Topology.TUNNEL, tunnels=parse_tunnels(tunnels)))
    maze.carve(maze.index_of(0, 0), Direction.E)
    maze.carve(maze.index_of(0, 2), Direction.E)
    return maze


def is_step(maze: Maze, a: CellPosition, b: CellPosition) -> bool:
    """True if b is one open wall or one tunnel away from a."""
    i = maze.index_of(a.row, a.col)
    j = maze.index_of(b.row, b.col)
    return maze.tunnel(i) == j or any(n == j for _, n in maze.open_neighbors(i))


# =============================================================================
# Shared Solver Behaviour
# =============================================================================


class TestSolverContract:
    """Behaviour every solver shares."""

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_single_cell(self, solver_name: str) -> None:
        """A 1x1 maze is solved immediately with one cell explored."""
        maze = build_maze(MazeConfig(1, 1))
        solver = make_solver(solver_name, rng=random.Random(0))
        solver.solve(maze)
        assert solver.is_solved()
        assert solver.cells_explored() == 1

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    @pytest.mark.parametrize("name,topology,tunnels", GENERATED)
    @pytest.mark.parametrize("seed", [0, 1])
    def test_generated_mazes_are_solved(
        self, solver_name: str, name: str, topology: Topology, tunnels: str, seed: int
    ) -> None:
        """Generators guarantee a route from entrance to exit."""
        maze = generated_maze(name, topology, tunnels, seed)
        solver = make_solver(solver_name, rng=random.Random(seed))
        solver.solve(maze)
        assert solver.is_solved()

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_unconnected_maze_is_unsolved(self, solver_name: str) -> None:
        """Without a route the solver reports failure."""
        maze = corridor()
        solver = make_solver(solver_name, rng=random.Random(0))
        solver.solve(maze)
        assert not solver.is_solved()

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_tunnel_completes_route(self, solver_name: str) -> None:
        """A tunnel bridges two otherwise separate corridors."""
        maze = corridor("0,1-0,2")
        solver = make_solver(solver_name, rng=random.Random(0))
        solver.solve(maze)
        assert solver.is_solved()

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_queries_are_idempotent(self, solver_name: str) -> None:
        """Repeated queries after one solve agree."""
        maze = generated_maze("kruskal", Topology.NORMAL, "", 3)
        solver = make_solver(solver_name, rng=random.Random(3))
        solver.solve(maze)
        assert solver.is_solved() == solver.is_solved()
        assert solver.cells_explored() == solver.cells_explored()

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_queries_before_solve(self, solver_name: str) -> None:
        """Queries need a prior solve."""
        solver = make_solver(solver_name)
        with pytest.raises(RuntimeError):
            solver.is_solved()
        with pytest.raises(RuntimeError):
            solver.cells_explored()

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_callback_sees_visits(self, solver_name: str) -> None:
        """Every visit is reported, starting at the entrance."""
        maze = generated_maze("recursive_backtracker", Topology.NORMAL, "", 5)
        recorder = VisitRecorder()
        solver = make_solver(solver_name, on_visit=recorder, rng=random.Random(5))
        solver.solve(maze)
        assert recorder.order[0] == maze.position(maze.entrance)
        assert (maze.position(maze.exit).row, maze.position(maze.exit).col) in recorder.visit_map

    @pytest.mark.parametrize("solver_name", list(SOLVERS))
    def test_counter_never_resets(self, solver_name: str) -> None:
        """Solving again keeps counting."""
        maze = generated_maze("prim", Topology.HEX, "", 6)
        solver = make_solver(solver_name, rng=random.Random(6))
        solver.solve(maze)
        first = solver.cells_explored()
        solver.solve(maze)
        assert solver.cells_explored() >= first

    def test_unknown_solver(self) -> None:
        """Unknown solver names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown solver"):
            make_solver("wall_follower")


# =============================================================================
# Bidirectional BFS
# =============================================================================


class TestBiDirectionalBFSSolver:
    """Tests for BiDirectionalBFSSolver."""

    def test_two_cell_corridor(self) -> None:
        """Each side takes one step, then they meet."""
        maze = build_maze(MazeConfig(1, 2))
        maze.carve(0, Direction.E)
        solver = BiDirectionalBFSSolver()
        solver.solve(maze)
        assert solver.is_solved()
        assert solver.cells_explored() == 2

    @pytest.mark.parametrize("name,topology,tunnels", GENERATED)
    def test_explored_bound(self, name: str, topology: Topology, tunnels: str) -> None:
        """At most two cells per step plus one per tunnel traversal."""
        maze = generated_maze(name, topology, tunnels, 8)
        recorder = VisitRecorder()
        solver = BiDirectionalBFSSolver(on_visit=recorder)
        solver.solve(maze)
        tunnel_ends = 2 * len(maze.tunnel_pairs())
        # Each side follows a tunnel at most once per tunnel end
        assert solver.cells_explored() <= 2 * len(maze.cells) + 2 * tunnel_ends
        assert solver.cells_explored() <= len(recorder.order)

    def test_each_cell_queued_once_per_side(self) -> None:
        """No side reports the same cell twice without a tunnel."""
        maze = generated_maze("kruskal", Topology.NORMAL, "", 11)
        visits: list[CellPosition] = []
        solver = BiDirectionalBFSSolver(on_visit=visits.append)
        solver.solve(maze)
        # Two sides may each report a cell once
        for pos in set(visits):
            assert visits.count(pos) <= 2

    def test_unconnected_sides_do_not_meet(self) -> None:
        """Visited sets stay disjoint when there is no route."""
        maze = corridor()
        solver = BiDirectionalBFSSolver()
        solver.solve(maze)
        assert not solver.is_solved()
        assert solver.cells_explored() == 2


# =============================================================================
# Recursive Backtracker
# =============================================================================


class TestRecursiveBacktrackerSolver:
    """Tests for RecursiveBacktrackerSolver."""

    def test_kruskal_5x5_walk(self) -> None:
        """The walk on a Kruskal maze stays in bounds and reaches the exit."""
        maze = build_maze(MazeConfig(5, 5))
        KruskalGenerator(random.Random(1)).generate(maze)
        solver = RecursiveBacktrackerSolver(rng=random.Random(1))
        solver.solve(maze)

        assert solver.is_solved()
        path = solver.path()
        assert path[0] == maze.position(maze.entrance)
        assert path[-1] == maze.position(maze.exit)
        assert all(0 <= p.row < 5 and 0 <= p.col < 5 for p in path)

    @pytest.mark.parametrize("name,topology,tunnels", GENERATED)
    @pytest.mark.parametrize("seed", range(3))
    def test_path_is_contiguous(self, name: str, topology: Topology, tunnels: str, seed: int) -> None:
        """Consecutive path cells are joined by an open wall or a tunnel."""
        maze = generated_maze(name, topology, tunnels, seed)
        solver = RecursiveBacktrackerSolver(rng=random.Random(seed))
        solver.solve(maze)

        path = solver.path()
        assert path[-1] == maze.position(maze.exit)
        for a, b in zip(path, path[1:]):
            assert is_step(maze, a, b)

    def test_tunnel_path(self) -> None:
        """The route through a tunnel is reported in order."""
        maze = corridor("0,1-0,2")
        solver = RecursiveBacktrackerSolver(rng=random.Random(0))
        solver.solve(maze)
        assert solver.path() == [CellPosition(0, c) for c in range(4)]
        assert solver.cells_explored() == 4

    def test_tunnel_between_mutual_dead_ends(self) -> None:
        """Two dead ends joined by a tunnel do not bounce forever."""
        maze = build_maze(
            MazeConfig(
                2,
                2,
                Topology.TUNNEL,
                tunnels=parse_tunnels("0,1-1,0"),
                entrance=CellPosition(0, 0),
                exit=CellPosition(1, 1),
            )
        )
        # (0,1) and (1,0) hang off the entrance; the exit is walled off
        maze.carve(maze.index_of(0, 0), Direction.E)
        maze.carve(maze.index_of(0, 0), Direction.S)

        for seed in range(5):
            recorder = VisitRecorder()
            solver = RecursiveBacktrackerSolver(on_visit=recorder, rng=random.Random(seed))
            solver.solve(maze)
            assert not solver.is_solved()
            assert len(recorder.order) <= 4 * len(maze.cells)
            assert (1, 1) not in recorder.visit_map

    def test_counts_tunnel_traversals(self) -> None:
        """A jump through a tunnel counts as exploring a cell."""
        maze = corridor("0,1-0,2")
        recorder = VisitRecorder()
        solver = RecursiveBacktrackerSolver(on_visit=recorder, rng=random.Random(0))
        solver.solve(maze)
        assert solver.cells_explored() == len(recorder.order)

    def test_explores_whole_tree_when_exit_unreachable(self) -> None:
        """Every reachable cell is visited before giving up."""
        maze = corridor()
        recorder = VisitRecorder()
        solver = RecursiveBacktrackerSolver(on_visit=recorder, rng=random.Random(0))
        solver.solve(maze)
        assert set(recorder.visit_map) == {(0, 0), (0, 1)}
        assert solver.cells_explored() == 2
