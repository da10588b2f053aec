"""
Demonstration script for the maze generators and solvers.
"""

import logging
import random

from ascii_render import VisitRecorder, render_maze
from generators import GENERATORS, is_perfect, make_generator
from maze_builder import MazeConfig, build_maze, parse_tunnels
from maze_types import Topology, UnsupportedTopologyError
from solvers import SOLVERS, RecursiveBacktrackerSolver, make_solver

CONFIGS = {
    Topology.NORMAL: MazeConfig(6, 8, Topology.NORMAL),
    Topology.TUNNEL: MazeConfig(6, 8, Topology.TUNNEL, tunnels=parse_tunnels("0,7-5,0 2,2-3,5")),
    Topology.HEX: MazeConfig(6, 8, Topology.HEX),
}


def generation_demo(seed: int = 7) -> None:
    """Generate one maze per topology with every generator that supports it."""
    print("=" * 60)
    print("Generation")
    print("=" * 60)
    print()

    for topology, config in CONFIGS.items():
        for name in GENERATORS:
            print(f"{name} on {topology.value} ({config.rows}x{config.cols})")
            print("-" * 60)
            try:
                generator = make_generator(name, topology, random.Random(seed))
            except UnsupportedTopologyError as e:
                print(f"✗ {e}")
                print()
                continue

            maze = build_maze(config)
            generator.generate(maze)
            print(render_maze(maze))
            print(f"{'✓' if is_perfect(maze) else '✗'} perfect maze, {len(maze.carved_walls())} walls carved")
            print()


def solving_demo(seed: int = 7) -> None:
    """Solve one generated maze per topology with every solver."""
    print("=" * 60)
    print("Solving")
    print("=" * 60)
    print()

    for topology, config in CONFIGS.items():
        for name in SOLVERS:
            maze = build_maze(config)
            make_generator("recursive_backtracker", topology, random.Random(seed)).generate(maze)

            recorder = VisitRecorder()
            solver = make_solver(name, on_visit=recorder, rng=random.Random(seed))
            solver.solve(maze)

            path = solver.path() if isinstance(solver, RecursiveBacktrackerSolver) else None
            print(f"{name} on {topology.value}")
            print("-" * 60)
            print(render_maze(maze, recorder.visit_map, path))
            print(f"Solved: {solver.is_solved()}, cells explored: {solver.cells_explored()}")
            print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    generation_demo()
    print()
    solving_demo()
