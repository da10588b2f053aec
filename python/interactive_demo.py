"""
Interactive demo for maze generation and solving.
Cycle topologies and algorithms with keyboard commands and watch the result.
"""

import logging
import random
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import VisitRecorder, render_maze
from generators import GENERATORS, make_generator
from maze_builder import MazeConfig, build_maze, parse_tunnels
from maze_types import CellPosition, Maze, Topology, UnsupportedTopologyError
from solvers import SOLVERS, RecursiveBacktrackerSolver, make_solver

LAYOUTS = dict(
    small = dict(rows=6, cols=10, tunnels="0,9-5,0 2,3-3,6"),
    large = dict(rows=12, cols=18, tunnels="0,17-11,0 3,3-8,14 5,9-6,2"),
)


class InteractiveDemo:
    """Interactive demo for maze generation and solving."""

    def __init__(self, rows: int, cols: int, tunnels: str = "", seed: int | None = None) -> None:
        self.rows = rows
        self.cols = cols
        self.tunnels = parse_tunnels(tunnels)
        self.rng = random.Random(seed)
        self.topologies = list(Topology)
        self.generator_names = list(GENERATORS)
        self.solver_names = list(SOLVERS)
        self.topology_idx = 0
        self.generator_idx = 0
        self.solver_idx = 0
        self.console = Console()
        self.status_message = "Ready"
        self.maze: Maze | None = None
        self.recorder = VisitRecorder()
        self.path: list[CellPosition] | None = None
        self.regenerate()

    @property
    def topology(self) -> Topology:
        return self.topologies[self.topology_idx]

    @property
    def generator_name(self) -> str:
        return self.generator_names[self.generator_idx]

    @property
    def solver_name(self) -> str:
        return self.solver_names[self.solver_idx]

    def regenerate(self) -> None:
        """Build a fresh maze and carve it with the selected generator."""
        tunnels = self.tunnels if self.topology is Topology.TUNNEL else ()
        maze = build_maze(MazeConfig(self.rows, self.cols, self.topology, tunnels=tunnels))
        self.recorder = VisitRecorder()
        self.path = None
        try:
            make_generator(self.generator_name, self.topology, self.rng).generate(maze)
        except UnsupportedTopologyError as e:
            self.maze = None
            self.status_message = f"✗ {e}"
            return
        self.maze = maze
        self.status_message = f"✓ Generated {self.topology.value} maze with {self.generator_name}"

    def solve(self) -> None:
        """Solve the current maze with the selected solver."""
        if self.maze is None:
            self.status_message = "✗ No maze to solve"
            return
        self.recorder = VisitRecorder()
        solver = make_solver(self.solver_name, on_visit=self.recorder, rng=self.rng)
        solver.solve(self.maze)
        self.path = solver.path() if isinstance(solver, RecursiveBacktrackerSolver) else None
        self.status_message = (
            f"{'✓ Solved' if solver.is_solved() else '✗ Unsolved'} with {self.solver_name}, "
            f"{solver.cells_explored()} cells explored"
        )

    def generate_display(self) -> Panel:
        """Generate the current display with maze and status."""
        status = Text()
        status.append("Topology: ", style="bold")
        status.append(f"{self.topology.value}\n")
        status.append("Generator: ", style="bold")
        status.append(f"{self.generator_name}\n")
        status.append("Solver: ", style="bold")
        status.append(f"{self.solver_name}\n\n")

        if self.maze is not None:
            maze_text = render_maze(self.maze, self.recorder.visit_map, self.path)
            status.append(Text.from_ansi(maze_text))
            status.append("\n\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  T - Next topology\n")
        status.append("  G - Next generator\n")
        status.append("  S - Next solver\n")
        status.append("  N - New maze\n")
        status.append("  Enter - Solve\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Maze Interactive Demo", border_style="green", width=max(80, 4 * self.cols + 8))

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the demo should quit."""
        if key == readchar.key.ENTER:
            self.solve()
            return True
        key = key.lower()
        if key == 'q':
            self.status_message = "Quitting..."
            return False
        elif key == 't':
            self.topology_idx = (self.topology_idx + 1) % len(self.topologies)
            self.regenerate()
        elif key == 'g':
            self.generator_idx = (self.generator_idx + 1) % len(self.generator_names)
            self.regenerate()
        elif key == 's':
            self.solver_idx = (self.solver_idx + 1) % len(self.solver_names)
            self.status_message = f"Solver set to {self.solver_name}"
        elif key == 'n':
            self.regenerate()
        else:
            self.status_message = f"Unknown key: {repr(key)}"
        return True

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    if not self.handle_key(readchar.readkey()):
                        live.update(self.generate_display())
                        break
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == 'sublime':
        # Running from IDE - just render the initial state
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

        print('Running from IDE - rendering initial state')
        print()
        demo = InteractiveDemo(**LAYOUTS['small'], seed=1)
        demo.solve()
        print(render_maze(demo.maze, demo.recorder.visit_map, demo.path) if demo.maze else demo.status_message)
    else:
        demo = InteractiveDemo(**LAYOUTS[sys.argv[1] if len(sys.argv) > 1 else 'small'])
        demo.run()
