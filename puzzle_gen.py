from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random

from config import Config

logger = logging.getLogger(__name__)

DIRS = ((-1, 0), (1, 0), (0, -1), (0, 1))

Cell = tuple[int, int]


@dataclass
class Checkpoint:
    cell: Cell
    number: int


@dataclass
class PathPuzzle:
    edge_id: str
    difficulty: int
    size: int
    checkpoints: list[Checkpoint]
    solution: list[Cell] = field(default_factory=list)
    must_fill_all: bool = False

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def checkpoint_at(self, cell: Cell) -> int | None:
        for cp in self.checkpoints:
            if cp.cell == cell:
                return cp.number
        return None


def in_grid(size: int, r: int, c: int) -> bool:
    return 0 <= r < size and 0 <= c < size


def open_neighbors(size: int, cell: Cell, visited: set[Cell]) -> list[Cell]:
    r, c = cell
    out = []
    for dr, dc in DIRS:
        nr, nc = r + dr, c + dc
        if in_grid(size, nr, nc) and (nr, nc) not in visited:
            out.append((nr, nc))
    return out


def snake_path(size: int) -> list[Cell]:
    path = []
    for r in range(size):
        cols = range(size) if r % 2 == 0 else range(size - 1, -1, -1)
        for c in cols:
            path.append((r, c))
    return path


def hamiltonian_path(size: int, rng: random.Random, attempts: int, step_budget: int) -> list[Cell] | None:
    total = size * size

    for attempt in range(attempts):
        start = (rng.randrange(size), rng.randrange(size))
        path: list[Cell] = []
        visited: set[Cell] = set()
        steps = [0]

        def extend(cell: Cell) -> bool:
            steps[0] += 1
            if steps[0] > step_budget:
                return False
            visited.add(cell)
            path.append(cell)
            if len(path) == total:
                return True

            options = open_neighbors(size, cell, visited)
            rng.shuffle(options)
            # Warnsdorff: fewest onward moves first, random tie-break
            options.sort(key=lambda n: (len(open_neighbors(size, n, visited)), rng.random()))
            for nxt in options:
                if extend(nxt):
                    return True

            visited.discard(cell)
            path.pop()
            return False

        if extend(start):
            logger.debug("hamiltonian path on %dx%d after %d attempts", size, size, attempt + 1)
            return path
    return None


def place_checkpoints(solution: list[Cell], count: int, rng: random.Random) -> list[Checkpoint]:
    count = max(2, min(count, len(solution)))
    checkpoints = [Checkpoint(solution[0], 1)]

    inner = count - 2
    step = len(solution) // (count - 1)
    jitter = int(step * 0.2)
    prev = 0
    for i in range(1, inner + 1):
        index = i * step
        if jitter > 0:
            index += rng.randint(-jitter, jitter)
        # strictly increasing, leaving room for the remaining checkpoints
        hi = len(solution) - 1 - (inner - i + 1)
        index = max(prev + 1, min(hi, index))
        checkpoints.append(Checkpoint(solution[index], i + 1))
        prev = index

    checkpoints.append(Checkpoint(solution[-1], count))
    return checkpoints


def generate_puzzle(cfg: Config, edge_id: str, difficulty: int, rng: random.Random) -> PathPuzzle:
    tier = max(1, min(3, difficulty))
    size = cfg.puzzle_grid_sizes[tier]
    count = cfg.puzzle_checkpoints[tier]

    solution = hamiltonian_path(size, rng, cfg.puzzle_attempts, cfg.puzzle_step_budget)
    if solution is None:
        logger.warning("backtracking exhausted for %s, using serpentine path", edge_id)
        solution = snake_path(size)

    puzzle = PathPuzzle(
        edge_id=edge_id,
        difficulty=tier,
        size=size,
        checkpoints=place_checkpoints(solution, count, rng),
        solution=solution,
        must_fill_all=cfg.puzzle_must_fill_all,
    )
    logger.debug("puzzle for %s: %dx%d, %d checkpoints", edge_id, size, size, len(puzzle.checkpoints))
    return puzzle


def check_solution(puzzle: PathPuzzle, cells) -> bool:
    cells = [tuple(c) for c in cells]
    if not cells:
        return False
    if cells[0] != puzzle.checkpoints[0].cell or cells[-1] != puzzle.checkpoints[-1].cell:
        return False
    if len(set(cells)) != len(cells):
        return False

    for (r1, c1), (r2, c2) in zip(cells, cells[1:]):
        if not in_grid(puzzle.size, r2, c2) or abs(r1 - r2) + abs(c1 - c2) != 1:
            return False

    expected = 1
    for cell in cells:
        number = puzzle.checkpoint_at(cell)
        if number is None:
            continue
        if number != expected:
            return False
        expected += 1
    if expected != len(puzzle.checkpoints) + 1:
        return False

    if puzzle.must_fill_all and len(cells) != puzzle.cell_count:
        return False
    return True
