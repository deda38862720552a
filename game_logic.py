# Core Snake game state and rules, independent from GUI/loop code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
import logging
import random

logger = logging.getLogger(__name__)


# Bounds used by the launcher and GUI when validating user input.
MIN_GRID_SIZE = 8
MAX_GRID_SIZE = 60
MIN_CELL_SIZE = 8
MAX_CELL_SIZE = 48
MAX_OBSTACLES = 200

DIRECTIONS = ("up", "down", "left", "right")
OPPOSITES = {
    "up": "down",
    "down": "up",
    "left": "right",
    "right": "left",
}

Cell = tuple[int, int]


class GameStatus(Enum):
    RUNNING = "running"
    OVER = "over"


@dataclass
class SnakeConfig:
    """Runtime settings shared between the logic layer and GUI."""
    grid_width: int = 30
    grid_height: int = 20
    cell_size: int = 20
    start: Cell = (5, 5)
    start_direction: str = "right"
    obstacle_count: int = 10
    initial_speed_ms: int = 150
    min_speed_ms: int = 50
    speed_step_ms: int = 5
    food_score: int = 10
    seed: int | None = None

    @property
    def total_cells(self) -> int:
        return self.grid_width * self.grid_height

    def validate(self) -> None:
        """Reject settings the placement rules cannot satisfy comfortably."""
        for label, value in (("Grid width", self.grid_width), ("Grid height", self.grid_height)):
            if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
                raise ValueError(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
        if not (MIN_CELL_SIZE <= self.cell_size <= MAX_CELL_SIZE):
            raise ValueError(f"Cell size must be between {MIN_CELL_SIZE} and {MAX_CELL_SIZE}.")

        sx, sy = self.start
        if not (0 <= sx < self.grid_width and 0 <= sy < self.grid_height):
            raise ValueError(f"Start cell {self.start} is outside the {self.grid_width}x{self.grid_height} grid.")
        if self.start_direction not in OPPOSITES:
            raise ValueError(f"Start direction must be one of {', '.join(DIRECTIONS)}.")

        if self.min_speed_ms <= 0:
            raise ValueError("Minimum speed must be > 0.")
        if self.initial_speed_ms < self.min_speed_ms:
            raise ValueError("Initial speed must not be below the minimum speed.")
        if self.speed_step_ms < 0:
            raise ValueError("Speed step must be >= 0.")
        if self.food_score < 0:
            raise ValueError("Food score must be >= 0.")

        if not (0 <= self.obstacle_count <= MAX_OBSTACLES):
            raise ValueError(f"Obstacle count must be between 0 and {MAX_OBSTACLES}.")
        # Snake + food + obstacles must leave most of the board open.
        occupied = self.obstacle_count + 2
        if occupied * 2 > self.total_cells:
            raise ValueError(
                f"{self.obstacle_count} obstacles is too dense for a "
                f"{self.grid_width}x{self.grid_height} grid."
            )


@dataclass(frozen=True)
class TickResult:
    """What a single advance_tick call did."""
    moved: bool
    status: GameStatus
    ate: bool = False
    speed_changed: bool = False
    reason: str | None = None


class SnakeGame:
    """Pure game state + rules (no Tkinter/UI code)."""
    def __init__(self, config: SnakeConfig | None = None) -> None:
        self.config = config if config is not None else SnakeConfig()
        self.rng = random.Random(self.config.seed)
        self.reset()

    def reset(
        self,
        grid_width: int | None = None,
        grid_height: int | None = None,
        cell_size: int | None = None,
    ) -> None:
        """Start a fresh game: snake at the start cell, then obstacles, then food."""
        overrides = {}
        if grid_width is not None:
            overrides["grid_width"] = grid_width
        if grid_height is not None:
            overrides["grid_height"] = grid_height
        if cell_size is not None:
            overrides["cell_size"] = cell_size
        new_config = replace(self.config, **overrides) if overrides else self.config
        new_config.validate()
        self.config = new_config

        self.snake: deque[Cell] = deque([self.config.start])   # ordered body, head at index 0
        self.snake_set: set[Cell] = {self.config.start}        # O(1) body collision lookup
        self.direction = self.config.start_direction
        self.pending_direction = self.config.start_direction   # queued from input; applied next tick
        self.score = 0
        self.speed_ms = self.config.initial_speed_ms
        self.status = GameStatus.RUNNING
        self.food: Cell | None = None

        # Obstacles must exist before food so food can avoid them.
        self.obstacles: frozenset[Cell] = frozenset()
        self.obstacles = self._place_obstacles(self.config.obstacle_count)
        self.food = self._place_food()

        logger.info(
            "New game on %dx%d grid: %d obstacles, food at %s",
            self.config.grid_width,
            self.config.grid_height,
            len(self.obstacles),
            self.food,
        )

    @property
    def grid_width(self) -> int:
        return self.config.grid_width

    @property
    def grid_height(self) -> int:
        return self.config.grid_height

    @property
    def cell_size(self) -> int:
        return self.config.cell_size

    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def alive(self) -> bool:
        return self.status is GameStatus.RUNNING

    def _open_cells(self, taken: set[Cell] | frozenset[Cell]) -> list[Cell]:
        """Cells not in taken, row-major so a seeded rng picks the same cells every run."""
        return [
            (x, y)
            for y in range(self.config.grid_height)
            for x in range(self.config.grid_width)
            if (x, y) not in taken
        ]

    def free_cells(self) -> list[Cell]:
        """Cells holding neither snake, obstacle nor food."""
        taken = self.snake_set | self.obstacles
        if self.food is not None:
            taken = taken | {self.food}
        return self._open_cells(taken)

    def _place_obstacles(self, count: int) -> frozenset[Cell]:
        """Pick count distinct cells off the snake, one uniform draw at a time."""
        placed: set[Cell] = set()
        for _ in range(count):
            candidates = self._open_cells(self.snake_set | placed)
            if not candidates:
                raise RuntimeError(f"No free cell left for obstacle {len(placed) + 1} of {count}.")
            placed.add(self.rng.choice(candidates))
        return frozenset(placed)

    def _place_food(self) -> Cell | None:
        """Pick a uniformly random cell off the snake and obstacles; None if the board is full."""
        candidates = self._open_cells(self.snake_set | self.obstacles)
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def _next_head(self, direction: str) -> Cell:
        """Translate current head by one tile in the given direction."""
        head_x, head_y = self.snake[0]
        if direction == "up":
            return head_x, head_y - 1
        if direction == "down":
            return head_x, head_y + 1
        if direction == "left":
            return head_x - 1, head_y
        return head_x + 1, head_y

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.config.grid_width and 0 <= y < self.config.grid_height

    def _end(self, reason: str) -> TickResult:
        """Mark the game over and report why."""
        self.status = GameStatus.OVER
        logger.info("Game over (%s) at %s with score %d, length %d", reason, self.head, self.score, len(self.snake))
        return TickResult(moved=False, status=self.status, reason=reason)

    def advance_tick(self) -> TickResult:
        """Advance one step. The returned result says whether the snake ate and whether speed changed."""
        if self.status is GameStatus.OVER:
            return TickResult(moved=False, status=self.status)

        # Apply the latest accepted input once per tick.
        self.direction = self.pending_direction
        new_x, new_y = self._next_head(self.direction)

        if not self._in_bounds(new_x, new_y):
            return self._end("wall")

        new_head = (new_x, new_y)
        # Checked against the pre-move body, tail included.
        if new_head in self.snake_set:
            return self._end("self")
        if new_head in self.obstacles:
            return self._end("obstacle")

        self.snake.appendleft(new_head)
        self.snake_set.add(new_head)

        if new_head != self.food:
            old_tail = self.snake.pop()
            self.snake_set.discard(old_tail)
            return TickResult(moved=True, status=self.status)

        self.score += self.config.food_score
        self.food = self._place_food()
        speed_changed = False
        if self.speed_ms > self.config.min_speed_ms:
            self.speed_ms = max(self.config.min_speed_ms, self.speed_ms - self.config.speed_step_ms)
            speed_changed = True
        logger.debug("Ate food at %s: score %d, speed %d ms, next food %s", new_head, self.score, self.speed_ms, self.food)
        return TickResult(moved=True, status=self.status, ate=True, speed_changed=speed_changed)

    def set_direction(self, requested: str) -> None:
        """Queue an input direction; reject turns straight back against the committed direction."""
        if self.status is GameStatus.OVER:
            return
        if requested not in OPPOSITES:
            return
        if OPPOSITES[requested] == self.direction:
            return
        self.pending_direction = requested

    def snapshot(self) -> dict:
        """Copy of everything a renderer needs; safe to hand to other code."""
        return {
            "width": self.config.grid_width,
            "height": self.config.grid_height,
            "cell_size": self.config.cell_size,
            "snake": list(self.snake),
            "obstacles": sorted(self.obstacles),
            "food": self.food,
            "score": self.score,
            "speed_ms": self.speed_ms,
            "status": self.status,
        }
