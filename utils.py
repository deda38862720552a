# Shared helpers: key mapping, cell geometry, board encoding, and session score stats.
from __future__ import annotations

import numpy as np

from game_logic import GameStatus, SnakeGame


# Tk keysyms accepted as movement input.
KEY_TO_DIRECTION = {
    "Up": "up",
    "Down": "down",
    "Left": "left",
    "Right": "right",
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
}

BOARD_EMPTY = 0.0
BOARD_FOOD = 0.5
BOARD_BODY = -0.5
BOARD_HEAD = 1.0
BOARD_OBSTACLE = -1.0

TEXT_GLYPHS = {
    BOARD_EMPTY: ".",
    BOARD_FOOD: "*",
    BOARD_BODY: "o",
    BOARD_HEAD: "@",
    BOARD_OBSTACLE: "#",
}


def direction_for_key(keysym: str) -> str | None:
    """Return the direction bound to a key, or None for keys the game ignores."""
    return KEY_TO_DIRECTION.get(keysym)


def cell_rect(x: int, y: int, cell_size: int) -> tuple[int, int, int, int]:
    """Pixel box (x1, y1, x2, y2) of a cell, one pixel short of the next cell."""
    x1 = x * cell_size
    y1 = y * cell_size
    return x1, y1, x1 + cell_size - 1, y1 + cell_size - 1


def encode_board_state(game: SnakeGame) -> np.ndarray:
    """
    Board as a (height, width) array:
    - 0.0: empty
    - 0.5: food
    - -0.5: snake body
    - 1.0: snake head
    - -1.0: obstacle
    """
    board = np.full((game.grid_height, game.grid_width), BOARD_EMPTY, dtype=np.float32)

    for x, y in game.obstacles:
        board[y, x] = BOARD_OBSTACLE

    if game.food is not None:
        fx, fy = game.food
        board[fy, fx] = BOARD_FOOD

    for idx, (x, y) in enumerate(game.snake):
        board[y, x] = BOARD_HEAD if idx == 0 else BOARD_BODY

    return board


def render_text(game: SnakeGame) -> str:
    """ASCII view of the board, top row first."""
    board = encode_board_state(game)
    rows = ["".join(TEXT_GLYPHS[float(value)] for value in row) for row in board]
    footer = f"score={game.score} speed={game.speed_ms}ms"
    if game.status is GameStatus.OVER:
        footer += " GAME OVER"
    rows.append(footer)
    return "\n".join(rows)


def chunked_mean(values: list[float], chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Compute mean value per fixed-size chunk."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        empty = np.array([], dtype=np.float32)
        return empty, empty

    x_end: list[float] = []
    means: list[float] = []
    for start in range(0, arr.size, chunk_size):
        chunk = arr[start : start + chunk_size]
        x_end.append(float(start + chunk.size))
        means.append(float(np.mean(chunk)))

    return np.asarray(x_end, dtype=np.float32), np.asarray(means, dtype=np.float32)


def score_summary(scores: list[float]) -> dict[str, float]:
    """Games played plus mean/median/best of the session's final scores."""
    if not scores:
        return {"games": 0, "mean": 0.0, "median": 0.0, "best": 0.0}
    arr = np.asarray(scores, dtype=np.float32)
    return {
        "games": int(arr.size),
        "mean": float(np.mean(arr)),
        "median": float(np.median(arr)),
        "best": float(np.max(arr)),
    }

