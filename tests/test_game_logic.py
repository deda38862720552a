from collections import deque
import random

import pytest

from game_logic import GameStatus, SnakeConfig, SnakeGame

FAR_CELL = (29, 19)


def open_game(**overrides) -> SnakeGame:
    """Obstacle-free game with food parked in the far corner."""
    settings = {"obstacle_count": 0, "seed": 1}
    settings.update(overrides)
    game = SnakeGame(SnakeConfig(**settings))
    game.food = FAR_CELL
    return game


def place_snake(game: SnakeGame, cells, direction: str) -> None:
    game.snake = deque(cells)
    game.snake_set = set(cells)
    game.direction = direction
    game.pending_direction = direction


def test_reset_builds_fresh_game():
    game = SnakeGame(SnakeConfig(seed=42))

    assert list(game.snake) == [(5, 5)]
    assert game.direction == "right"
    assert game.pending_direction == "right"
    assert game.score == 0
    assert game.speed_ms == 150
    assert game.status is GameStatus.RUNNING
    assert game.alive
    assert len(game.obstacles) == 10
    assert (5, 5) not in game.obstacles
    assert game.food not in game.obstacles
    assert game.food != (5, 5)
    for x, y in game.obstacles | {game.food}:
        assert 0 <= x < 30 and 0 <= y < 20


def test_reset_restores_state_after_play():
    game = open_game()
    game.food = (6, 5)
    game.advance_tick()
    game.set_direction("down")
    for _ in range(30):
        game.advance_tick()
    assert game.status is GameStatus.OVER

    game.reset()

    assert list(game.snake) == [(5, 5)]
    assert game.score == 0
    assert game.speed_ms == 150
    assert game.direction == "right"
    assert game.status is GameStatus.RUNNING


def test_reset_accepts_new_dimensions():
    game = SnakeGame(SnakeConfig(seed=3))
    game.reset(grid_width=12, grid_height=10, cell_size=16)

    assert (game.grid_width, game.grid_height, game.cell_size) == (12, 10, 16)
    for x, y in game.obstacles | {game.food}:
        assert 0 <= x < 12 and 0 <= y < 10


def test_rejected_reset_keeps_previous_config():
    game = open_game()

    with pytest.raises(ValueError):
        game.reset(grid_width=4)

    assert game.grid_width == 30
    game.reset()
    assert game.grid_width == 30
    game.food = FAR_CELL
    result = game.advance_tick()
    assert result.moved
    assert game.head == (6, 5)


def test_same_seed_gives_same_layout():
    first = SnakeGame(SnakeConfig(seed=7))
    second = SnakeGame(SnakeConfig(seed=7))

    assert first.obstacles == second.obstacles
    assert first.food == second.food


@pytest.mark.parametrize(
    "overrides",
    [
        {"grid_width": 4},
        {"grid_height": 100},
        {"cell_size": 2},
        {"start": (40, 5)},
        {"start_direction": "north"},
        {"min_speed_ms": 0},
        {"initial_speed_ms": 40},
        {"speed_step_ms": -1},
        {"obstacle_count": -1},
        {"grid_width": 8, "grid_height": 8, "obstacle_count": 40},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValueError):
        SnakeGame(SnakeConfig(**overrides))


def test_three_straight_ticks_move_without_growth():
    game = open_game()

    for _ in range(3):
        result = game.advance_tick()
        assert result.moved
        assert not result.ate

    assert list(game.snake) == [(8, 5)]
    assert game.score == 0


def test_eating_along_the_row_grows_snake():
    game = open_game()

    for x in (6, 7, 8):
        game.food = (x, 5)
        result = game.advance_tick()
        assert result.ate

    assert list(game.snake) == [(8, 5), (7, 5), (6, 5), (5, 5)]
    assert game.score == 30
    assert game.speed_ms == 135


def test_eating_food_scores_and_speeds_up():
    game = open_game()
    game.food = (6, 5)

    result = game.advance_tick()

    assert result.ate
    assert result.speed_changed
    assert game.score == 10
    assert game.speed_ms == 145
    assert len(game.snake) == 2
    assert game.food not in game.snake
    assert game.food not in game.obstacles


def test_speed_never_drops_below_floor():
    game = open_game()
    game.speed_ms = 55
    game.food = (6, 5)
    assert game.advance_tick().speed_changed
    assert game.speed_ms == 50

    game.food = (7, 5)
    result = game.advance_tick()
    assert result.ate
    assert not result.speed_changed
    assert game.speed_ms == 50
    assert game.score == 20


def test_leaving_the_grid_ends_game():
    game = open_game(start=(0, 5), start_direction="left")

    result = game.advance_tick()

    assert result.status is GameStatus.OVER
    assert result.reason == "wall"
    assert not result.moved
    assert list(game.snake) == [(0, 5)]


def test_moving_into_own_tail_ends_game():
    game = open_game()
    place_snake(game, [(6, 5), (6, 6), (5, 6), (5, 5)], "left")

    result = game.advance_tick()

    assert result.reason == "self"
    assert game.status is GameStatus.OVER
    assert list(game.snake) == [(6, 5), (6, 6), (5, 6), (5, 5)]


def test_hitting_obstacle_ends_game():
    game = open_game()
    game.obstacles = frozenset({(6, 5)})

    result = game.advance_tick()

    assert result.reason == "obstacle"
    assert game.status is GameStatus.OVER
    assert list(game.snake) == [(5, 5)]


def test_over_state_is_frozen():
    game = open_game(start=(0, 5), start_direction="left")
    game.advance_tick()
    before = game.snapshot()

    game.set_direction("up")
    for _ in range(5):
        result = game.advance_tick()
        assert not result.moved

    assert game.snapshot() == before
    assert game.pending_direction == "left"


def test_reversal_against_committed_direction_is_ignored():
    game = open_game()

    game.set_direction("left")
    game.advance_tick()

    assert game.direction == "right"
    assert game.head == (6, 5)


def test_queued_turn_cannot_be_followed_by_reversal():
    game = open_game()

    game.set_direction("up")
    game.set_direction("left")
    assert game.pending_direction == "up"

    game.advance_tick()
    assert game.head == (5, 4)
    assert game.direction == "up"


def test_unknown_direction_is_ignored():
    game = open_game()
    game.set_direction("sideways")
    assert game.pending_direction == "right"

    game.set_direction("down")
    assert game.pending_direction == "down"


def test_full_board_leaves_no_food():
    game = open_game(grid_width=8, grid_height=8)
    path = []
    for y in range(8):
        xs = range(8) if y % 2 == 0 else reversed(range(8))
        path.extend((x, y) for x in xs)
    place_snake(game, list(reversed(path[:63])), "left")
    game.food = path[63]

    result = game.advance_tick()

    assert result.ate
    assert len(game.snake) == 64
    assert game.food is None
    assert game.free_cells() == []


def test_snapshot_is_a_copy():
    game = open_game()
    snapshot = game.snapshot()
    snapshot["snake"].append((0, 0))
    snapshot["obstacles"].append((1, 1))

    assert list(game.snake) == [(5, 5)]
    assert game.obstacles == frozenset()
    assert snapshot["food"] == FAR_CELL
    assert snapshot["status"] is GameStatus.RUNNING


def test_free_cells_excludes_everything_on_board():
    game = SnakeGame(SnakeConfig(seed=5))
    free = game.free_cells()

    assert len(free) == 30 * 20 - 1 - 10 - 1
    assert game.food not in free
    assert game.head not in free
    assert not game.obstacles & set(free)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_play_keeps_board_consistent(seed):
    game = SnakeGame(SnakeConfig(seed=seed))
    picker = random.Random(seed)
    obstacles = game.obstacles

    for _ in range(400):
        if not game.alive:
            break
        if picker.random() < 0.3:
            game.set_direction(picker.choice(["up", "down", "left", "right"]))
        previous_len = len(game.snake)
        previous_score = game.score

        result = game.advance_tick()

        assert game.obstacles == obstacles
        assert len(set(game.snake)) == len(game.snake)
        assert set(game.snake) == game.snake_set
        if result.moved:
            assert len(game.snake) == previous_len + (1 if result.ate else 0)
            assert game.score == previous_score + (10 if result.ate else 0)
            assert game.food not in game.snake_set
            assert game.food not in game.obstacles
        assert game.speed_ms >= 50
