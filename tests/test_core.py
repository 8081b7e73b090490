import numpy as np
import pytest

from falling_blocks.game import (
    EMPTY,
    Action,
    FallingBlockGame,
    GameConfig,
    MovingPiece,
    Piece,
    Position,
    TetrominoType,
)


VERTICAL_I = Piece.from_type(TetrominoType.I).rotate_right()


def make_game(**kwargs) -> FallingBlockGame:
    kwargs.setdefault("random_seed", 0)
    return FallingBlockGame(GameConfig(**kwargs))


def tick_until_locked(game: FallingBlockGame, limit: int = 5000) -> None:
    for _ in range(limit):
        if game.current_piece is None or game.game_over:
            return
        game.tick()
    raise AssertionError("piece never locked")


def lock_in_place(game: FallingBlockGame, moving: MovingPiece) -> None:
    """Put a piece where it cannot fall and run the tick that locks it."""
    game.current_piece = moving
    game.move_frames = game.config.frames_per_move - 1
    game.tick()


def fill_row_except(game: FallingBlockGame, y: int, hole_x: int, color: int = 6) -> None:
    for x in range(game.grid.width):
        if x != hole_x:
            assert game.grid.set(Position(x, y), color)


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(width=3)
    with pytest.raises(ValueError):
        GameConfig(width=4)
    with pytest.raises(ValueError):
        GameConfig(frames_per_move=1)
    with pytest.raises(ValueError):
        GameConfig(ticks_per_second=0)


def test_first_tick_spawns_next_piece():
    game = make_game()
    assert game.current_piece is None
    upcoming = game.next_piece
    game.tick()
    assert game.current_piece == MovingPiece(Position(5, -2), upcoming)
    assert game.move_frames == 0


def test_piece_falls_once_per_period():
    game = make_game(frames_per_move=18)
    game.tick()
    for _ in range(17):
        game.tick()
        assert game.current_piece.pos == Position(5, -2)
    game.tick()
    assert game.current_piece.pos == Position(5, -1)
    assert game.move_frames == 0


def test_soft_drop_adds_half_a_period():
    game = make_game(frames_per_move=18)
    game.tick()
    assert game.apply(Action.SOFT_DROP)
    assert game.move_frames == 9
    game.apply(Action.SOFT_DROP)
    game.tick()
    assert game.current_piece.pos == Position(5, -1)
    assert game.move_frames == 1


def test_repeated_soft_drop_falls_one_row_per_tick():
    game = make_game(frames_per_move=18)
    game.tick()
    for _ in range(5):
        assert game.apply(Action.SOFT_DROP)
    assert game.move_frames == 45
    game.tick()
    assert game.current_piece.pos == Position(5, -1)
    assert game.move_frames == 28
    game.tick()
    assert game.current_piece.pos == Position(5, 0)
    assert game.move_frames == 11
    game.tick()
    assert game.current_piece.pos == Position(5, 0)
    assert game.move_frames == 12


def test_narrowest_board_lets_i_piece_fall():
    game = make_game(width=5, frames_per_move=2)
    game.tick()
    game.current_piece = MovingPiece.spawn(Piece.from_type(TetrominoType.I), 5)
    for _ in range(4):
        game.tick()
    assert not game.game_over
    assert game.current_piece.pos == Position(2, 0)
    assert sorted(p.x for p in game.current_piece.points()) == [1, 2, 3, 4]


def test_soft_drop_without_active_piece_is_ignored():
    game = make_game()
    assert game.apply(Action.SOFT_DROP) is False
    assert game.move_frames == 0


def test_drop_to_bottom_locks_piece_cells():
    game = make_game(width=10, height=20)
    game.tick()
    game.current_piece = MovingPiece.spawn(Piece.from_type(TetrominoType.O), 10)
    tick_until_locked(game)

    assert not game.game_over
    assert game.current_piece is None
    expected = np.full((20, 10), EMPTY, dtype=np.int8)
    expected[18:20, 4:6] = int(TetrominoType.O)
    np.testing.assert_array_equal(game.grid.grid, expected)
    assert game.score == 0
    assert game.pieces_locked == 1


def test_next_tick_after_lock_spawns():
    game = make_game()
    game.tick()
    tick_until_locked(game)
    upcoming = game.next_piece
    game.tick()
    assert game.current_piece is not None
    assert game.current_piece.piece == upcoming


def test_single_line_clear_shifts_rows_and_scores():
    game = make_game(width=10, height=20)
    fill_row_except(game, 19, hole_x=0)
    game.grid.set(Position(5, 18), 2)

    # Vertical I in column 0 covering rows 16..19; only row 19 becomes full.
    game.current_piece = MovingPiece(Position(0, 17), VERTICAL_I)
    tick_until_locked(game)

    assert game.score == 40
    assert game.lines_cleared_total == 1
    i_color = int(TetrominoType.I)
    bottom = [EMPTY] * 10
    bottom[0] = i_color
    bottom[5] = 2
    assert game.grid.grid[19].tolist() == bottom
    assert game.grid.cell(Position(0, 18)) == i_color
    assert game.grid.cell(Position(0, 17)) == i_color
    assert game.grid.cell(Position(0, 16)) is None
    assert game.grid.filled_cells() == 4


@pytest.mark.parametrize("rows, points", [(0, 0), (1, 40), (2, 100), (3, 300), (4, 1200)])
def test_score_per_lock(rows, points):
    game = make_game(width=10, height=20)
    for y in range(20 - rows, 20):
        fill_row_except(game, y, hole_x=0)
    lock_in_place(game, MovingPiece(Position(0, 17), VERTICAL_I))

    assert game.current_piece is None
    assert game.lines_cleared_total == rows
    assert game.score == points
    if rows == 4:
        assert game.grid.filled_cells() == 0


def test_score_never_decreases():
    game = make_game(random_seed=3, frames_per_move=2)
    last = 0
    for _ in range(3000):
        game.tick()
        assert game.score >= last
        last = game.score
    assert game.game_over


def test_move_left_blocked_at_wall():
    game = make_game()
    game.tick()
    # O piece with pivot at x=1 has its left column at x=0.
    start = MovingPiece(Position(1, 5), Piece.from_type(TetrominoType.O))
    game.current_piece = start
    assert game.apply(Action.MOVE_LEFT) is False
    assert game.current_piece == start


def test_move_right_and_blocked_by_locked_cell():
    game = make_game()
    game.tick()
    game.current_piece = MovingPiece(Position(4, 5), Piece.from_type(TetrominoType.O))
    assert game.apply(Action.MOVE_RIGHT)
    assert game.current_piece.pos == Position(5, 5)
    game.grid.set(Position(6, 5), 0)
    assert game.apply(Action.MOVE_RIGHT) is False
    assert game.current_piece.pos == Position(5, 5)


def test_rotation_without_kick_is_rejected_at_wall():
    game = make_game()
    game.tick()
    start = MovingPiece(Position(0, 5), VERTICAL_I)
    game.current_piece = start
    # Rotating back to horizontal would put a cell at x=-1.
    assert game.apply(Action.ROTATE_LEFT) is False
    assert game.current_piece == start


def test_rotation_applied_when_free():
    game = make_game()
    game.tick()
    t_piece = Piece.from_type(TetrominoType.T)
    game.current_piece = MovingPiece(Position(5, 5), t_piece)
    assert game.apply(Action.ROTATE_RIGHT)
    assert game.current_piece.piece == t_piece.rotate_right()
    assert game.apply(Action.ROTATE_LEFT)
    assert game.current_piece.piece == t_piece


def test_moves_allowed_above_board():
    game = make_game()
    game.tick()
    game.current_piece = MovingPiece(Position(5, -2), Piece.from_type(TetrominoType.T))
    assert game.apply(Action.MOVE_LEFT)
    assert game.current_piece.pos == Position(4, -2)


def test_lock_above_board_is_game_over_without_writes():
    game = make_game(width=10, height=20)
    game.grid.set(Position(4, 0), 1)
    game.grid.set(Position(5, 0), 1)
    before = game.grid.clone_state()
    game.tick()
    game.current_piece = MovingPiece.spawn(Piece.from_type(TetrominoType.O), 10)
    tick_until_locked(game)

    assert game.game_over
    np.testing.assert_array_equal(game.grid.grid, before)
    for _ in range(100):
        game.tick()
    np.testing.assert_array_equal(game.grid.grid, before)
    assert "Game Over" in game.status_text()


@pytest.mark.parametrize("action", list(Action))
def test_input_after_game_over_changes_nothing(action):
    game = make_game(random_seed=5, frames_per_move=2)
    while not game.game_over:
        game.tick()
    grid = game.grid.clone_state()
    score = game.score
    current = game.current_piece
    frames = game.move_frames

    assert game.apply(action) is False
    game.step_frame([action, action], ticks=10)

    assert game.game_over
    assert game.score == score
    assert game.current_piece == current
    assert game.move_frames == frames
    np.testing.assert_array_equal(game.grid.grid, grid)


def test_request_quit_never_mutates():
    game = make_game()
    game.tick()
    current = game.current_piece
    assert game.apply(Action.REQUEST_QUIT) is False
    assert game.current_piece == current
    assert not game.game_over


def test_step_frame_applies_input_before_ticks():
    game = make_game(frames_per_move=18)
    game.tick()
    game.current_piece = MovingPiece(Position(5, 5), Piece.from_type(TetrominoType.O))
    game.move_frames = 17
    game.step_frame([Action.MOVE_LEFT], ticks=1)
    assert game.current_piece.pos == Position(4, 6)


def test_snapshot_is_detached():
    game = make_game()
    game.tick()
    snap = game.snapshot()
    assert snap.current == game.current_piece
    assert snap.next_piece == game.next_piece
    assert snap.score == 0 and not snap.game_over
    snap.grid[19, 0] = 3
    assert game.grid.cell(Position(0, 19)) is None


def test_status_text():
    game = make_game()
    game.score = 140
    assert game.status_text() == "Tetris - Score: 140"


def test_reset_with_seed_is_deterministic():
    a = make_game(random_seed=None)
    b = make_game(random_seed=None)
    a.reset(seed=42)
    b.reset(seed=42)
    for _ in range(200):
        a.tick()
        b.tick()
        assert a.current_piece == b.current_piece
        assert a.next_piece == b.next_piece
    a.grid.set(Position(0, 0), 1)
    a.reset()
    assert a.grid.filled_cells() == 0
    assert a.current_piece is None
    assert a.score == 0 and not a.game_over
