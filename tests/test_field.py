from __future__ import annotations

import random

import numpy as np

from tetromino_engine.game import (
    EMPTY,
    DropOutcome,
    Field,
    GameOverEvent,
    LineClearEvent,
    Piece,
    PieceLockedEvent,
    TetrominoType,
)


FILL = int(TetrominoType.T)


def test_construction_spawns_active_and_next() -> None:
    field = Field(rng=random.Random(3))
    assert field.active_piece is not None
    assert field.next_piece is not None
    assert field.cleared_line_count == 0
    assert not field.is_over
    assert np.all(field.grid.grid == EMPTY)


def test_spawn_is_centered(kinds) -> None:
    for kind in TetrominoType:
        field = Field(kind_source=kinds([kind]))
        piece = field.active_piece
        assert piece.anchor_x == 10 // 2 - piece.width // 2
        assert piece.anchor_y == 0


def test_promoted_piece_is_recentered(kinds) -> None:
    field = Field(kind_source=kinds([TetrominoType.O, TetrominoType.I]))
    queued = field.next_piece
    assert queued.kind == TetrominoType.I
    field.hard_drop()
    assert field.active_piece is queued
    assert (queued.anchor_x, queued.anchor_y) == (3, 0)


def test_collides_predicate(o_field: Field) -> None:
    assert o_field.collides(Piece(TetrominoType.T, -1, 5))
    assert o_field.collides(Piece(TetrominoType.T, 8, 5))
    assert not o_field.collides(Piece(TetrominoType.T, 7, 5))
    assert not o_field.collides(Piece(TetrominoType.T, 0, 18))
    assert o_field.collides(Piece(TetrominoType.T, 0, 19))


def test_collides_above_top_ignores_grid_contents(o_field: Field) -> None:
    o_field.grid.grid[0, :] = FILL
    assert not o_field.collides(Piece(TetrominoType.T, 0, -2))
    assert o_field.collides(Piece(TetrominoType.T, 0, -1))
    assert o_field.collides(Piece(TetrominoType.T, -1, -2))


def test_move_left_at_wall_fails(t_field: Field) -> None:
    piece = t_field.active_piece
    for _ in range(4):
        assert t_field.move_left()
    assert piece.anchor_x == 0
    assert not t_field.move_left()
    assert piece.anchor_x == 0


def test_move_right_at_wall_fails(t_field: Field) -> None:
    piece = t_field.active_piece
    while t_field.move_right():
        pass
    assert piece.anchor_x == 7
    assert not t_field.move_right()
    assert piece.anchor_x == 7


def test_move_down_moves_then_locks(o_field: Field) -> None:
    piece = o_field.active_piece
    assert o_field.move_down().outcome is DropOutcome.MOVED
    assert piece.anchor_y == 1
    piece.anchor_y = 18
    result = o_field.move_down()
    assert result.outcome is DropOutcome.LOCKED
    assert not result
    assert result.cleared_rows == ()
    assert o_field.active_piece is not piece
    assert o_field.grid.grid[19, 4] == int(TetrominoType.O)
    assert o_field.grid.grid[18, 5] == int(TetrominoType.O)


def test_active_piece_is_never_painted(o_field: Field) -> None:
    o_field.move_down()
    o_field.move_left()
    assert np.all(o_field.grid.grid == EMPTY)


def test_blocked_rotation_restores_matrix(kinds) -> None:
    field = Field(kind_source=kinds([TetrominoType.J]))
    piece = field.active_piece
    before = piece.cell_matrix.copy()
    # Clockwise J needs (6, 0), counterclockwise does not
    field.grid.grid[0, 6] = FILL
    assert not field.rotate_right()
    assert np.array_equal(piece.cell_matrix, before)
    assert field.rotate_left()
    assert not np.array_equal(piece.cell_matrix, before)


def test_rotation_has_no_wall_kick(kinds) -> None:
    field = Field(kind_source=kinds([TetrominoType.I]))
    piece = field.active_piece
    assert field.rotate_right()
    while field.move_left():
        pass
    # Vertical I hugging the left wall cannot turn flat
    assert piece.anchor_x == -2
    assert not field.rotate_left()
    assert piece.anchor_x == -2


def test_single_line_clear(o_field: Field) -> None:
    o_field.grid.grid[19, :] = FILL
    o_field.grid.grid[19, 4:6] = EMPTY
    o_field.grid.grid[18, 3] = int(TetrominoType.J)
    o_field.drain_events()

    result = o_field.hard_drop()

    assert result.outcome is DropOutcome.LOCKED
    assert result.cleared_rows == (19,)
    assert o_field.cleared_line_count == 1
    assert o_field.grid.grid[19, 3] == int(TetrominoType.J)
    assert o_field.grid.grid[19, 4] == int(TetrominoType.O)
    assert np.count_nonzero(o_field.grid.grid[19]) == 3
    assert np.all(o_field.grid.grid[0] == EMPTY)
    assert np.all(o_field.grid.grid[:19] == EMPTY)

    events = o_field.drain_events()
    assert [type(e) for e in events] == [PieceLockedEvent, LineClearEvent]
    assert events[1] == LineClearEvent(1, (19,))


def test_four_line_clear_in_one_lock(kinds) -> None:
    field = Field(kind_source=kinds([TetrominoType.I]))
    field.grid.grid[16:20, 1:] = FILL
    assert field.rotate_right()
    while field.move_left():
        pass
    field.drain_events()

    result = field.hard_drop()

    assert result.cleared_rows == (19, 18, 17, 16)
    assert result.lines_cleared == 4
    assert field.cleared_line_count == 4
    assert np.all(field.grid.grid == EMPTY)
    clears = [e for e in field.drain_events() if isinstance(e, LineClearEvent)]
    assert clears == [LineClearEvent(4, (19, 18, 17, 16))]


def test_lock_drops_cells_above_top(kinds) -> None:
    field = Field(kind_source=kinds([TetrominoType.T]))
    piece = field.active_piece
    piece.anchor_y = -1
    field.lock()
    # Only the bottom row of the T reached row 0
    assert np.count_nonzero(field.grid.grid[0]) == 3


def _stack_until_over(field: Field) -> list:
    results = []
    while not field.is_over:
        results.append(field.hard_drop())
    return results


def test_game_over_when_spawn_is_blocked(o_field: Field) -> None:
    o_field.drain_events()
    results = _stack_until_over(o_field)

    assert len(results) == 10
    assert all(r.outcome is DropOutcome.LOCKED for r in results[:-1])
    assert results[-1].outcome is DropOutcome.GAME_OVER
    events = o_field.drain_events()
    assert sum(isinstance(e, GameOverEvent) for e in events) == 1
    assert isinstance(events[-1], GameOverEvent)


def test_commands_are_noops_after_game_over(o_field: Field) -> None:
    _stack_until_over(o_field)
    o_field.drain_events()
    grid_before = o_field.grid.clone_state()
    active, nxt = o_field.active_piece, o_field.next_piece
    anchor = (active.anchor_x, active.anchor_y)

    assert not o_field.move_left()
    assert not o_field.move_right()
    assert not o_field.rotate_left()
    assert not o_field.rotate_right()
    assert o_field.move_down().outcome is DropOutcome.REJECTED
    assert o_field.hard_drop().outcome is DropOutcome.REJECTED
    assert o_field.tick().outcome is DropOutcome.REJECTED

    assert np.array_equal(o_field.grid.grid, grid_before)
    assert o_field.active_piece is active and o_field.next_piece is nxt
    assert (active.anchor_x, active.anchor_y) == anchor
    assert o_field.cleared_line_count == 0
    assert o_field.drain_events() == []


def test_reset_restores_initial_state(o_field: Field) -> None:
    o_field.grid.grid[19, :9] = FILL
    _stack_until_over(o_field)

    o_field.reset()

    assert np.all(o_field.grid.grid == EMPTY)
    assert o_field.cleared_line_count == 0
    assert not o_field.is_over
    assert (o_field.active_piece.anchor_x, o_field.active_piece.anchor_y) == (4, 0)
    assert o_field.next_piece is not None
    assert o_field.move_down()


def test_tick_is_one_gravity_step(o_field: Field) -> None:
    piece = o_field.active_piece
    assert o_field.tick()
    assert o_field.update()
    assert piece.anchor_y == 2


def test_lock_after_game_over_changes_nothing(o_field: Field) -> None:
    _stack_until_over(o_field)
    o_field.drain_events()
    grid_before = o_field.grid.clone_state()

    assert o_field.lock() == []

    assert np.array_equal(o_field.grid.grid, grid_before)
    assert o_field.drain_events() == []
    assert o_field.is_over


def test_lock_that_clears_and_ends_game(o_field: Field) -> None:
    # Columns 4-5 stacked up to row 2; row 1 full except where the O sits
    o_field.grid.grid[2:, 4:6] = FILL
    o_field.grid.grid[1, :] = FILL
    o_field.grid.grid[1, 4:6] = EMPTY
    o_field.drain_events()

    result = o_field.move_down()

    assert result.outcome is DropOutcome.GAME_OVER
    assert result.cleared_rows == (1,)
    assert o_field.cleared_line_count == 1
    # The O's top half dropped into row 1 and blocks the next spawn
    assert o_field.grid.grid[1, 4] == int(TetrominoType.O)
    events = o_field.drain_events()
    assert [type(e) for e in events] == [PieceLockedEvent, LineClearEvent, GameOverEvent]
    assert events[1] == LineClearEvent(1, (1,))


def test_default_source_draws_seeded_random_pieces() -> None:
    expected_rng = random.Random(5)
    expected = [Piece.random(0, 0, expected_rng).kind for _ in range(2)]
    field = Field(rng=random.Random(5))
    assert [field.active_piece.kind, field.next_piece.kind] == expected
