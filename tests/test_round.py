"""
Tests for the round controller: intents, gravity, locking and game over.
"""

import numpy as np
import pytest

from fallblock.game.pieces import BlockKind
from fallblock.game.randomizer import KindPicker
from fallblock.game.tetris import (
    DEFAULT_FALL_INTERVAL,
    INPUT_REPEAT_INTERVAL,
    Intent,
    RoundController,
    RoundState,
)

from conftest import FALL, REPEAT, CyclePicker


def cells(controller):
    return set(controller.active_piece.occupied_cells())


def make_controller(clock, kind, **kwargs):
    kwargs.setdefault("fall_interval", FALL)
    kwargs.setdefault("input_repeat_interval", REPEAT)
    controller = RoundController(picker=CyclePicker([kind]), clock=clock, **kwargs)
    controller.start()
    return controller


class TestStart:
    """Round initialization."""

    def test_not_playing_before_start(self, clock):
        controller = RoundController(clock=clock)
        assert controller.state is RoundState.INITIALIZING

    def test_start_enters_playing(self, o_controller):
        assert o_controller.state is RoundState.PLAYING
        assert o_controller.active_piece.kind == BlockKind.O
        assert o_controller.next_piece.kind == BlockKind.O
        assert (o_controller.active_piece.x, o_controller.active_piece.y) == (3, 0)
        assert np.all(o_controller.field.grid == BlockKind.NONE)

    def test_start_clears_previous_round(self, o_controller):
        o_controller.field.grid[19, 0] = BlockKind.T
        o_controller.active_piece.translate(0, 5)
        o_controller.start()
        assert np.all(o_controller.field.grid == BlockKind.NONE)
        assert o_controller.active_piece.y == 0
        assert o_controller.pieces_locked == 0

    def test_field_too_small_is_contract_violation(self, clock):
        with pytest.raises(AssertionError):
            RoundController(field_width=5, picker=CyclePicker([BlockKind.I]), clock=clock)

    def test_smallest_field_locks_in_bounds(self, clock):
        """An I piece on a 7-wide field spawns, falls and locks without leaving the grid."""
        controller = RoundController(
            field_width=7, field_height=4, fall_interval=FALL,
            picker=CyclePicker([BlockKind.I]), clock=clock,
        )
        controller.start()
        for _ in range(4):
            clock.advance(FALL)
            events = controller.step()
            if events.locked:
                break
        assert events.locked
        assert controller.field.full_rows() == []
        assert [controller.field.cell(x, 3) for x in range(3, 7)] == [BlockKind.I] * 4

    def test_step_requires_playing(self, clock):
        controller = RoundController(clock=clock)
        with pytest.raises(AssertionError):
            controller.step()

    def test_seeded_rounds_match(self, clock):
        a = RoundController(picker=KindPicker(5), clock=clock)
        b = RoundController(picker=KindPicker(5), clock=clock)
        a.start()
        b.start()
        assert a.active_piece.kind == b.active_piece.kind
        assert a.next_piece.kind == b.next_piece.kind


class TestIntents:
    """Input-repeat gating and move/rotate legality."""

    def test_intent_ignored_before_repeat_interval(self, o_controller, clock):
        before = cells(o_controller)
        clock.advance(REPEAT / 2)
        events = o_controller.step(Intent.MOVE_LEFT)
        assert not events.moved
        assert cells(o_controller) == before

    def test_move_left_and_right(self, o_controller, clock):
        clock.advance(REPEAT)
        events = o_controller.step(Intent.MOVE_LEFT)
        assert events.moved
        assert o_controller.active_piece.x == 2

        clock.advance(REPEAT / 2)
        assert not o_controller.step(Intent.MOVE_RIGHT).moved

        clock.advance(REPEAT / 2)
        assert o_controller.step(Intent.MOVE_RIGHT).moved
        assert o_controller.active_piece.x == 3

    def test_soft_drop(self, o_controller, clock):
        clock.advance(REPEAT)
        events = o_controller.step(Intent.SOFT_DROP)
        assert events.moved
        assert not events.fell
        assert o_controller.active_piece.y == 1

    def test_blocked_move_does_not_reset_repeat_clock(self, o_controller, clock):
        o_controller.active_piece.translate(-4, 0)
        clock.advance(REPEAT)
        assert not o_controller.step(Intent.MOVE_LEFT).moved
        # gate is still open, so the next intent is accepted right away
        assert o_controller.step(Intent.MOVE_RIGHT).moved

    def test_wall_stops_movement(self, clock):
        controller = make_controller(clock, BlockKind.O, fall_interval=100.0)
        for _ in range(10):
            clock.advance(REPEAT)
            controller.step(Intent.MOVE_RIGHT)
        assert max(x for x, _ in cells(controller)) == 9
        assert controller.active_piece.y == 0

    def test_rotate(self, clock):
        controller = make_controller(clock, BlockKind.T)
        controller.active_piece.translate(0, 2)
        clock.advance(REPEAT)
        events = controller.step(Intent.ROTATE)
        assert events.rotated
        assert controller.active_piece.rotation == 1

    def test_rotate_blocked(self, clock):
        controller = make_controller(clock, BlockKind.I)
        # vertical I needs rows 0-3 of column 5
        controller.field.grid[3, 5] = BlockKind.Z
        clock.advance(REPEAT)
        assert not controller.step(Intent.ROTATE).rotated
        assert controller.active_piece.rotation == 0

    def test_confirm_is_not_a_move(self, o_controller, clock):
        before = cells(o_controller)
        clock.advance(REPEAT)
        events = o_controller.step(Intent.CONFIRM)
        assert not events.controlled
        assert cells(o_controller) == before


class TestGravity:
    """Automatic fall on the gravity clock."""

    def test_no_fall_before_interval(self, o_controller, clock):
        clock.advance(FALL - REPEAT / 2)
        events = o_controller.step()
        assert not events.fell
        assert o_controller.active_piece.y == 0

    def test_fall_after_interval(self, o_controller, clock):
        clock.advance(FALL)
        events = o_controller.step()
        assert events.fell
        assert o_controller.active_piece.y == 1

    def test_gravity_clock_resets(self, o_controller, clock):
        clock.advance(FALL)
        o_controller.step()
        clock.advance(FALL / 2)
        assert not o_controller.step().fell
        clock.advance(FALL / 2)
        assert o_controller.step().fell
        assert o_controller.active_piece.y == 2

    def test_intent_and_fall_in_same_tick(self, o_controller, clock):
        """An accepted intent does not hold back gravity once the interval elapsed."""
        clock.advance(FALL)
        events = o_controller.step(Intent.MOVE_LEFT)
        assert events.moved
        assert events.fell
        assert (o_controller.active_piece.x, o_controller.active_piece.y) == (2, 1)

    def test_custom_fall_interval(self, clock):
        controller = make_controller(clock, BlockKind.O, fall_interval=1.0)
        clock.advance(0.5)
        assert not controller.step().fell
        clock.advance(0.5)
        assert controller.step().fell


class TestDefaults:
    """Default 0.3s gravity and 0.1s input repeat."""

    def test_default_intervals(self, clock):
        controller = RoundController(clock=clock)
        assert controller.fall_interval == DEFAULT_FALL_INTERVAL == 0.3
        assert controller.input_repeat_interval == INPUT_REPEAT_INTERVAL == 0.1

    def test_default_timing(self, clock):
        controller = RoundController(picker=CyclePicker([BlockKind.O]), clock=clock)
        controller.start()
        clock.advance(0.05)
        assert not controller.step(Intent.MOVE_LEFT).moved
        clock.advance(0.06)
        assert controller.step(Intent.MOVE_LEFT).moved
        clock.advance(0.15)
        assert not controller.step().fell
        clock.advance(0.05)
        assert controller.step().fell


class TestLocking:
    """Lock, line clear, promotion and game over."""

    def drop_to_floor(self, controller, clock):
        events = None
        for _ in range(controller.field.height + 1):
            clock.advance(controller.fall_interval)
            events = controller.step()
            if events.locked:
                break
        return events

    def test_lock_at_floor_and_promote(self, clock):
        controller = make_controller(clock, BlockKind.S)
        controller.active_piece.reset(BlockKind.O)
        controller.next_piece.reset(BlockKind.T)

        events = self.drop_to_floor(controller, clock)
        assert events.locked
        assert not events.lines_cleared
        assert not events.game_over
        for x, y in [(4, 18), (5, 18), (4, 19), (5, 19)]:
            assert controller.field.cell(x, y) == BlockKind.O

        assert controller.active_piece.kind == BlockKind.T
        assert (controller.active_piece.x, controller.active_piece.y) == (3, 0)
        assert controller.active_piece.rotation == 0
        assert controller.next_piece.kind == BlockKind.S
        assert controller.pieces_locked == 1
        assert controller.state is RoundState.PLAYING

    def test_lock_clears_lines(self, o_controller, clock):
        field = o_controller.field
        for y in (18, 19):
            for x in range(field.width):
                if x not in (4, 5):
                    field.grid[y, x] = BlockKind.L
        field.grid[17, 0] = BlockKind.J

        events = self.drop_to_floor(o_controller, clock)
        assert events.locked
        assert events.lines_cleared
        assert field.full_rows() == []
        assert field.cell(0, 19) == BlockKind.J
        assert np.count_nonzero(field.grid) == 1

    def test_spawn_blocked_is_game_over(self, o_controller, clock):
        """Filled top rows at columns 3-6 block the promoted piece."""
        field = o_controller.field
        o_controller.active_piece.translate(0, 18)
        for y in (0, 1):
            for x in range(3, 7):
                field.grid[y, x] = BlockKind.Z

        clock.advance(FALL)
        events = o_controller.step()
        assert events.locked
        assert events.game_over
        assert o_controller.state is RoundState.GAME_OVER
        assert o_controller.game_over
        assert not field.can_place(o_controller.active_piece, 0, 0)

    def test_snapshot(self, o_controller):
        state = o_controller.get_state()
        assert state["field"].shape == (20, 10)
        assert state["active_kind"] == BlockKind.O
        assert set(state["active_cells"]) == {(4, 0), (5, 0), (4, 1), (5, 1)}
        assert state["next_kind"] == BlockKind.O
        assert set(state["next_cells"]) == {(1, 1), (2, 1), (1, 2), (2, 2)}
        assert state["round_state"] is RoundState.PLAYING

    def test_snapshot_is_a_copy(self, o_controller):
        state = o_controller.get_state()
        state["field"][0, 0] = BlockKind.I
        assert o_controller.field.is_empty(0, 0)
