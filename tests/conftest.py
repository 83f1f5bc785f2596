"""
Shared fixtures: a controllable clock and a scripted kind picker.
"""

import itertools

import pytest

from fallblock.game.board import Field
from fallblock.game.pieces import BlockKind
from fallblock.game.tetris import RoundController


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CyclePicker:
    """Kind picker that cycles through a fixed list of kinds."""

    def __init__(self, kinds):
        self._kinds = itertools.cycle(kinds)

    def pick(self):
        return next(self._kinds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def field():
    return Field(10, 20)


# Dyadic intervals keep fake-clock arithmetic exact
FALL = 0.25
REPEAT = 0.125


@pytest.fixture
def o_controller(clock):
    """Started round controller that only ever deals O pieces."""
    controller = RoundController(
        fall_interval=FALL,
        input_repeat_interval=REPEAT,
        picker=CyclePicker([BlockKind.O]),
        clock=clock,
    )
    controller.start()
    return controller


def fill_row(field, y, kind=BlockKind.I, gap=None):
    """Fill row y with kind, optionally leaving column `gap` empty."""
    for x in range(field.width):
        if x != gap:
            field.grid[y, x] = kind
