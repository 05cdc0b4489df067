"""Shared fixtures for the car runner tests."""

import random

import pytest

from carrunner.core.state import GameState
from carrunner.game.context import initialize
from carrunner.game.rules import CLASSIC


class ScriptedRandom(random.Random):
    """Returns queued values from ``random()``, then a fixed default."""

    def __init__(self, values=(), default=0.5):
        super().__init__(0)
        self.values = list(values)
        self.default = default

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def make_ctx():
    """Factory for a 1200x600 context that is already playing.

    Spawning is switched off unless asked for, so tests control exactly
    which entities exist.
    """
    def _make(rules=CLASSIC, width=1200, height=600, rng=None, playing=True, spawning=False):
        ctx = initialize(width, height, rules, rng=rng or random.Random(1234))
        if playing:
            ctx.state.transition(GameState.PLAYING, "test")
        if not spawning:
            ctx.spawn_timers = [float("inf")] * len(ctx.spawn_timers)
        return ctx

    return _make


@pytest.fixture
def ctx(make_ctx):
    return make_ctx()
