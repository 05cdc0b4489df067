"""Tests for timed statuses, speed milestones and fuel burn."""

import pytest

from carrunner.core.events import EventType
from carrunner.game.collisions import resolve_collisions
from carrunner.game.entities import TurboPickup
from carrunner.game.rules import RALLY
from carrunner.game.status import apply_speed_milestones, burn_fuel, tick_statuses


def test_turbo_reverts_to_recorded_speed(ctx):
    # Two milestones already raised the speed before the pickup
    ctx.player.speed = 3.2
    ctx.registry.add(TurboPickup(x=150, y=480, width=50, height=50))
    resolve_collisions(ctx)

    tick_statuses(ctx)
    assert ctx.player.speed == pytest.approx(6.4)

    for _ in range(298):
        assert tick_statuses(ctx) == []
    assert ctx.player.turbo_active

    assert tick_statuses(ctx) == ["turbo"]
    assert not ctx.player.turbo_active
    assert ctx.player.speed == 3.2


def test_turbo_ignores_milestones(ctx):
    ctx.player.turbo_timer = 50
    ctx.player.pre_turbo_speed = 3.0
    ctx.score = 200.0

    assert not apply_speed_milestones(ctx)
    assert ctx.speed_level == 2

    for _ in range(50):
        tick_statuses(ctx)
    assert ctx.player.speed == 3.0


def test_speed_rises_once_per_milestone(ctx):
    ctx.score = 99.9
    assert not apply_speed_milestones(ctx)

    ctx.score = 100.0
    assert apply_speed_milestones(ctx)
    assert ctx.player.speed == pytest.approx(3.1)
    assert any(e.type == EventType.SPEED_UP for e in ctx.events)

    ctx.score = 150.0
    assert not apply_speed_milestones(ctx)
    assert ctx.player.speed == pytest.approx(3.1)


def test_shield_and_rocket_expire(ctx):
    ctx.player.shield_timer = 2
    ctx.player.rocket_timer = 1

    assert tick_statuses(ctx) == ["rocket"]
    assert tick_statuses(ctx) == ["shield"]
    assert not ctx.player.shield_active
    assert not ctx.player.flying

    expired = [e.data["status"] for e in ctx.events if e.type == EventType.STATUS_EXPIRED]
    assert expired == ["rocket", "shield"]


def test_classic_fuel_burns_every_fifth_frame(ctx):
    for _ in range(4):
        burn_fuel(ctx)
    assert ctx.player.fuel == 100

    burn_fuel(ctx)
    assert ctx.player.fuel == pytest.approx(99.9)


def test_rally_fuel_burns_every_frame(make_ctx):
    ctx = make_ctx(rules=RALLY)
    for _ in range(10):
        burn_fuel(ctx)
    assert ctx.player.fuel == pytest.approx(99.5)


def test_fuel_never_negative(ctx):
    ctx.player.fuel = 0.05
    for _ in range(5):
        burn_fuel(ctx)
    assert ctx.player.fuel == 0
