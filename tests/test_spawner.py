"""Tests for timer-driven spawning."""

import pytest

from carrunner.game.collisions import player_overlaps
from carrunner.game.entities import (
    Cloud,
    EntityKind,
    Pothole,
    Rock,
    ShieldPickup,
    Tree,
    Ufo,
    UfoPhase,
)
from carrunner.game.rules import CLASSIC, RALLY
from carrunner.game.spawner import spawn_entity, update_spawning

from conftest import ScriptedRandom


def test_tree_spawn_uses_rolls_in_order(make_ctx):
    # pick, tree height, trunk ratio, cloud roll, interval
    rng = ScriptedRandom([0.1, 0.5, 0.25, 0.9, 0.5])
    ctx = make_ctx(rng=rng, spawning=True)

    update_spawning(ctx)

    assert len(ctx.registry) == 1
    tree = ctx.registry.obstacles[0]
    assert isinstance(tree, Tree)
    assert tree.x == 1200
    assert tree.height == pytest.approx(140.0)
    assert tree.bottom == pytest.approx(570.0)
    assert tree.trunk_ratio == 0.25
    assert ctx.spawn_timers[0] == pytest.approx(100.0)


def test_empty_band_can_still_spawn_cloud(make_ctx):
    # pick, cloud roll, cloud height, interval
    rng = ScriptedRandom([0.85, 0.1, 0.5, 0.0])
    ctx = make_ctx(rng=rng, spawning=True)

    update_spawning(ctx)

    assert [type(e) for e in ctx.registry.obstacles] == [Cloud]
    assert ctx.spawn_timers[0] == pytest.approx(60.0)


def test_timer_counts_down_between_spawns(make_ctx):
    ctx = make_ctx(rng=ScriptedRandom(default=0.9), spawning=True)
    ctx.spawn_timers = [3]

    update_spawning(ctx)
    update_spawning(ctx)
    assert ctx.spawn_timers[0] == 1

    update_spawning(ctx)
    # 0.9 lands past the last band and above the cloud chance
    assert len(ctx.registry) == 0
    assert ctx.spawn_timers[0] == pytest.approx(60 + 0.9 * 80)


def test_interval_shrinks_with_run_length(make_ctx):
    ctx = make_ctx(rng=ScriptedRandom(default=0.9), spawning=True)
    ctx.run_frames = 1_000_000
    update_spawning(ctx)
    assert ctx.spawn_timers[0] == CLASSIC.streams[0].min_interval


def test_rally_streams_wait_for_initial_delay(make_ctx):
    ctx = make_ctx(rules=RALLY, rng=ScriptedRandom(default=0.99), spawning=True)

    for _ in range(59):
        update_spawning(ctx)
    assert len(ctx.registry) == 0

    update_spawning(ctx)
    assert [type(e) for e in ctx.registry.obstacles] == [Rock]
    assert ctx.spawn_timers[0] == 90.0

    for _ in range(90):
        update_spawning(ctx)
    kinds = [e.kind for e in ctx.registry.obstacles]
    assert kinds == [EntityKind.ROCK, EntityKind.ROCK, EntityKind.SHIELD]


def test_ufo_starts_above_view_and_swoops(ctx):
    ufo = spawn_entity(ctx, EntityKind.UFO)
    assert isinstance(ufo, Ufo)
    assert ufo.bottom < 0
    assert ufo.phase is UfoPhase.SWOOP
    assert 2 <= ufo.dy < 3
    assert ufo.dx == -3


def test_pothole_outline(ctx):
    pothole = spawn_entity(ctx, EntityKind.POTHOLE)
    assert isinstance(pothole, Pothole)
    assert 14 <= len(pothole.points) <= 18
    for px, py in pothole.points:
        assert abs(px - pothole.width / 2) <= pothole.width * 0.6 + 1e-9
        assert abs(py - pothole.height / 2) <= pothole.height * 0.6 + 1e-9


@pytest.mark.parametrize("kind", [EntityKind.FUEL, EntityKind.TURBO, EntityKind.SHIELD, EntityKind.ROCKET])
def test_pickups_are_reachable_by_grounded_car(ctx, kind):
    pickup = spawn_entity(ctx, kind)
    pickup.x = ctx.player.x
    assert player_overlaps(ctx.player, pickup, ctx.rules.collision_buffer * ctx.scale)


def test_geometry_scales_with_viewport(make_ctx):
    ctx = make_ctx(width=600, height=300)
    shield = spawn_entity(ctx, EntityKind.SHIELD)
    assert isinstance(shield, ShieldPickup)
    assert shield.width == pytest.approx(25.0)


def test_unknown_kind_raises(ctx):
    with pytest.raises(TypeError):
        spawn_entity(ctx, "banana")
