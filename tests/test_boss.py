"""Tests for the boss battle sub-mode."""

import pytest

from carrunner.game.boss import (
    MAX_PLAYER_LASERS,
    BossStatus,
    fire_laser,
    init_boss_mode,
    update_boss,
)
from carrunner.game.entities import Laser, LaserOwner, Tree
from carrunner.game.input import IDLE, InputSnapshot
from carrunner.game.rules import TRANSFORMER


@pytest.fixture
def battle(make_ctx):
    ctx = make_ctx(rules=TRANSFORMER)
    ctx.registry.add(Tree(x=500, y=400, width=60, height=150))
    ctx.player.health = 40
    init_boss_mode(ctx)
    return ctx


def test_init_creates_full_health_boss(battle):
    boss = battle.boss
    assert boss.health == boss.max_health == 100
    assert (boss.x, boss.y) == (600, 150)

    player = battle.player
    assert player.transformed
    assert player.health == 100
    assert (player.x, player.y) == (600, 400)
    assert (player.width, player.height) == (120, 150)
    assert len(battle.registry) == 0


def test_boss_fires_on_cooldown(battle):
    boss = battle.boss
    battle.player.x = 0

    assert update_boss(battle, IDLE) is BossStatus.ACTIVE
    assert len(battle.registry.boss_lasers) == 1
    assert boss.shoot_cooldown == 59

    for _ in range(59):
        update_boss(battle, IDLE)
    assert boss.shoot_cooldown == 0

    update_boss(battle, IDLE)
    fresh = [laser for laser in battle.registry.boss_lasers if laser.y == boss.y + boss.height]
    assert len(fresh) == 1
    assert boss.shoot_cooldown == 59


def test_boss_turns_at_screen_edge(battle):
    boss = battle.boss
    boss.x = battle.width - boss.width - 1
    update_boss(battle, IDLE)
    assert boss.direction == -1
    assert boss.x == battle.width - boss.width

    update_boss(battle, IDLE)
    assert boss.x == battle.width - boss.width - 3


def test_player_moves_freely_within_screen(battle):
    update_boss(battle, InputSnapshot(up=True, left=True))
    assert (battle.player.x, battle.player.y) == (593, 393)

    battle.player.x = 2
    update_boss(battle, InputSnapshot(left=True))
    assert battle.player.x == 0

    battle.player.y = battle.height - battle.player.height
    update_boss(battle, InputSnapshot(down=True))
    assert battle.player.y == battle.height - battle.player.height


def test_lasers_aim_at_target(battle):
    laser = fire_laser(battle, (660.0, 0.0))
    assert laser.owner is LaserOwner.PLAYER
    assert (laser.x, laser.y) == (660, 400)
    assert laser.vx == pytest.approx(0.0, abs=1e-9)
    assert laser.vy == pytest.approx(-15.0)


def test_live_laser_limit(battle):
    for _ in range(MAX_PLAYER_LASERS + 2):
        fire_laser(battle, (0.0, 0.0))
    assert len(battle.registry.lasers) == MAX_PLAYER_LASERS
    assert fire_laser(battle, (0.0, 0.0)) is None


def test_fire_input_shoots(battle):
    update_boss(battle, InputSnapshot(fire=True, pointer=(660.0, 0.0)))
    assert len(battle.registry.lasers) == 1
    assert battle.registry.lasers[0].y == pytest.approx(385.0)


def test_offscreen_lasers_are_removed(battle):
    battle.registry.add_laser(Laser(x=5, y=100, vx=-15, vy=0, owner=LaserOwner.PLAYER))
    update_boss(battle, IDLE)
    assert battle.registry.lasers == []


def test_player_laser_damages_boss(battle):
    boss = battle.boss
    battle.registry.add_laser(Laser(
        x=boss.x + 10, y=boss.y + 10, vx=0, vy=0, owner=LaserOwner.PLAYER,
    ))

    assert update_boss(battle, IDLE) is BossStatus.ACTIVE
    assert boss.health == 95
    assert battle.registry.lasers == []


def test_boss_defeated(battle):
    boss = battle.boss
    boss.health = 5
    battle.registry.add_laser(Laser(
        x=boss.x + 10, y=boss.y + 10, vx=0, vy=0, owner=LaserOwner.PLAYER,
    ))

    assert update_boss(battle, IDLE) is BossStatus.DEFEATED
    assert boss.health == 0


def test_boss_laser_damages_player(battle):
    player = battle.player
    battle.registry.add_laser(Laser(
        x=player.x + 10, y=player.y + 10, vx=0, vy=8,
        owner=LaserOwner.BOSS, width=5, height=15,
    ))

    assert update_boss(battle, IDLE) is BossStatus.ACTIVE
    assert player.health == 90
    # Only the freshly fired boss laser remains
    assert len(battle.registry.boss_lasers) == 1


def test_player_defeated(battle):
    player = battle.player
    player.health = 10
    battle.registry.add_laser(Laser(
        x=player.x + 10, y=player.y + 10, vx=0, vy=8,
        owner=LaserOwner.BOSS, width=5, height=15,
    ))

    assert update_boss(battle, IDLE) is BossStatus.PLAYER_DEFEATED
    assert player.health == 0


def test_update_requires_boss(ctx):
    with pytest.raises(RuntimeError):
        update_boss(ctx, IDLE)
