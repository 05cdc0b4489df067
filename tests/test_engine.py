"""Tests for the frame update and the engine wrapper."""

import random

import pytest

from carrunner.core.events import EventType
from carrunner.core.state import GameState
from carrunner.game.context import initialize
from carrunner.game.engine import GameEngine, update
from carrunner.game.entities import Laser, LaserOwner, Player, Tree
from carrunner.game.highscore import MemoryHighScoreStore
from carrunner.game.input import IDLE, InputSnapshot
from carrunner.game.rules import CLASSIC, RALLY, TRANSFORMER

START = InputSnapshot(start=True)
PAUSE = InputSnapshot(pause=True)
RESTART = InputSnapshot(restart=True)


def event_types(result):
    return [e.type for e in result.events]


def test_title_screen_waits_for_start(make_ctx):
    ctx = make_ctx(playing=False, spawning=True)

    for _ in range(300):
        result = update(ctx, IDLE)

    assert result.state == GameState.START
    assert result.obstacles == []
    assert ctx.score == 0

    result = update(ctx, START)
    assert result.state == GameState.PLAYING
    assert EventType.RUN_STARTED in event_types(result)


def test_playing_frame_scores_and_counts(ctx):
    result = update(ctx, IDLE)
    assert result.state == GameState.PLAYING
    assert result.score == pytest.approx(0.1)
    assert ctx.run_frames == 1
    assert result.frame == 1


def test_pause_freezes_the_run(ctx):
    update(ctx, IDLE)
    result = update(ctx, PAUSE)
    assert result.state == GameState.PAUSED

    for _ in range(10):
        result = update(ctx, IDLE)
    assert result.score == pytest.approx(0.1)
    assert ctx.run_frames == 1

    result = update(ctx, PAUSE)
    assert result.state == GameState.PLAYING


def test_tree_hit_once_through_update(ctx):
    ctx.registry.add(Tree(x=150, y=400, width=60, height=150))

    update(ctx, IDLE)
    assert ctx.player.health == 75
    update(ctx, IDLE)
    assert ctx.player.health == 75


def test_empty_tank_ends_run(ctx):
    ctx.player.fuel = 0.05
    ctx.fuel_timer = 4

    result = update(ctx, IDLE)

    assert result.state == GameState.GAMEOVER
    assert result.player.fuel == 0
    assert result.player.health == 100
    ended = [e for e in result.events if e.type == EventType.RUN_ENDED]
    assert ended[0].data["reason"] == "out of fuel"


def test_zero_health_ends_run(ctx):
    ctx.player.health = 25
    ctx.registry.add(Tree(x=150, y=400, width=60, height=150))

    result = update(ctx, IDLE)

    assert result.state == GameState.GAMEOVER
    assert result.player.health == 0
    assert result.player.fuel > 0


def test_game_over_ignores_input_until_restart(ctx):
    ctx.player.fuel = 0.05
    ctx.fuel_timer = 4
    update(ctx, IDLE)

    for snapshot in (IDLE, START, PAUSE, InputSnapshot(jump=True)):
        assert update(ctx, snapshot).state == GameState.GAMEOVER

    result = update(ctx, RESTART)
    assert result.state == GameState.PLAYING
    assert result.score == 0
    assert result.player.health == 100
    assert result.player.fuel == 100
    assert result.player.speed == CLASSIC.base_speed
    assert result.obstacles == []
    assert ctx.state.context.run_count == 2


def test_score_threshold_starts_boss(make_ctx):
    ctx = make_ctx(rules=TRANSFORMER)
    ctx.score = 499.95

    result = update(ctx, IDLE)

    assert result.state == GameState.BOSS
    assert result.boss is not None
    assert result.boss.health == 100
    assert result.player.transformed
    assert EventType.BOSS_STARTED in event_types(result)

    assert update(ctx, IDLE).state == GameState.BOSS


def test_classic_has_no_boss(ctx):
    ctx.score = 999.95
    assert update(ctx, IDLE).state == GameState.PLAYING


def test_defeating_boss_is_victory(make_ctx):
    ctx = make_ctx(rules=TRANSFORMER)
    ctx.score = 499.95
    update(ctx, IDLE)

    boss = ctx.boss
    boss.health = 5
    ctx.registry.add_laser(Laser(
        x=boss.x + 10, y=boss.y + 10, vx=0, vy=0, owner=LaserOwner.PLAYER,
    ))

    result = update(ctx, IDLE)

    assert result.state == GameState.VICTORY
    assert result.high_score == 500
    assert EventType.NEW_HIGH_SCORE in event_types(result)


def test_fuel_does_not_burn_during_boss(make_ctx):
    ctx = make_ctx(rules=TRANSFORMER)
    ctx.score = 499.95
    update(ctx, IDLE)
    fuel = ctx.player.fuel

    for _ in range(30):
        update(ctx, InputSnapshot(left=True))
    assert ctx.player.fuel == fuel
    assert ctx.score == pytest.approx(500.05)


@pytest.mark.parametrize("rules", [CLASSIC, RALLY, TRANSFORMER])
def test_health_and_fuel_stay_in_range(rules):
    ctx = initialize(1200, 600, rules, rng=random.Random(7))
    inputs = random.Random(99)
    update(ctx, START)

    for frame in range(3000):
        snapshot = InputSnapshot(
            jump=inputs.random() < 0.2,
            up=inputs.random() < 0.2,
            down=inputs.random() < 0.2,
            left=inputs.random() < 0.2,
            right=inputs.random() < 0.2,
            fire=inputs.random() < 0.1,
            restart=True,
            pointer=(inputs.random() * 1200, inputs.random() * 600),
        )
        result = update(ctx, snapshot)
        assert 0 <= result.player.health <= 100
        assert 0 <= result.player.fuel <= 100


def test_same_seed_same_run():
    def play(seed):
        ctx = initialize(1200, 600, CLASSIC, rng=random.Random(seed))
        update(ctx, START)
        for _ in range(600):
            update(ctx, InputSnapshot(jump=True))
        return [(type(e).__name__, round(e.x, 3)) for e in ctx.registry.obstacles], ctx.player.health

    assert play(5) == play(5)


def test_initialize_rejects_empty_viewport():
    with pytest.raises(ValueError):
        initialize(0, 600, CLASSIC)


def test_supplied_player_is_used_for_every_run():
    car = Player(x=40, y=0, width=50, height=30, health=60, fuel=70)
    ctx = initialize(1200, 600, CLASSIC, rng=random.Random(1), player=car)

    result = update(ctx, START)
    assert result.state == GameState.PLAYING
    assert (result.player.x, result.player.width, result.player.height) == (40, 50, 30)
    assert result.player.health == 60
    assert result.player.fuel == 70
    assert result.player.y == 450

    # Damage in one run does not leak into the next
    ctx.spawn_timers = [float("inf")]
    ctx.player.health = 0
    assert update(ctx, IDLE).state == GameState.GAMEOVER
    result = update(ctx, RESTART)
    assert result.player.health == 60
    assert car.health == 60


def test_kept_result_does_not_change_on_later_frames(ctx):
    ctx.registry.add(Tree(x=900, y=400, width=60, height=150))
    first = update(ctx, InputSnapshot(jump=True))
    player_y = first.player.y
    tree_x = first.obstacles[0].x

    for _ in range(5):
        update(ctx, IDLE)

    assert first.player.y == player_y
    assert first.obstacles[0].x == tree_x
    assert ctx.player.y != player_y
    assert ctx.registry.obstacles[0].x != tree_x


def test_engine_publishes_events_and_saves_high_score():
    store = MemoryHighScoreStore(10)
    engine = GameEngine(CLASSIC, 1200, 600, store=store, rng=random.Random(3))
    assert engine.ctx.high_score == 10

    ended = []
    engine.event_bus.subscribe(EventType.RUN_ENDED, ended.append)

    engine.step(START)
    engine.ctx.spawn_timers = [float("inf")]
    engine.ctx.score = 42.45
    engine.ctx.player.fuel = 0.05
    engine.ctx.fuel_timer = 4
    result = engine.step()

    assert result.state == GameState.GAMEOVER
    assert engine.state == GameState.GAMEOVER
    assert ended and ended[0].data["score"] == 42
    assert store.load() == 42


def test_engine_keeps_running_when_save_fails():
    class BrokenStore(MemoryHighScoreStore):
        def save(self, score):
            raise OSError("disk full")

    engine = GameEngine(CLASSIC, 1200, 600, store=BrokenStore(), rng=random.Random(3))
    engine.step(START)
    engine.ctx.spawn_timers = [float("inf")]
    engine.ctx.score = 10.0
    engine.ctx.player.fuel = 0.05
    engine.ctx.fuel_timer = 4

    result = engine.step()
    assert result.state == GameState.GAMEOVER
    assert result.high_score == 10
