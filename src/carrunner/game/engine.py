"""Frame update for the car runner.

``update`` advances a simulation context by exactly one fixed frame and
returns what a host needs to draw it. The host decides how often to
call it; ``GameEngine`` wraps a context together with an event bus and
a high score store for hosts that want both.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional
import logging
import math
import random

from carrunner.animation.particles import FloatingText, Particle
from carrunner.core.events import Event, EventBus, EventType
from carrunner.core.state import GameState
from carrunner.game.boss import BossStatus, init_boss_mode, update_boss
from carrunner.game.collisions import resolve_collisions
from carrunner.game.context import SimulationContext, initialize, reset_run
from carrunner.game.entities import Boss, Entity, Laser, Player
from carrunner.game.highscore import HighScoreStore, MemoryHighScoreStore
from carrunner.game.input import IDLE, InputSnapshot
from carrunner.game.physics import update_player, update_world
from carrunner.game.rules import RunnerRules
from carrunner.game.spawner import update_spawning
from carrunner.game.status import apply_speed_milestones, burn_fuel, tick_statuses

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Snapshot handed to the host after every frame.

    Player, boss and entities are copies, so a kept result does not change
    when the simulation advances.
    """

    state: GameState
    frame: int
    player: Player
    boss: Optional[Boss]
    obstacles: List[Entity]
    particles: List[Particle]
    texts: List[FloatingText]
    lasers: List[Laser]
    boss_lasers: List[Laser]
    score: float
    high_score: int
    events: List[Event] = field(default_factory=list)


def update(ctx: SimulationContext, inputs: InputSnapshot = IDLE) -> FrameResult:
    """Advance the simulation by one frame."""
    ctx.events = []
    ctx.frame += 1
    state = ctx.state.state

    if state == GameState.START:
        if inputs.start:
            _start_run(ctx, "start")
    elif state == GameState.PLAYING:
        _step_playing(ctx, inputs)
    elif state == GameState.PAUSED:
        if inputs.pause:
            _transition(ctx, GameState.PLAYING, "resumed")
    elif state == GameState.BOSS:
        _step_boss(ctx, inputs)
    elif ctx.state.is_run_over:
        if inputs.restart:
            _start_run(ctx, "restart")

    return _snapshot(ctx)


def _snapshot(ctx: SimulationContext) -> FrameResult:
    registry = ctx.registry
    return FrameResult(
        state=ctx.state.state,
        frame=ctx.frame,
        player=replace(ctx.player),
        boss=replace(ctx.boss) if ctx.boss is not None else None,
        obstacles=[replace(entity) for entity in registry.obstacles],
        particles=[replace(particle) for particle in registry.particles],
        texts=[replace(text) for text in registry.texts],
        lasers=[replace(laser) for laser in registry.lasers],
        boss_lasers=[replace(laser) for laser in registry.boss_lasers],
        score=ctx.score,
        high_score=ctx.high_score,
        events=list(ctx.events),
    )


def _transition(ctx: SimulationContext, to_state: GameState, reason: str) -> bool:
    from_state = ctx.state.state
    if not ctx.state.transition(to_state, reason):
        return False
    ctx.emit(
        EventType.STATE_CHANGED,
        source="state",
        from_state=from_state.value,
        to_state=to_state.value,
        reason=reason,
    )
    return True


def _start_run(ctx: SimulationContext, reason: str) -> None:
    reset_run(ctx)
    if _transition(ctx, GameState.PLAYING, reason):
        ctx.emit(EventType.RUN_STARTED, run=ctx.state.context.run_count)
        logger.info(f"Run {ctx.state.context.run_count} started ({ctx.rules.name})")


def _end_run(ctx: SimulationContext, to_state: GameState, reason: str) -> None:
    if not _transition(ctx, to_state, reason):
        return

    final = int(math.floor(ctx.score))
    if final > ctx.high_score:
        ctx.high_score = final
        ctx.emit(EventType.NEW_HIGH_SCORE, score=final)
        logger.info(f"New high score: {final}")

    ctx.emit(
        EventType.RUN_ENDED,
        score=final,
        reason=reason,
        victory=to_state == GameState.VICTORY,
    )
    logger.info(f"Run ended: {reason}, score {final}")


def _step_playing(ctx: SimulationContext, inputs: InputSnapshot) -> None:
    if inputs.pause:
        _transition(ctx, GameState.PAUSED, "paused")
        return

    rules = ctx.rules
    player = ctx.player
    ctx.run_frames += 1

    update_spawning(ctx)
    update_player(ctx, inputs)
    update_world(ctx)
    resolve_collisions(ctx)
    tick_statuses(ctx)

    ctx.score += rules.score_per_frame
    apply_speed_milestones(ctx)
    burn_fuel(ctx)

    ctx.registry.compact()

    if player.health <= 0:
        _end_run(ctx, GameState.GAMEOVER, "health depleted")
    elif player.fuel <= 0:
        _end_run(ctx, GameState.GAMEOVER, "out of fuel")
    elif rules.boss_threshold is not None and ctx.score >= rules.boss_threshold:
        _start_boss(ctx)


def _start_boss(ctx: SimulationContext) -> None:
    if not _transition(ctx, GameState.BOSS, "boss threshold reached"):
        return
    boss = init_boss_mode(ctx)
    ctx.emit(EventType.BOSS_STARTED, health=boss.health, score=ctx.score)


def _step_boss(ctx: SimulationContext, inputs: InputSnapshot) -> None:
    status = update_boss(ctx, inputs)
    if status is BossStatus.DEFEATED:
        _end_run(ctx, GameState.VICTORY, "boss defeated")
    elif status is BossStatus.PLAYER_DEFEATED:
        _end_run(ctx, GameState.GAMEOVER, "transformer destroyed")


class GameEngine:
    """
    A simulation context wired to an event bus and a high score store.

    Each ``step`` publishes the frame's events on the bus and persists
    the high score when a run ends above the stored one.
    """

    def __init__(
        self,
        rules: RunnerRules,
        width: float,
        height: float,
        store: HighScoreStore | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store or MemoryHighScoreStore()
        self.event_bus = event_bus or EventBus()
        self.ctx = initialize(width, height, rules, rng=rng, high_score=self.store.load())

    @property
    def state(self) -> GameState:
        return self.ctx.state.state

    @property
    def rules(self) -> RunnerRules:
        return self.ctx.rules

    def step(self, inputs: InputSnapshot = IDLE) -> FrameResult:
        """Advance one frame and publish what happened."""
        result = update(self.ctx, inputs)
        self.event_bus.emit_all(result.events)

        if any(event.type == EventType.NEW_HIGH_SCORE for event in result.events):
            self._persist_high_score()

        return result

    def _persist_high_score(self) -> None:
        try:
            self.store.save(self.ctx.high_score)
        except OSError:
            logger.warning(f"High score {self.ctx.high_score} kept in memory only")
