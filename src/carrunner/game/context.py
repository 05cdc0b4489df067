"""Simulation context: everything one run of the game owns."""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional
import logging
import math
import random

from carrunner.core.events import Event, EventType
from carrunner.core.state import StateMachine
from carrunner.game.entities import Boss, Player
from carrunner.game.registry import EntityRegistry
from carrunner.game.rules import RunnerRules

logger = logging.getLogger(__name__)

REFERENCE_WIDTH = 1200.0


@dataclass
class SimulationContext:
    """Explicit simulation state passed into every step.

    Nothing lives at module level, so independent simulations can run side
    by side and a seeded ``rng`` makes a run reproducible.
    """

    width: float
    height: float
    rules: RunnerRules
    rng: random.Random
    player: Player
    state: StateMachine = field(default_factory=StateMachine)
    registry: EntityRegistry = field(default_factory=EntityRegistry)
    boss: Optional[Boss] = None
    initial_player: Optional[Player] = None  # template for every new run

    score: float = 0.0
    high_score: int = 0

    frame: int = 0        # frames ticked since initialize
    run_frames: int = 0   # frames played this run (difficulty counter)
    distance: float = 0.0
    fuel_timer: int = 0
    speed_level: int = 0  # last score milestone applied to speed
    spawn_timers: List[float] = field(default_factory=list)

    events: List[Event] = field(default_factory=list)

    @property
    def scale(self) -> float:
        return self.width / REFERENCE_WIDTH

    def emit(self, event_type: EventType, source: str = "engine", **data: Any) -> None:
        """Record an event for this frame."""
        self.events.append(Event(event_type, data=data, source=source, frame=self.frame))


def ground_top(ctx: SimulationContext, offset_x: float = 0.0) -> float:
    """Y of the player's top edge when resting on the ground.

    Flat for most variants; ``terrain_amplitude`` adds rolling hills that
    scroll with the distance travelled.
    """
    rules = ctx.rules
    y = ctx.height - rules.ground_offset * ctx.scale
    if rules.terrain_amplitude:
        phase = (ctx.player.x + offset_x + ctx.distance) * rules.terrain_frequency
        y -= math.sin(phase) * rules.terrain_amplitude * ctx.scale
    return y


def make_player(width: float, height: float, rules: RunnerRules) -> Player:
    scale = width / REFERENCE_WIDTH
    return Player(
        x=rules.player_x * scale,
        y=height - rules.ground_offset * scale,
        width=rules.player_width * scale,
        height=rules.player_height * scale,
        speed=rules.base_speed,
        pre_turbo_speed=rules.base_speed,
    )


def initialize(
    width: float,
    height: float,
    rules: RunnerRules,
    rng: random.Random | None = None,
    high_score: int = 0,
    player: Player | None = None,
) -> SimulationContext:
    """Create a fresh simulation on the title screen."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Viewport must be positive, got {width}x{height}")

    ctx = SimulationContext(
        width=width,
        height=height,
        rules=rules,
        rng=rng or random.Random(),
        player=replace(player) if player is not None else make_player(width, height, rules),
        high_score=high_score,
        initial_player=replace(player) if player is not None else None,
    )
    ctx.spawn_timers = [stream.initial_delay for stream in rules.streams]
    ctx.player.y = ground_top(ctx)
    logger.info(f"Simulation initialized: {rules.name} {width:.0f}x{height:.0f}")
    return ctx


def reset_run(ctx: SimulationContext) -> None:
    """Reset all per-run state; rules, rng and high score survive."""
    if ctx.initial_player is not None:
        ctx.player = replace(ctx.initial_player)
    else:
        ctx.player = make_player(ctx.width, ctx.height, ctx.rules)
    ctx.registry.clear()
    ctx.boss = None
    ctx.score = 0.0
    ctx.run_frames = 0
    ctx.distance = 0.0
    ctx.fuel_timer = 0
    ctx.speed_level = 0
    ctx.spawn_timers = [stream.initial_delay for stream in ctx.rules.streams]
    ctx.player.y = ground_top(ctx)
