"""Timer-driven weighted-random spawning.

Each spawn stream of the variant counts down once per frame. When a
countdown runs out a single uniform roll picks the entity kind from the
stream's cumulative bands, the entity is placed at the right edge of the
world, and the countdown restarts from a randomized interval that
tightens with difficulty. Clouds come from an independent second roll.
"""

import logging
import math

from carrunner.game.context import SimulationContext, ground_top
from carrunner.game.entities import (
    Cloud,
    Entity,
    EntityKind,
    FuelPickup,
    Pothole,
    Rock,
    RocketPickup,
    ShieldPickup,
    Tree,
    TurboPickup,
    Ufo,
)
from carrunner.game.rules import SpawnStream

logger = logging.getLogger(__name__)


def update_spawning(ctx: SimulationContext) -> None:
    """Advance every spawn stream by one frame."""
    if ctx.player is None or not ctx.spawn_timers:
        return

    for index, stream in enumerate(ctx.rules.streams):
        ctx.spawn_timers[index] -= 1
        if ctx.spawn_timers[index] > 0:
            continue

        _roll_stream(ctx, stream)
        ctx.spawn_timers[index] = stream.interval(ctx.rng.random(), ctx.run_frames)


def _roll_stream(ctx: SimulationContext, stream: SpawnStream) -> None:
    kind = stream.pick(ctx.rng.random())
    if kind is not None:
        entity = spawn_entity(ctx, kind)
        ctx.registry.add(entity)
        logger.debug(f"Spawned {kind.value} at x={entity.x:.0f} y={entity.y:.0f}")

    if stream.cloud_chance and ctx.rng.random() < stream.cloud_chance:
        ctx.registry.add(spawn_entity(ctx, EntityKind.CLOUD))


def spawn_entity(ctx: SimulationContext, kind: EntityKind) -> Entity:
    """Build one entity of ``kind`` at the world's right edge."""
    rng = ctx.rng
    s = ctx.scale
    w, h = ctx.width, ctx.height
    road_height = 110 * s

    if kind is EntityKind.TREE:
        height = (80 + rng.random() * 120) * s
        return Tree(
            x=w, y=h - 30 * s - height,
            width=60 * s, height=height,
            trunk_ratio=rng.random(),
        )

    if kind is EntityKind.POTHOLE:
        width = 110 * s + rng.random() * 50 * s
        height = 45 * s + rng.random() * 20 * s
        return Pothole(
            x=w, y=h - road_height + 10 * s,
            width=width, height=height,
            points=pothole_outline(ctx, width, height),
        )

    if kind is EntityKind.UFO:
        return Ufo(
            x=w + 80 * s, y=-100 * s,
            width=90 * s, height=45 * s,
            dx=-3 * s,
            dy=2 + rng.random(),
            target_y=h - 200 * s - 45 * s,
            scrolls=ctx.rules.ufo_scrolls,
        )

    if kind is EntityKind.CLOUD:
        return Cloud(
            x=w, y=180 * s + rng.random() * 60 * s,
            width=90 * s, height=50 * s,
        )

    if kind is EntityKind.ROCK:
        return Rock(
            x=w + 80 * s, y=h - 140 * s,
            width=60 * s, height=40 * s,
        )

    size = 50 * s
    if kind is EntityKind.FUEL:
        return FuelPickup(x=w, y=_pickup_y(ctx, size, high=True), width=size, height=size)
    if kind is EntityKind.TURBO:
        return TurboPickup(x=w, y=_pickup_y(ctx, size), width=size, height=size)
    if kind is EntityKind.SHIELD:
        return ShieldPickup(x=w, y=_pickup_y(ctx, size), width=size, height=size)
    if kind is EntityKind.ROCKET:
        return RocketPickup(x=w, y=_pickup_y(ctx, size, high=True), width=size, height=size)

    raise TypeError(f"Cannot spawn unknown entity kind: {kind!r}")


def _pickup_y(ctx: SimulationContext, size: float, high: bool = False) -> float:
    # Pickups sit inside the car's resting box so driving through collects them
    rest = ground_top(ctx) + ctx.player.height
    lift = 40 * ctx.scale if high else 0.0
    return rest - size - 20 * ctx.scale - lift


def pothole_outline(ctx: SimulationContext, width: float, height: float) -> list[tuple[float, float]]:
    """Amoeba outline: 14-18 points at 80-120% of the half extents."""
    rng = ctx.rng
    count = 14 + int(rng.random() * 5)
    points = []
    for i in range(count):
        angle = (math.pi * 2 / count) * i
        rx = (width / 2) * (0.8 + rng.random() * 0.4)
        ry = (height / 2) * (0.8 + rng.random() * 0.4)
        points.append((width / 2 + math.cos(angle) * rx, height / 2 + math.sin(angle) * ry))
    return points
