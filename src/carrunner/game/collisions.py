"""Player-versus-world collision resolution.

Every live entity is tested against the player's box once per frame.
The first overlap flips the entity's ``hit`` flag and applies the
kind-specific effect; an entity whose flag is already set never applies
an effect again, however many frames it keeps overlapping.

Entities are resolved in registry order against the live status, so a
shield picked up earlier in the loop already protects later entities in
the same frame.
"""

from dataclasses import dataclass, field
from typing import List
import logging

from carrunner.animation.particles import floating_text
from carrunner.core.events import EventType
from carrunner.game.context import SimulationContext
from carrunner.game.entities import (
    Cloud,
    Entity,
    EntityKind,
    FuelPickup,
    Player,
    Pothole,
    Rock,
    RocketPickup,
    ShieldPickup,
    Tree,
    TurboPickup,
    Ufo,
    UfoPhase,
)

logger = logging.getLogger(__name__)

PICKUP_TEXT_COLOR = (255, 255, 0)
SHIELD_TEXT_COLOR = (0, 255, 255)


@dataclass
class CollisionReport:
    """Status deltas produced by one resolution pass."""

    health_delta: float = 0.0
    fuel_delta: float = 0.0
    hits: List[EntityKind] = field(default_factory=list)
    absorbed: List[EntityKind] = field(default_factory=list)
    collected: List[EntityKind] = field(default_factory=list)

    @property
    def touched(self) -> int:
        return len(self.hits) + len(self.absorbed) + len(self.collected)


def boxes_overlap(
    ax: float, ay: float, aw: float, ah: float,
    bx: float, by: float, bw: float, bh: float,
    buffer: float = 0.0,
) -> bool:
    """Axis-aligned overlap with the second box shrunk by ``buffer``."""
    return (
        ax < bx + bw - buffer
        and ax + aw > bx + buffer
        and ay < by + bh - buffer
        and ay + ah > by + buffer
    )


def player_overlaps(player: Player, entity: Entity, buffer: float = 0.0) -> bool:
    return boxes_overlap(
        player.x, player.y, player.width, player.height,
        entity.x, entity.y, entity.width, entity.height,
        buffer,
    )


def resolve_collisions(ctx: SimulationContext) -> CollisionReport:
    """Apply at most one effect per entity for the current overlaps."""
    report = CollisionReport()
    player = ctx.player
    buffer = ctx.rules.collision_buffer * ctx.scale

    for entity in ctx.registry.live_obstacles():
        if entity.hit or isinstance(entity, Cloud):
            continue
        if not player_overlaps(player, entity, buffer):
            continue
        _apply_effect(ctx, entity, report)

    return report


def _apply_effect(ctx: SimulationContext, entity: Entity, report: CollisionReport) -> None:
    entity.hit = True

    if isinstance(entity, (Tree, Pothole, Rock, Ufo)):
        _apply_damage(ctx, entity, report)
    elif isinstance(entity, FuelPickup):
        _collect_fuel(ctx, entity, report)
    elif isinstance(entity, TurboPickup):
        _collect_turbo(ctx, entity, report)
    elif isinstance(entity, ShieldPickup):
        _collect_shield(ctx, entity, report)
    elif isinstance(entity, RocketPickup):
        _collect_rocket(ctx, entity, report)
    else:
        raise TypeError(f"No collision rule for {type(entity).__name__}")


def _apply_damage(ctx: SimulationContext, entity: Entity, report: CollisionReport) -> None:
    player = ctx.player
    rules = ctx.rules

    if isinstance(entity, Ufo):
        entity.phase = UfoPhase.SPIN

    if player.shield_active:
        report.absorbed.append(entity.kind)
        ctx.registry.add_text(floating_text(
            "Shield block!", player.x, player.y,
            color=SHIELD_TEXT_COLOR, decay=0.03, dy=-1.0,
        ))
        ctx.emit(EventType.HIT_ABSORBED, kind=entity.kind.value, by="shield")
        return

    # UFOs stay hazardous in flight
    if player.flying and rules.rocket_blocks_damage and not isinstance(entity, Ufo):
        report.absorbed.append(entity.kind)
        ctx.emit(EventType.HIT_ABSORBED, kind=entity.kind.value, by="rocket")
        return

    before = player.health
    player.damage(rules.damage)
    report.health_delta += player.health - before
    report.hits.append(entity.kind)
    ctx.emit(EventType.OBSTACLE_HIT, kind=entity.kind.value, health=player.health)
    logger.debug(f"Hit {entity.kind.value}, health {player.health:.0f}")


def _collect(ctx: SimulationContext, entity: Entity, report: CollisionReport) -> None:
    # One-shot pickups leave the world in the same frame
    entity.expired = True
    report.collected.append(entity.kind)
    label = ctx.rules.labels.get(entity.kind, entity.kind.value)
    ctx.registry.add_text(floating_text(
        label, entity.x, entity.y,
        color=PICKUP_TEXT_COLOR, decay=ctx.rules.text_decay,
    ))
    ctx.emit(EventType.PICKUP_COLLECTED, kind=entity.kind.value)
    logger.debug(f"Collected {entity.kind.value}")


def _collect_fuel(ctx: SimulationContext, entity: FuelPickup, report: CollisionReport) -> None:
    player = ctx.player
    before = player.fuel
    player.add_fuel(ctx.rules.fuel_pickup)
    report.fuel_delta += player.fuel - before
    _collect(ctx, entity, report)


def _collect_turbo(ctx: SimulationContext, entity: TurboPickup, report: CollisionReport) -> None:
    player = ctx.player
    if not player.turbo_active:
        # A refresh keeps the speed recorded by the first pickup
        player.pre_turbo_speed = player.speed
    player.turbo_timer = ctx.rules.turbo_frames
    _collect(ctx, entity, report)
    ctx.emit(EventType.STATUS_STARTED, status="turbo", frames=player.turbo_timer)


def _collect_shield(ctx: SimulationContext, entity: ShieldPickup, report: CollisionReport) -> None:
    ctx.player.shield_timer = ctx.rules.shield_frames
    _collect(ctx, entity, report)
    ctx.emit(EventType.STATUS_STARTED, status="shield", frames=ctx.player.shield_timer)


def _collect_rocket(ctx: SimulationContext, entity: RocketPickup, report: CollisionReport) -> None:
    ctx.player.rocket_timer = ctx.rules.rocket_frames
    _collect(ctx, entity, report)
    ctx.emit(EventType.STATUS_STARTED, status="rocket", frames=ctx.player.rocket_timer)
