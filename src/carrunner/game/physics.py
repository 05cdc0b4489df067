"""Per-frame motion: player integration and world scrolling."""

import logging

from carrunner.animation.particles import floating_text, spawn_dust, update_timed
from carrunner.core.events import EventType
from carrunner.game.context import SimulationContext, ground_top
from carrunner.game.entities import (
    Cloud,
    Entity,
    FuelPickup,
    Pothole,
    Rock,
    RocketPickup,
    ShieldPickup,
    Tree,
    TurboPickup,
    Ufo,
    UfoPhase,
    clamp,
)
from carrunner.game.input import InputSnapshot

logger = logging.getLogger(__name__)

TREE_FALL_STEP = 3.0     # degrees per frame
TREE_FALL_MAX = 90.0
UFO_FOLLOW_STEP = 1.0    # px per frame
UFO_SPIN_STEP = 15.0     # degrees per frame
UFO_SPIN_CLIMB = 4.0     # px per frame


def update_player(ctx: SimulationContext, inputs: InputSnapshot) -> None:
    """Integrate the runner's vertical motion for one frame."""
    player = ctx.player
    rules = ctx.rules
    ground = ground_top(ctx)

    if player.flying:
        # Direct vertical control, no gravity
        step = rules.flight_speed * ctx.scale
        if inputs.up:
            player.y -= step
        if inputs.down:
            player.y += step
        player.y = clamp(player.y, 0.0, ground)
        player.dy = 0.0
        player.jumping = False
        player.on_ground = player.y >= ground
        return

    if inputs.jump and player.on_ground:
        player.dy = rules.jump_strength * ctx.scale
        player.on_ground = False
        player.jumping = True
        player.jump_hold = 0
    elif not inputs.jump:
        player.jumping = False

    if player.on_ground:
        # Stay glued to the road, including over rolling terrain
        player.y = ground
        player.dy = 0.0
        return

    player.dy += rules.gravity * ctx.scale if rules.gravity_scales else rules.gravity
    if player.jumping and player.jump_hold < rules.max_jump_hold:
        player.dy += rules.jump_strength * ctx.scale * rules.jump_hold_factor
        player.jump_hold += 1
    player.y += player.dy

    if player.y >= ground:
        player.y = ground
        player.dy = 0.0
        player.on_ground = True
        player.jumping = False
        _on_landing(ctx, ground)


def _on_landing(ctx: SimulationContext, ground: float) -> None:
    player = ctx.player
    cx = player.x + player.width / 2
    ctx.registry.add_particles(spawn_dust(ctx.rng, cx, ground + player.height, ctx.scale))
    if ctx.rules.landing_text:
        ctx.registry.add_text(floating_text(
            ctx.rules.landing_text, cx, ground,
            color=(255, 255, 255), decay=ctx.rules.text_decay, dy=-0.7,
        ))
    ctx.emit(EventType.PLAYER_LANDED, x=cx, y=ground)


def update_world(ctx: SimulationContext) -> None:
    """Scroll every world entity left and mark the ones that left the view."""
    speed = ctx.player.speed
    for entity in ctx.registry.live_obstacles():
        move_entity(ctx, entity, speed)
        if entity.right < 0 or entity.bottom < -ctx.height:
            entity.expired = True
        elif isinstance(entity, Ufo) and entity.phase is UfoPhase.SPIN and entity.bottom < 0:
            entity.expired = True

    update_timed(ctx.registry.particles)
    update_timed(ctx.registry.texts)
    ctx.distance += speed * ctx.rules.world_speed_factor


def move_entity(ctx: SimulationContext, entity: Entity, speed: float) -> None:
    """Advance one entity by one frame according to its kind."""
    scroll = speed * ctx.rules.world_speed_factor

    if isinstance(entity, Tree):
        entity.x -= scroll
        if entity.hit and entity.fall_angle < TREE_FALL_MAX:
            entity.fall_angle = min(TREE_FALL_MAX, entity.fall_angle + TREE_FALL_STEP)
    elif isinstance(entity, Ufo):
        _move_ufo(ctx, entity, scroll)
    elif isinstance(entity, Cloud):
        entity.x -= speed * ctx.rules.cloud_speed_factor
    elif isinstance(entity, (Pothole, Rock, FuelPickup, TurboPickup, ShieldPickup, RocketPickup)):
        entity.x -= scroll
    else:
        raise TypeError(f"No motion rule for {type(entity).__name__}")


def _move_ufo(ctx: SimulationContext, ufo: Ufo, scroll: float) -> None:
    if ufo.scrolls:
        ufo.x -= scroll
    ufo.x += ufo.dx

    if ufo.phase is UfoPhase.SWOOP:
        ufo.y += ufo.dy
        if ufo.y >= ufo.target_y:
            ufo.y = ufo.target_y
            ufo.dy = 0.0
            ufo.phase = UfoPhase.FOLLOW
    elif ufo.phase is UfoPhase.FOLLOW:
        _, player_cy = ctx.player.center
        offset = player_cy - (ufo.y + ufo.height / 2)
        ufo.y += clamp(offset, -UFO_FOLLOW_STEP, UFO_FOLLOW_STEP)
    else:
        ufo.spin_angle = (ufo.spin_angle + UFO_SPIN_STEP) % 360
        ufo.y -= UFO_SPIN_CLIMB
