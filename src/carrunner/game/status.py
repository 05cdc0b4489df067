"""Timed power-ups, speed progression and fuel burn."""

import logging
import math

from carrunner.core.events import EventType
from carrunner.game.context import SimulationContext

logger = logging.getLogger(__name__)


def tick_statuses(ctx: SimulationContext) -> list[str]:
    """Count every active status down by one frame.

    Turbo pins the speed to the recorded pre-turbo value times the
    multiplier while it runs and restores that recorded value exactly when
    it runs out. Returns the names of the statuses that expired.
    """
    player = ctx.player
    expired = []

    if player.shield_timer > 0:
        player.shield_timer -= 1
        if player.shield_timer == 0:
            expired.append("shield")

    if player.rocket_timer > 0:
        player.rocket_timer -= 1
        if player.rocket_timer == 0:
            expired.append("rocket")

    if player.turbo_timer > 0:
        player.speed = player.pre_turbo_speed * ctx.rules.turbo_multiplier
        player.turbo_timer -= 1
        if player.turbo_timer == 0:
            player.speed = player.pre_turbo_speed
            expired.append("turbo")

    for status in expired:
        logger.debug(f"{status} expired (speed {player.speed:.2f})")
        ctx.emit(EventType.STATUS_EXPIRED, status=status, speed=player.speed)

    return expired


def apply_speed_milestones(ctx: SimulationContext) -> bool:
    """Raise the scroll speed once per score milestone crossed.

    Milestones reached while turbo is active are consumed without a speed
    change, so the turbo revert lands on the recorded value.
    """
    milestone = int(math.floor(ctx.score / ctx.rules.speed_milestone))
    if milestone <= ctx.speed_level:
        return False

    ctx.speed_level = milestone
    if ctx.player.turbo_active:
        return False

    ctx.player.speed += ctx.rules.speed_increment
    ctx.emit(EventType.SPEED_UP, speed=ctx.player.speed, milestone=milestone)
    return True


def burn_fuel(ctx: SimulationContext) -> None:
    """Drain the tank by the variant's decay every decay interval."""
    ctx.fuel_timer += 1
    if ctx.fuel_timer >= ctx.rules.fuel_decay_interval:
        ctx.fuel_timer = 0
        ctx.player.add_fuel(-ctx.rules.fuel_decay)
