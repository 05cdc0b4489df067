"""Boss battle sub-mode.

Once the transformer reaches the score threshold the runner loop hands
over to this simpler loop: the player moves freely and shoots aimed
lasers at a mothership that patrols the top of the screen and fires
straight down on a fixed cooldown.
"""

from enum import Enum
import logging
import math

from carrunner.core.events import EventType
from carrunner.game.context import SimulationContext
from carrunner.game.entities import Boss, Laser, LaserOwner, Player, clamp
from carrunner.game.input import InputSnapshot

logger = logging.getLogger(__name__)

PLAYER_MOVE_SPEED = 7.0
PLAYER_WIDTH = 120.0
PLAYER_HEIGHT = 150.0
PLAYER_LASER_SPEED = 15.0
PLAYER_LASER_DAMAGE = 5.0
MAX_PLAYER_LASERS = 10

BOSS_LASER_SPEED = 8.0
BOSS_LASER_DAMAGE = 10.0
BOSS_COOLDOWN = 60


class BossStatus(Enum):
    ACTIVE = "active"
    DEFEATED = "defeated"
    PLAYER_DEFEATED = "player_defeated"


def init_boss_mode(ctx: SimulationContext) -> Boss:
    """Create a full-health boss and transform the player."""
    ctx.boss = Boss(x=ctx.width / 2, y=150.0)

    player = ctx.player
    player.transformed = True
    player.health = player.max_health
    player.x = ctx.width / 2
    player.y = ctx.height - 200
    player.width = PLAYER_WIDTH
    player.height = PLAYER_HEIGHT
    player.dy = 0.0
    player.jumping = False
    player.on_ground = False
    player.rocket_timer = 0

    # The runner world is left behind
    ctx.registry.clear()
    logger.info(f"Boss mode initiated at score {ctx.score:.0f}")
    return ctx.boss


def fire_laser(ctx: SimulationContext, target: tuple[float, float]) -> Laser | None:
    """Shoot one laser from the player's nose toward ``target``."""
    if len(ctx.registry.lasers) >= MAX_PLAYER_LASERS:
        return None

    player = ctx.player
    x = player.x + player.width / 2
    y = player.y
    angle = math.atan2(target[1] - y, target[0] - x)
    laser = Laser(
        x=x, y=y,
        vx=math.cos(angle) * PLAYER_LASER_SPEED,
        vy=math.sin(angle) * PLAYER_LASER_SPEED,
        owner=LaserOwner.PLAYER,
    )
    ctx.registry.add_laser(laser)
    ctx.emit(EventType.LASER_FIRED, x=x, y=y)
    return laser


def _overlaps(laser: Laser, x: float, y: float, width: float, height: float) -> bool:
    return (
        laser.x < x + width
        and laser.x + laser.width > x
        and laser.y < y + height
        and laser.y + laser.height > y
    )


def _move_player(ctx: SimulationContext, player: Player, inputs: InputSnapshot) -> None:
    if inputs.up:
        player.y -= PLAYER_MOVE_SPEED
    if inputs.down:
        player.y += PLAYER_MOVE_SPEED
    if inputs.left:
        player.x -= PLAYER_MOVE_SPEED
    if inputs.right:
        player.x += PLAYER_MOVE_SPEED
    player.x = clamp(player.x, 0.0, ctx.width - player.width)
    player.y = clamp(player.y, 0.0, ctx.height - player.height)


def _move_boss(ctx: SimulationContext, boss: Boss) -> None:
    boss.x += boss.speed * boss.direction
    right_edge = ctx.width - boss.width
    if boss.x > right_edge or boss.x < 0:
        boss.direction *= -1
        boss.x = clamp(boss.x, 0.0, max(0.0, right_edge))


def update_boss(ctx: SimulationContext, inputs: InputSnapshot) -> BossStatus:
    """Advance the battle by one frame and report how it stands."""
    boss = ctx.boss
    if boss is None:
        raise RuntimeError("update_boss called before init_boss_mode")

    player = ctx.player
    registry = ctx.registry
    status = BossStatus.ACTIVE

    _move_player(ctx, player, inputs)
    if inputs.fire:
        fire_laser(ctx, inputs.pointer)

    _move_boss(ctx, boss)

    for laser in registry.lasers:
        laser.x += laser.vx
        laser.y += laser.vy
        if not (0 < laser.x < ctx.width and 0 < laser.y < ctx.height):
            laser.expired = True

    for laser in registry.boss_lasers:
        laser.y += laser.vy
        if _overlaps(laser, player.x, player.y, player.width, player.height):
            laser.expired = True
            player.damage(BOSS_LASER_DAMAGE)
            ctx.emit(EventType.PLAYER_DAMAGED, health=player.health)
        elif laser.y > ctx.height:
            laser.expired = True

    if boss.shoot_cooldown <= 0:
        registry.add_laser(Laser(
            x=boss.x + boss.width / 2, y=boss.y + boss.height,
            vx=0.0, vy=BOSS_LASER_SPEED,
            owner=LaserOwner.BOSS, width=5.0, height=15.0,
        ))
        boss.shoot_cooldown = BOSS_COOLDOWN
    boss.shoot_cooldown -= 1

    for laser in registry.lasers:
        if laser.expired:
            continue
        if _overlaps(laser, boss.x, boss.y, boss.width, boss.height):
            laser.expired = True
            boss.damage(PLAYER_LASER_DAMAGE)
            ctx.emit(EventType.BOSS_DAMAGED, health=boss.health)

    registry.compact()

    # A simultaneous knockout counts as a win
    if boss.health <= 0:
        status = BossStatus.DEFEATED
        logger.info("Boss defeated!")
    elif player.health <= 0:
        status = BossStatus.PLAYER_DEFEATED
        logger.info("Transformer destroyed by the mothership")

    return status
