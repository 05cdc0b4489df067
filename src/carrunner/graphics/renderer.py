"""Placeholder-geometry renderer for car runner frames.

Everything is drawn from rectangles, circles and polygons so a frame can
always be produced without any image assets. Text is left to the host,
which has fonts; ``FrameRenderer.labels`` lists what to write where.
"""

from dataclasses import dataclass
from typing import List, Tuple
import logging
import math

from carrunner.core.state import GameState
from carrunner.game.engine import FrameResult
from carrunner.game.entities import (
    Boss,
    Cloud,
    Entity,
    FuelPickup,
    Player,
    Pothole,
    Rock,
    RocketPickup,
    ShieldPickup,
    Tree,
    TurboPickup,
    Ufo,
)
from carrunner.graphics.primitives import (
    Buffer,
    Color,
    blend,
    create_buffer,
    draw_circle,
    draw_line,
    draw_polygon,
    draw_rect,
    fill,
    vertical_gradient,
)

logger = logging.getLogger(__name__)

SKY_TOP: Color = (30, 60, 120)
SKY_BOTTOM: Color = (250, 180, 120)
GRASS: Color = (46, 139, 87)
ROAD: Color = (85, 85, 85)
LANE: Color = (255, 255, 0)
EDGE: Color = (230, 230, 230)
TRUNK: Color = (139, 69, 19)
LEAVES: Color = (46, 139, 87)
UFO_BODY: Color = (221, 221, 221)
UFO_DOME: Color = (176, 224, 230)
CLOUD: Color = (240, 240, 240)
ROCK: Color = (102, 102, 102)
HOLE: Color = (0, 0, 0)
FUEL: Color = (255, 165, 0)
TURBO: Color = (255, 69, 0)
SHIELD: Color = (0, 255, 255)
ROCKET: Color = (200, 200, 255)
CAR: Color = (200, 30, 30)
WHEEL: Color = (20, 20, 20)
TRANSFORMER: Color = (0, 0, 255)
BOSS_HULL: Color = (138, 43, 226)
BOSS_COCKPIT: Color = (75, 0, 130)
PLAYER_LASER: Color = (0, 255, 255)
BOSS_LASER: Color = (255, 65, 54)
BAR_BACK: Color = (85, 85, 85)
HEALTH: Color = (46, 204, 64)
FUEL_BAR: Color = (255, 220, 0)
SPACE: Color = (0, 13, 26)

Label = Tuple[str, float, float, Color, float]


@dataclass
class RenderStats:
    """Counters from the last rendered frame."""
    entities: int = 0
    particles: int = 0
    labels: int = 0


class FrameRenderer:
    """Draws a ``FrameResult`` into a numpy RGB buffer."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.scale = width / 1200.0
        self.buffer: Buffer = create_buffer(width, height)
        self.labels: List[Label] = []
        self.stats = RenderStats()
        self._lane_offset = 0.0
        logger.debug(f"FrameRenderer created: {width}x{height}")

    def render(self, frame: FrameResult) -> Buffer:
        """Draw one frame and return the buffer."""
        self.labels = []

        if frame.state in (GameState.BOSS, GameState.VICTORY) and frame.boss is not None:
            self._draw_battle(frame)
        else:
            self._draw_road(frame)
            for entity in frame.obstacles:
                self._draw_entity(entity)
            self._draw_player(frame.player)

        for particle in frame.particles:
            color = blend(particle.color, tuple(self.buffer[
                min(self.height - 1, max(0, int(particle.y))),
                min(self.width - 1, max(0, int(particle.x))),
            ]), particle.alpha)
            draw_circle(self.buffer, particle.x, particle.y, particle.radius, color)

        for text in frame.texts:
            self.labels.append((text.text, text.x, text.y, text.color, max(0.0, text.alpha)))

        self._draw_bars(frame.player)

        self.stats = RenderStats(
            entities=len(frame.obstacles),
            particles=len(frame.particles),
            labels=len(self.labels),
        )
        return self.buffer

    def _draw_road(self, frame: FrameResult) -> None:
        s = self.scale
        ground = int(self.height - 110 * s)
        vertical_gradient(self.buffer, SKY_TOP, SKY_BOTTOM, 0, ground)
        draw_rect(self.buffer, 0, ground, self.width, self.height - ground, GRASS)
        draw_rect(self.buffer, 0, ground + 10 * s, self.width, 80 * s, ROAD)
        draw_line(self.buffer, 0, ground + 10 * s, self.width - 1, ground + 10 * s, EDGE, thickness=2)

        # Lane markings scroll with the world
        self._lane_offset = (self._lane_offset + frame.player.speed * 1.5) % (80 * s)
        x = -self._lane_offset
        while x < self.width:
            draw_rect(self.buffer, x, ground + 48 * s, 40 * s, 4 * s, LANE)
            x += 80 * s

    def _draw_entity(self, entity: Entity) -> None:
        s = self.scale
        if isinstance(entity, Tree):
            self._draw_tree(entity)
        elif isinstance(entity, Pothole):
            points = [(entity.x + px, entity.y + py) for px, py in entity.points]
            draw_polygon(self.buffer, points, HOLE)
        elif isinstance(entity, Ufo):
            cx = entity.x + entity.width / 2
            cy = entity.y + entity.height / 2
            tilt = math.sin(math.radians(entity.spin_angle)) * entity.height / 4
            draw_polygon(self.buffer, [
                (entity.x, cy + tilt),
                (cx, entity.y + entity.height / 3),
                (entity.right, cy - tilt),
                (cx, entity.bottom),
            ], UFO_BODY)
            draw_circle(self.buffer, cx, entity.y + entity.height / 3, 14 * s, UFO_DOME)
        elif isinstance(entity, Cloud):
            for i in range(3):
                draw_circle(
                    self.buffer,
                    entity.x + entity.width * (0.25 + i * 0.25),
                    entity.y + entity.height / 2,
                    entity.height / 2,
                    CLOUD,
                )
        elif isinstance(entity, Rock):
            draw_polygon(self.buffer, [
                (entity.x, entity.bottom),
                (entity.x + entity.width * 0.2, entity.y),
                (entity.x + entity.width * 0.8, entity.y + entity.height * 0.2),
                (entity.right, entity.bottom),
            ], ROCK)
        elif isinstance(entity, (FuelPickup, TurboPickup, ShieldPickup, RocketPickup)):
            color = {
                FuelPickup: FUEL,
                TurboPickup: TURBO,
                ShieldPickup: SHIELD,
                RocketPickup: ROCKET,
            }[type(entity)]
            draw_circle(
                self.buffer,
                entity.x + entity.width / 2,
                entity.y + entity.height / 2,
                entity.width / 2,
                color,
            )
        else:
            raise TypeError(f"No drawing rule for {type(entity).__name__}")

    def _draw_tree(self, tree: Tree) -> None:
        trunk_h = tree.height * (0.3 + tree.trunk_ratio * 0.2)
        if tree.fall_angle >= 45:
            # Lying on the road
            draw_rect(self.buffer, tree.x, tree.bottom - tree.width / 2,
                      tree.height, tree.width / 2, TRUNK)
            return
        draw_rect(self.buffer, tree.x + tree.width / 3, tree.bottom - trunk_h,
                  tree.width / 3, trunk_h, TRUNK)
        draw_polygon(self.buffer, [
            (tree.x, tree.bottom - trunk_h),
            (tree.x + tree.width / 2, tree.y),
            (tree.right, tree.bottom - trunk_h),
        ], LEAVES)

    def _draw_player(self, player: Player) -> None:
        s = self.scale
        if player.flying:
            # Exhaust flame under the car
            draw_circle(self.buffer, player.x + player.width * 0.3,
                        player.y + player.height,
                        12 * s, TURBO)
        draw_rect(self.buffer, player.x, player.y + player.height * 0.3,
                  player.width, player.height * 0.5, CAR)
        draw_rect(self.buffer, player.x + player.width * 0.25, player.y,
                  player.width * 0.45, player.height * 0.35, CAR)
        for fx in (0.2, 0.8):
            draw_circle(self.buffer, player.x + player.width * fx,
                        player.y + player.height * 0.8, player.height * 0.2, WHEEL)
        if player.shield_active:
            cx, cy = player.center
            draw_rect(self.buffer, cx - player.width * 0.6, cy - player.height * 0.7,
                      player.width * 1.2, player.height * 1.4, SHIELD, filled=False, thickness=2)

    def _draw_battle(self, frame: FrameResult) -> None:
        fill(self.buffer, SPACE)

        boss = frame.boss
        self._draw_boss(boss)

        player = frame.player
        draw_rect(self.buffer, player.x, player.y, player.width, player.height, TRANSFORMER)

        for laser in frame.lasers:
            draw_rect(self.buffer, laser.x, laser.y, laser.width, laser.height, PLAYER_LASER)
        for laser in frame.boss_lasers:
            draw_rect(self.buffer, laser.x, laser.y, laser.width, laser.height, BOSS_LASER)

    def _draw_boss(self, boss: Boss) -> None:
        draw_polygon(self.buffer, [
            (boss.x + boss.width / 2, boss.y),
            (boss.x, boss.y + boss.height * 0.8),
            (boss.x + boss.width, boss.y + boss.height * 0.8),
        ], BOSS_HULL)
        draw_rect(self.buffer, boss.x + boss.width / 2 - 15, boss.y + 20, 30, 30, BOSS_COCKPIT)

        bar_w = self.width * 0.6
        bar_x = (self.width - bar_w) / 2
        draw_rect(self.buffer, bar_x, 30, bar_w, 25, BAR_BACK)
        draw_rect(self.buffer, bar_x, 30, bar_w * boss.health / boss.max_health, 25, BOSS_LASER)
        self.labels.append(("ALIEN MOTHERSHIP", self.width / 2, 34, (255, 255, 255), 1.0))

    def _draw_bars(self, player: Player) -> None:
        x, y = 20, self.height - 40
        draw_rect(self.buffer, x, y, 200, 12, BAR_BACK)
        draw_rect(self.buffer, x, y, 200 * player.health / player.max_health, 12, HEALTH)
        if not player.transformed:
            draw_rect(self.buffer, x, y + 16, 200, 12, BAR_BACK)
            draw_rect(self.buffer, x, y + 16, 200 * player.fuel / player.max_fuel, 12, FUEL_BAR)
