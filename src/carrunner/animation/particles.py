"""Particle and floating-text effects.

Both are timed entities: they drift by their velocity each frame and fade
by ``decay`` until ``alpha`` reaches zero, at which point the registry
compacts them away. They never take part in collisions.
"""

from dataclasses import dataclass
from typing import List, Tuple
import random

Color = Tuple[int, int, int]

DUST_COLOR: Color = (204, 204, 204)


@dataclass
class TimedEntity:
    """Base for short-lived visual entities."""

    x: float
    y: float
    dx: float = 0.0
    dy: float = 0.0
    alpha: float = 1.0
    decay: float = 0.02

    @property
    def is_dead(self) -> bool:
        """Check if the entity has faded out."""
        return self.alpha <= 0

    def update(self) -> None:
        """Advance one frame."""
        self.x += self.dx
        self.y += self.dy
        self.alpha -= self.decay


@dataclass
class Particle(TimedEntity):
    """A single dust/spark particle."""

    radius: float = 2.0
    color: Color = DUST_COLOR


@dataclass
class FloatingText(TimedEntity):
    """Confirmation text that rises and fades."""

    text: str = ""
    color: Color = (255, 255, 0)


def spawn_dust(
    rng: random.Random,
    x: float,
    y: float,
    scale: float = 1.0,
    count: int = 10,
) -> List[Particle]:
    """Create a puff of dust particles around (x, y)."""
    particles = []
    for _ in range(count):
        particles.append(Particle(
            x=x + (rng.random() - 0.5) * 30 * scale,
            y=y + rng.random() * 5 * scale,
            dx=(rng.random() - 0.5) * 2,
            dy=-rng.random() * 1.5,
            radius=2 + rng.random() * 2,
            decay=0.02,
        ))
    return particles


def floating_text(
    text: str,
    x: float,
    y: float,
    color: Color = (255, 255, 0),
    decay: float = 0.01,
    dy: float = -0.5,
) -> FloatingText:
    """Create a floating confirmation text."""
    return FloatingText(x=x, y=y, dy=dy, decay=decay, text=text, color=color)


def update_timed(entities: List[TimedEntity]) -> None:
    """Advance every entity by one frame (no removal)."""
    for entity in entities:
        entity.update()
