"""Live entity collections for the current run."""

from dataclasses import dataclass, field
from typing import Iterator, List

from carrunner.animation.particles import FloatingText, Particle
from carrunner.game.entities import Entity, Laser, LaserOwner


@dataclass
class EntityRegistry:
    """Holds every live entity of one simulation.

    Steps never remove entries while iterating; they mark ``expired`` (or
    fade a timed entity out) and ``compact()`` filters once per frame.
    """

    obstacles: List[Entity] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    texts: List[FloatingText] = field(default_factory=list)
    lasers: List[Laser] = field(default_factory=list)
    boss_lasers: List[Laser] = field(default_factory=list)

    def add(self, entity: Entity) -> None:
        self.obstacles.append(entity)

    def add_particles(self, particles: List[Particle]) -> None:
        self.particles.extend(particles)

    def add_text(self, text: FloatingText) -> None:
        self.texts.append(text)

    def add_laser(self, laser: Laser) -> None:
        if laser.owner is LaserOwner.PLAYER:
            self.lasers.append(laser)
        else:
            self.boss_lasers.append(laser)

    def live_obstacles(self) -> Iterator[Entity]:
        """Iterate entities that have not been marked for removal."""
        return (e for e in self.obstacles if not e.expired)

    def compact(self) -> None:
        """Drop everything marked expired or faded out."""
        self.obstacles = [e for e in self.obstacles if not e.expired]
        self.particles = [p for p in self.particles if not p.is_dead]
        self.texts = [t for t in self.texts if not t.is_dead]
        self.lasers = [laser for laser in self.lasers if not laser.expired]
        self.boss_lasers = [laser for laser in self.boss_lasers if not laser.expired]

    def clear(self) -> None:
        self.obstacles.clear()
        self.particles.clear()
        self.texts.clear()
        self.lasers.clear()
        self.boss_lasers.clear()

    def __len__(self) -> int:
        return len(self.obstacles)
