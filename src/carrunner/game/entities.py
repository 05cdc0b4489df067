"""Entity records for the runner and the boss battle.

World entities form a closed set of kinds. Each concrete class pins its
``kind`` and the motion and collision steps dispatch on the class, so an
unknown kind is a programming error rather than a silent no-op.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Tuple, Union

MAX_HEALTH = 100.0
MAX_FUEL = 100.0


class EntityKind(Enum):
    TREE = "tree"
    POTHOLE = "pothole"
    UFO = "ufo"
    CLOUD = "cloud"
    ROCK = "rock"
    FUEL = "fuel"
    TURBO = "turbo"
    SHIELD = "shield"
    ROCKET = "rocket"


class UfoPhase(Enum):
    SWOOP = "swoop"    # descending to cruise height
    FOLLOW = "follow"  # tracking the player's height
    SPIN = "spin"      # hit, spinning away


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds."""
    return lo if value < lo else hi if value > hi else value


@dataclass
class WorldEntity:
    """Common fields of everything that scrolls through the world."""

    kind: ClassVar[EntityKind]

    x: float
    y: float
    width: float
    height: float
    hit: bool = False
    expired: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Tree(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.TREE

    trunk_ratio: float = 0.5
    fall_angle: float = 0.0  # degrees, grows after a hit


@dataclass
class Pothole(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.POTHOLE

    # Outline points relative to (x, y)
    points: List[Tuple[float, float]] = field(default_factory=list)


@dataclass
class Ufo(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.UFO

    dx: float = 0.0
    dy: float = 0.0
    target_y: float = 0.0
    scrolls: bool = True
    phase: UfoPhase = UfoPhase.SWOOP
    spin_angle: float = 0.0


@dataclass
class Cloud(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.CLOUD


@dataclass
class Rock(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.ROCK


@dataclass
class FuelPickup(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.FUEL


@dataclass
class TurboPickup(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.TURBO


@dataclass
class ShieldPickup(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.SHIELD


@dataclass
class RocketPickup(WorldEntity):
    kind: ClassVar[EntityKind] = EntityKind.ROCKET


Entity = Union[
    Tree, Pothole, Ufo, Cloud, Rock,
    FuelPickup, TurboPickup, ShieldPickup, RocketPickup,
]


@dataclass
class Player:
    """The car (or, in the boss battle, the transformer)."""

    x: float
    y: float
    width: float
    height: float
    dy: float = 0.0
    on_ground: bool = True
    health: float = MAX_HEALTH
    fuel: float = MAX_FUEL
    max_health: float = MAX_HEALTH
    max_fuel: float = MAX_FUEL

    # Status durations in frames
    shield_timer: int = 0
    turbo_timer: int = 0
    rocket_timer: int = 0

    # World scroll speed and the value recorded when turbo started
    speed: float = 3.0
    pre_turbo_speed: float = 3.0

    # Variable-height jump
    jumping: bool = False
    jump_hold: int = 0

    transformed: bool = False

    @property
    def shield_active(self) -> bool:
        return self.shield_timer > 0

    @property
    def turbo_active(self) -> bool:
        return self.turbo_timer > 0

    @property
    def flying(self) -> bool:
        return self.rocket_timer > 0

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def damage(self, amount: float) -> None:
        """Lose health, clamped at zero."""
        self.health = clamp(self.health - amount, 0.0, self.max_health)

    def add_fuel(self, amount: float) -> None:
        """Gain or burn fuel, clamped to the tank."""
        self.fuel = clamp(self.fuel + amount, 0.0, self.max_fuel)


class LaserOwner(Enum):
    PLAYER = "player"
    BOSS = "boss"


@dataclass
class Laser:
    """A boss-battle projectile."""

    x: float
    y: float
    vx: float
    vy: float
    owner: LaserOwner
    width: float = 4.0
    height: float = 20.0
    expired: bool = False


@dataclass
class Boss:
    """The alien mothership."""

    x: float
    y: float
    width: float = 200.0
    height: float = 100.0
    health: float = 100.0
    max_health: float = 100.0
    speed: float = 3.0
    direction: int = 1
    shoot_cooldown: int = 0

    def damage(self, amount: float) -> None:
        self.health = clamp(self.health - amount, 0.0, self.max_health)
