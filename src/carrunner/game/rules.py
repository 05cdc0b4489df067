"""Rule sets for the runner variants.

A variant is pure data: spawn tables, physics constants and power-up
tuning. The engine reads everything variant-specific from here.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from carrunner.game.entities import EntityKind


@dataclass(frozen=True)
class SpawnBand:
    """Cumulative probability band: rolls below ``upper`` pick ``kind``."""

    upper: float
    kind: EntityKind


@dataclass(frozen=True)
class SpawnStream:
    """One countdown timer with its weighted spawn table.

    Rolls at or above the last band's upper bound spawn nothing.
    """

    name: str
    bands: Tuple[SpawnBand, ...]
    base_interval: float = 60.0
    interval_spread: float = 80.0
    tightening: float = 0.0   # frames removed per difficulty frame
    min_interval: float = 30.0
    initial_delay: float = 0.0
    cloud_chance: float = 0.0

    def __post_init__(self) -> None:
        previous = 0.0
        for band in self.bands:
            if band.upper <= previous or band.upper > 1.0:
                raise ValueError(
                    f"Spawn stream '{self.name}': bands must increase within (0, 1], "
                    f"got {band.upper} after {previous}"
                )
            previous = band.upper
        if self.min_interval < 1:
            raise ValueError(f"Spawn stream '{self.name}': min_interval must be >= 1")

    def pick(self, roll: float) -> Optional[EntityKind]:
        """Map a uniform roll to an entity kind (or nothing)."""
        for band in self.bands:
            if roll < band.upper:
                return band.kind
        return None

    def interval(self, roll: float, difficulty: float) -> float:
        """Next countdown, shrinking with difficulty down to the floor."""
        raw = self.base_interval + roll * self.interval_spread - difficulty * self.tightening
        return max(self.min_interval, raw)


def _bands(*pairs: Tuple[float, EntityKind]) -> Tuple[SpawnBand, ...]:
    return tuple(SpawnBand(upper, kind) for upper, kind in pairs)


@dataclass(frozen=True)
class RunnerRules:
    """All tunables of one runner variant."""

    name: str
    streams: Tuple[SpawnStream, ...]

    # Player geometry (unscaled, reference width 1200)
    player_width: float = 180.0
    player_height: float = 100.0
    player_x: float = 100.0
    ground_offset: float = 150.0

    # Physics
    gravity: float = 0.5
    gravity_scales: bool = False  # multiply gravity by the view scale
    jump_strength: float = -12.0
    max_jump_hold: int = 15
    jump_hold_factor: float = 0.05
    flight_speed: float = 6.0
    terrain_amplitude: float = 0.0
    terrain_frequency: float = 0.005

    # World
    base_speed: float = 3.0
    world_speed_factor: float = 1.5
    cloud_speed_factor: float = 0.5
    ufo_scrolls: bool = True

    # Collisions
    collision_buffer: float = 20.0   # inset at reference width, scaled with the view
    damage: float = 25.0
    fuel_pickup: float = 25.0
    rocket_blocks_damage: bool = True

    # Status tuning (frames)
    shield_frames: int = 300
    turbo_frames: int = 300
    rocket_frames: int = 300
    turbo_multiplier: float = 2.0

    # Progression
    score_per_frame: float = 0.1
    speed_milestone: float = 100.0
    speed_increment: float = 0.1
    fuel_decay: float = 0.1
    fuel_decay_interval: int = 5
    boss_threshold: Optional[float] = None

    # Feedback
    text_decay: float = 0.01
    landing_text: Optional[str] = None

    labels: Dict[EntityKind, str] = field(default_factory=lambda: {
        EntityKind.FUEL: "+25% Fuel",
        EntityKind.TURBO: "Turbo Activated!",
        EntityKind.SHIELD: "Shield Activated!",
        EntityKind.ROCKET: "Rocket Boost!",
    })

    def __post_init__(self) -> None:
        if not self.streams:
            raise ValueError(f"Variant '{self.name}' has no spawn streams")
        if self.turbo_multiplier <= 0:
            raise ValueError("turbo_multiplier must be positive")
        if self.fuel_decay_interval < 1:
            raise ValueError("fuel_decay_interval must be >= 1")


CLASSIC = RunnerRules(
    name="classic",
    streams=(
        SpawnStream(
            name="world",
            bands=_bands(
                (0.20, EntityKind.TREE),
                (0.40, EntityKind.POTHOLE),
                (0.50, EntityKind.UFO),
                (0.60, EntityKind.FUEL),
                (0.70, EntityKind.TURBO),
                (0.80, EntityKind.SHIELD),
            ),
            base_interval=60.0,
            interval_spread=80.0,
            tightening=0.01,
            min_interval=30.0,
            cloud_chance=0.3,
        ),
    ),
)

RALLY = RunnerRules(
    name="rally",
    streams=(
        SpawnStream(
            name="obstacles",
            bands=_bands(
                (0.5, EntityKind.TREE),
                (0.7, EntityKind.UFO),
                (1.0, EntityKind.ROCK),
            ),
            base_interval=90.0,
            interval_spread=0.0,
            tightening=1.0,
            min_interval=30.0,
            initial_delay=60.0,
        ),
        SpawnStream(
            name="pickups",
            bands=_bands(
                (0.5, EntityKind.FUEL),
                (0.8, EntityKind.TURBO),
                (1.0, EntityKind.SHIELD),
            ),
            base_interval=200.0,
            interval_spread=0.0,
            tightening=2.0,
            min_interval=50.0,
            initial_delay=150.0,
        ),
    ),
    player_x=150.0,
    player_height=90.0,
    gravity=0.6,
    gravity_scales=True,
    jump_strength=-15.0,
    max_jump_hold=0,
    terrain_amplitude=60.0,
    base_speed=5.0,
    world_speed_factor=1.0,
    ufo_scrolls=False,
    collision_buffer=0.0,
    fuel_decay=0.05,
    fuel_decay_interval=1,
    text_decay=0.02,
    landing_text="Landing!",
    labels={
        EntityKind.FUEL: "+Fuel",
        EntityKind.TURBO: "Turbo!",
        EntityKind.SHIELD: "Shield!",
        EntityKind.ROCKET: "Rocket!",
    },
)

TRANSFORMER = RunnerRules(
    name="transformer",
    streams=(
        SpawnStream(
            name="world",
            bands=_bands(
                (0.20, EntityKind.TREE),
                (0.40, EntityKind.POTHOLE),
                (0.50, EntityKind.UFO),
                (0.575, EntityKind.FUEL),
                (0.65, EntityKind.TURBO),
                (0.725, EntityKind.SHIELD),
                (0.80, EntityKind.ROCKET),
            ),
            base_interval=60.0,
            interval_spread=80.0,
            tightening=0.01,
            min_interval=30.0,
            cloud_chance=0.3,
        ),
    ),
    boss_threshold=500.0,
)

VARIANTS: Dict[str, RunnerRules] = {
    rules.name: rules for rules in (CLASSIC, RALLY, TRANSFORMER)
}


def get_rules(name: str) -> RunnerRules:
    """Look up a variant by name."""
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown variant '{name}', expected one of {sorted(VARIANTS)}"
        ) from None
