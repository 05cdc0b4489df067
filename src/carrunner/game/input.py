"""Input snapshot consumed by the simulation core.

Hosts translate their keyboard, touch and pointer events into one of
these per simulation frame. Held flags describe keys that are down;
edge flags are true only on the frame the key went down.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class InputSnapshot:
    # Held
    jump: bool = False
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    # Edges
    fire: bool = False
    start: bool = False
    pause: bool = False
    restart: bool = False

    pointer: Tuple[float, float] = (0.0, 0.0)


IDLE = InputSnapshot()
