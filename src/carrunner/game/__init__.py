"""Car runner simulation core."""

from carrunner.game.context import SimulationContext, initialize, reset_run
from carrunner.game.engine import FrameResult, GameEngine, update
from carrunner.game.entities import EntityKind, Player, Boss
from carrunner.game.highscore import HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore
from carrunner.game.input import InputSnapshot, IDLE
from carrunner.game.rules import RunnerRules, CLASSIC, RALLY, TRANSFORMER, get_rules

__all__ = [
    # Engine
    "SimulationContext",
    "initialize",
    "reset_run",
    "update",
    "FrameResult",
    "GameEngine",
    # Data
    "EntityKind",
    "Player",
    "Boss",
    "InputSnapshot",
    "IDLE",
    # Rules
    "RunnerRules",
    "CLASSIC",
    "RALLY",
    "TRANSFORMER",
    "get_rules",
    # Persistence
    "HighScoreStore",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
]
