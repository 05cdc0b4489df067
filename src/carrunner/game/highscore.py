"""High score persistence."""

from pathlib import Path
from typing import Protocol
import json
import logging

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    """Where the best score survives between sessions."""

    def load(self) -> int: ...

    def save(self, score: int) -> None: ...


class MemoryHighScoreStore:
    """Keeps the high score for the lifetime of the process only."""

    def __init__(self, score: int = 0) -> None:
        self._score = score

    def load(self) -> int:
        return self._score

    def save(self, score: int) -> None:
        self._score = score


class JsonHighScoreStore:
    """Single JSON document ``{"high_score": N}`` on disk.

    A missing, unreadable or malformed file reads as 0 so a broken save
    never keeps the game from starting.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0

        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            score = int(data.get("high_score", 0))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable high score file {self.path}: {e}")
            return 0

        if score < 0:
            logger.warning(f"Ignoring negative high score in {self.path}")
            return 0

        logger.info(f"Loaded high score {score} from {self.path}")
        return score

    def save(self, score: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump({"high_score": int(score)}, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save high score to {self.path}: {e}")
            raise
        logger.debug(f"Saved high score {score} to {self.path}")
