"""
Game state machine for a car runner run.

States:
    START: Title screen, waiting for the player to begin
    PLAYING: Runner simulation is advancing
    PAUSED: Runner simulation frozen, resumable
    BOSS: Boss battle sub-mode is running
    VICTORY: Boss defeated, run over
    GAMEOVER: Player out of health or fuel, run over
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Any
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Top-level game modes."""
    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"
    BOSS = "boss"
    VICTORY = "victory"
    GAMEOVER = "gameover"


@dataclass
class StateContext:
    """Context data carried across transitions."""
    reason: str | None = None
    run_count: int = 0
    data: dict[str, Any] = field(default_factory=dict)


class StateMachine:
    """
    Manages the game mode and its transitions.

    Exactly one state is active at a time. Every transition is
    one-directional except PLAYING <-> PAUSED; the terminal states of a
    run (GAMEOVER, VICTORY) only leave through a restart into PLAYING.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        # From START
        (GameState.START, GameState.PLAYING),

        # From PLAYING
        (GameState.PLAYING, GameState.PAUSED),
        (GameState.PLAYING, GameState.GAMEOVER),
        (GameState.PLAYING, GameState.BOSS),

        # From PAUSED
        (GameState.PAUSED, GameState.PLAYING),

        # From BOSS
        (GameState.BOSS, GameState.VICTORY),
        (GameState.BOSS, GameState.GAMEOVER),

        # Restart
        (GameState.GAMEOVER, GameState.PLAYING),
        (GameState.VICTORY, GameState.PLAYING),
    ]

    def __init__(self, initial_state: GameState = GameState.START) -> None:
        self._state = initial_state
        self._context = StateContext()
        self._listeners: list[Callable[[GameState, GameState, StateContext], None]] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> StateContext:
        """Get current context."""
        return self._context

    @property
    def is_run_over(self) -> bool:
        """Check if the current run has ended."""
        return self._state in (GameState.GAMEOVER, GameState.VICTORY)

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState, reason: str | None = None) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            reason: Short description stored on the context

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        self._context.reason = reason

        if to_state == GameState.PLAYING and old_state != GameState.PAUSED:
            self._context.run_count += 1

        logger.info(f"State transition: {old_state.name} -> {to_state.name}"
                    + (f" ({reason})" if reason else ""))

        for listener in self._listeners:
            try:
                listener(old_state, to_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(
        self,
        callback: Callable[[GameState, GameState, StateContext], None]
    ) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(
        self,
        callback: Callable[[GameState, GameState, StateContext], None]
    ) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
