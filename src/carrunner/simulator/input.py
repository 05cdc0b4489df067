"""
Keyboard and mouse to InputSnapshot translation for the simulator.

Keyboard Mapping:
    SPACE / UP / W: Jump (held), fly up while the rocket is active
    DOWN / S: Fly down
    LEFT / A, RIGHT / D: Move in the boss battle
    Mouse click / F: Fire toward the pointer
    ENTER: Start
    P: Pause / resume
    R: Restart after the run is over
"""

import pygame

from carrunner.game.input import InputSnapshot


class KeyboardInputCollector:
    """
    Accumulates pygame events between simulation frames.

    Edge actions pressed at any point since the last snapshot are reported
    once, so a tap between two fixed steps is never lost.
    """

    EDGE_KEYS = {
        pygame.K_RETURN: "start",
        pygame.K_KP_ENTER: "start",
        pygame.K_p: "pause",
        pygame.K_r: "restart",
        pygame.K_f: "fire",
    }

    def __init__(self) -> None:
        self._held: set[int] = set()
        self._edges: set[str] = set()
        self._pointer: tuple[float, float] = (0.0, 0.0)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Feed one pygame event."""
        if event.type == pygame.KEYDOWN:
            self._held.add(event.key)
            action = self.EDGE_KEYS.get(event.key)
            if action:
                self._edges.add(action)
            # Space also starts and restarts, like the browser games
            if event.key == pygame.K_SPACE:
                self._edges.update(("start", "restart"))
        elif event.type == pygame.KEYUP:
            self._held.discard(event.key)
        elif event.type == pygame.MOUSEMOTION:
            self._pointer = (float(event.pos[0]), float(event.pos[1]))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._pointer = (float(event.pos[0]), float(event.pos[1]))
            self._edges.add("fire")

    def _down(self, *keys: int) -> bool:
        return any(key in self._held for key in keys)

    def snapshot(self, consume: bool = True) -> InputSnapshot:
        """Build the snapshot for the next simulation frame."""
        snap = InputSnapshot(
            jump=self._down(pygame.K_SPACE, pygame.K_UP, pygame.K_w),
            up=self._down(pygame.K_UP, pygame.K_w, pygame.K_SPACE),
            down=self._down(pygame.K_DOWN, pygame.K_s),
            left=self._down(pygame.K_LEFT, pygame.K_a),
            right=self._down(pygame.K_RIGHT, pygame.K_d),
            fire="fire" in self._edges,
            start="start" in self._edges,
            pause="pause" in self._edges,
            restart="restart" in self._edges,
            pointer=self._pointer,
        )
        if consume:
            self._edges.clear()
        return snap

    def reset(self) -> None:
        self._held.clear()
        self._edges.clear()
