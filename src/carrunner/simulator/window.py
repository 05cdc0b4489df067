"""
Simulator window using pygame.

Hosts a ``GameEngine`` on the desktop: collects keyboard and mouse input,
drives the simulation at a fixed step rate independent of the display
refresh, and draws the placeholder renderer's buffer plus a text HUD.
"""

import asyncio
import logging
from dataclasses import dataclass

import pygame

from carrunner.config.settings import Settings
from carrunner.core.events import Event, EventType
from carrunner.core.state import GameState, StateContext
from carrunner.game.engine import FrameResult, GameEngine
from carrunner.graphics.renderer import FrameRenderer
from carrunner.simulator.input import KeyboardInputCollector

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 1200
    height: int = 600
    title: str = "Car Runner"
    fullscreen: bool = False
    fps: int = 60
    step_rate: int = 60
    max_steps_per_frame: int = 5

    # Colors
    text_color: tuple[int, int, int] = (255, 255, 255)
    accent_color: tuple[int, int, int] = (100, 150, 255)
    overlay_color: tuple[int, int, int, int] = (0, 0, 0, 150)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowConfig":
        return cls(
            width=settings.display.width,
            height=settings.display.height,
            title=settings.simulator.title,
            fullscreen=settings.simulator.fullscreen,
            fps=settings.display.fps,
            step_rate=settings.simulator.step_rate,
            max_steps_per_frame=settings.simulator.max_steps_per_frame,
        )


class SimulatorWindow:
    """
    Desktop host for the car runner.

    Keyboard Mapping (besides the game keys, see simulator.input):
        ESC: Exit simulator
        F1: Toggle debug overlay
        F2: Toggle log viewer
        F11: Toggle fullscreen
        F12: Capture screenshot
    """

    def __init__(self, engine: GameEngine, config: WindowConfig | None = None) -> None:
        self.config = config or WindowConfig()
        self.engine = engine
        self.renderer = FrameRenderer(self.config.width, self.config.height)
        self.input = KeyboardInputCollector()

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._accumulator = 0.0
        self._show_debug = False
        self._last_result: FrameResult | None = None

        # Fonts
        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None

        # Log viewer
        self._show_log = False
        self._log_buffer: list[str] = []
        self._max_log_lines = 20
        self._log_handler: logging.Handler | None = None

        # Flash the screen on hits
        self._flash = 0
        self.engine.event_bus.subscribe(EventType.OBSTACLE_HIT, self._on_hit)
        self.engine.event_bus.subscribe(EventType.PLAYER_DAMAGED, self._on_hit)

        # Held keys must not leak across pause or into the next run
        self.engine.ctx.state.add_listener(self._on_state_change)

        self._setup_log_capture()

        logger.info("SimulatorWindow created")

    def _on_hit(self, event: Event) -> None:
        self._flash = 6

    def _on_state_change(self, old: GameState, new: GameState, context: StateContext) -> None:
        if new in (GameState.PAUSED, GameState.GAMEOVER, GameState.VICTORY):
            self.input.reset()

    def _setup_log_capture(self) -> None:
        """Setup log capturing for the log viewer."""
        class SimulatorLogHandler(logging.Handler):
            def __init__(self, window: 'SimulatorWindow'):
                super().__init__()
                self.window = window

            def emit(self, record):
                msg = self.format(record)
                self.window._log_buffer.append(msg)
                # Keep buffer size limited
                if len(self.window._log_buffer) > self.window._max_log_lines * 2:
                    self.window._log_buffer = self.window._log_buffer[-self.window._max_log_lines:]

        handler = SimulatorLogHandler(self)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter('%(levelname).1s %(name)s: %(message)s'))
        logging.getLogger().addHandler(handler)
        self._log_handler = handler

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN | pygame.SCALED

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 26)
        self._small_font = pygame.font.SysFont(None, 18)
        self._big_font = pygame.font.SysFont(None, 64)

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN and self._handle_system_key(event.key):
                continue
            else:
                self.input.handle_event(event)

    def _handle_system_key(self, key: int) -> bool:
        """Handle window keys; returns True when the key was consumed."""
        if key == pygame.K_ESCAPE:
            self._running = False
        elif key == pygame.K_F1:
            self._show_debug = not self._show_debug
        elif key == pygame.K_F2:
            self._show_log = not self._show_log
        elif key == pygame.K_F11:
            self._toggle_fullscreen()
        elif key == pygame.K_F12:
            self._capture_screenshot()
        else:
            return False
        return True

    def _advance(self, elapsed: float) -> None:
        """Run as many fixed simulation steps as the elapsed time allows."""
        step = 1.0 / self.config.step_rate
        self._accumulator += elapsed
        steps = 0

        while self._accumulator >= step and steps < self.config.max_steps_per_frame:
            self._last_result = self.engine.step(self.input.snapshot())
            self._accumulator -= step
            steps += 1

        if steps == self.config.max_steps_per_frame and self._accumulator >= step:
            # Too far behind; drop the backlog rather than spiral
            logger.debug(f"Dropping {self._accumulator:.3f}s of simulation backlog")
            self._accumulator = 0.0

    def _render(self) -> None:
        """Render the game frame and overlays."""
        if not self._screen or self._last_result is None:
            return

        result = self._last_result
        buffer = self.renderer.render(result)
        surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
        self._screen.blit(surface, (0, 0))

        for text, x, y, color, alpha in self.renderer.labels:
            label = self._font.render(text, True, color)
            label.set_alpha(int(255 * alpha))
            self._screen.blit(label, label.get_rect(center=(int(x), int(y))))

        if self._flash > 0:
            flash = pygame.Surface((self.config.width, self.config.height), pygame.SRCALPHA)
            flash.fill((255, 0, 0, 18 * self._flash))
            self._screen.blit(flash, (0, 0))
            self._flash -= 1

        self._render_hud(result)
        self._render_overlay(result)
        if self._show_debug:
            self._render_debug_panel(result)
        if self._show_log:
            self._render_log_panel()

        pygame.display.flip()

    def _render_hud(self, result: FrameResult) -> None:
        player = result.player
        lines = [
            f"Score: {int(result.score)}",
            f"High score: {result.high_score}",
        ]
        if not player.transformed:
            lines.append(f"Fuel: {player.fuel:.0f}%")
            statuses = []
            if player.shield_active:
                statuses.append(f"Shield {player.shield_timer // 60 + 1}s")
            if player.turbo_active:
                statuses.append(f"Turbo {player.turbo_timer // 60 + 1}s")
            if player.flying:
                statuses.append(f"Rocket {player.rocket_timer // 60 + 1}s")
            if statuses:
                lines.append(" | ".join(statuses))

        y = 10
        for line in lines:
            surf = self._font.render(line, True, self.config.text_color)
            self._screen.blit(surf, (self.config.width - surf.get_width() - 16, y))
            y += 24

    def _render_overlay(self, result: FrameResult) -> None:
        """Title, pause and end-of-run screens."""
        messages = {
            GameState.START: ("CAR RUNNER", "Press ENTER or SPACE to start"),
            GameState.PAUSED: ("PAUSED", "Press P to resume"),
            GameState.GAMEOVER: ("GAME OVER", f"Score {int(result.score)} - press R to restart"),
            GameState.VICTORY: ("VICTORY!", f"Score {int(result.score)} - press R to play again"),
        }
        if result.state not in messages:
            return

        title, hint = messages[result.state]
        shade = pygame.Surface((self.config.width, self.config.height), pygame.SRCALPHA)
        shade.fill(self.config.overlay_color)
        self._screen.blit(shade, (0, 0))

        cx, cy = self.config.width // 2, self.config.height // 2
        title_surf = self._big_font.render(title, True, self.config.text_color)
        self._screen.blit(title_surf, title_surf.get_rect(center=(cx, cy - 30)))
        hint_surf = self._font.render(hint, True, self.config.accent_color)
        self._screen.blit(hint_surf, hint_surf.get_rect(center=(cx, cy + 20)))

    def _debug_lines(self, result: FrameResult) -> list[str]:
        recent = self.engine.event_bus.get_history(limit=3)
        return [
            f"state: {result.state.value}",
            f"frame: {result.frame}",
            f"fps: {self._clock.get_fps():.0f}" if self._clock else "fps: -",
            f"speed: {result.player.speed:.2f}",
            f"entities: {len(result.obstacles)}",
            f"particles: {len(result.particles)}",
            f"lasers: {len(result.lasers)}/{len(result.boss_lasers)}",
            "events: " + (", ".join(e.type.name.lower() for e in recent) or "-"),
        ]

    def _render_debug_panel(self, result: FrameResult) -> None:
        lines = self._debug_lines(result)
        y = 10
        for line in lines:
            surf = self._small_font.render(line, True, (150, 255, 150))
            self._screen.blit(surf, (10, y))
            y += 16

    def _render_log_panel(self) -> None:
        """Render the log viewer panel."""
        rect = pygame.Rect(10, 130, 420, self.config.height - 180)

        surf = pygame.Surface((rect.width, rect.height), pygame.SRCALPHA)
        surf.fill((20, 25, 35, 230))
        self._screen.blit(surf, rect.topleft)
        pygame.draw.rect(self._screen, (60, 80, 100), rect, 1, border_radius=5)

        y = rect.y + 8
        for line in self._log_buffer[-self._max_log_lines:]:
            # Color code by level
            if line.startswith('E'):
                color = (255, 100, 100)
            elif line.startswith('W'):
                color = (255, 200, 100)
            else:
                color = (150, 200, 150)

            display_line = line[:60] + "..." if len(line) > 63 else line
            text_surf = self._small_font.render(display_line, True, color)
            self._screen.blit(text_surf, (rect.x + 8, y))
            y += 14

            if y > rect.bottom - 10:
                break

    def _capture_screenshot(self) -> None:
        """Capture and save a screenshot."""
        if self._screen:
            filename = f"screenshot_{self._frame_count}.png"
            pygame.image.save(self._screen, filename)
            logger.info(f"Screenshot saved: {filename}")

    def _toggle_fullscreen(self) -> None:
        """Toggle fullscreen mode."""
        self.config.fullscreen = not self.config.fullscreen
        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN | pygame.SCALED
        self._screen = pygame.display.set_mode((self.config.width, self.config.height), flags)
        logger.info(f"Fullscreen: {self.config.fullscreen}")

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True
        self._last_result = self.engine.step()

        logger.info("Simulator started")

        try:
            while self._running:
                self._handle_events()

                if self._clock:
                    self._advance(self._clock.get_time() / 1000.0)

                self._render()

                if self._clock:
                    self._clock.tick(self.config.fps)

                self._frame_count += 1

                # Yield to other tasks
                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        self.engine.ctx.state.remove_listener(self._on_state_change)
        if self._log_handler:
            logging.getLogger().removeHandler(self._log_handler)
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
