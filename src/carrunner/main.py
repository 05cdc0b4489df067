"""
Main entry point for the car runner.

Launches the pygame simulator, or with ``--headless N`` runs N frames
without a window for smoke testing.
"""

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

from carrunner.config.settings import Settings, get_settings
from carrunner.core.events import Event, EventType
from carrunner.game.engine import GameEngine
from carrunner.game.highscore import JsonHighScoreStore
from carrunner.game.input import InputSnapshot
from carrunner.game.rules import VARIANTS, get_rules

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    """Configure console logging, plus a file log when requested."""
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_file:
        # Truncate on each run for fresh logs
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def build_engine(settings: Settings, variant: str | None = None) -> GameEngine:
    """Create an engine from settings."""
    rules = get_rules(variant or settings.variant)
    rng = random.Random(settings.seed) if settings.seed is not None else random.Random()
    return GameEngine(
        rules,
        settings.display.width,
        settings.display.height,
        store=JsonHighScoreStore(settings.high_score_path),
        rng=rng,
    )


def run_headless(engine: GameEngine, frames: int) -> None:
    """Press start, then let the run play out with no further input."""
    def log_run_end(event: Event) -> None:
        logger.info(f"Run ended after frame {event.frame}: {event.data}")

    engine.event_bus.subscribe(EventType.RUN_ENDED, log_run_end)

    engine.step(InputSnapshot(start=True))
    result = None
    for _ in range(frames):
        result = engine.step()

    if result is not None:
        logger.info(
            f"Headless run: {frames} frames, state {result.state.value}, "
            f"score {result.score:.1f}, high score {result.high_score}"
        )


async def run_simulator(engine: GameEngine, settings: Settings) -> None:
    """Run the pygame simulator."""
    from carrunner.simulator.window import SimulatorWindow, WindowConfig

    window = SimulatorWindow(engine, WindowConfig.from_settings(settings))
    await window.run()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="carrunner", description="Car runner game")
    parser.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        help="rule set to play (defaults to CARRUNNER_VARIANT)",
    )
    parser.add_argument(
        "--headless",
        type=int,
        metavar="N",
        help="run N frames without a window and exit",
    )
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = parse_args(argv)
    settings = get_settings()
    setup_logging(args.debug or settings.debug, settings.log_path)

    logger.info("Car runner starting...")

    try:
        engine = build_engine(settings, args.variant)
        if args.headless is not None:
            run_headless(engine, args.headless)
        else:
            asyncio.run(run_simulator(engine, settings))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Car runner stopped")


if __name__ == "__main__":
    main()
