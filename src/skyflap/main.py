"""
Main entry point for SKYFLAP.

Wires settings, storage, assets and the game into a desktop window.
"""

import asyncio
import logging
import sys

from skyflap.config.settings import Settings, get_settings
from skyflap.core.events import EventBus
from skyflap.core.scheduler import AsyncioFrameScheduler
from skyflap.errors import ResourceLoadError
from skyflap.game import GameStateMachine
from skyflap.graphics.draw_engine import BufferDrawEngine
from skyflap.resources.loader import PygameResourceLoader
from skyflap.resources.persistence import JsonFileStorage
from skyflap.resources.storage import ResourceStorage


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_game(settings: Settings) -> None:
    """Build the game and run it in a window until closed."""
    from skyflap.simulator.window import GameWindow

    draw_engine = BufferDrawEngine(settings.canvas.width, settings.canvas.height)
    resources = ResourceStorage(PygameResourceLoader(settings.resources.assets_path))
    storage = JsonFileStorage(settings.storage_path)

    game = GameStateMachine(
        settings=settings,
        draw_engine=draw_engine,
        resources=resources,
        storage=storage,
        scheduler=AsyncioFrameScheduler(),
        event_bus=EventBus(),
    )

    window = GameWindow(settings=settings, game=game, draw_engine=draw_engine)
    await window.run()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("SKYFLAP starting...")

    try:
        asyncio.run(run_game(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except ResourceLoadError as e:
        logger.error(f"Could not load assets: {e}")
        logger.error("Run scripts/generate_assets.py to create placeholder assets")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("SKYFLAP stopped")


if __name__ == "__main__":
    main()
