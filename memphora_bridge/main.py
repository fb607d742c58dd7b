"""Memphora Bridge entry point."""

import asyncio
import logging

from memphora_bridge.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Start the action server and run until interrupted."""
    from memphora_bridge.server import ActionServer

    if not settings.memphora_api_key:
        logger.warning(
            "MEMPHORA_API_KEY is empty; callers must send their own key "
            "in the Authorization header"
        )

    async def _run() -> None:
        server = ActionServer()
        await server.start()
        try:
            await asyncio.Event().wait()
        finally:
            await server.stop()

    logger.info("Starting Memphora Bridge against %s...", settings.memphora_api_url)
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
