"""
main.py - Single entry point.

Runs the product analysis HTTP API in one asyncio event loop until
SIGINT / SIGTERM.
"""
import asyncio
import logging
import signal
import sys

import config
from api_server import start_api_server

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    handlers=[logging.StreamHandler(sys.stdout)],
)
logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


async def run() -> None:
    if not config.GOOGLE_API_KEY:
        logger.warning("GOOGLE_API_KEY is not set - analysis requests will fail.")

    runner = await start_api_server()

    stop_event = asyncio.Event()

    def _stop(*_):
        logger.info("Shutdown signal received.")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _stop)
        except (NotImplementedError, RuntimeError):
            # Windows doesn't support add_signal_handler for all signals
            pass

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down…")
        await runner.cleanup()

    logger.info("Goodbye.")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
