"""SplashyBot entry point."""

import asyncio
import contextlib
import logging
import signal

from src.config import settings
from src.webhooks.server import WebhookServer

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


async def serve(port: int | None = None) -> None:
    """Run the webhook server until SIGINT or SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    server = WebhookServer(port=port)
    await server.start()
    try:
        await stop.wait()
    finally:
        await server.stop()


def main() -> None:
    """Start the WhatsApp relay."""
    logger.info("Starting SplashyBot on port %d...", settings.port)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
