"""
Poll a Fireworq instance on an interval and log the most delayed queues.

Run with: python examples/watch.py
"""

import asyncio
import logging
import os

from queuestat import QueueStatError, Settings, poll

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Configuration
INTERVAL = float(os.environ.get("INTERVAL", "10"))  # Seconds between polls
TOP_N = int(os.environ.get("TOP_N", "5"))


async def main() -> None:
    settings = Settings()
    logger.info("Watching %s every %.0fs", settings.base_url, INTERVAL)

    while True:
        try:
            snapshot = await poll(settings)
        except QueueStatError as e:
            logger.warning("Poll failed: %s", e)
        else:
            delays = sorted(
                (
                    (name.removeprefix("queue.delay."), value)
                    for name, value in snapshot.items()
                    if name.startswith("queue.delay.")
                ),
                key=lambda item: item[1],
                reverse=True,
            )
            logger.info(
                "waiting=%d outstanding=%d active_nodes=%d",
                snapshot["jobs_waiting"],
                snapshot["jobs_outstanding"],
                snapshot["active_nodes"],
            )
            for queue, delay in delays[:TOP_N]:
                logger.info("  %-30s %8.1fs", queue, delay)
        await asyncio.sleep(INTERVAL)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
