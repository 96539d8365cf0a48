"""Entry point: python -m services.economy"""

import asyncio
import logging
import signal

from services.economy.config import EconomyConfig
from services.economy.economy import EconomyService


async def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    config = EconomyConfig.from_env()
    service = await EconomyService.from_config(config)
    loop = asyncio.get_running_loop()

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logging.getLogger(__name__).info("Shutdown signal received")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    await service.start()
    logging.getLogger(__name__).info(
        "Economy service is running over vault %s. Press Ctrl+C to stop.", config.vault_path
    )

    await stop_event.wait()
    await service.stop()


if __name__ == "__main__":
    asyncio.run(main())
