"""Protean Engine runner for the marketplace domain.

Only needed when event processing is asynchronous (PROTEAN_ENV=production):
the Engine delivers order events to the notification handler and the
timeline projector.

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine

from marketplace.domain import marketplace
from marketplace.utils.logging import configure_logging


async def run():
    configure_logging()
    marketplace.init()
    await Engine(marketplace).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
