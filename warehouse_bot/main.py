"""
Warehouse Telegram Bot - Main entry point.
"""

import asyncio
import contextlib
import logging
import sys

from warehouse_bot.bot.bot import get_bot, get_dispatcher
from warehouse_bot.bot.handlers import register_handlers
from warehouse_bot.config import settings
from warehouse_bot.core.conversation import get_session_store
from warehouse_bot.integrations.warehouse import get_warehouse_client


# Fix for Windows asyncio
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_sweeper: asyncio.Task | None = None


async def sweep_sessions(interval: float) -> None:
    """Periodically evict idle chat sessions."""
    store = get_session_store()
    while True:
        await asyncio.sleep(interval)
        await store.purge_expired()


async def on_startup() -> None:
    """Initialize services on startup."""
    global _sweeper
    logger.info(
        f"Starting Warehouse Bot @{settings.telegram_bot_username} "
        f"(warehouse service: {settings.warehouse_base_url})"
    )
    _sweeper = asyncio.create_task(sweep_sessions(settings.session_sweep_interval))


async def on_shutdown() -> None:
    """Cleanup on shutdown."""
    logger.info("Shutting down Warehouse Bot...")

    if _sweeper is not None:
        _sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await _sweeper

    await get_warehouse_client().close()

    logger.info("Cleanup complete")


async def main() -> None:
    """Main function to run the bot."""
    bot = get_bot()
    dp = get_dispatcher()

    # Register handlers
    register_handlers(dp)

    # Register startup/shutdown hooks
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    # Start polling
    logger.info("Bot is starting...")
    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await bot.session.close()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
