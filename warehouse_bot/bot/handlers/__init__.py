"""
Bot handlers registration.
"""

from aiogram import Dispatcher

from warehouse_bot.bot.handlers.start import router as start_router
from warehouse_bot.bot.handlers.inventory import router as inventory_router


def register_handlers(dp: Dispatcher) -> None:
    """Register all handlers to dispatcher."""
    # Order matters! Commands first, then the catch-all inventory handler
    dp.include_router(start_router)
    dp.include_router(inventory_router)
