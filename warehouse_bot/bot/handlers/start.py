"""
Start, help and cancel command handlers.
"""

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from warehouse_bot.bot.handlers.inventory import answer_with_dispatcher

router = Router(name="start")


@router.message(CommandStart())
async def handle_start(message: Message) -> None:
    """Handle /start command: main menu, any pending input is dropped."""
    await answer_with_dispatcher(message, "/start")


@router.message(Command("help"))
async def handle_help(message: Message) -> None:
    """Handle /help command."""
    await answer_with_dispatcher(message, "/help")


@router.message(Command("cancel"))
async def handle_cancel(message: Message) -> None:
    """Abort the current input."""
    await answer_with_dispatcher(message, "/cancel")
