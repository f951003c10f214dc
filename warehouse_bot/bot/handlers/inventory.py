"""
Message handler - forwards chat text to the inventory dispatcher.
"""

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from warehouse_bot.bot.keyboards.menu import get_keyboard
from warehouse_bot.core.conversation import get_command_dispatcher

router = Router(name="inventory")
logger = logging.getLogger(__name__)


async def answer_with_dispatcher(message: Message, text: str) -> None:
    """Run text through the dispatcher and send its single reply."""
    chat_id = message.chat.id
    username = message.from_user.username if message.from_user else None

    logger.info(f"Received message {text[:50]!r} from @{username} (chat {chat_id})")

    reply = await get_command_dispatcher().handle(text, chat_id)

    try:
        await message.answer(reply.text, reply_markup=get_keyboard(reply.menu))
    except TelegramAPIError as e:
        logger.error(f"Failed to send message to chat {chat_id}: {e}")


@router.message(F.text)
async def handle_text(message: Message) -> None:
    """Handle menu buttons and typed input."""
    await answer_with_dispatcher(message, message.text)


@router.message()
async def handle_other(message: Message) -> None:
    """Non-text messages cannot be interpreted."""
    await message.answer("Please send text or use the menu buttons.")
