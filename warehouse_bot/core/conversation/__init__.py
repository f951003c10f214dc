"""
Inventory conversation: per-chat flow state, input validation and rendering.
"""

from functools import lru_cache

from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.utils.token import extract_bot_id

from warehouse_bot.config import settings
from warehouse_bot.core.conversation.dispatcher import (
    Command,
    CommandDispatcher,
    Menu,
    Reply,
    parse_command,
)
from warehouse_bot.core.conversation.session import ProductListing, SessionStore
from warehouse_bot.core.conversation.states import FlowState, PendingInput, SessionExpiredError
from warehouse_bot.integrations.warehouse import get_warehouse_client


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Get process-wide session store over the bot's FSM storage."""
    return SessionStore(
        storage=MemoryStorage(),
        bot_id=extract_bot_id(settings.telegram_bot_token),
        idle_timeout=settings.session_idle_timeout,
    )


@lru_cache(maxsize=1)
def get_command_dispatcher() -> CommandDispatcher:
    """Get process-wide dispatcher wired to the configured warehouse client."""
    return CommandDispatcher(
        client=get_warehouse_client(),
        store=get_session_store(),
        page_size=settings.page_size,
    )


__all__ = [
    # Dispatcher
    "Command",
    "CommandDispatcher",
    "Menu",
    "Reply",
    "parse_command",
    "get_command_dispatcher",
    # Session
    "ProductListing",
    "SessionStore",
    "get_session_store",
    # States
    "FlowState",
    "PendingInput",
    "SessionExpiredError",
]
