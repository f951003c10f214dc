"""
Per-chat conversation state on top of aiogram FSM storage.

The pending input is the FSM state of the chat; staged flow values, the
cached product listing and the session-expired marker live in its FSM data.
Keys follow the FSMStrategy.CHAT layout so the store and the aiogram
dispatcher address the same record.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.fsm.storage.base import BaseStorage, StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from warehouse_bot.core.conversation.states import (
    FlowState,
    SessionExpiredError,
    pending_input,
)
from warehouse_bot.integrations.warehouse.models import Product

logger = logging.getLogger(__name__)

# FSM data keys
STAGING = "staging"
LISTING = "listing"
EXPIRED = "expired"


@dataclass
class ProductListing:
    """Cached product list of a chat and its current page."""

    products: list[Product]
    page_size: int
    page: int = 0
    title: str = "All Products"

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.products) / self.page_size)

    def clamp(self, page: int) -> int:
        """Clamp a page index to the valid range."""
        return max(0, min(page, self.total_pages - 1))

    def move(self, step: int) -> int:
        """Move the cursor by step pages, staying inside the list."""
        self.page = self.clamp(self.page + step)
        return self.page

    def current_page(self) -> list[Product]:
        start = self.page * self.page_size
        return self.products[start:start + self.page_size]

    def to_data(self) -> dict[str, Any]:
        return {
            "products": [p.model_dump(mode="json") for p in self.products],
            "page_size": self.page_size,
            "page": self.page,
            "title": self.title,
        }

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "ProductListing":
        return cls(
            products=[Product.model_validate(p) for p in data["products"]],
            page_size=data["page_size"],
            page=data["page"],
            title=data["title"],
        )


class SessionStore:
    """Session store backed by an aiogram FSM storage."""

    def __init__(
        self,
        storage: Optional[BaseStorage] = None,
        bot_id: int = 0,
        idle_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.storage = storage or MemoryStorage()
        self.bot_id = bot_id
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._touched: dict[StorageKey, float] = {}

    def __len__(self) -> int:
        return len(self._touched)

    def key(self, chat_id: int) -> StorageKey:
        """Storage key of a chat, as built by FSMStrategy.CHAT."""
        return StorageKey(bot_id=self.bot_id, chat_id=chat_id, user_id=chat_id)

    def context(self, chat_id: int) -> FSMContext:
        return FSMContext(storage=self.storage, key=self.key(chat_id))

    async def _session(self, chat_id: int) -> FSMContext:
        state = self.context(chat_id)
        touched_at = self._touched.get(state.key)
        if touched_at is not None and self._is_idle(touched_at):
            await self._expire(state)
        self._touched[state.key] = self._clock()
        return state

    def _is_idle(self, touched_at: float) -> bool:
        if self.idle_timeout is None:
            return False
        return self._clock() - touched_at > self.idle_timeout

    async def _expire(self, state: FSMContext) -> None:
        pending = await state.get_state()
        await state.set_state(None)
        if pending is not None:
            logger.info(f"Chat {state.key.chat_id}: session expired while {pending}")
            await state.set_data({EXPIRED: True})
        else:
            await state.set_data({})

    # Pending input

    async def get(self, chat_id: int) -> Optional[State]:
        """Pending-input state of a chat, None when at the top-level menu."""
        state = await self._session(chat_id)
        return pending_input(await state.get_state())

    async def set(self, chat_id: int, flow: FlowState | State) -> None:
        """Set the pending input; a flow variant also replaces the staged values."""
        state = await self._session(chat_id)
        data = await state.get_data()
        data.pop(EXPIRED, None)
        if isinstance(flow, FlowState):
            await state.set_state(flow.tag)
            data[STAGING] = flow.staged()
        else:
            await state.set_state(flow)
        await state.set_data(data)

    async def clear(self, chat_id: int) -> None:
        """Drop the pending input and staged values. Safe to call repeatedly."""
        state = self.context(chat_id)
        await state.set_state(None)
        data = await state.get_data()
        data.pop(STAGING, None)
        data.pop(EXPIRED, None)
        await state.set_data(data)
        await self._discard_if_empty(state)

    async def get_flow(self, chat_id: int) -> Optional[FlowState]:
        """
        Current flow variant of a chat.

        Raises:
            SessionExpiredError: if the flow timed out or its staged values are gone
        """
        state = await self._session(chat_id)
        data = await state.get_data()
        if data.pop(EXPIRED, False):
            await state.set_data(data)
            raise SessionExpiredError(f"chat {chat_id}: session expired")
        raw_state = await state.get_state()
        if raw_state is None:
            return None
        return FlowState.restore(raw_state, data.get(STAGING, {}))

    # Staging

    async def stage_set(self, chat_id: int, field_name: str, value: Any) -> None:
        state = await self._session(chat_id)
        staging = dict((await state.get_data()).get(STAGING, {}))
        staging[field_name] = value
        await state.update_data({STAGING: staging})

    async def stage_get(self, chat_id: int, field_name: str) -> Any:
        data = await self.storage.get_data(self.key(chat_id))
        return data.get(STAGING, {}).get(field_name)

    async def stage_clear(self, chat_id: int) -> None:
        state = self.context(chat_id)
        data = await state.get_data()
        if data.pop(STAGING, None) is not None:
            await state.set_data(data)

    # Product listing

    async def set_listing(self, chat_id: int, listing: Optional[ProductListing]) -> None:
        """Replace the cached listing; None or an empty list drops it."""
        state = await self._session(chat_id)
        if listing is None or not listing.products:
            data = await state.get_data()
            data.pop(LISTING, None)
            await state.set_data(data)
            await self._discard_if_empty(state)
        else:
            await state.update_data({LISTING: listing.to_data()})

    async def get_listing(self, chat_id: int) -> Optional[ProductListing]:
        state = await self._session(chat_id)
        data = (await state.get_data()).get(LISTING)
        if data is None:
            return None
        return ProductListing.from_data(data)

    # Eviction

    async def purge_expired(self) -> int:
        """
        Evict sessions idle for longer than idle_timeout.

        Sessions that were waiting for input keep an expiry marker so the
        next message from that chat is answered with a session-expired notice.

        Returns:
            Number of evicted sessions
        """
        if self.idle_timeout is None:
            return 0

        evicted = 0
        for key, touched_at in list(self._touched.items()):
            if not self._is_idle(touched_at):
                continue
            state = FSMContext(storage=self.storage, key=key)
            data = await state.get_data()
            if data.get(EXPIRED) or await state.get_state() is None:
                await state.clear()
                self._forget(key)
            else:
                await self._expire(state)
                self._touched[key] = self._clock()
            evicted += 1

        self._drop_blank_records()
        if evicted:
            logger.info(f"Evicted {evicted} idle chat sessions")
        return evicted

    async def _discard_if_empty(self, state: FSMContext) -> None:
        if await state.get_state() is None and not await state.get_data():
            self._forget(state.key)

    def _drop_blank_records(self) -> None:
        """Drop empty MemoryStorage records the aiogram dispatcher created for unseen chats."""
        if not isinstance(self.storage, MemoryStorage):
            return
        blank = [
            key
            for key, record in self.storage.storage.items()
            if key not in self._touched and record.state is None and not record.data
        ]
        for key in blank:
            del self.storage.storage[key]

    def _forget(self, key: StorageKey) -> None:
        self._touched.pop(key, None)
        if isinstance(self.storage, MemoryStorage):
            self.storage.storage.pop(key, None)
