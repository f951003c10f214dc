"""
Inventory conversation dispatcher.

Interprets one inbound text per call: either as a menu command or, when the
chat is waiting for input, as the next field of the pending flow. Always
returns exactly one Reply; failures are rendered as text, never raised.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from aiogram import html

from warehouse_bot.core.conversation import messages
from warehouse_bot.core.conversation.formatting import (
    format_product_page,
    format_product_with_attributes,
)
from warehouse_bot.core.conversation.session import ProductListing, SessionStore
from warehouse_bot.core.conversation.states import (
    AwaitingFilter,
    AwaitingProductId,
    AwaitingReservedProductId,
    AwaitingReservedQuantity,
    AwaitingStockProductId,
    AwaitingStockQuantity,
    AwaitingStockWarehouseId,
    AwaitingThermocupCreate,
    AwaitingThermocupId,
    AwaitingThermocupUpdate,
    FlowState,
    SessionExpiredError,
)
from warehouse_bot.core.conversation.validators import (
    FilterValidator,
    IdValidator,
    QuantityChangeValidator,
    ThermocupPayloadValidator,
)
from warehouse_bot.integrations.warehouse.base import ApiResult, BaseWarehouseClient
from warehouse_bot.integrations.warehouse.models import THERMOCUPS, Product

logger = logging.getLogger(__name__)


class Menu(Enum):
    """Reply keyboard to show with a reply."""
    MAIN = "main"
    PRODUCTS = "products"
    ADD = "add"
    UPDATE = "update"
    PAGINATION = "pagination"
    CANCEL = "cancel"


@dataclass
class Reply:
    """Text answer to one inbound message plus a keyboard hint."""
    text: str
    menu: Menu = Menu.MAIN


class Command(Enum):
    """Top-level commands and menu buttons."""
    START = "start"
    HELP = "help"
    CANCEL = "cancel"
    BACK = "back"
    GET_PRODUCTS = "get_products"
    ADD_PRODUCTS = "add_products"
    UPDATE_PRODUCTS = "update_products"
    ALL_PRODUCTS = "all_products"
    PRODUCT_BY_ID = "product_by_id"
    THERMOCUP_BY_ID = "thermocup_by_id"
    SEARCH_BY_FILTER = "search_by_filter"
    ADD_THERMOCUP = "add_thermocup"
    UPDATE_THERMOCUP = "update_thermocup"
    UPDATE_RESERVED = "update_reserved"
    UPDATE_STOCK = "update_stock"
    NEXT_PAGE = "next_page"
    PREVIOUS_PAGE = "previous_page"


# Normalised button label / slash command -> command
COMMAND_LABELS = {
    "/start": Command.START,
    "/help": Command.HELP,
    "/cancel": Command.CANCEL,
    "cancel": Command.CANCEL,
    "back to main menu": Command.BACK,
    "get products": Command.GET_PRODUCTS,
    "add new products": Command.ADD_PRODUCTS,
    "update products": Command.UPDATE_PRODUCTS,
    "all products": Command.ALL_PRODUCTS,
    "products by id": Command.PRODUCT_BY_ID,
    "thermocups by id": Command.THERMOCUP_BY_ID,
    "search by filter": Command.SEARCH_BY_FILTER,
    "add new thermal mug": Command.ADD_THERMOCUP,
    "update thermal mug by id": Command.UPDATE_THERMOCUP,
    "update quantity of reserved product": Command.UPDATE_RESERVED,
    "update product quantity in stock": Command.UPDATE_STOCK,
    "next page": Command.NEXT_PAGE,
    "previous page": Command.PREVIOUS_PAGE,
}

# Recognised even while a flow is waiting for input
INTERRUPTING_COMMANDS = {
    Command.START,
    Command.HELP,
    Command.CANCEL,
    Command.BACK,
    Command.NEXT_PAGE,
    Command.PREVIOUS_PAGE,
}

_LEADING_SYMBOLS = re.compile(r"^[^\w/]+")
_SPACES = re.compile(r"\s+")


def parse_command(text: str) -> Optional[Command]:
    """Map a message to a command, ignoring emoji prefixes, case and bot mentions."""
    normalized = _LEADING_SYMBOLS.sub("", text.strip())
    normalized = _SPACES.sub(" ", normalized).lower()
    if normalized.startswith("/"):
        normalized = normalized.split(" ", 1)[0].split("@", 1)[0]
    return COMMAND_LABELS.get(normalized)


def _product_caption(product_id: int, product: Product) -> str:
    if not product.name:
        return f"ID {product_id}"
    return f"{html.quote(product.name)} (ID {product_id})"


InputHandler = Callable[[int, FlowState, str], Awaitable[Reply]]


class CommandDispatcher:
    """Per-chat state machine over the inventory menu."""

    def __init__(
        self,
        client: BaseWarehouseClient,
        store: SessionStore,
        page_size: int = 5,
    ):
        self.client = client
        self.store = store
        self.page_size = page_size

        self._commands: dict[Command, Callable[[int], Awaitable[Reply]]] = {
            Command.START: self._show_main_menu,
            Command.BACK: self._show_main_menu,
            Command.HELP: self._show_help,
            Command.CANCEL: self._cancel,
            Command.GET_PRODUCTS: self._show_products_menu,
            Command.ADD_PRODUCTS: self._show_add_menu,
            Command.UPDATE_PRODUCTS: self._show_update_menu,
            Command.ALL_PRODUCTS: self._list_all_products,
            Command.PRODUCT_BY_ID: self._start_flow(AwaitingProductId(), messages.ASK_PRODUCT_ID),
            Command.THERMOCUP_BY_ID: self._start_flow(AwaitingThermocupId(), messages.ASK_THERMOCUP_ID),
            Command.SEARCH_BY_FILTER: self._start_flow(AwaitingFilter(), messages.ASK_FILTER),
            Command.ADD_THERMOCUP: self._start_flow(
                AwaitingThermocupCreate(), messages.ASK_THERMOCUP_CREATE
            ),
            Command.UPDATE_THERMOCUP: self._start_flow(
                AwaitingThermocupUpdate(), messages.ASK_THERMOCUP_UPDATE
            ),
            Command.UPDATE_RESERVED: self._start_flow(
                AwaitingReservedProductId(), messages.ASK_RESERVED_PRODUCT_ID
            ),
            Command.UPDATE_STOCK: self._start_flow(
                AwaitingStockProductId(), messages.ASK_STOCK_PRODUCT_ID
            ),
            Command.NEXT_PAGE: lambda chat_id: self._turn_page(chat_id, 1),
            Command.PREVIOUS_PAGE: lambda chat_id: self._turn_page(chat_id, -1),
        }

        self._inputs: dict[type[FlowState], InputHandler] = {
            AwaitingProductId: self._on_product_id,
            AwaitingThermocupId: self._on_thermocup_id,
            AwaitingFilter: self._on_filter,
            AwaitingThermocupCreate: self._on_thermocup_create,
            AwaitingThermocupUpdate: self._on_thermocup_update,
            AwaitingStockProductId: self._on_stock_product_id,
            AwaitingStockWarehouseId: self._on_stock_warehouse_id,
            AwaitingStockQuantity: self._on_stock_quantity,
            AwaitingReservedProductId: self._on_reserved_product_id,
            AwaitingReservedQuantity: self._on_reserved_quantity,
        }

    async def handle(self, text: str, chat_id: int) -> Reply:
        """
        Process one inbound message.

        Callers serialise messages of the same chat; the aiogram dispatcher
        does it through its event isolation.
        """
        try:
            return await self._dispatch(text or "", chat_id)
        except Exception as e:
            logger.error(f"Error handling message from chat {chat_id}: {e}", exc_info=True)
            return Reply(messages.GENERIC_ERROR)

    async def _dispatch(self, text: str, chat_id: int) -> Reply:
        command = parse_command(text)
        if command in INTERRUPTING_COMMANDS:
            return await self._commands[command](chat_id)

        try:
            flow = await self.store.get_flow(chat_id)
        except SessionExpiredError as e:
            logger.info(f"{e}")
            await self.store.clear(chat_id)
            if command is None:
                return Reply(messages.SESSION_EXPIRED)
            reply = await self._commands[command](chat_id)
            return Reply(f"{messages.SESSION_EXPIRED}\n\n{reply.text}", reply.menu)

        if flow is not None:
            # Cleared before parsing so a failing handler cannot leave the chat stuck
            await self.store.clear(chat_id)
            return await self._inputs[type(flow)](chat_id, flow, text.strip())

        if command is None:
            return Reply(messages.UNKNOWN_COMMAND)
        return await self._commands[command](chat_id)

    # =========================================================================
    # MENUS
    # =========================================================================

    async def _show_main_menu(self, chat_id: int) -> Reply:
        await self.store.clear(chat_id)
        return Reply(messages.WELCOME_MESSAGE, Menu.MAIN)

    async def _show_help(self, chat_id: int) -> Reply:
        menu = Menu.CANCEL if await self.store.get(chat_id) is not None else Menu.MAIN
        return Reply(messages.HELP_MESSAGE, menu)

    async def _cancel(self, chat_id: int) -> Reply:
        had_flow = await self.store.get(chat_id) is not None
        await self.store.clear(chat_id)
        return Reply(messages.CANCELLED if had_flow else messages.NOTHING_TO_CANCEL, Menu.MAIN)

    async def _show_products_menu(self, chat_id: int) -> Reply:
        return Reply(messages.PRODUCTS_MENU, Menu.PRODUCTS)

    async def _show_add_menu(self, chat_id: int) -> Reply:
        return Reply(messages.ADD_PRODUCTS_MENU, Menu.ADD)

    async def _show_update_menu(self, chat_id: int) -> Reply:
        return Reply(messages.UPDATE_PRODUCTS_MENU, Menu.UPDATE)

    def _start_flow(self, flow: FlowState, prompt: str) -> Callable[[int], Awaitable[Reply]]:
        async def start(chat_id: int) -> Reply:
            await self.store.set(chat_id, flow)
            return Reply(prompt, Menu.CANCEL)
        return start

    async def _retry(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        """Keep the chat on the same step and ask again."""
        await self.store.set(chat_id, flow)
        return Reply(text, Menu.CANCEL)

    # =========================================================================
    # LISTING AND PAGINATION
    # =========================================================================

    async def _list_all_products(self, chat_id: int) -> Reply:
        return await self._show_listing(chat_id, None, "All Products")

    async def _show_listing(
        self, chat_id: int, filters: Optional[dict[str, str]], title: str
    ) -> Reply:
        result = await self.client.list_products(filters)
        if not result.ok:
            await self.store.set_listing(chat_id, None)
            return self._upstream_error(result, Menu.PRODUCTS)

        if not result.value:
            await self.store.set_listing(chat_id, None)
            return Reply(messages.NO_PRODUCTS, Menu.PRODUCTS)

        listing = ProductListing(products=result.value, page_size=self.page_size, title=title)
        await self.store.set_listing(chat_id, listing)
        return Reply(self._render_page(listing), Menu.PAGINATION)

    async def _turn_page(self, chat_id: int, step: int) -> Reply:
        listing = await self.store.get_listing(chat_id)
        if listing is None:
            return Reply(messages.NO_LISTING, Menu.PRODUCTS)

        previous = listing.page
        listing.move(step)
        await self.store.set_listing(chat_id, listing)
        text = self._render_page(listing)
        if listing.page == previous:
            notice = messages.LAST_PAGE if step > 0 else messages.FIRST_PAGE
            text = f"{notice}\n\n{text}"
        return Reply(text, Menu.PAGINATION)

    @staticmethod
    def _render_page(listing: ProductListing) -> str:
        return format_product_page(
            listing.current_page(),
            listing.page,
            listing.total_pages,
            len(listing.products),
            listing.title,
        )

    # =========================================================================
    # SINGLE-SHOT FLOWS
    # =========================================================================

    async def _on_product_id(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        is_valid, product_id, error = IdValidator.validate(text, "Product ID")
        if not is_valid:
            return Reply(error, Menu.PRODUCTS)

        result = await self.client.get_product_with_attributes(product_id)
        if result.not_found:
            return Reply(messages.PRODUCT_NOT_FOUND, Menu.PRODUCTS)
        if not result.ok:
            return self._upstream_error(result, Menu.PRODUCTS)

        found = result.value
        return Reply(format_product_with_attributes(found.product, found.attributes), Menu.PRODUCTS)

    async def _on_thermocup_id(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        is_valid, product_id, error = IdValidator.validate(text, "Thermocup ID")
        if not is_valid:
            return Reply(error, Menu.PRODUCTS)

        product_result = await self.client.get_product(product_id)
        if product_result.not_found:
            return Reply(messages.THERMOCUP_NOT_FOUND, Menu.PRODUCTS)
        if not product_result.ok:
            return self._upstream_error(product_result, Menu.PRODUCTS)

        product = product_result.value
        if product.category_label != THERMOCUPS:
            return Reply(messages.THERMOCUP_NOT_FOUND, Menu.PRODUCTS)

        attributes_result = await self.client.get_thermocup_attributes(product_id)
        if attributes_result.not_found:
            return Reply(messages.THERMOCUP_NOT_FOUND, Menu.PRODUCTS)
        if not attributes_result.ok:
            return self._upstream_error(attributes_result, Menu.PRODUCTS)

        return Reply(
            format_product_with_attributes(product, attributes_result.value), Menu.PRODUCTS
        )

    async def _on_filter(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        is_valid, filters, error = FilterValidator.validate(text)
        if not is_valid:
            return Reply(error, Menu.PRODUCTS)
        return await self._show_listing(chat_id, filters, "Filtered Products")

    async def _on_thermocup_create(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        is_valid, payload, error = ThermocupPayloadValidator.validate(text)
        if not is_valid:
            return Reply(error, Menu.ADD)

        draft, attributes = payload
        result = await self.client.create_thermocup(draft, attributes)
        if result.ok:
            logger.info(f"Chat {chat_id}: created thermocup {result.value.id}")
            return Reply(messages.THERMOCUP_CREATED.format(product_id=result.value.id), Menu.ADD)
        if result.value is not None:
            logger.error(
                f"Chat {chat_id}: product {result.value.id} created without attributes: {result.detail}"
            )
            return Reply(
                messages.THERMOCUP_ATTRIBUTES_FAILED.format(product_id=result.value.id), Menu.ADD
            )
        return self._upstream_error(result, Menu.ADD)

    async def _on_thermocup_update(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        is_valid, payload, error = ThermocupPayloadValidator.validate_update(text)
        if not is_valid:
            return Reply(error, Menu.UPDATE)

        product_id, draft, attributes = payload
        result = await self.client.update_thermocup(product_id, draft, attributes)
        if result.not_found:
            return Reply(messages.THERMOCUP_NOT_FOUND, Menu.UPDATE)
        if not result.ok:
            return self._upstream_error(result, Menu.UPDATE)
        return Reply(messages.THERMOCUP_UPDATED.format(product_id=product_id), Menu.UPDATE)

    # =========================================================================
    # STOCK UPDATE: product -> warehouse -> quantity
    # =========================================================================

    async def _on_stock_product_id(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        product_id, product, reply = await self._lookup_flow_product(chat_id, flow, text)
        if product is None:
            return reply

        await self.store.set(chat_id, AwaitingStockWarehouseId(product_id=product_id))
        return Reply(
            messages.ASK_STOCK_WAREHOUSE_ID.format(product=_product_caption(product_id, product)),
            Menu.CANCEL,
        )

    async def _on_stock_warehouse_id(
        self, chat_id: int, flow: AwaitingStockWarehouseId, text: str
    ) -> Reply:
        is_valid, warehouse_id, error = IdValidator.validate(text, "Warehouse ID")
        if not is_valid:
            return await self._retry(chat_id, flow, messages.TRY_AGAIN.format(error=error))

        await self.store.set(
            chat_id,
            AwaitingStockQuantity(product_id=flow.product_id, warehouse_id=warehouse_id),
        )
        return Reply(
            messages.ASK_STOCK_QUANTITY.format(
                product_id=flow.product_id, warehouse_id=warehouse_id
            ),
            Menu.CANCEL,
        )

    async def _on_stock_quantity(
        self, chat_id: int, flow: AwaitingStockQuantity, text: str
    ) -> Reply:
        is_valid, quantity_change, error = QuantityChangeValidator.validate(text)
        if not is_valid:
            return await self._retry(chat_id, flow, messages.TRY_AGAIN.format(error=error))

        result = await self.client.update_stock_quantity(
            flow.product_id, flow.warehouse_id, quantity_change
        )
        if result.not_found:
            return Reply(messages.PRODUCT_NOT_FOUND, Menu.UPDATE)
        if not result.ok:
            return self._upstream_error(result, Menu.UPDATE)

        logger.info(
            f"Chat {chat_id}: stock of product {flow.product_id} in warehouse "
            f"{flow.warehouse_id} changed by {quantity_change}"
        )
        return Reply(
            messages.STOCK_UPDATED.format(
                product_id=flow.product_id,
                warehouse_id=flow.warehouse_id,
                quantity_change=quantity_change,
            ),
            Menu.UPDATE,
        )

    # =========================================================================
    # RESERVED UPDATE: product -> quantity
    # =========================================================================

    async def _on_reserved_product_id(self, chat_id: int, flow: FlowState, text: str) -> Reply:
        product_id, product, reply = await self._lookup_flow_product(chat_id, flow, text)
        if product is None:
            return reply

        await self.store.set(chat_id, AwaitingReservedQuantity(product_id=product_id))
        return Reply(
            messages.ASK_RESERVED_QUANTITY.format(product=_product_caption(product_id, product)),
            Menu.CANCEL,
        )

    async def _on_reserved_quantity(
        self, chat_id: int, flow: AwaitingReservedQuantity, text: str
    ) -> Reply:
        is_valid, quantity_change, error = QuantityChangeValidator.validate(text)
        if not is_valid:
            return await self._retry(chat_id, flow, messages.TRY_AGAIN.format(error=error))

        result = await self.client.update_reserved_quantity(flow.product_id, quantity_change)
        if result.not_found:
            return Reply(messages.PRODUCT_NOT_FOUND, Menu.UPDATE)
        if not result.ok:
            return self._upstream_error(result, Menu.UPDATE)

        logger.info(
            f"Chat {chat_id}: reserved quantity of product {flow.product_id} "
            f"changed by {quantity_change}"
        )
        return Reply(
            messages.RESERVED_UPDATED.format(
                product_id=flow.product_id, quantity_change=quantity_change
            ),
            Menu.UPDATE,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _lookup_flow_product(
        self, chat_id: int, flow: FlowState, text: str
    ) -> tuple[Optional[int], Optional[Product], Optional[Reply]]:
        """
        First step of a multi-step flow: the product must exist.

        Invalid or unknown ids keep the chat on the same step.
        """
        is_valid, product_id, error = IdValidator.validate(text, "Product ID")
        if not is_valid:
            retry = await self._retry(chat_id, flow, messages.TRY_AGAIN.format(error=error))
            return None, None, retry

        result = await self.client.get_product(product_id)
        if result.not_found:
            return product_id, None, await self._retry(
                chat_id, flow, messages.PRODUCT_NOT_FOUND_RETRY.format(product_id=product_id)
            )
        if not result.ok:
            return product_id, None, self._upstream_error(result, Menu.UPDATE)
        return product_id, result.value, None

    @staticmethod
    def _upstream_error(result: ApiResult, menu: Menu) -> Reply:
        logger.warning(f"Warehouse request failed: {result.status.value} {result.detail or ''}")
        return Reply(messages.UPSTREAM_ERROR, menu)
