"""
Reply keyboards for the inventory menu.
"""

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from warehouse_bot.core.conversation import Menu


BACK_BUTTON = "🔙 Back to Main Menu"
GET_PRODUCTS_BUTTON = "📦 Get products"
CANCEL_BUTTON = "❌ Cancel"


def _markup(builder: ReplyKeyboardBuilder, placeholder: str | None = None) -> ReplyKeyboardMarkup:
    return builder.as_markup(
        resize_keyboard=True,
        one_time_keyboard=False,
        input_field_placeholder=placeholder,
    )


def get_main_menu_keyboard() -> ReplyKeyboardMarkup:
    """Top-level menu."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=GET_PRODUCTS_BUTTON))
    builder.row(KeyboardButton(text="➕ Add new products"))
    builder.row(KeyboardButton(text="✏️ Update products"))
    return _markup(builder, "Choose an action...")


def get_products_menu_keyboard() -> ReplyKeyboardMarkup:
    """Product lookup sub-menu."""
    builder = ReplyKeyboardBuilder()
    builder.row(
        KeyboardButton(text="All products"),
        KeyboardButton(text="Products by ID"),
    )
    builder.row(
        KeyboardButton(text="Thermocups by ID"),
        KeyboardButton(text="Search by filter"),
    )
    builder.row(KeyboardButton(text=BACK_BUTTON))
    return _markup(builder)


def get_add_menu_keyboard() -> ReplyKeyboardMarkup:
    """Product creation sub-menu."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text="Add new Thermal mug"))
    builder.row(KeyboardButton(text=BACK_BUTTON))
    return _markup(builder)


def get_update_menu_keyboard() -> ReplyKeyboardMarkup:
    """Product update sub-menu."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text="Update thermal mug by ID"))
    builder.row(KeyboardButton(text="Update quantity of reserved product"))
    builder.row(KeyboardButton(text="Update product quantity in stock"))
    builder.row(KeyboardButton(text=BACK_BUTTON))
    return _markup(builder)


def get_pagination_keyboard() -> ReplyKeyboardMarkup:
    """Next/previous page navigation."""
    builder = ReplyKeyboardBuilder()
    builder.row(
        KeyboardButton(text="⬅️ Previous page"),
        KeyboardButton(text="➡️ Next page"),
    )
    builder.row(
        KeyboardButton(text=BACK_BUTTON),
        KeyboardButton(text=GET_PRODUCTS_BUTTON),
    )
    return _markup(builder)


def get_cancel_keyboard() -> ReplyKeyboardMarkup:
    """Shown while the bot waits for typed input."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=CANCEL_BUTTON))
    return _markup(builder, "Type your answer...")


KEYBOARDS = {
    Menu.MAIN: get_main_menu_keyboard,
    Menu.PRODUCTS: get_products_menu_keyboard,
    Menu.ADD: get_add_menu_keyboard,
    Menu.UPDATE: get_update_menu_keyboard,
    Menu.PAGINATION: get_pagination_keyboard,
    Menu.CANCEL: get_cancel_keyboard,
}


def get_keyboard(menu: Menu) -> ReplyKeyboardMarkup:
    """Keyboard for a reply's menu hint."""
    return KEYBOARDS[menu]()
