"""
Text rendering of warehouse records.
Output is Telegram HTML; every value coming from the service is escaped.
"""

from decimal import Decimal
from typing import Any, Optional

from aiogram import html

from warehouse_bot.integrations.warehouse.models import (
    CategoryAttributes,
    Product,
    ServerAttributes,
    ThermocupAttributes,
    UnknownCategory,
)


def _text(value: Any) -> str:
    if value is None or value == "":
        return "—"
    return html.quote(str(value))


def _yes_no(value: Optional[bool]) -> str:
    if value is None:
        return "—"
    return "Yes" if value else "No"


def format_price(price: Optional[Decimal]) -> str:
    if price is None:
        return "—"
    return f"${price:.2f}"


def format_product(product: Product) -> str:
    """Render every product field."""
    lines = [
        f"🆔 ID: {_text(product.id)}",
        f"📛 Name: {html.bold(_text(product.name))}",
        f"🏷️ Category: {_text(product.category_label)}",
        f"🔖 SKU: {_text(product.sku)}",
        f"💰 Price: {format_price(product.base_price)}",
        f"📦 In stock: {_text(product.quantity)}",
        f"📌 Reserved: {_text(product.num_reserved_goods)}",
        f"🔧 Active: {_yes_no(product.is_active)}",
        f"📸 Photo: {_text(product.path_to_photo)}",
    ]
    return "\n".join(lines)


def format_product_short(product: Product) -> str:
    """One-line product summary for listings."""
    return (
        f"🆔 {_text(product.id)} | 📛 {_text(product.name)} | "
        f"💰 {format_price(product.base_price)} | 📦 {_text(product.quantity)}"
    )


def format_thermocup_attributes(attributes: ThermocupAttributes) -> str:
    lines = [
        "🧴 <b>Thermocup Attributes:</b>",
        f"• Volume: {_text(attributes.volume_ml)} ml",
        f"• Color: {_text(attributes.color)}",
        f"• Brand: {_text(attributes.brand)}",
        f"• Model: {_text(attributes.model)}",
        f"• Hermetic: {_yes_no(attributes.is_hermetic)}",
        f"• Material: {_text(attributes.material)}",
    ]
    return "\n".join(lines)


def format_server_attributes(attributes: ServerAttributes) -> str:
    lines = [
        "🖥️ <b>Server Attributes:</b>",
        f"• RAM: {_text(attributes.ram_gb)} GB",
        f"• CPU: {_text(attributes.cpu_model)} ({_text(attributes.cpu_cores)} cores)",
        f"• HDD: {_text(attributes.hdd_size_gb)} GB",
        f"• SSD: {_text(attributes.ssd_size_gb)} GB",
        f"• Form factor: {_text(attributes.form_factor)}",
        f"• Manufacturer: {_text(attributes.manufacturer)}",
    ]
    return "\n".join(lines)


def format_attributes(attributes: CategoryAttributes) -> str:
    """Render the category-specific block."""
    if isinstance(attributes, ThermocupAttributes):
        return format_thermocup_attributes(attributes)
    if isinstance(attributes, ServerAttributes):
        return format_server_attributes(attributes)
    if isinstance(attributes, UnknownCategory):
        return f"🏷️ Category: {_text(attributes.label)}"
    raise TypeError(f"Unsupported attributes type: {type(attributes).__name__}")


def format_product_with_attributes(
    product: Product, attributes: Optional[CategoryAttributes] = None
) -> str:
    """Render a product followed by its category attributes."""
    if attributes is None:
        attributes = UnknownCategory(label=product.category_label)
    return f"{format_product(product)}\n\n{format_attributes(attributes)}"


def format_product_page(
    products: list[Product],
    page: int,
    total_pages: int,
    total_count: int,
    title: str = "All Products",
) -> str:
    """Render one page of a product listing."""
    header = f"📦 <b>{html.quote(title)}</b> (page {page + 1} of {total_pages}, {total_count} total)"
    body = "\n\n".join(format_product_short(p) for p in products)
    return f"{header}\n\n{body}"
