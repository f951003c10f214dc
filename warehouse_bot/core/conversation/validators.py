"""
Validators for free-text input of inventory flows.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from pydantic import ValidationError

from warehouse_bot.integrations.warehouse.models import ProductDraft, ThermocupAttributes

FIELD_SEPARATOR = "|"

TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0"}


def parse_int(text: str) -> Optional[int]:
    """Parse a signed integer, None if the text is not one."""
    text = text.strip()
    if text.startswith("+"):
        text = text[1:]
    try:
        return int(text)
    except ValueError:
        return None


def parse_bool(text: str) -> Optional[bool]:
    lowered = text.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


def parse_decimal(text: str) -> Optional[Decimal]:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def split_fields(text: str) -> list[str]:
    return [part.strip() for part in text.split(FIELD_SEPARATOR)]


class IdValidator:
    """Validate product and warehouse ids."""

    @classmethod
    def validate(cls, text: str, what: str = "ID") -> Tuple[bool, Optional[int], Optional[str]]:
        """
        Validate a positive integer id.

        Returns:
            Tuple of (is_valid, id, error_message)
        """
        value = parse_int(text)
        if value is None:
            return False, None, f"Invalid number format. {what} must be a whole number."
        if value <= 0:
            return False, None, f"{what} must be a positive number."
        return True, value, None


class QuantityChangeValidator:
    """Validate quantity deltas for stock and reservation updates."""

    @classmethod
    def validate(cls, text: str) -> Tuple[bool, Optional[int], Optional[str]]:
        """
        Validate a non-zero signed quantity change.

        Returns:
            Tuple of (is_valid, quantity_change, error_message)
        """
        value = parse_int(text)
        if value is None:
            return False, None, (
                "Invalid number format. Enter a whole number, "
                "positive to add or negative to subtract (e.g. 15 or -3)."
            )
        if value == 0:
            return False, None, "Quantity change cannot be zero."
        return True, value, None


class FilterValidator:
    """Validate product list filters written as key=value pairs."""

    @classmethod
    def validate(cls, text: str) -> Tuple[bool, Optional[dict[str, str]], Optional[str]]:
        filters: dict[str, str] = {}
        for part in split_fields(text):
            key, sep, value = part.partition("=")
            key, value = key.strip(), value.strip()
            if not sep or not key or not value:
                return False, None, (
                    "Invalid format. Use key=value pairs separated by '|', "
                    "e.g. category_id=1|is_active=true"
                )
            filters[key] = value
        return True, filters, None


class ThermocupPayloadValidator:
    """Validate pipe-separated thermal mug create/update lines."""

    # name|category_id|base_price|sku|is_active|path_to_photo|volume_ml|color|brand|model|is_hermetic|material
    FIELD_COUNT = 12

    CREATE_FORMAT = (
        "name|category_id|base_price|sku|is_active|path_to_photo|"
        "volume_ml|color|brand|model|is_hermetic|material"
    )
    UPDATE_FORMAT = "ID|" + CREATE_FORMAT

    @classmethod
    def validate(
        cls, text: str
    ) -> Tuple[bool, Optional[tuple[ProductDraft, ThermocupAttributes]], Optional[str]]:
        """
        Validate a create line.

        Returns:
            Tuple of (is_valid, (draft, attributes), error_message)
        """
        parts = split_fields(text)
        if len(parts) != cls.FIELD_COUNT:
            return False, None, (
                f"Invalid format. Expected {cls.FIELD_COUNT} fields separated by '|', "
                f"got {len(parts)}.\nFormat: {cls.CREATE_FORMAT}"
            )
        return cls._build(parts, cls.CREATE_FORMAT)

    @classmethod
    def validate_update(
        cls, text: str
    ) -> Tuple[bool, Optional[tuple[int, ProductDraft, ThermocupAttributes]], Optional[str]]:
        """
        Validate an update line: the product id followed by the create fields.

        Returns:
            Tuple of (is_valid, (product_id, draft, attributes), error_message)
        """
        parts = split_fields(text)
        if len(parts) != cls.FIELD_COUNT + 1:
            return False, None, (
                f"Invalid format. Expected {cls.FIELD_COUNT + 1} fields separated by '|', "
                f"got {len(parts)}.\nFormat: {cls.UPDATE_FORMAT}"
            )

        product_id = parse_int(parts[0])
        if product_id is None or product_id <= 0:
            return False, None, f"Invalid format. ID must be a positive number.\nFormat: {cls.UPDATE_FORMAT}"

        is_valid, payload, error = cls._build(parts[1:], cls.UPDATE_FORMAT)
        if not is_valid:
            return False, None, error
        draft, attributes = payload
        return True, (product_id, draft, attributes), None

    @classmethod
    def _build(
        cls, parts: list[str], fmt: str
    ) -> Tuple[bool, Optional[tuple[ProductDraft, ThermocupAttributes]], Optional[str]]:
        (name, category_id, base_price, sku, is_active, path_to_photo,
         volume_ml, color, brand, model, is_hermetic, material) = parts

        parsed = {
            "category_id": parse_int(category_id),
            "base_price": parse_decimal(base_price),
            "is_active": parse_bool(is_active),
            "volume_ml": parse_int(volume_ml),
            "is_hermetic": parse_bool(is_hermetic),
        }
        invalid = [field for field, value in parsed.items() if value is None]
        if not name:
            invalid.insert(0, "name")
        if invalid:
            return False, None, (
                f"Invalid format. Could not read: {', '.join(invalid)}.\nFormat: {fmt}"
            )

        try:
            draft = ProductDraft(
                name=name,
                category_id=parsed["category_id"],
                base_price=parsed["base_price"],
                sku=sku,
                is_active=parsed["is_active"],
                path_to_photo=path_to_photo or None,
            )
            attributes = ThermocupAttributes(
                volume_ml=parsed["volume_ml"],
                color=color or None,
                brand=brand or None,
                model=model or None,
                is_hermetic=parsed["is_hermetic"],
                material=material or None,
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            return False, None, f"Invalid format. Invalid value for: {fields}.\nFormat: {fmt}"

        return True, (draft, attributes), None
