"""
Wire models for the warehouse REST service.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


THERMOCUPS = "Thermocups"
SERVERS = "Servers"

# Category ids used by the warehouse service when no label is sent
CATEGORY_LABELS = {
    1: THERMOCUPS,
    2: SERVERS,
}


class Product(BaseModel):
    """Product record owned by the warehouse service."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[int] = None
    sku: Optional[str] = None
    base_price: Optional[Decimal] = None
    is_active: Optional[bool] = None
    quantity: Optional[int] = None
    num_reserved_goods: Optional[int] = None
    path_to_photo: Optional[str] = None

    @property
    def category_label(self) -> str:
        """Category label, falling back to the known id mapping."""
        if self.category:
            return self.category
        if self.category_id is not None:
            return CATEGORY_LABELS.get(self.category_id, f"Category #{self.category_id}")
        return "Unknown"


class ThermocupAttributes(BaseModel):
    """Thermal mug specific attributes."""

    model_config = ConfigDict(extra="ignore")

    product_id: Optional[int] = None
    volume_ml: Optional[int] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    is_hermetic: Optional[bool] = None
    material: Optional[str] = None


class ServerAttributes(BaseModel):
    """Server specific attributes."""

    model_config = ConfigDict(extra="ignore")

    product_id: Optional[int] = None
    ram_gb: Optional[int] = None
    cpu_model: Optional[str] = None
    cpu_cores: Optional[int] = None
    hdd_size_gb: Optional[int] = None
    ssd_size_gb: Optional[int] = None
    form_factor: Optional[str] = None  # Rack, Tower, Blade
    manufacturer: Optional[str] = None


class UnknownCategory(BaseModel):
    """Product category without an attribute schema."""

    label: str


CategoryAttributes = Union[ThermocupAttributes, ServerAttributes, UnknownCategory]


class ProductWithAttributes(BaseModel):
    """Product together with its category attributes."""

    product: Product
    attributes: CategoryAttributes


class StockChange(BaseModel):
    """Body of a stock quantity update."""

    warehouse_id: int
    quantity_change: int


class ReservedChange(BaseModel):
    """Body of a reserved quantity update."""

    quantity_change: int


class ProductDraft(BaseModel):
    """Product fields entered by staff when creating or updating a record."""

    name: str
    category_id: int
    base_price: Decimal = Field(ge=0)
    sku: str
    is_active: bool = True
    path_to_photo: Optional[str] = None
