"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")

from decimal import Decimal
from typing import Mapping, Optional

import pytest

from warehouse_bot.core.conversation import CommandDispatcher, SessionStore
from warehouse_bot.integrations.warehouse.base import ApiResult, BaseWarehouseClient
from warehouse_bot.integrations.warehouse.models import (
    Product,
    ProductDraft,
    ServerAttributes,
    ThermocupAttributes,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWarehouseClient(BaseWarehouseClient):
    """In-memory warehouse service that records every call."""

    def __init__(self, products: Optional[list[Product]] = None):
        self.products = {p.id: p for p in products or []}
        self.thermocups: dict[int, ThermocupAttributes] = {}
        self.servers: dict[int, ServerAttributes] = {}
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.raising: set[str] = set()
        self.next_id = 100

    def _call(self, name: str, *args) -> Optional[ApiResult]:
        self.calls.append((name, *args))
        if name in self.raising:
            raise RuntimeError(f"{name} exploded")
        if name in self.failing:
            return ApiResult.failure("HTTP 500: boom")
        return None

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def get_product(self, product_id: int) -> ApiResult[Product]:
        failed = self._call("get_product", product_id)
        if failed:
            return failed
        product = self.products.get(product_id)
        return ApiResult.success(product) if product else ApiResult.missing()

    async def list_products(
        self, filters: Optional[Mapping[str, str]] = None
    ) -> ApiResult[list[Product]]:
        failed = self._call("list_products", dict(filters) if filters else None)
        if failed:
            return failed
        return ApiResult.success(list(self.products.values()))

    async def get_thermocup_attributes(self, product_id: int) -> ApiResult[ThermocupAttributes]:
        failed = self._call("get_thermocup_attributes", product_id)
        if failed:
            return failed
        attributes = self.thermocups.get(product_id)
        return ApiResult.success(attributes) if attributes else ApiResult.missing()

    async def get_server_attributes(self, product_id: int) -> ApiResult[ServerAttributes]:
        failed = self._call("get_server_attributes", product_id)
        if failed:
            return failed
        attributes = self.servers.get(product_id)
        return ApiResult.success(attributes) if attributes else ApiResult.missing()

    async def create_product(self, draft: ProductDraft) -> ApiResult[Product]:
        failed = self._call("create_product", draft)
        if failed:
            return failed
        product = Product(id=self.next_id, **draft.model_dump())
        self.products[product.id] = product
        self.next_id += 1
        return ApiResult.success(product)

    async def create_thermocup_attributes(
        self, attributes: ThermocupAttributes
    ) -> ApiResult[None]:
        failed = self._call("create_thermocup_attributes", attributes)
        if failed:
            return failed
        self.thermocups[attributes.product_id] = attributes
        return ApiResult.success()

    async def update_thermocup(
        self, product_id: int, draft: ProductDraft, attributes: ThermocupAttributes
    ) -> ApiResult[None]:
        failed = self._call("update_thermocup", product_id, draft, attributes)
        if failed:
            return failed
        if product_id not in self.products:
            return ApiResult.missing()
        return ApiResult.success()

    async def update_stock_quantity(
        self, product_id: int, warehouse_id: int, quantity_change: int
    ) -> ApiResult[None]:
        failed = self._call("update_stock_quantity", product_id, warehouse_id, quantity_change)
        if failed:
            return failed
        product = self.products[product_id]
        product.quantity = (product.quantity or 0) + quantity_change
        return ApiResult.success()

    async def update_reserved_quantity(
        self, product_id: int, quantity_change: int
    ) -> ApiResult[None]:
        failed = self._call("update_reserved_quantity", product_id, quantity_change)
        if failed:
            return failed
        product = self.products[product_id]
        product.num_reserved_goods = (product.num_reserved_goods or 0) + quantity_change
        return ApiResult.success()

    @property
    def name(self) -> str:
        return "fake"


def make_product(
    product_id: int,
    name: Optional[str] = None,
    category: Optional[str] = "Thermocups",
    category_id: Optional[int] = None,
    price: str = "29.99",
    quantity: int = 10,
    reserved: int = 0,
) -> Product:
    """Helper to create a Product with sensible defaults."""
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        category=category,
        category_id=category_id,
        sku=f"SKU-{product_id}",
        base_price=Decimal(price),
        is_active=True,
        quantity=quantity,
        num_reserved_goods=reserved,
        path_to_photo=f"/photos/{product_id}.jpg",
    )


def make_thermocup(product_id: int) -> ThermocupAttributes:
    return ThermocupAttributes(
        product_id=product_id,
        volume_ml=500,
        color="Blue",
        brand="ThermoBrand",
        model="PremiumX",
        is_hermetic=True,
        material="Stainless Steel",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def client():
    fake = FakeWarehouseClient([make_product(42, "Premium Thermo"), make_product(7, "Rack Server", category="Servers")])
    fake.thermocups[42] = make_thermocup(42)
    return fake


@pytest.fixture
def dispatcher(client, store):
    return CommandDispatcher(client=client, store=store, page_size=2)
