"""
Base interface for warehouse service clients.
Keeps the conversation core independent of the transport used to reach the service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Mapping, Optional, TypeVar

from warehouse_bot.integrations.warehouse.models import (
    SERVERS,
    THERMOCUPS,
    Product,
    ProductDraft,
    ProductWithAttributes,
    ServerAttributes,
    ThermocupAttributes,
    UnknownCategory,
)

T = TypeVar("T")


class CallStatus(Enum):
    """Outcome of a single warehouse call."""
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class ApiResult(Generic[T]):
    """Result of a warehouse call: a value or a failure indicator."""

    status: CallStatus
    value: Optional[T] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is CallStatus.OK

    @property
    def not_found(self) -> bool:
        return self.status is CallStatus.NOT_FOUND

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ApiResult[T]":
        return cls(CallStatus.OK, value)

    @classmethod
    def missing(cls, detail: Optional[str] = None) -> "ApiResult[T]":
        return cls(CallStatus.NOT_FOUND, detail=detail)

    @classmethod
    def failure(cls, detail: Optional[str] = None) -> "ApiResult[T]":
        return cls(CallStatus.FAILED, detail=detail)


class BaseWarehouseClient(ABC):
    """
    Abstract warehouse service client.

    Implementations perform exactly one network call per operation and must
    never raise: transport and status errors are reported through ApiResult.
    """

    @abstractmethod
    async def get_product(self, product_id: int) -> ApiResult[Product]:
        """Fetch a product by id."""

    @abstractmethod
    async def list_products(
        self, filters: Optional[Mapping[str, str]] = None
    ) -> ApiResult[list[Product]]:
        """Fetch the product list, optionally filtered by query parameters."""

    @abstractmethod
    async def get_thermocup_attributes(self, product_id: int) -> ApiResult[ThermocupAttributes]:
        """Fetch thermal mug attributes of a product."""

    @abstractmethod
    async def get_server_attributes(self, product_id: int) -> ApiResult[ServerAttributes]:
        """Fetch server attributes of a product."""

    @abstractmethod
    async def create_product(self, draft: ProductDraft) -> ApiResult[Product]:
        """Create a product; the returned product carries its assigned id."""

    @abstractmethod
    async def create_thermocup_attributes(
        self, attributes: ThermocupAttributes
    ) -> ApiResult[None]:
        """Attach thermal mug attributes to an existing product."""

    @abstractmethod
    async def update_thermocup(
        self,
        product_id: int,
        draft: ProductDraft,
        attributes: ThermocupAttributes,
    ) -> ApiResult[None]:
        """Replace product fields and thermal mug attributes."""

    @abstractmethod
    async def update_stock_quantity(
        self, product_id: int, warehouse_id: int, quantity_change: int
    ) -> ApiResult[None]:
        """Change the stock of a product in one warehouse by a delta."""

    @abstractmethod
    async def update_reserved_quantity(
        self, product_id: int, quantity_change: int
    ) -> ApiResult[None]:
        """Change the reserved quantity of a product by a delta."""

    async def close(self) -> None:
        """Release network resources."""

    async def get_category_attributes(
        self, product: Product
    ) -> ApiResult[ThermocupAttributes | ServerAttributes | UnknownCategory]:
        """Resolve the attribute variant for a product from its category label."""
        label = product.category_label
        if label == THERMOCUPS:
            return await self.get_thermocup_attributes(product.id)
        if label == SERVERS:
            return await self.get_server_attributes(product.id)
        return ApiResult.success(UnknownCategory(label=label))

    async def get_product_with_attributes(
        self, product_id: int
    ) -> ApiResult[ProductWithAttributes]:
        """Fetch a product and its category attributes."""
        product_result = await self.get_product(product_id)
        if not product_result.ok:
            return ApiResult(product_result.status, detail=product_result.detail)

        product = product_result.value
        attributes_result = await self.get_category_attributes(product)
        if attributes_result.ok:
            attributes = attributes_result.value
        elif attributes_result.not_found:
            # Product exists but its attribute record does not
            attributes = UnknownCategory(label=product.category_label)
        else:
            return ApiResult(attributes_result.status, detail=attributes_result.detail)

        return ApiResult.success(ProductWithAttributes(product=product, attributes=attributes))

    async def create_thermocup(
        self, draft: ProductDraft, attributes: ThermocupAttributes
    ) -> ApiResult[Product]:
        """Create a product and then its thermal mug attributes."""
        product_result = await self.create_product(draft)
        if not product_result.ok:
            return product_result

        product = product_result.value
        if product is None or product.id is None:
            return ApiResult.failure("warehouse service did not return the new product id")

        attached = attributes.model_copy(update={"product_id": product.id})
        attributes_result = await self.create_thermocup_attributes(attached)
        if not attributes_result.ok:
            return ApiResult(attributes_result.status, value=product, detail=attributes_result.detail)

        return ApiResult.success(product)

    @property
    @abstractmethod
    def name(self) -> str:
        """Client name."""
