"""
Warehouse client over the service's JSON REST API.
"""

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from warehouse_bot.config import settings
from warehouse_bot.integrations.warehouse.base import ApiResult, BaseWarehouseClient
from warehouse_bot.integrations.warehouse.models import (
    Product,
    ProductDraft,
    ReservedChange,
    ServerAttributes,
    StockChange,
    ThermocupAttributes,
)

logger = logging.getLogger(__name__)

_product_list = TypeAdapter(list[Product])


class HttpWarehouseClient(BaseWarehouseClient):
    """Warehouse client backed by httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.warehouse_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.warehouse_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        operation: str,
        json_data: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> ApiResult[httpx.Response]:
        """
        Perform one request and classify its outcome.

        Returns:
            ApiResult holding the response on 2xx, NOT_FOUND on 404,
            FAILED on any other status or transport error.
        """
        client = self._get_client()
        try:
            response = await client.request(method, endpoint, json=json_data, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error {operation}: {e!r}")
            return ApiResult.failure(f"connection error: {e}")

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info(f"{operation}: {endpoint} not found")
            return ApiResult.missing(response.text or None)

        if not response.is_success:
            logger.error(
                f"Error {operation}: HTTP {response.status_code} {response.text[:200]}"
            )
            return ApiResult.failure(f"HTTP {response.status_code}: {response.text[:200]}")

        return ApiResult.success(response)

    async def _get_model(self, endpoint: str, model: type, operation: str) -> ApiResult:
        result = await self._request("GET", endpoint, operation=operation)
        if not result.ok:
            return ApiResult(result.status, detail=result.detail)
        try:
            return ApiResult.success(model.model_validate(result.value.json()))
        except (ValueError, ValidationError) as e:
            logger.error(f"Error {operation}: unexpected response body: {e}")
            return ApiResult.failure("unexpected response from warehouse service")

    async def get_product(self, product_id: int) -> ApiResult[Product]:
        return await self._get_model(
            f"/products/{product_id}", Product, "getting product by id"
        )

    async def list_products(
        self, filters: Optional[Mapping[str, str]] = None
    ) -> ApiResult[list[Product]]:
        result = await self._request(
            "GET", "/products", operation="getting products", params=filters or None
        )
        if not result.ok:
            return ApiResult(result.status, detail=result.detail)
        try:
            return ApiResult.success(_product_list.validate_python(result.value.json()))
        except (ValueError, ValidationError) as e:
            logger.error(f"Error getting products: unexpected response body: {e}")
            return ApiResult.failure("unexpected response from warehouse service")

    async def get_thermocup_attributes(self, product_id: int) -> ApiResult[ThermocupAttributes]:
        return await self._get_model(
            f"/products/thermocups/{product_id}",
            ThermocupAttributes,
            "getting thermocup attributes",
        )

    async def get_server_attributes(self, product_id: int) -> ApiResult[ServerAttributes]:
        return await self._get_model(
            f"/products/servers/{product_id}",
            ServerAttributes,
            "getting server attributes",
        )

    async def create_product(self, draft: ProductDraft) -> ApiResult[Product]:
        result = await self._request(
            "POST",
            "/products",
            operation="creating product",
            json_data=draft.model_dump(mode="json"),
        )
        if not result.ok:
            return ApiResult(result.status, detail=result.detail)
        try:
            return ApiResult.success(Product.model_validate(result.value.json()))
        except (ValueError, ValidationError) as e:
            logger.error(f"Error creating product: unexpected response body: {e}")
            return ApiResult.failure("unexpected response from warehouse service")

    async def create_thermocup_attributes(
        self, attributes: ThermocupAttributes
    ) -> ApiResult[None]:
        result = await self._request(
            "POST",
            "/products/thermocups/create",
            operation="creating thermocup attributes",
            json_data=attributes.model_dump(mode="json", exclude_none=True),
        )
        return ApiResult(result.status, detail=result.detail)

    async def update_thermocup(
        self,
        product_id: int,
        draft: ProductDraft,
        attributes: ThermocupAttributes,
    ) -> ApiResult[None]:
        body = draft.model_dump(mode="json")
        body["attributes"] = attributes.model_dump(mode="json", exclude_none=True)
        result = await self._request(
            "PUT",
            f"/products/thermocups/update/{product_id}",
            operation="updating thermocup",
            json_data=body,
        )
        return ApiResult(result.status, detail=result.detail)

    async def update_stock_quantity(
        self, product_id: int, warehouse_id: int, quantity_change: int
    ) -> ApiResult[None]:
        change = StockChange(warehouse_id=warehouse_id, quantity_change=quantity_change)
        result = await self._request(
            "PATCH",
            f"/products/thermocups/update/{product_id}/stock",
            operation="updating stock quantity",
            json_data=change.model_dump(),
        )
        return ApiResult(result.status, detail=result.detail)

    async def update_reserved_quantity(
        self, product_id: int, quantity_change: int
    ) -> ApiResult[None]:
        change = ReservedChange(quantity_change=quantity_change)
        result = await self._request(
            "PATCH",
            f"/products/thermocups/update/{product_id}/reserved",
            operation="updating reserved quantity",
            json_data=change.model_dump(),
        )
        return ApiResult(result.status, detail=result.detail)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def name(self) -> str:
        return "http"
