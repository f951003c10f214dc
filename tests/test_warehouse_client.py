"""Tests for the HTTP warehouse client."""

import json
from decimal import Decimal

import httpx
import pytest

from warehouse_bot.integrations.warehouse import CallStatus, HttpWarehouseClient
from warehouse_bot.integrations.warehouse.models import (
    ProductDraft,
    ServerAttributes,
    ThermocupAttributes,
    UnknownCategory,
)

BASE_URL = "http://warehouse.test"

PRODUCT_42 = {
    "id": 42,
    "name": "Premium Thermo",
    "category": "Thermocups",
    "sku": "TH-500",
    "base_price": "29.99",
    "is_active": True,
    "quantity": 10,
    "num_reserved_goods": 2,
    "path_to_photo": "/photos/42.jpg",
}

THERMOCUP_42 = {
    "product_id": 42,
    "volume_ml": 500,
    "color": "Blue",
    "brand": "ThermoBrand",
    "model": "PremiumX",
    "is_hermetic": True,
    "material": "Stainless Steel",
}


class Recorder:
    """MockTransport handler answering from a route table."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="no route")
        if isinstance(route, Exception):
            raise route
        return route


def make_client(routes) -> tuple[HttpWarehouseClient, Recorder]:
    recorder = Recorder(routes)
    client = HttpWarehouseClient(
        base_url=BASE_URL + "/",
        timeout=1.0,
        transport=httpx.MockTransport(recorder),
    )
    return client, recorder


def body(request: httpx.Request) -> dict:
    return json.loads(request.content)


def make_draft() -> ProductDraft:
    return ProductDraft(
        name="Premium Thermo",
        category_id=1,
        base_price=Decimal("29.99"),
        sku="TH-500",
        is_active=True,
        path_to_photo="/photos/thermo1.jpg",
    )


def make_attributes() -> ThermocupAttributes:
    return ThermocupAttributes(
        volume_ml=500,
        color="Blue",
        brand="ThermoBrand",
        model="PremiumX",
        is_hermetic=True,
        material="Stainless Steel",
    )


class TestReads:
    @pytest.mark.asyncio
    async def test_get_product(self):
        client, recorder = make_client(
            {("GET", "/products/42"): httpx.Response(200, json=PRODUCT_42)}
        )

        result = await client.get_product(42)

        assert result.ok
        assert result.value.name == "Premium Thermo"
        assert result.value.base_price == Decimal("29.99")
        assert str(recorder.requests[0].url) == f"{BASE_URL}/products/42"
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_product(self):
        client, _ = make_client({})

        result = await client.get_product(999)

        assert result.status is CallStatus.NOT_FOUND
        assert result.value is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        client, _ = make_client(
            {("GET", "/products/42"): httpx.Response(500, text="database down")}
        )

        result = await client.get_product(42)

        assert result.status is CallStatus.FAILED
        assert "500" in result.detail

    @pytest.mark.asyncio
    async def test_connection_error(self):
        client, _ = make_client(
            {("GET", "/products/42"): httpx.ConnectError("connection refused")}
        )

        result = await client.get_product(42)

        assert result.status is CallStatus.FAILED
        assert "connection error" in result.detail

    @pytest.mark.asyncio
    async def test_timeout(self):
        client, _ = make_client(
            {("GET", "/products"): httpx.ReadTimeout("timed out")}
        )

        result = await client.list_products()

        assert result.status is CallStatus.FAILED

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client, _ = make_client(
            {("GET", "/products/42"): httpx.Response(200, text="<html>oops</html>")}
        )

        result = await client.get_product(42)

        assert result.status is CallStatus.FAILED
        assert result.detail == "unexpected response from warehouse service"

    @pytest.mark.asyncio
    async def test_list_products_with_filters(self):
        client, recorder = make_client(
            {("GET", "/products"): httpx.Response(200, json=[PRODUCT_42, {**PRODUCT_42, "id": 43}])}
        )

        result = await client.list_products({"category_id": "1", "is_active": "true"})

        assert result.ok
        assert [p.id for p in result.value] == [42, 43]
        params = recorder.requests[0].url.params
        assert params["category_id"] == "1"
        assert params["is_active"] == "true"

    @pytest.mark.asyncio
    async def test_list_products_without_filters(self):
        client, recorder = make_client({("GET", "/products"): httpx.Response(200, json=[])})

        result = await client.list_products()

        assert result.ok
        assert result.value == []
        assert recorder.requests[0].url.query == b""

    @pytest.mark.asyncio
    async def test_list_products_rejects_non_list(self):
        client, _ = make_client(
            {("GET", "/products"): httpx.Response(200, json={"detail": "nope"})}
        )

        result = await client.list_products()

        assert result.status is CallStatus.FAILED

    @pytest.mark.asyncio
    async def test_thermocup_attributes(self):
        client, _ = make_client(
            {("GET", "/products/thermocups/42"): httpx.Response(200, json=THERMOCUP_42)}
        )

        result = await client.get_thermocup_attributes(42)

        assert result.ok
        assert result.value.volume_ml == 500
        assert result.value.is_hermetic is True

    @pytest.mark.asyncio
    async def test_null_product_fields(self):
        sparse = {
            **PRODUCT_42,
            "name": None,
            "base_price": None,
            "is_active": None,
            "quantity": None,
            "num_reserved_goods": None,
        }
        client, _ = make_client({
            ("GET", "/products/42"): httpx.Response(200, json=sparse),
            ("GET", "/products"): httpx.Response(200, json=[sparse, PRODUCT_42]),
        })

        product = await client.get_product(42)
        listing = await client.list_products()

        assert product.ok
        assert product.value.name is None
        assert product.value.num_reserved_goods is None
        assert product.value.is_active is None
        assert listing.ok
        assert [p.quantity for p in listing.value] == [None, 10]


class TestProductWithAttributes:
    @pytest.mark.asyncio
    async def test_thermocup(self):
        client, _ = make_client({
            ("GET", "/products/42"): httpx.Response(200, json=PRODUCT_42),
            ("GET", "/products/thermocups/42"): httpx.Response(200, json=THERMOCUP_42),
        })

        result = await client.get_product_with_attributes(42)

        assert result.ok
        assert isinstance(result.value.attributes, ThermocupAttributes)

    @pytest.mark.asyncio
    async def test_server_by_category_id(self):
        server = {**PRODUCT_42, "id": 7, "category": None, "category_id": 2}
        client, _ = make_client({
            ("GET", "/products/7"): httpx.Response(200, json=server),
            ("GET", "/products/servers/7"): httpx.Response(
                200, json={"product_id": 7, "ram_gb": 64, "cpu_cores": 16}
            ),
        })

        result = await client.get_product_with_attributes(7)

        assert result.ok
        assert isinstance(result.value.attributes, ServerAttributes)
        assert result.value.attributes.ram_gb == 64

    @pytest.mark.asyncio
    async def test_unknown_category_makes_one_call(self):
        chair = {**PRODUCT_42, "id": 9, "category": "Chairs"}
        client, recorder = make_client(
            {("GET", "/products/9"): httpx.Response(200, json=chair)}
        )

        result = await client.get_product_with_attributes(9)

        assert result.ok
        assert result.value.attributes == UnknownCategory(label="Chairs")
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_product(self):
        client, recorder = make_client({})

        result = await client.get_product_with_attributes(1)

        assert result.not_found
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_attribute_failure(self):
        client, _ = make_client({
            ("GET", "/products/42"): httpx.Response(200, json=PRODUCT_42),
            ("GET", "/products/thermocups/42"): httpx.Response(503),
        })

        result = await client.get_product_with_attributes(42)

        assert result.status is CallStatus.FAILED


class TestWrites:
    @pytest.mark.asyncio
    async def test_update_stock_quantity(self):
        client, recorder = make_client(
            {("PATCH", "/products/thermocups/update/42/stock"): httpx.Response(200, json={})}
        )

        result = await client.update_stock_quantity(42, 1, -3)

        assert result.ok
        assert body(recorder.requests[0]) == {"warehouse_id": 1, "quantity_change": -3}

    @pytest.mark.asyncio
    async def test_update_reserved_quantity(self):
        client, recorder = make_client(
            {("PATCH", "/products/thermocups/update/42/reserved"): httpx.Response(204)}
        )

        result = await client.update_reserved_quantity(42, 5)

        assert result.ok
        assert body(recorder.requests[0]) == {"quantity_change": 5}

    @pytest.mark.asyncio
    async def test_update_stock_of_missing_product(self):
        client, _ = make_client({})
        result = await client.update_stock_quantity(999, 1, 1)
        assert result.not_found

    @pytest.mark.asyncio
    async def test_create_thermocup(self):
        client, recorder = make_client({
            ("POST", "/products"): httpx.Response(201, json={**PRODUCT_42, "id": 100}),
            ("POST", "/products/thermocups/create"): httpx.Response(201, json={}),
        })

        result = await client.create_thermocup(make_draft(), make_attributes())

        assert result.ok
        assert result.value.id == 100
        product_body, attributes_body = (body(r) for r in recorder.requests)
        assert product_body["name"] == "Premium Thermo"
        assert product_body["base_price"] == "29.99"
        assert attributes_body["product_id"] == 100
        assert attributes_body["volume_ml"] == 500

    @pytest.mark.asyncio
    async def test_create_thermocup_attributes_failure(self):
        client, _ = make_client({
            ("POST", "/products"): httpx.Response(201, json={**PRODUCT_42, "id": 100}),
            ("POST", "/products/thermocups/create"): httpx.Response(422, text="bad volume"),
        })

        result = await client.create_thermocup(make_draft(), make_attributes())

        assert result.status is CallStatus.FAILED
        assert result.value.id == 100

    @pytest.mark.asyncio
    async def test_create_thermocup_product_failure(self):
        client, recorder = make_client(
            {("POST", "/products"): httpx.Response(400, text="duplicate sku")}
        )

        result = await client.create_thermocup(make_draft(), make_attributes())

        assert result.status is CallStatus.FAILED
        assert result.value is None
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_create_without_returned_id(self):
        client, recorder = make_client(
            {("POST", "/products"): httpx.Response(201, json={"name": "Premium Thermo"})}
        )

        result = await client.create_thermocup(make_draft(), make_attributes())

        assert result.status is CallStatus.FAILED
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_update_thermocup(self):
        client, recorder = make_client(
            {("PUT", "/products/thermocups/update/42"): httpx.Response(200, json={})}
        )

        result = await client.update_thermocup(42, make_draft(), make_attributes())

        assert result.ok
        sent = body(recorder.requests[0])
        assert sent["sku"] == "TH-500"
        assert sent["attributes"]["material"] == "Stainless Steel"
        assert "product_id" not in sent["attributes"]


def test_base_url_trailing_slash_is_stripped():
    client = HttpWarehouseClient(base_url="http://warehouse.test/", timeout=1.0)
    assert client.base_url == "http://warehouse.test"
    assert client.name == "http"
