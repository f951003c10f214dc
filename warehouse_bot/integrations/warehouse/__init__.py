"""
Warehouse service client factory and initialization.
"""

from functools import lru_cache

from warehouse_bot.integrations.warehouse.base import ApiResult, BaseWarehouseClient, CallStatus
from warehouse_bot.integrations.warehouse.http import HttpWarehouseClient


@lru_cache(maxsize=1)
def get_warehouse_client() -> BaseWarehouseClient:
    """Get cached process-wide warehouse client."""
    return HttpWarehouseClient()


__all__ = [
    "ApiResult",
    "BaseWarehouseClient",
    "CallStatus",
    "HttpWarehouseClient",
    "get_warehouse_client",
]
