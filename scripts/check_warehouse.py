"""
Script to check connectivity and product data of the warehouse service.
Run: python -m scripts.check_warehouse
"""

import asyncio
import sys
sys.path.insert(0, '.')

from warehouse_bot.config import settings
from warehouse_bot.integrations.warehouse import HttpWarehouseClient


async def main() -> int:
    client = HttpWarehouseClient()
    print(f"Warehouse service: {settings.warehouse_base_url}")

    try:
        result = await client.list_products()
    finally:
        await client.close()

    if not result.ok:
        print(f"Request failed: {result.status.value} {result.detail or ''}")
        return 1

    products = result.value
    print(f"Total products: {len(products)}\n")

    print("=" * 50)
    print("PRODUCTS BY CATEGORY:")
    print("=" * 50)

    categories = {}
    for product in products:
        categories.setdefault(product.category_label, []).append(product)

    for category, items in sorted(categories.items()):
        active = sum(1 for p in items if p.is_active)
        print(f"\n{category}: {len(items)} products ({active} active)")
        for p in sorted(items, key=lambda p: p.name or "")[:5]:
            print(f"  - [{p.id}] {p.name}: stock {p.quantity}, reserved {p.num_reserved_goods}")
        if len(items) > 5:
            print(f"  ... and {len(items) - 5} more")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
