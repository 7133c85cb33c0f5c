"""Dump the storefront tables for a quick look.

Prints users, the first five products, cart entries (with user email and
product name) and contact inquiries from the backend selected by
STORE_BACKEND / DATABASE_URL.

Usage:
    python scripts/query_db.py
"""
import asyncio

from storefront.config import Settings
from storefront.stores import build_backend


async def dump(settings: Settings) -> None:
    backend = build_backend(settings)
    await backend.startup()
    try:
        async with backend.open() as stores:
            users = await stores.users.list_all()
            print("Users table:")
            for u in users:
                print(f"  {u.id:>4}  {u.email:<32} {u.name:<24} {u.created_at}")

            print("\nProducts table (first 5):")
            for p in (await stores.catalog.list_all())[:5]:
                print(f"  {p.id:>4}  {p.name:<36} price={p.price:<8} stock={p.stock_qty}")

            print("\nCart items table:")
            for u in users:
                for ci in await stores.carts.list_for_user(u.id):
                    product_name = ci.product.name if ci.product is not None else "?"
                    print(f"  {ci.id:>4}  {u.email:<32} {product_name:<36} x{ci.quantity}")

            print("\nContact inquiries table:")
            for c in await stores.contacts.list_all():
                print(f"  {c.id:>4}  {c.name:<20} {c.email:<32} {c.subject!r}: {c.message!r}  {c.created_at}")
    finally:
        await backend.shutdown()


def main():
    asyncio.run(dump(Settings.from_env()))


if __name__ == "__main__":
    main()
