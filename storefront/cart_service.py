# storefront/cart_service.py
"""Cart operations and the stock admission check.

Invariants kept here for every mutation:

* an entry's quantity is at least 1;
* an entry's quantity does not exceed the product's ``stock_qty`` at the
  moment the mutation is admitted (stock is never re-checked later and never
  decremented by this module);
* a user has at most one entry per product; repeated adds merge.

The caller's identity is always passed in as ``user_id``.
"""
import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional, Tuple

from .errors import ConflictError, InsufficientStock, InvalidInput, NotFound
from .models import CartItem
from .stores import CartStore, Catalog

logger = logging.getLogger(__name__)


@dataclass
class AddResult:
    created: bool
    quantity: int


@dataclass
class UpdateResult:
    id: int
    quantity: int


class KeyedLocks:
    """One asyncio.Lock per key, created on first use.

    Locks whose key nobody holds or waits on are dropped on release, so the
    registry only grows with concurrent traffic.
    """

    def __init__(self):
        self._locks: Dict[Tuple, asyncio.Lock] = {}
        self._waiters: Dict[Tuple, int] = defaultdict(int)

    async def acquire(self, key: Tuple) -> None:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] += 1
        try:
            await lock.acquire()
        except BaseException:
            self._forget(key)
            raise

    def release(self, key: Tuple) -> None:
        self._locks[key].release()
        self._forget(key)

    def _forget(self, key: Tuple) -> None:
        self._waiters[key] -= 1
        if self._waiters[key] == 0:
            del self._waiters[key]
            del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: Tuple) -> AsyncIterator[None]:
        await self.acquire(key)
        try:
            yield
        finally:
            self.release(key)


def _check_quantity(quantity) -> None:
    # bool is an int subclass; reject it along with everything non-integral
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidInput("Quantity must be at least 1")


class CartService:
    def __init__(self, catalog: Catalog, carts: CartStore, locks: Optional[KeyedLocks] = None):
        self.catalog = catalog
        self.carts = carts
        self.locks = locks if locks is not None else KeyedLocks()

    async def list_cart(self, user_id: int) -> List[CartItem]:
        return await self.carts.list_for_user(user_id)

    async def add_to_cart(self, user_id: int, product_id: int, quantity: int) -> AddResult:
        _check_quantity(quantity)

        product = await self.catalog.find_by_id(product_id)
        if product is None:
            raise NotFound("Product not found")
        # read once: a failed insert rolls the session back and expires product
        stock = product.stock_qty
        if stock < quantity:
            logger.info("Add rejected: insufficient stock", extra={"user_id": user_id, "product_id": product_id})
            raise InsufficientStock()

        async with self.locks.hold((user_id, product_id)):
            existing = await self.carts.find(user_id, product_id)
            if existing is None:
                try:
                    await self.carts.insert(user_id, product_id, quantity)
                except ConflictError:
                    # lost an insert race with another process; merge into its row
                    existing = await self.carts.find(user_id, product_id)
                    if existing is None:
                        raise
                else:
                    logger.info("Cart entry created", extra={"user_id": user_id, "product_id": product_id, "quantity": quantity})
                    return AddResult(created=True, quantity=quantity)

            merged = existing.quantity + quantity
            if stock < merged:
                logger.info("Merge rejected: insufficient stock", extra={"user_id": user_id, "product_id": product_id})
                raise InsufficientStock()
            await self.carts.set_quantity(existing.id, merged)

        logger.info("Cart entry merged", extra={"user_id": user_id, "product_id": product_id, "quantity": merged})
        return AddResult(created=False, quantity=merged)

    async def update_quantity(self, user_id: int, entry_id: int, quantity: int) -> UpdateResult:
        _check_quantity(quantity)

        entry = await self.carts.get(entry_id, user_id)
        if entry is None:
            raise NotFound("Cart item not found")
        product_id = entry.product_id

        # same key as add_to_cart; ownership and stock are re-checked under it
        async with self.locks.hold((user_id, product_id)):
            if await self.carts.get(entry_id, user_id) is None:
                raise NotFound("Cart item not found")
            product = await self.catalog.find_by_id(product_id)
            if product is None:
                raise NotFound("Product not found")
            if product.stock_qty < quantity:
                raise InsufficientStock()
            await self.carts.set_quantity(entry_id, quantity)
        logger.info("Cart entry updated", extra={"user_id": user_id, "entry_id": entry_id, "quantity": quantity})
        return UpdateResult(id=entry_id, quantity=quantity)

    async def remove_entry(self, user_id: int, entry_id: int) -> None:
        # missing and foreign ids are a silent no-op
        removed = await self.carts.delete(entry_id, user_id)
        if removed:
            logger.info("Cart entry removed", extra={"user_id": user_id, "entry_id": entry_id})

    async def cart_count(self, user_id: Optional[int]) -> int:
        if user_id is None:
            return 0
        return await self.carts.sum_quantity(user_id)
