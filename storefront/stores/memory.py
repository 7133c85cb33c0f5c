# storefront/stores/memory.py
"""Process-local backend for demos and tests.

Holds detached ORM instances in plain lists, so everything above the store
layer sees the same types as with the relational backend. Nothing survives a
restart.
"""
import itertools
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from ..errors import ConflictError, NotFound
from ..models import CartItem, ContactInquiry, Product, User, utcnow
from .base import CartStore, Catalog, ContactStore, StorageBackend, Stores, UserStore


class MemoryData:
    """The shared tables behind every memory store."""

    def __init__(self):
        self.users: List[User] = []
        self.products: Dict[int, Product] = {}
        self.cart_items: List[CartItem] = []
        self.inquiries: List[ContactInquiry] = []
        self._ids = {name: itertools.count(1) for name in ("users", "products", "cart_items", "inquiries")}

    def next_id(self, table: str) -> int:
        return next(self._ids[table])


class MemoryCatalog(Catalog):
    def __init__(self, data: MemoryData):
        self.data = data

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.data.products.get(product_id)

    async def list_all(self) -> List[Product]:
        return sorted(self.data.products.values(), key=lambda p: (p.created_at, p.id), reverse=True)

    async def list_featured(self) -> List[Product]:
        return [p for p in self.data.products.values() if p.is_featured]

    async def count(self) -> int:
        return len(self.data.products)

    async def add(self, **fields) -> Product:
        fields.setdefault("stock_qty", 0)
        fields.setdefault("is_featured", False)
        if fields["price"] < 0 or fields["stock_qty"] < 0:
            raise ValueError("price and stock_qty must be non-negative")
        product = Product(id=self.data.next_id("products"), created_at=utcnow(), **fields)
        self.data.products[product.id] = product
        return product


class MemoryCartStore(CartStore):
    def __init__(self, data: MemoryData):
        self.data = data

    async def list_for_user(self, user_id: int) -> List[CartItem]:
        items = [ci for ci in self.data.cart_items if ci.user_id == user_id]
        for ci in items:
            ci.product = self.data.products.get(ci.product_id)
        return items

    async def find(self, user_id: int, product_id: int) -> Optional[CartItem]:
        for ci in self.data.cart_items:
            if ci.user_id == user_id and ci.product_id == product_id:
                return ci
        return None

    async def get(self, entry_id: int, user_id: int) -> Optional[CartItem]:
        for ci in self.data.cart_items:
            if ci.id == entry_id and ci.user_id == user_id:
                return ci
        return None

    async def insert(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        if quantity < 1:
            raise ValueError("quantity must be positive")
        if await self.find(user_id, product_id) is not None:
            raise ConflictError("Product is already in the cart")
        item = CartItem(
            id=self.data.next_id("cart_items"),
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            added_at=utcnow(),
        )
        self.data.cart_items.append(item)
        return item

    async def set_quantity(self, entry_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValueError("quantity must be positive")
        for ci in self.data.cart_items:
            if ci.id == entry_id:
                ci.quantity = quantity
                return
        raise NotFound("Cart item not found")

    async def delete(self, entry_id: int, user_id: int) -> bool:
        before = len(self.data.cart_items)
        self.data.cart_items = [
            ci for ci in self.data.cart_items if not (ci.id == entry_id and ci.user_id == user_id)
        ]
        return len(self.data.cart_items) < before

    async def sum_quantity(self, user_id: int) -> int:
        return sum(ci.quantity for ci in self.data.cart_items if ci.user_id == user_id)


class MemoryUserStore(UserStore):
    def __init__(self, data: MemoryData):
        self.data = data

    async def get(self, user_id: int) -> Optional[User]:
        for u in self.data.users:
            if u.id == user_id:
                return u
        return None

    async def find_by_email(self, email: str) -> Optional[User]:
        for u in self.data.users:
            if u.email == email:
                return u
        return None

    async def create(self, email: str, password_hash: str, name: str) -> User:
        if await self.find_by_email(email) is not None:
            raise ConflictError("Email already registered")
        user = User(
            id=self.data.next_id("users"),
            email=email,
            password_hash=password_hash,
            name=name,
            created_at=utcnow(),
        )
        self.data.users.append(user)
        return user

    async def delete(self, user_id: int) -> bool:
        user = await self.get(user_id)
        if user is None:
            return False
        self.data.cart_items = [ci for ci in self.data.cart_items if ci.user_id != user_id]
        for inquiry in self.data.inquiries:
            if inquiry.user_id == user_id:
                inquiry.user_id = None
        self.data.users.remove(user)
        return True

    async def list_all(self) -> List[User]:
        return list(self.data.users)


class MemoryContactStore(ContactStore):
    def __init__(self, data: MemoryData):
        self.data = data

    async def add(self, user_id: Optional[int], name: str, email: str, subject: str, message: str) -> ContactInquiry:
        inquiry = ContactInquiry(
            id=self.data.next_id("inquiries"),
            user_id=user_id,
            name=name,
            email=email,
            subject=subject,
            message=message,
            created_at=utcnow(),
        )
        self.data.inquiries.append(inquiry)
        return inquiry

    async def list_all(self) -> List[ContactInquiry]:
        return list(self.data.inquiries)


class MemoryBackend(StorageBackend):
    name = "memory"

    def __init__(self):
        self.data = MemoryData()
        self.stores = Stores(
            users=MemoryUserStore(self.data),
            catalog=MemoryCatalog(self.data),
            carts=MemoryCartStore(self.data),
            contacts=MemoryContactStore(self.data),
        )

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Stores]:
        yield self.stores
