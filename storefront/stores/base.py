"""Storage contracts shared by the relational and in-memory backends.

Both backends hand out ``storefront.models`` instances; the in-memory one
keeps them detached from any session.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncContextManager, List, Optional

from ..models import CartItem, ContactInquiry, Product, User


class Catalog(ABC):
    """Product reference data. Read-only at request time."""

    @abstractmethod
    async def find_by_id(self, product_id: int) -> Optional[Product]:
        ...

    @abstractmethod
    async def list_all(self) -> List[Product]:
        """Newest first."""

    @abstractmethod
    async def list_featured(self) -> List[Product]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def add(self, **fields) -> Product:
        """Insert a product. Used by the startup seeder only."""


class CartStore(ABC):

    @abstractmethod
    async def list_for_user(self, user_id: int) -> List[CartItem]:
        """Entries in insertion order, with ``product`` populated."""

    @abstractmethod
    async def find(self, user_id: int, product_id: int) -> Optional[CartItem]:
        ...

    @abstractmethod
    async def get(self, entry_id: int, user_id: int) -> Optional[CartItem]:
        """Lookup by id, scoped to the owner. Foreign entries come back as None."""

    @abstractmethod
    async def insert(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        """Raises ConflictError if the (user, product) pair already has an entry."""

    @abstractmethod
    async def set_quantity(self, entry_id: int, quantity: int) -> None:
        """Raises NotFound if the entry does not exist."""

    @abstractmethod
    async def delete(self, entry_id: int, user_id: int) -> bool:
        """Delete if owned by ``user_id``. Returns whether a row went away."""

    @abstractmethod
    async def sum_quantity(self, user_id: int) -> int:
        ...


class UserStore(ABC):

    @abstractmethod
    async def get(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create(self, email: str, password_hash: str, name: str) -> User:
        """Raises ConflictError if the email is taken."""

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        """Remove the account, its cart entries, and detach its inquiries."""

    @abstractmethod
    async def list_all(self) -> List[User]:
        ...


class ContactStore(ABC):

    @abstractmethod
    async def add(self, user_id: Optional[int], name: str, email: str, subject: str, message: str) -> ContactInquiry:
        ...

    @abstractmethod
    async def list_all(self) -> List[ContactInquiry]:
        ...


@dataclass
class Stores:
    users: UserStore
    catalog: Catalog
    carts: CartStore
    contacts: ContactStore


class StorageBackend(ABC):
    name: str = ""

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    @abstractmethod
    def open(self) -> AsyncContextManager[Stores]:
        """Async context manager yielding the stores for one unit of work."""
