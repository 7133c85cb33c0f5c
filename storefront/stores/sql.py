# storefront/stores/sql.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import Settings
from ..database import create_tables, make_engine, make_session_maker
from ..errors import ConflictError, NotFound
from ..models import CartItem, ContactInquiry, Product, User
from .base import CartStore, Catalog, ContactStore, StorageBackend, Stores, UserStore

logger = logging.getLogger(__name__)


class SqlCatalog(Catalog):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        return await self.session.get(Product, product_id)

    async def list_all(self) -> List[Product]:
        result = await self.session.execute(
            select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        )
        return list(result.scalars().all())

    async def list_featured(self) -> List[Product]:
        result = await self.session.execute(
            select(Product).where(Product.is_featured.is_(True)).order_by(Product.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        res = await self.session.execute(select(func.count()).select_from(Product))
        return res.scalar_one()

    async def add(self, **fields) -> Product:
        product = Product(**fields)
        self.session.add(product)
        await self.session.commit()
        return product


class SqlCartStore(CartStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(self, user_id: int) -> List[CartItem]:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.product))
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def find(self, user_id: int, product_id: int) -> Optional[CartItem]:
        result = await self.session.execute(
            select(CartItem).where(
                CartItem.user_id == user_id,
                CartItem.product_id == product_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, entry_id: int, user_id: int) -> Optional[CartItem]:
        result = await self.session.execute(
            select(CartItem).where(CartItem.id == entry_id, CartItem.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def insert(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        self.session.add(item)
        try:
            await self.session.commit()
        except IntegrityError:
            # uq_cart_user_product: someone else inserted this pair first
            await self.session.rollback()
            raise ConflictError("Product is already in the cart")
        return item

    async def set_quantity(self, entry_id: int, quantity: int) -> None:
        result = await self.session.execute(
            update(CartItem).where(CartItem.id == entry_id).values(quantity=quantity)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFound("Cart item not found")
        await self.session.commit()

    async def delete(self, entry_id: int, user_id: int) -> bool:
        result = await self.session.execute(
            delete(CartItem).where(CartItem.id == entry_id, CartItem.user_id == user_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def sum_quantity(self, user_id: int) -> int:
        res = await self.session.execute(
            select(func.coalesce(func.sum(CartItem.quantity), 0)).where(CartItem.user_id == user_id)
        )
        return int(res.scalar_one())


class SqlUserStore(UserStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create(self, email: str, password_hash: str, name: str) -> User:
        user = User(email=email, password_hash=password_hash, name=name)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Email already registered")
        return user

    async def delete(self, user_id: int) -> bool:
        # explicit statements instead of relying on the driver honouring ON DELETE
        await self.session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        await self.session.execute(
            update(ContactInquiry).where(ContactInquiry.user_id == user_id).values(user_id=None)
        )
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.commit()
        return result.rowcount > 0

    async def list_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())


class SqlContactStore(ContactStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, user_id: Optional[int], name: str, email: str, subject: str, message: str) -> ContactInquiry:
        inquiry = ContactInquiry(user_id=user_id, name=name, email=email, subject=subject, message=message)
        self.session.add(inquiry)
        await self.session.commit()
        return inquiry

    async def list_all(self) -> List[ContactInquiry]:
        result = await self.session.execute(select(ContactInquiry).order_by(ContactInquiry.id))
        return list(result.scalars().all())


class SqlBackend(StorageBackend):
    name = "sql"

    def __init__(self, settings: Settings):
        self.engine = make_engine(settings.database_url, echo=settings.db_echo)
        self.session_maker = make_session_maker(self.engine)

    async def startup(self) -> None:
        logger.info("Creating tables on %s", self.engine.url.render_as_string(hide_password=True))
        await create_tables(self.engine)

    async def shutdown(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Stores]:
        async with self.session_maker() as session:
            yield Stores(
                users=SqlUserStore(session),
                catalog=SqlCatalog(session),
                carts=SqlCartStore(session),
                contacts=SqlContactStore(session),
            )
