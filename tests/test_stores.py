"""Contract tests run against both storage backends."""
import pytest

from storefront.errors import ConflictError, NotFound
from storefront.seed import DEMO_PRODUCTS, seed_products


class TestCartStore:

    @pytest.mark.asyncio
    async def test_insert_duplicate_pair_conflicts(self, stores, users, product):
        # plain ids: the relational store rolls back on conflict, expiring loaded rows
        user_id, product_id = users[0].id, product.id
        await stores.carts.insert(user_id, product_id, 1)
        with pytest.raises(ConflictError):
            await stores.carts.insert(user_id, product_id, 2)
        assert (await stores.carts.find(user_id, product_id)).quantity == 1

    @pytest.mark.asyncio
    async def test_set_quantity_on_missing_entry(self, stores):
        with pytest.raises(NotFound):
            await stores.carts.set_quantity(31337, 2)

    @pytest.mark.asyncio
    async def test_delete_is_scoped_to_owner(self, stores, users, product):
        u1, u2 = users
        entry = await stores.carts.insert(u1.id, product.id, 1)

        assert await stores.carts.delete(entry.id, u2.id) is False
        assert await stores.carts.get(entry.id, u1.id) is not None
        assert await stores.carts.delete(entry.id, u1.id) is True
        assert await stores.carts.get(entry.id, u1.id) is None

    @pytest.mark.asyncio
    async def test_get_hides_foreign_entries(self, stores, users, product):
        u1, u2 = users
        entry = await stores.carts.insert(u1.id, product.id, 1)
        assert await stores.carts.get(entry.id, u2.id) is None

    @pytest.mark.asyncio
    async def test_list_in_insertion_order_with_products(self, stores, users, product):
        u1, u2 = users
        second = await stores.catalog.add(name="Shirt", price=500, stock_qty=3)
        await stores.carts.insert(u1.id, second.id, 2)
        await stores.carts.insert(u1.id, product.id, 1)
        await stores.carts.insert(u2.id, product.id, 4)

        entries = await stores.carts.list_for_user(u1.id)
        assert [e.product_id for e in entries] == [second.id, product.id]
        assert [e.product.name for e in entries] == ["Shirt", "Tropical T-Shirt"]

    @pytest.mark.asyncio
    async def test_sum_quantity(self, stores, users, product):
        u1, u2 = users
        assert await stores.carts.sum_quantity(u1.id) == 0
        second = await stores.catalog.add(name="Shirt", price=500, stock_qty=3)
        await stores.carts.insert(u1.id, product.id, 4)
        await stores.carts.insert(u1.id, second.id, 3)
        assert await stores.carts.sum_quantity(u1.id) == 7
        assert await stores.carts.sum_quantity(u2.id) == 0


class TestCatalog:

    @pytest.mark.asyncio
    async def test_list_all_newest_first_and_featured(self, stores):
        added = [
            await stores.catalog.add(name=f"P{i}", price=100 * i, stock_qty=i, is_featured=(i % 2 == 0))
            for i in range(1, 5)
        ]

        listed = await stores.catalog.list_all()
        assert [p.id for p in listed] == [p.id for p in reversed(added)]

        featured = await stores.catalog.list_featured()
        assert sorted(p.name for p in featured) == ["P2", "P4"]
        assert await stores.catalog.find_by_id(added[0].id) is not None
        assert await stores.catalog.find_by_id(12345) is None

    @pytest.mark.asyncio
    async def test_seed_only_fills_empty_catalog(self, stores):
        assert await seed_products(stores.catalog) == len(DEMO_PRODUCTS)
        assert await seed_products(stores.catalog) == 0
        assert await stores.catalog.count() == 16
        assert len(await stores.catalog.list_featured()) == 8


class TestUserStore:

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, stores, users):
        with pytest.raises(ConflictError):
            await stores.users.create(email="u1@example.com", password_hash="y", name="Again")

    @pytest.mark.asyncio
    async def test_lookup(self, stores, users):
        u1, _ = users
        assert (await stores.users.find_by_email("u1@example.com")).id == u1.id
        assert (await stores.users.get(u1.id)).name == "User One"
        assert await stores.users.find_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_delete_cascades_to_cart_and_detaches_inquiries(self, stores, users, product):
        u1, u2 = users
        await stores.carts.insert(u1.id, product.id, 2)
        await stores.carts.insert(u2.id, product.id, 1)
        await stores.contacts.add(u1.id, "User One", "u1@example.com", "", "Hello")

        assert await stores.users.delete(u1.id) is True

        assert await stores.users.get(u1.id) is None
        assert await stores.carts.list_for_user(u1.id) == []
        assert await stores.carts.sum_quantity(u2.id) == 1
        inquiries = await stores.contacts.list_all()
        assert [i.user_id for i in inquiries] == [None]
        assert await stores.users.delete(u1.id) is False


@pytest.mark.asyncio
async def test_contact_store_keeps_anonymous_inquiries(stores):
    inquiry = await stores.contacts.add(None, "Visitor", "v@example.com", "", "Where is my parcel?")
    assert inquiry.id is not None
    listed = await stores.contacts.list_all()
    assert [(i.name, i.subject, i.user_id) for i in listed] == [("Visitor", "", None)]
