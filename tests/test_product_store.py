import math
from decimal import Decimal

from app_products.errors import NotFoundError, PersistenceError, ValidationError
from app_products.sql import database, schemas

from tests.base import StoreTestCase


def _product(name="Laptop", price="999.99"):
    return schemas.CreateProduct(name=name, price=price)


class CreateTest(StoreTestCase):
    async def test_create_returns_full_record(self):
        product = await self.store.create(_product())

        self.assertEqual(product.id, 1)
        self.assertEqual(product.name, "Laptop")
        self.assertEqual(product.price, Decimal("999.99"))
        self.assertTrue(product.available)
        self.assertIsNotNone(product.created_at)
        self.assertEqual(product.created_at, product.updated_at)

    async def test_ids_are_sequential_and_names_not_unique(self):
        first = await self.store.create(_product())
        second = await self.store.create(_product())
        self.assertEqual(second.id, first.id + 1)

    async def test_price_keeps_four_decimals(self):
        product = await self.store.create(_product(price="99.9999"))
        self.assertEqual(product.price, Decimal("99.9999"))

    async def test_largest_column_price_is_stored_exactly(self):
        product = await self.store.create(_product(price="99999999.9999"))
        self.assertEqual(product.price, Decimal("99999999.9999"))
        self.assertEqual((await self.store.find_one(product.id)).price, Decimal("99999999.9999"))

    async def test_storage_failure_is_persistence_error(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.drop_all)

        with self.assertRaises(PersistenceError):
            await self.store.create(_product())


class FindAllTest(StoreTestCase):
    async def _seed(self, count):
        return [await self.store.create(_product(name=f"P{i}", price=i)) for i in range(count)]

    async def test_defaults(self):
        await self._seed(12)
        page = await self.store.find_all()
        self.assertEqual(len(page["data"]), 10)
        self.assertEqual(page["meta"], {"page": 1, "total": 12, "last_page": 2})

    async def test_second_page_of_twelve(self):
        await self._seed(12)
        page = await self.store.find_all(page=2, limit=10)
        self.assertEqual([p.name for p in page["data"]], ["P10", "P11"])
        self.assertEqual(page["meta"], {"page": 2, "total": 12, "last_page": 2})

    async def test_empty_catalog(self):
        page = await self.store.find_all(page=1, limit=10)
        self.assertEqual(page["data"], [])
        self.assertEqual(page["meta"], {"page": 1, "total": 0, "last_page": 0})

    async def test_page_out_of_range_is_not_an_error(self):
        await self._seed(3)
        page = await self.store.find_all(page=5, limit=2)
        self.assertEqual(page["data"], [])
        self.assertEqual(page["meta"], {"page": 5, "total": 3, "last_page": 2})

    async def test_pages_cover_every_product_once(self):
        created = await self._seed(23)
        for limit in (1, 4, 7, 10, 23, 50):
            with self.subTest(limit=limit):
                first = await self.store.find_all(page=1, limit=limit)
                last_page = first["meta"]["last_page"]
                self.assertEqual(last_page, math.ceil(23 / limit))

                seen = []
                for page in range(1, last_page + 1):
                    seen += [p.id for p in (await self.store.find_all(page=page, limit=limit))["data"]]
                self.assertEqual(seen, [p.id for p in created])

    async def test_removed_products_are_not_listed_nor_counted(self):
        created = await self._seed(5)
        await self.store.remove(created[1].id)
        await self.store.remove(created[3].id)

        page = await self.store.find_all(page=1, limit=10)
        self.assertEqual([p.id for p in page["data"]], [created[0].id, created[2].id, created[4].id])
        self.assertEqual(page["meta"]["total"], 3)

    async def test_non_positive_page_or_limit_rejected(self):
        for page, limit in ((0, 10), (1, 0), (-1, 5)):
            with self.subTest(page=page, limit=limit):
                with self.assertRaises(ValidationError):
                    await self.store.find_all(page=page, limit=limit)


class FindOneTest(StoreTestCase):
    async def test_found(self):
        created = await self.store.create(_product())
        found = await self.store.find_one(created.id)
        self.assertEqual(found.id, created.id)
        self.assertEqual(found.name, "Laptop")

    async def test_missing(self):
        with self.assertRaises(NotFoundError) as ctx:
            await self.store.find_one(42)
        self.assertEqual(ctx.exception.product_id, 42)
        self.assertEqual(str(ctx.exception), "Product with id #42 not found")

    async def test_removed_is_indistinguishable_from_missing(self):
        created = await self.store.create(_product())
        await self.store.remove(created.id)
        with self.assertRaises(NotFoundError) as ctx:
            await self.store.find_one(created.id)
        self.assertEqual(str(ctx.exception), f"Product with id #{created.id} not found")


class UpdateTest(StoreTestCase):
    async def test_price_only_changes_price_and_updated_at(self):
        created = await self.store.create(_product())
        updated = await self.store.update(created.id, schemas.ProductPatch(price="899.99"))

        self.assertEqual(updated.price, Decimal("899.99"))
        self.assertEqual(updated.name, created.name)
        self.assertEqual(updated.created_at, created.created_at)
        self.assertTrue(updated.available)
        self.assertGreaterEqual(updated.updated_at, created.updated_at)

        stored = await self.store.find_one(created.id)
        self.assertEqual(stored.price, Decimal("899.99"))
        self.assertEqual(stored.name, "Laptop")

    async def test_name_only(self):
        created = await self.store.create(_product())
        updated = await self.store.update(created.id, {"name": "Notebook"})
        self.assertEqual(updated.name, "Notebook")
        self.assertEqual(updated.price, Decimal("999.99"))

    async def test_id_in_patch_is_ignored(self):
        created = await self.store.create(_product())
        other = await self.store.create(_product(name="Mouse"))

        updated = await self.store.update(created.id, schemas.UpdateProduct(id=other.id, name="Tablet"))
        self.assertEqual(updated.id, created.id)
        self.assertEqual(updated.name, "Tablet")
        self.assertEqual((await self.store.find_one(other.id)).name, "Mouse")

        updated = await self.store.update(created.id, {"id": 999, "price": 1})
        self.assertEqual(updated.id, created.id)

    async def test_empty_patch_refreshes_updated_at_only(self):
        created = await self.store.create(_product())
        updated = await self.store.update(created.id, {})
        self.assertEqual(updated.name, created.name)
        self.assertEqual(updated.price, created.price)
        self.assertGreaterEqual(updated.updated_at, created.updated_at)

    async def test_invalid_mapping_patch_rejected_before_write(self):
        created = await self.store.create(_product())
        for patch in ({"price": -5}, {"name": None}, {"price": None}, {"name": ""}):
            with self.subTest(patch=patch):
                with self.assertRaises(ValidationError):
                    await self.store.update(created.id, patch)

        stored = await self.store.find_one(created.id)
        self.assertEqual(stored.name, "Laptop")
        self.assertEqual(stored.price, Decimal("999.99"))
        self.assertEqual(stored.updated_at, created.updated_at)

    async def test_missing(self):
        with self.assertRaises(NotFoundError):
            await self.store.update(7, {"price": 1})

    async def test_removed(self):
        created = await self.store.create(_product())
        await self.store.remove(created.id)
        with self.assertRaises(NotFoundError):
            await self.store.update(created.id, {"price": "899.99"})


class RemoveTest(StoreTestCase):
    async def test_soft_delete_returns_flipped_record(self):
        created = await self.store.create(_product())
        removed = await self.store.remove(created.id)

        self.assertEqual(removed.id, created.id)
        self.assertFalse(removed.available)
        self.assertEqual(removed.name, created.name)
        self.assertEqual(removed.price, created.price)
        self.assertEqual(removed.created_at, created.created_at)
        self.assertGreaterEqual(removed.updated_at, removed.created_at)

    async def test_second_remove_fails(self):
        created = await self.store.create(_product())
        await self.store.remove(created.id)
        with self.assertRaises(NotFoundError):
            await self.store.remove(created.id)

    async def test_missing(self):
        with self.assertRaises(NotFoundError):
            await self.store.remove(1)


class TimestampsTest(StoreTestCase):
    async def test_updated_at_never_before_created_at(self):
        product = await self.store.create(_product())
        self.assertGreaterEqual(product.updated_at, product.created_at)

        for price in ("1", "2", "3"):
            product = await self.store.update(product.id, {"price": price})
            self.assertGreaterEqual(product.updated_at, product.created_at)

        product = await self.store.remove(product.id)
        self.assertGreaterEqual(product.updated_at, product.created_at)
