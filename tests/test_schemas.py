import unittest
from datetime import datetime
from decimal import Decimal

from pydantic import ValidationError

from app_products.sql import schemas


class CreateProductTest(unittest.TestCase):
    def test_valid(self):
        payload = schemas.CreateProduct(name="Laptop", price=999.99)
        self.assertEqual(payload.price, Decimal("999.99"))

    def test_price_rules(self):
        self.assertEqual(schemas.CreateProduct(name="x", price="99.9999").price, Decimal("99.9999"))
        self.assertEqual(schemas.CreateProduct(name="x", price=0).price, Decimal("0"))
        for price in (-5, "-0.01", "1.00001"):
            with self.subTest(price=price):
                with self.assertRaises(ValidationError):
                    schemas.CreateProduct(name="x", price=price)

    def test_price_fits_numeric_12_4(self):
        self.assertEqual(schemas.CreateProduct(name="x", price="99999999.9999").price, Decimal("99999999.9999"))
        for price in ("123456789.1234", "12345678901234.5678"):
            with self.subTest(price=price):
                with self.assertRaises(ValidationError):
                    schemas.CreateProduct(name="x", price=price)

    def test_name_required_and_non_empty(self):
        with self.assertRaises(ValidationError):
            schemas.CreateProduct(name="", price=1)
        with self.assertRaises(ValidationError):
            schemas.CreateProduct(price=1)

    def test_extra_fields_forbidden(self):
        with self.assertRaises(ValidationError):
            schemas.CreateProduct(name="x", price=1, available=False)


class UpdateProductTest(unittest.TestCase):
    def test_changes_only_sent_fields_without_id(self):
        payload = schemas.UpdateProduct(id=3, price="899.99")
        self.assertEqual(payload.changes(), {"price": Decimal("899.99")})

    def test_null_fields_rejected_but_omitted_fields_allowed(self):
        for data in ({"name": None}, {"price": None}):
            with self.subTest(data=data):
                with self.assertRaises(ValidationError):
                    schemas.ProductPatch(**data)
        self.assertEqual(schemas.ProductPatch().changes(), {})

    def test_patch_id_accepted_and_dropped(self):
        self.assertEqual(schemas.ProductPatch(id=9, name="Tablet").changes(), {"name": "Tablet"})

    def test_id_must_be_positive(self):
        with self.assertRaises(ValidationError):
            schemas.UpdateProduct(id=0, name="x")


class PaginationTest(unittest.TestCase):
    def test_defaults(self):
        pagination = schemas.Pagination()
        self.assertEqual((pagination.page, pagination.limit), (1, 10))

    def test_positive_only(self):
        for data in ({"page": 0}, {"limit": -1}):
            with self.subTest(data=data):
                with self.assertRaises(ValidationError):
                    schemas.Pagination(**data)


class OutputTest(unittest.TestCase):
    def test_page_is_camel_case_with_numeric_price(self):
        now = datetime(2025, 1, 1, 12, 0, 0)
        page = schemas.ProductPage.model_validate({
            "data": [{
                "id": 1, "name": "Laptop", "price": Decimal("999.9900"),
                "available": True, "created_at": now, "updated_at": now,
            }],
            "meta": {"page": 1, "total": 1, "last_page": 1},
        })
        dumped = page.model_dump(mode="json", by_alias=True)
        self.assertEqual(dumped["meta"], {"page": 1, "total": 1, "lastPage": 1})
        self.assertEqual(dumped["data"][0]["price"], 999.99)
        self.assertEqual(dumped["data"][0]["createdAt"], "2025-01-01T12:00:00")


if __name__ == "__main__":
    unittest.main()
