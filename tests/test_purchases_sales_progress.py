import unittest
from datetime import date

from backoffice.core.exceptions import DuplicateKeyError, RecordNotFoundError, ValidationError
from backoffice.schemas.progress import ProgressEntryCreate
from backoffice.schemas.purchases import PurchaseOrderCreate
from backoffice.schemas.sales import SaleCreate
from backoffice.services.list_query import ListQuery
from backoffice.services.progress_service import create_entry, list_entries
from backoffice.services.purchase_service import (
    create_purchase,
    get_purchase,
    list_purchases,
    update_status,
)
from backoffice.services.sale_service import create_sale, list_sales
from tests.support import memory_engine, session_factory


class DatabaseTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = memory_engine()
        self.db = session_factory(self.engine)()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()


class PurchaseServiceTest(DatabaseTestCase):
    def purchase(self, supplier="Stanley", **values):
        values.setdefault("lines", [{"sku": "SCR-01", "quantity": 10, "unit_cost": 12.5}])
        return create_purchase(self.db, PurchaseOrderCreate(supplier=supplier, **values))

    def test_create_computes_total_and_number(self):
        purchase = self.purchase(
            order_date=date(2024, 5, 1),
            lines=[
                {"sku": "SCR-01", "quantity": 10, "unit_cost": 12.5},
                {"sku": "HM-02", "quantity": 3, "unit_cost": 18.0},
            ],
        )
        self.assertEqual(purchase.total_amount, 179.0)
        self.assertTrue(purchase.po_number.startswith("PO-20240501-"))
        self.assertEqual(purchase.status, "draft")
        self.assertEqual(get_purchase(self.db, purchase.id).supplier, "Stanley")

    def test_duplicate_po_number(self):
        self.purchase(po_number="PO-1")
        with self.assertRaises(DuplicateKeyError):
            self.purchase(po_number="PO-1")

    def test_expected_date_before_order_date(self):
        with self.assertRaises(ValidationError):
            self.purchase(order_date=date(2024, 5, 2), expected_date=date(2024, 5, 1))

    def test_missing_purchase(self):
        with self.assertRaises(RecordNotFoundError):
            get_purchase(self.db, "missing")

    def test_received_orders_are_final(self):
        purchase = self.purchase()
        self.assertEqual(update_status(self.db, purchase.id, "ordered").status, "ordered")
        self.assertEqual(update_status(self.db, purchase.id, "received").status, "received")
        with self.assertRaises(ValidationError):
            update_status(self.db, purchase.id, "cancelled")

    def test_list_newest_first_with_search_and_status(self):
        self.purchase(po_number="PO-A", supplier="Makita", order_date=date(2024, 1, 5))
        self.purchase(po_number="PO-B", supplier="Bosch", order_date=date(2024, 3, 5), status="ordered")
        self.purchase(po_number="PO-C", supplier="Makita", order_date=date(2024, 2, 5))

        page = list_purchases(self.db, ListQuery())
        self.assertEqual([item.po_number for item in page.items], ["PO-B", "PO-C", "PO-A"])

        page = list_purchases(self.db, ListQuery(search="makita", sort_field="date", sort_direction="asc"))
        self.assertEqual([item.po_number for item in page.items], ["PO-A", "PO-C"])

        page = list_purchases(self.db, ListQuery(filters={"status": "ordered"}))
        self.assertEqual(page.total, 1)

    def test_list_reports_invalid_sort(self):
        page = list_purchases(self.db, ListQuery(sort_field="colour"))
        self.assertEqual(page.error_kind, "invalid_query")


class SaleServiceTest(DatabaseTestCase):
    def sale(self, customer="Jordan", **values):
        values.setdefault("lines", [{"name": "Claw Hammer", "sku": "HM-02", "quantity": 2, "unit_price": 34.95}])
        return create_sale(self.db, SaleCreate(customer_name=customer, **values))

    def test_create_computes_total(self):
        sale = self.sale(sale_date=date(2024, 6, 1))
        self.assertEqual(sale.grand_total, 69.9)
        self.assertEqual(sale.status, "completed")
        self.assertTrue(sale.sale_number.startswith("S-20240601-"))

    def test_duplicate_sale_number(self):
        self.sale(sale_number="S-1")
        with self.assertRaises(DuplicateKeyError):
            self.sale(sale_number="S-1")

    def test_list_sales(self):
        self.sale(sale_number="S-1", customer="Avery", sale_date=date(2024, 6, 1))
        self.sale(sale_number="S-2", customer="Blake", sale_date=date(2024, 6, 3))
        self.sale(sale_number="S-3", customer="Avery", sale_date=date(2024, 6, 2), status="refunded")

        page = list_sales(self.db, ListQuery(page_size=2))
        self.assertEqual([item.sale_number for item in page.items], ["S-2", "S-3"])
        self.assertEqual(page.total, 3)

        page = list_sales(self.db, ListQuery(search="avery", filters={"status": "completed"}))
        self.assertEqual([item.sale_number for item in page.items], ["S-1"])

        page = list_sales(self.db, ListQuery(sort_field="total", sort_direction="desc"))
        self.assertEqual(page.items[0].sale_number, "S-1")


class ProgressServiceTest(DatabaseTestCase):
    def test_sender_defaults_to_anonymous(self):
        entry = create_entry(self.db, ProgressEntryCreate(description=" Counted aisle 4 "))
        self.assertEqual(entry.sender, "Anonymous")
        self.assertEqual(entry.description, "Counted aisle 4")

    def test_blank_description_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_entry(self.db, ProgressEntryCreate(description="   "))

    def test_list_entries_limit(self):
        for idx in range(3):
            create_entry(self.db, ProgressEntryCreate(description=f"Step {idx}", sender="Sam"))
        self.assertEqual(len(list_entries(self.db)), 3)
        self.assertEqual(len(list_entries(self.db, limit=2)), 2)


if __name__ == "__main__":
    unittest.main()
