import unittest
from dataclasses import dataclass
from typing import Optional

from backoffice.core.exceptions import InvalidQueryError
from backoffice.services.inventory_records import INVENTORY_FIELDS, InventoryRecord
from backoffice.services.list_query import (
    NUMBER,
    STRING,
    ListFields,
    ListQuery,
    Page,
    apply_query,
    query_from_mapping,
)
from backoffice.services.seed_data import demo_inventory


@dataclass
class Row:
    id: str
    code: str
    label: Optional[str]
    amount: Optional[float]


ROW_FIELDS = ListFields(
    search=("label",),
    filters=(),
    sortable={"code": STRING, "label": STRING, "amount": NUMBER},
    default_sort="label",
    tie_breaker="code",
)


def _skus(page):
    return [item.sku for item in page.items]


class ApplyQueryTest(unittest.TestCase):
    def setUp(self):
        self.records = demo_inventory()

    def test_default_query_sorts_by_name(self):
        page = apply_query(self.records, ListQuery(page_size=3), INVENTORY_FIELDS)
        self.assertEqual(page.total, 25)
        self.assertEqual(
            [item.name for item in page.items],
            ["Adjustable Wrench", "Ball Valve 15mm", "Circular Saw"],
        )

    def test_search_matches_name_or_sku_case_insensitively(self):
        page = apply_query(self.records, ListQuery(search="SCR"), INVENTORY_FIELDS)
        self.assertEqual(page.total, 2)
        self.assertEqual(_skus(page), ["SCR-01", "SC-41"])

    def test_search_matches_category(self):
        page = apply_query(self.records, ListQuery(search="plumb"), INVENTORY_FIELDS)
        self.assertEqual(sorted(_skus(page)), ["PP-30", "TP-31", "VL-32"])

    def test_filter_is_exact_and_case_insensitive(self):
        page = apply_query(self.records, ListQuery(filters={"category": "tools"}), INVENTORY_FIELDS)
        self.assertEqual(page.total, 3)
        self.assertEqual(sorted(_skus(page)), ["HM-02", "SCR-01", "WR-03"])

    def test_blank_filters_are_ignored(self):
        page = apply_query(
            self.records,
            ListQuery(filters={"category": "", "location": None}),
            INVENTORY_FIELDS,
        )
        self.assertEqual(page.total, 25)

    def test_search_and_filters_combine(self):
        query = ListQuery(search="set", filters={"category": "Tools", "location": "Warehouse A"})
        page = apply_query(self.records, query, INVENTORY_FIELDS)
        self.assertEqual(_skus(page), ["SCR-01"])

    def test_sort_descending_by_price_alias(self):
        query = ListQuery(sort_field="price", sort_direction="desc", page_size=5)
        page = apply_query(self.records, query, INVENTORY_FIELDS)
        self.assertEqual(_skus(page), ["SW-11", "DR-10", "SD-12", "PT-50", "LV-71"])

    def test_pagination(self):
        query = ListQuery(sort_field="sku", page=3, page_size=10)
        page = apply_query(self.records, query, INVENTORY_FIELDS)
        self.assertEqual(page.total, 25)
        self.assertEqual(page.pages, 3)
        self.assertEqual(len(page.items), 5)

    def test_page_past_the_end_is_empty(self):
        page = apply_query(self.records, ListQuery(page=9, page_size=10), INVENTORY_FIELDS)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 25)

    def test_pages_cover_every_match_once(self):
        seen = []
        for number in range(1, 5):
            page = apply_query(
                self.records,
                ListQuery(sort_field="category", page=number, page_size=7),
                INVENTORY_FIELDS,
            )
            seen.extend(_skus(page))
        self.assertEqual(len(seen), 25)
        self.assertEqual(len(set(seen)), 25)

    def test_ties_break_on_sku_in_both_directions(self):
        records = [
            InventoryRecord(id="3", sku="C", name="Same", rrp=5.0),
            InventoryRecord(id="1", sku="A", name="Same", rrp=5.0),
            InventoryRecord(id="2", sku="B", name="Other", rrp=9.0),
        ]
        ascending = apply_query(records, ListQuery(sort_field="rrp"), INVENTORY_FIELDS)
        descending = apply_query(
            records,
            ListQuery(sort_field="rrp", sort_direction="desc"),
            INVENTORY_FIELDS,
        )
        self.assertEqual(_skus(ascending), ["A", "C", "B"])
        self.assertEqual(_skus(descending), ["B", "A", "C"])

    def test_missing_values_sort_last_ascending(self):
        rows = [
            Row(id="1", code="a", label=None, amount=None),
            Row(id="2", code="b", label="beta", amount=2.0),
            Row(id="3", code="c", label="Alpha", amount=1.0),
        ]
        page = apply_query(rows, ListQuery(), ROW_FIELDS)
        self.assertEqual([row.code for row in page.items], ["c", "b", "a"])
        page = apply_query(rows, ListQuery(sort_field="amount", sort_direction="desc"), ROW_FIELDS)
        self.assertEqual([row.code for row in page.items], ["a", "b", "c"])

    def test_unknown_sort_field_is_rejected(self):
        with self.assertRaises(InvalidQueryError):
            apply_query(self.records, ListQuery(sort_field="colour"), INVENTORY_FIELDS)

    def test_unknown_filter_is_rejected(self):
        with self.assertRaises(InvalidQueryError):
            apply_query(self.records, ListQuery(filters={"brand": "3M"}), INVENTORY_FIELDS)

    def test_bad_direction_and_page_are_rejected(self):
        with self.assertRaises(InvalidQueryError):
            apply_query(self.records, ListQuery(sort_direction="sideways"), INVENTORY_FIELDS)
        with self.assertRaises(InvalidQueryError):
            apply_query(self.records, ListQuery(page=0), INVENTORY_FIELDS)

    def test_empty_collection(self):
        page = apply_query([], ListQuery(search="anything"), INVENTORY_FIELDS)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 0)
        self.assertEqual(page.pages, 0)


class QueryFromMappingTest(unittest.TestCase):
    def test_reads_loose_parameters(self):
        query = query_from_mapping(
            {"page": "2", "search": "drill", "category": "Power Tools", "sort": "rrp", "order": "desc"},
            INVENTORY_FIELDS,
            default_page_size=20,
        )
        self.assertEqual(query.page, 2)
        self.assertEqual(query.page_size, 20)
        self.assertEqual(query.search, "drill")
        self.assertEqual(query.filters["category"], "Power Tools")
        self.assertIsNone(query.filters["location"])
        self.assertEqual(query.sort_field, "rrp")
        self.assertEqual(query.sort_direction, "desc")

    def test_non_numeric_page_is_rejected(self):
        with self.assertRaises(InvalidQueryError):
            query_from_mapping({"page": "two"}, INVENTORY_FIELDS, default_page_size=20)


class PageTest(unittest.TestCase):
    def setUp(self):
        self.items = [
            InventoryRecord(id=str(idx), sku=f"S{idx}", name=f"Item {idx}") for idx in range(3)
        ]

    def test_prepend_on_first_page_keeps_page_size(self):
        page = Page(items=list(self.items), total=7, page=1, page_size=3)
        added = InventoryRecord(id="new", sku="NEW", name="New")
        updated = page.prepend(added)
        self.assertEqual([item.id for item in updated.items], ["new", "0", "1"])
        self.assertEqual(updated.total, 8)
        self.assertEqual(page.total, 7)

    def test_prepend_on_later_page_only_counts(self):
        page = Page(items=list(self.items), total=7, page=2, page_size=3)
        updated = page.prepend(InventoryRecord(id="new", sku="NEW", name="New"))
        self.assertEqual(updated.items, page.items)
        self.assertEqual(updated.total, 8)

    def test_replace_and_remove(self):
        page = Page(items=list(self.items), total=3, page_size=3)
        renamed = InventoryRecord(id="1", sku="S1", name="Renamed")
        self.assertEqual(page.replace_record(renamed).items[1].name, "Renamed")
        missing = InventoryRecord(id="zz", sku="ZZ", name="Elsewhere")
        self.assertIs(page.replace_record(missing), page)
        removed = page.remove("0")
        self.assertEqual([item.id for item in removed.items], ["1", "2"])
        self.assertEqual(removed.total, 2)
        self.assertIs(page.remove("zz"), page)

    def test_move(self):
        page = Page(items=list(self.items), total=3, page_size=3)
        self.assertEqual([item.id for item in page.move("1", "up").items], ["1", "0", "2"])
        self.assertEqual([item.id for item in page.move("1", "down").items], ["0", "2", "1"])
        self.assertIs(page.move("0", "up"), page)
        self.assertIs(page.move("2", "down"), page)
        with self.assertRaises(InvalidQueryError):
            page.move("1", "left")

    def test_failed_page(self):
        page = Page.failed(ListQuery(page=2, page_size=5), "boom")
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 0)
        self.assertEqual(page.error, "boom")
        self.assertEqual(page.error_kind, "fetch_failed")


if __name__ == "__main__":
    unittest.main()
