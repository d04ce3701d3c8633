from pathlib import Path
import tempfile
import unittest

from openpyxl import Workbook

from backoffice.services.import_service import (
    import_workbook,
    load_sheet_rows,
    normalize_header,
    row_changes,
    validate_columns,
)
from backoffice.services.inventory_repository import InventoryRepository
from backoffice.services.inventory_service import InventoryService
from backoffice.services.seed_data import demo_inventory

HEADERS = ["SKU", "Item Name", "Category", "Price", "Qty", "Location", "Tags"]
ROWS = [
    ["SCR-01", None, None, None, 99, None, None],
    ["NEW-1", "Pry Bar", "Tools", "$15.50", "3", "Shop Floor", "steel, demolition"],
    ["BAD-1", "Broken Qty", "Tools", 4.0, "lots", None, None],
    [None, "No Sku", "Tools", 2.0, 1, None, None],
    ["NEW-1", "Pry Bar Again", "Tools", 15.5, 1, None, None],
    ["NEW-2", None, "Tools", 1.0, 1, None, None],
]


def _write_workbook(path, headers=HEADERS, rows=ROWS, title="Inventory"):
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = title
    worksheet.append(headers)
    for row in rows:
        worksheet.append(row)
    workbook.save(path)


class ImportHelpersTest(unittest.TestCase):
    def test_header_aliases(self):
        self.assertEqual(normalize_header("Item Name"), "name")
        self.assertEqual(normalize_header("Retail Price"), "rrp")
        self.assertEqual(normalize_header(" Qty "), "stock")
        self.assertEqual(normalize_header("Reorder-Level"), "low_stock_threshold")
        self.assertEqual(normalize_header("Shelf Colour"), "shelf_colour")
        self.assertEqual(normalize_header(None), "")

    def test_row_changes_skips_blanks_and_placeholders(self):
        changes = row_changes({"name": " Hammer ", "brand": "n/a", "rrp": "1,200", "stock": 3.0})
        self.assertEqual(changes, {"name": "Hammer", "rrp": 1200.0, "stock": 3})

    def test_row_changes_rejects_bad_numbers(self):
        with self.assertRaises(ValueError):
            row_changes({"stock": "2.5"})
        with self.assertRaises(ValueError):
            row_changes({"cost": -1})

    def test_validate_columns(self):
        with self.assertRaises(ValueError):
            validate_columns({"name", "stock"})
        validate_columns({"sku", "name"})

    def test_load_sheet_rows_skips_empty_rows(self):
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.append(["SKU", "Name"])
        worksheet.append(["A-1", "First"])
        worksheet.append([None, None])
        worksheet.append(["A-2", "Second"])

        rows, columns = load_sheet_rows(worksheet)

        self.assertEqual(columns, {"sku", "name"})
        self.assertEqual([row["_row"] for row in rows], [2, 4])


class ImportWorkbookTest(unittest.TestCase):
    def setUp(self):
        repository = InventoryRepository()
        repository.load(seed=demo_inventory())
        self.service = InventoryService(repository)
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp_dir.name) / "inventory.xlsx"
        _write_workbook(self.path)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_import_inserts_and_updates_by_sku(self):
        result = import_workbook(self.service, self.path)

        self.assertEqual((result.inserted, result.updated, result.skipped), (1, 1, 1))
        self.assertEqual(len(result.errors), 3)
        self.assertEqual(self.service.repository.get_by_sku("SCR-01").stock, 99)
        self.assertEqual(self.service.repository.get_by_sku("SCR-01").name, "Screwdriver Set")
        created = self.service.repository.get_by_sku("NEW-1")
        self.assertEqual(created.rrp, 15.5)
        self.assertEqual(created.stock, 3)
        self.assertEqual(created.tags, ["steel", "demolition"])
        self.assertIsNone(self.service.repository.get_by_sku("BAD-1"))

    def test_errors_name_the_row(self):
        result = import_workbook(self.service, self.path)
        self.assertTrue(any(error.startswith("Row 4:") for error in result.errors))
        self.assertTrue(any("duplicate SKU NEW-1" in error for error in result.errors))
        self.assertTrue(any("NEW-2" in error for error in result.errors))

    def test_dry_run_changes_nothing(self):
        result = import_workbook(self.service, self.path, dry_run=True)
        self.assertTrue(result.dry_run)
        self.assertEqual((result.inserted, result.updated), (1, 1))
        self.assertEqual(self.service.repository.get_by_sku("SCR-01").stock, 40)
        self.assertIsNone(self.service.repository.get_by_sku("NEW-1"))

    def test_named_sheet(self):
        path = Path(self.tmp_dir.name) / "named.xlsx"
        _write_workbook(path, title="Stock")
        with self.assertRaises(ValueError):
            import_workbook(self.service, path, sheet="Missing")
        result = import_workbook(self.service, path, sheet="Stock")
        self.assertEqual(result.inserted, 1)

    def test_missing_required_column(self):
        path = Path(self.tmp_dir.name) / "no_sku.xlsx"
        _write_workbook(path, headers=["Name", "Qty"], rows=[["Thing", 1]])
        with self.assertRaises(ValueError):
            import_workbook(self.service, path)

    def test_rejects_missing_file_and_other_formats(self):
        with self.assertRaises(FileNotFoundError):
            import_workbook(self.service, Path(self.tmp_dir.name) / "absent.xlsx")
        csv_path = Path(self.tmp_dir.name) / "inventory.csv"
        csv_path.write_text("sku,name\nA,B\n")
        with self.assertRaises(ValueError):
            import_workbook(self.service, csv_path)


if __name__ == "__main__":
    unittest.main()
