import unittest

from sqlalchemy import inspect

from backoffice.database.engine import create_db_engine, ensure_sqlite_schema, is_memory_sqlite


class DatabaseEngineTest(unittest.TestCase):
    def test_memory_url_detection(self):
        self.assertTrue(is_memory_sqlite("sqlite:///:memory:"))
        self.assertTrue(is_memory_sqlite("sqlite://"))
        self.assertTrue(is_memory_sqlite("sqlite:///file:shared?mode=memory&uri=true"))
        self.assertFalse(is_memory_sqlite("sqlite:///./backoffice.db"))
        self.assertFalse(is_memory_sqlite("postgresql://user@localhost/backoffice"))

    def test_old_inventory_table_gets_new_columns(self):
        engine = create_db_engine("sqlite:///:memory:")
        with engine.begin() as conn:
            conn.exec_driver_sql(
                "CREATE TABLE inventory_items (id TEXT PRIMARY KEY, sku TEXT, name TEXT)"
            )

        added = ensure_sqlite_schema(engine)

        self.assertIn("inventory_items.tags", added)
        self.assertIn("inventory_items.min_stock_count", added)
        self.assertNotIn("sales.status", added)
        columns = {column["name"] for column in inspect(engine).get_columns("inventory_items")}
        self.assertIn("barcode", columns)
        self.assertEqual(ensure_sqlite_schema(engine), [])
        engine.dispose()

    def test_sqlite_lower_folds_unicode(self):
        engine = create_db_engine("sqlite:///:memory:")
        with engine.connect() as conn:
            folded = conn.exec_driver_sql("SELECT lower('ÉCOLE Straße'), lower(NULL)").one()
        self.assertEqual(tuple(folded), ("école strasse", None))
        engine.dispose()


if __name__ == "__main__":
    unittest.main()
