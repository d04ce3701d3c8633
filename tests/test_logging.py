import json
import logging
import sys
import unittest

from backoffice.core.logging import JsonFormatter


class JsonFormatterTest(unittest.TestCase):
    def test_payload_is_tagged(self):
        formatter = JsonFormatter("Back Office", "test")
        record = logging.LogRecord(
            "backoffice.services", logging.WARNING, __file__, 1, "Synced %d items", (3,), None
        )

        payload = json.loads(formatter.format(record))

        self.assertEqual(payload["message"], "Synced 3 items")
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["app"], "Back Office")
        self.assertEqual(payload["environment"], "test")
        self.assertNotIn("exc_info", payload)

    def test_exception_is_included(self):
        formatter = JsonFormatter("Back Office", "test")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), exc_info)

        payload = json.loads(formatter.format(record))

        self.assertIn("RuntimeError: boom", payload["exc_info"])


if __name__ == "__main__":
    unittest.main()
