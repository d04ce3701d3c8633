import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException

from backoffice.config import get_settings
from backoffice.core.exceptions import BackOfficeError
from backoffice.main import build_inventory_service
from backoffice.services.import_service import import_workbook


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import inventory items from an Excel workbook, matched on SKU."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--sheet", default=None, help="Sheet to import. Default: first sheet.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    args = parse_args()
    service = build_inventory_service(get_settings())
    try:
        result = import_workbook(service, args.path, sheet=args.sheet, dry_run=args.dry_run)
    except (OSError, ValueError, InvalidFileException, BackOfficeError) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(f"{result.inserted} inserted, {result.updated} updated, {result.skipped} skipped")
    if result.errors:
        print("Rows not imported:")
        for error in result.errors:
            print(f"  {error}")

    if args.dry_run:
        print("Dry run complete, no changes saved.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
