import logging
from pathlib import Path

from openpyxl import load_workbook

from backoffice.core.exceptions import ValidationError
from backoffice.schemas.inventory import InventoryImportResult
from backoffice.services.inventory_records import InventoryRecord, new_record_id, utcnow
from backoffice.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("sku",), "sku"),
    (("item", "code"), "sku"),
    (("stock", "code"), "sku"),
    (("product", "code"), "sku"),
    (("name",), "name"),
    (("item", "name"), "name"),
    (("product", "name"), "name"),
    (("description",), "description"),
    (("category",), "category"),
    (("category", "name"), "category"),
    (("subcategory",), "subcategory"),
    (("sub", "category"), "subcategory"),
    (("brand",), "brand"),
    (("rrp",), "rrp"),
    (("price",), "rrp"),
    (("retail", "price"), "rrp"),
    (("cost",), "cost"),
    (("cost", "price"), "cost"),
    (("unit", "cost"), "cost"),
    (("stock",), "stock"),
    (("qty",), "stock"),
    (("quantity",), "stock"),
    (("stock", "count"), "stock"),
    (("low", "stock", "threshold"), "low_stock_threshold"),
    (("reorder", "level"), "low_stock_threshold"),
    (("min", "stock"), "min_stock_count"),
    (("min", "stock", "count"), "min_stock_count"),
    (("location",), "location"),
    (("bin",), "location"),
    (("barcode",), "barcode"),
    (("supplier",), "supplier"),
    (("supplier", "name"), "supplier"),
    (("image", "url"), "image_url"),
    (("image",), "image_url"),
    (("tags",), "tags"),
    (("active",), "is_active"),
    (("is", "active"), "is_active"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {"sku", "name"}

_TEXT_FIELDS = (
    "name",
    "description",
    "category",
    "subcategory",
    "brand",
    "location",
    "barcode",
    "supplier",
    "image_url",
)
_MONEY_FIELDS = ("rrp", "cost")
_COUNT_FIELDS = ("stock", "low_stock_threshold", "min_stock_count")
_PLACEHOLDER_VALUES = {"none", "[none]", "null", "[null]", "na", "n/a", "nan", "-", "--"}
_FALSE_VALUES = {"0", "false", "no", "n", "inactive", "discontinued"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_text(value):
    if _is_blank(value):
        return None
    text = str(value).strip()
    if text.lower() in _PLACEHOLDER_VALUES:
        return None
    return text


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def to_float(value, field):
    if isinstance(value, str):
        value = value.replace(",", "").replace("$", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number") from None
    if number < 0:
        raise ValueError(f"{field} must be non-negative")
    return number


def to_int(value, field):
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    number = to_float(value, field)
    if not number.is_integer():
        raise ValueError(f"{field} must be an integer")
    return int(number)


def to_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSE_VALUES


def to_tags(value):
    return [part.strip() for part in str(value).split(",") if part.strip()]


def load_sheet_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for key in header_keys if key}

    rows = []
    for row_idx, row in enumerate(rows_iter, start=2):
        if row is None or all(_is_blank(value) for value in row):
            continue
        record = {key: row[idx] for idx, key in indices if idx < len(row)}
        record["_row"] = row_idx
        rows.append(record)
    return rows, columns


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - columns)
    if missing:
        raise ValueError(f"Sheet missing columns: {', '.join(missing)}")


def row_changes(row):
    """Typed field values present in the row; blank cells are left out."""
    changes = {}
    for field in _TEXT_FIELDS:
        value = _clean_text(row.get(field))
        if value is not None:
            changes[field] = value
    for field in _MONEY_FIELDS:
        if not _is_blank(row.get(field)):
            changes[field] = to_float(row[field], field)
    for field in _COUNT_FIELDS:
        if not _is_blank(row.get(field)):
            changes[field] = to_int(row[field], field)
    if not _is_blank(row.get("tags")):
        changes["tags"] = to_tags(row["tags"])
    if not _is_blank(row.get("is_active")):
        changes["is_active"] = to_bool(row["is_active"])
    return changes


def build_records(service: InventoryService, rows):
    """Turn sheet rows into new or updated records, keyed on SKU."""
    records = []
    errors = []
    skipped = 0
    seen = set()
    for row in rows:
        row_number = row.get("_row")
        sku = _clean_text(row.get("sku"))
        if sku is None:
            skipped += 1
            continue
        if sku in seen:
            errors.append(f"Row {row_number}: duplicate SKU {sku} in sheet")
            continue
        try:
            changes = row_changes(row)
        except ValueError as exc:
            errors.append(f"Row {row_number}: {exc}")
            continue
        seen.add(sku)

        existing = service.repository.get_by_sku(sku)
        if existing is not None:
            records.append(existing.touched(**changes))
            continue
        if "name" not in changes:
            errors.append(f"Row {row_number}: name is required for new SKU {sku}")
            continue
        now = utcnow()
        records.append(
            InventoryRecord(
                id=new_record_id(),
                sku=sku,
                date_added=now,
                last_updated=now,
                **changes,
            )
        )
    return records, errors, skipped


def import_workbook(service: InventoryService, workbook_path, sheet=None, dry_run=False):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        if sheet:
            if sheet not in workbook.sheetnames:
                raise ValueError(f"Sheet not found: {sheet}")
            worksheet = workbook[sheet]
        else:
            worksheet = workbook[workbook.sheetnames[0]]
        rows, columns = load_sheet_rows(worksheet)
    finally:
        workbook.close()

    validate_columns(columns)
    records, errors, skipped = build_records(service, rows)

    result = InventoryImportResult(skipped=skipped, errors=errors, dry_run=dry_run)
    if dry_run:
        for record in records:
            if service.repository.find(record.id) is None:
                result.inserted += 1
            else:
                result.updated += 1
        return result

    if records:
        try:
            counts = service.save_records(records)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc
        result.inserted = counts.inserted
        result.updated = counts.updated
    logger.info(
        "Imported %s: %d inserted, %d updated, %d skipped, %d errors",
        workbook_path.name,
        result.inserted,
        result.updated,
        result.skipped,
        len(result.errors),
    )
    return result


__all__ = [
    "HEADER_ALIASES",
    "import_workbook",
    "load_sheet_rows",
    "normalize_header",
    "row_changes",
    "validate_columns",
]
