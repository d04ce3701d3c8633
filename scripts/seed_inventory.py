import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from backoffice.config import get_settings
from backoffice.core.logging import setup_logging
from backoffice.database import Base, SessionLocal, engine, ensure_sqlite_schema, session_scope
from backoffice.models import InventoryItem, import_all_models
from backoffice.services.inventory_repository import InventoryRepository
from backoffice.services.seed_data import demo_inventory


def parse_args():
    parser = argparse.ArgumentParser(description="Seed the demo inventory.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing inventory items before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    with session_scope() as db:
        if args.reset:
            db.execute(delete(InventoryItem))
        has_items = db.execute(select(InventoryItem.id).limit(1)).first() is not None
    if has_items:
        print("Seed skipped: inventory items already exist.")
        return

    repository = InventoryRepository(
        SessionLocal,
        sync_batch_size=get_settings().INVENTORY_SYNC_BATCH_SIZE,
    )
    repository.load(seed=demo_inventory())
    print(f"Seeded {repository.count()} inventory items.")


if __name__ == "__main__":
    main()
