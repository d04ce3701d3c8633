import importlib

from backoffice.models.inventory import InventoryItem
from backoffice.models.progress import ProgressEntry
from backoffice.models.purchases import PurchaseOrder
from backoffice.models.sales import Sale


def import_all_models() -> None:
    for module_name in (
        "backoffice.models.inventory",
        "backoffice.models.progress",
        "backoffice.models.purchases",
        "backoffice.models.sales",
    ):
        importlib.import_module(module_name)


__all__ = [
    "InventoryItem",
    "ProgressEntry",
    "PurchaseOrder",
    "Sale",
    "import_all_models",
]
