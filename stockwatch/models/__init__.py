import importlib

from stockwatch.models.alert import Alert
from stockwatch.models.product import Product
from stockwatch.models.supplier import Supplier


def import_all_models() -> None:
    for module_name in (
        "stockwatch.models.alert",
        "stockwatch.models.product",
        "stockwatch.models.supplier",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Alert",
    "Product",
    "Supplier",
    "import_all_models",
]
