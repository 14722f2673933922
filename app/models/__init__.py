from app.models.catalog import (
    Category,
    Manufacturer,
    Parameter,
    ParameterOption,
    Product,
    ProductParameter,
)
from app.models.sync_log import SyncLog

__all__ = [
    "Category",
    "Manufacturer",
    "Parameter",
    "ParameterOption",
    "Product",
    "ProductParameter",
    "SyncLog",
]
