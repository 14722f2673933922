"""
Manufacturer repository.
"""
from typing import Set

from sqlalchemy import func

from app.models.catalog import Manufacturer
from app.repositories.base_catalog_repository import BaseCatalogRepository


class ManufacturerRepository(BaseCatalogRepository[Manufacturer]):
    """Repository for manufacturer operations."""

    model_class = Manufacturer
    vendor_key = "asbis_id"

    def lowercase_names(self) -> Set[str]:
        """All manufacturer names, lower-cased, for case-insensitive matching."""
        rows = self.db.query(func.lower(Manufacturer.name)).all()
        return {row[0] for row in rows if row[0]}
