"""
Product repository.

Handles Asbis product lookups and the counts used by the integrity report.
The counts only consider products linked to Asbis.
"""
from app.models.catalog import Product
from app.repositories.base_catalog_repository import BaseCatalogRepository


class ProductRepository(BaseCatalogRepository[Product]):
    """Repository for product operations."""

    model_class = Product
    vendor_key = "asbis_id"

    def _linked(self):
        return self.db.query(Product).filter(Product.asbis_id.isnot(None))

    def count_without_category(self) -> int:
        return self._linked().filter(Product.category_id.is_(None)).count()

    def count_without_manufacturer(self) -> int:
        return self._linked().filter(Product.manufacturer_id.is_(None)).count()

    def count_without_price(self) -> int:
        return self._linked().filter(Product.price_client.is_(None)).count()
