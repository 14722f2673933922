"""
Category repository.

Handles Asbis-linked category lookups and slug bookkeeping.
"""
from typing import Optional

from app.constants.sync import AsbisKeys
from app.models.catalog import Category
from app.repositories.base_catalog_repository import BaseCatalogRepository


class CategoryRepository(BaseCatalogRepository[Category]):
    """Repository for category operations."""

    model_class = Category
    vendor_key = "asbis_id"

    def slug_exists(self, slug: str) -> bool:
        return self.db.query(Category.id).filter(
            Category.slug == slug
        ).first() is not None

    def get_asbis_root(self) -> Optional[Category]:
        """
        Category that holds Asbis parameters: the first top-level Asbis
        category, falling back to any Asbis category.

        Returns:
            Category or None when no Asbis category exists yet
        """
        root = self.db.query(Category).filter(
            Category.asbis_id.like(f"{AsbisKeys.MAIN_CATEGORY_PREFIX}%")
        ).order_by(Category.id).first()
        if root is not None:
            return root
        return self.db.query(Category).filter(
            Category.asbis_id.isnot(None)
        ).order_by(Category.id).first()
