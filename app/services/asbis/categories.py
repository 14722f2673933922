"""Asbis category reconciliation."""

import logging
import re
import unicodedata
from typing import List, Optional

from sqlalchemy.orm import Session

from app.constants.sync import AsbisKeys, ColumnLimits, SyncAction
from app.core.exceptions import RecordMappingError
from app.models.catalog import Category
from app.repositories.category_repository import CategoryRepository
from app.schemas.asbis import VendorCategory
from app.services.asbis.reconciler import ReconcileTally, Reconciler, apply_changes, truncate

logger = logging.getLogger(__name__)


def local_category_id(category: VendorCategory) -> str:
    """
    Key stored in ``Category.asbis_id``: ``main:<name>`` for top-level
    categories, ``sub:<parent>:<name>`` for product types.
    """
    if category.level == 1:
        return f"{AsbisKeys.MAIN_CATEGORY_PREFIX}{category.name}"
    return f"{AsbisKeys.SUB_CATEGORY_PREFIX}{category.parent_id}:{category.name}"


def main_category_id(name: str) -> str:
    return f"{AsbisKeys.MAIN_CATEGORY_PREFIX}{name}"


def sub_category_id(parent: str, name: str) -> str:
    return f"{AsbisKeys.SUB_CATEGORY_PREFIX}{parent}:{name}"


def slugify(name: str) -> str:
    normalized = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "category"


class CategoryReconciler(Reconciler[VendorCategory]):
    """Creates the two-level Asbis category tree locally."""

    entity_name = "categories"

    def __init__(self, db: Session):
        super().__init__(db)
        self.repo = CategoryRepository(db)

    def reconcile(self, records):
        # Parents first so level-2 records can resolve them
        ordered: List[VendorCategory] = sorted(records, key=lambda c: c.level)
        return super().reconcile(ordered)

    def reconcile_record(self, record: VendorCategory) -> str:
        asbis_id = truncate(local_category_id(record), ColumnLimits.CATEGORY_ID, "Category id")

        parent: Optional[Category] = None
        if record.level == 2:
            parent = self.repo.get_by_vendor_id(main_category_id(record.parent_id))
            if parent is None:
                raise RecordMappingError(
                    record.vendor_id,
                    f"parent category '{record.parent_id}' is not synced",
                )

        values = {
            "name_bg": record.name,
            "name_en": record.name,
            "category_path": record.full_path,
            "asbis_code": truncate(record.vendor_id, ColumnLimits.CATEGORY_ID, "Category code"),
            "parent": parent,
        }

        existing = self.repo.get_by_vendor_id(asbis_id)
        if existing is None:
            category = Category(
                asbis_id=asbis_id,
                slug=self.generate_slug(record.name, parent),
                show=True,
                sort_order=0,
                **values,
            )
            self.repo.add(category)
            logger.info("Created Asbis category '%s' (level %s)", record.full_path, record.level)
            return SyncAction.CREATED

        if apply_changes(existing, values):
            logger.info("Updated Asbis category '%s'", record.full_path)
            return SyncAction.UPDATED
        return SyncAction.SKIPPED

    def generate_slug(self, name: str, parent: Optional[Category]) -> str:
        """
        Unique slug. Top-level categories try ``<name>`` then
        ``<name>-asbis``; subcategories use ``<parent-slug>-<name>``. Both fall
        back to a numeric suffix.
        """
        base = slugify(name)
        if parent is None:
            candidates = [base, f"{base}{AsbisKeys.SLUG_SUFFIX}"]
        else:
            parent_slug = parent.slug or slugify(parent.name_bg)
            base = f"{parent_slug}-{base}"
            candidates = [base]

        for candidate in candidates:
            if not self.repo.slug_exists(candidate):
                return candidate

        counter = 2
        while self.repo.slug_exists(f"{candidates[-1]}-{counter}"):
            counter += 1
        return f"{candidates[-1]}-{counter}"

    def build_message(self, tally: ReconcileTally) -> str:
        message = (
            f"Categories: {tally.created} created, {tally.updated} updated, "
            f"{tally.skipped} unchanged"
        )
        if tally.errors:
            message += f". Skipped {tally.errors} categories"
        return message

    def describe(self, record: VendorCategory) -> str:
        return record.vendor_id
