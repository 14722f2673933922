"""Asbis product reconciliation."""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.constants.sync import ColumnLimits, ProductStatus, SyncAction
from app.core.exceptions import RecordMappingError
from app.models.catalog import Product, ProductParameter
from app.repositories import (
    CategoryRepository,
    ManufacturerRepository,
    ParameterRepository,
    ProductRepository,
)
from app.schemas.asbis import VendorProduct
from app.services.asbis.categories import main_category_id, sub_category_id
from app.services.asbis.reconciler import ReconcileTally, Reconciler, apply_changes, truncate

logger = logging.getLogger(__name__)


class ProductReconciler(Reconciler[VendorProduct]):
    """
    Maps vendor products onto local products, resolving category,
    manufacturer and parameter references created by the earlier stages.
    """

    entity_name = "products"

    def __init__(self, db: Session, batch_size: int = 50):
        super().__init__(db)
        self.batch_size = max(batch_size, 1)
        self.repo = ProductRepository(db)
        self.category_repo = CategoryRepository(db)
        self.manufacturer_repo = ManufacturerRepository(db)
        self.parameter_repo = ParameterRepository(db)
        self._category_ids: Dict[str, Optional[int]] = {}
        self._manufacturer_ids: Dict[str, Optional[int]] = {}

    # ==================== Reference resolution ====================

    def resolve_category_id(self, record: VendorProduct) -> int:
        if not record.product_category:
            raise RecordMappingError(record.product_code, "product has no category")
        if record.product_type:
            key = sub_category_id(record.product_category, record.product_type)
        else:
            key = main_category_id(record.product_category)

        if key not in self._category_ids:
            category = self.category_repo.get_by_vendor_id(key)
            self._category_ids[key] = category.id if category else None
        category_id = self._category_ids[key]
        if category_id is None:
            raise RecordMappingError(
                record.product_code, f"category '{key}' is not synced"
            )
        return category_id

    def resolve_manufacturer_id(self, record: VendorProduct) -> Optional[int]:
        if not record.vendor:
            return None
        name = truncate(record.vendor, ColumnLimits.MANUFACTURER_NAME, "Manufacturer name")
        if name not in self._manufacturer_ids:
            manufacturer = self.manufacturer_repo.get_by_vendor_id(name)
            self._manufacturer_ids[name] = manufacturer.id if manufacturer else None
        manufacturer_id = self._manufacturer_ids[name]
        if manufacturer_id is None:
            raise RecordMappingError(
                record.product_code, f"manufacturer '{name}' is not synced"
            )
        return manufacturer_id

    def resolve_parameter_options(self, record: VendorProduct) -> Dict[int, int]:
        """
        Map every vendor attribute to (parameter id -> option id). Unknown
        options of a known parameter are created on demand.
        """
        resolved: Dict[int, int] = {}
        for name, value in sorted(record.attributes.items()):
            key = truncate(name, ColumnLimits.PARAMETER_KEY, "Parameter key")
            parameter = self.parameter_repo.get_by_vendor_id(key)
            if parameter is None:
                raise RecordMappingError(
                    record.product_code, f"parameter '{name}' is not synced"
                )
            option = self.parameter_repo.get_option(parameter, value)
            if option is None:
                option = self.parameter_repo.add_option(parameter, value)
            resolved[parameter.id] = option.id
        return resolved

    # ==================== Reconciliation ====================

    def reconcile_record(self, record: VendorProduct) -> str:
        code = record.product_code
        if not code:
            raise RecordMappingError(None, "product code is missing")
        if not record.description:
            raise RecordMappingError(code, "product description is missing")

        category_id = self.resolve_category_id(record)
        manufacturer_id = self.resolve_manufacturer_id(record)
        options = self.resolve_parameter_options(record)

        values = {
            "sku": code,
            "asbis_code": code,
            "reference_number": code,
            "name_bg": record.description,
            "name_en": record.description,
            "model": truncate(record.product_category, ColumnLimits.PRODUCT_MODEL, "Product model"),
            "status": ProductStatus.AVAILABLE,
            "category_id": category_id,
            "manufacturer_id": manufacturer_id,
        }
        # A feed without images leaves the stored ones alone
        if record.image:
            values["primary_image_url"] = record.image
        if record.images:
            values["additional_images"] = list(record.images)

        existing = self.repo.get_by_vendor_id(code)
        if existing is None:
            product = self.repo.add(Product(asbis_id=code, show=True, **values))
            self.sync_product_parameters(product, options)
            logger.debug("Created Asbis product %s", code)
            return SyncAction.CREATED

        changed = apply_changes(existing, values)
        changed = self.sync_product_parameters(existing, options) or changed
        if changed:
            logger.debug("Updated Asbis product %s", code)
            return SyncAction.UPDATED
        return SyncAction.SKIPPED

    def sync_product_parameters(self, product: Product, options: Dict[int, int]) -> bool:
        """Make the product's parameter links equal ``options``."""
        changed = False
        current: Dict[int, ProductParameter] = {
            link.parameter_id: link for link in product.product_parameters
        }
        stale: List[ProductParameter] = [
            link for parameter_id, link in current.items()
            if parameter_id not in options
        ]
        for link in stale:
            product.product_parameters.remove(link)
            changed = True

        for parameter_id, option_id in options.items():
            link = current.get(parameter_id)
            if link is None:
                product.product_parameters.append(
                    ProductParameter(parameter_id=parameter_id, option_id=option_id)
                )
                changed = True
            elif link.option_id != option_id:
                link.option_id = option_id
                changed = True
        return changed

    def after_record(self, tally: ReconcileTally) -> None:
        if tally.total_processed % self.batch_size == 0:
            logger.info(
                "Progress: %s products processed (created: %s, updated: %s, errors: %s)",
                tally.total_processed, tally.created, tally.updated, tally.errors,
            )

    def describe(self, record: VendorProduct) -> str:
        return record.product_code or "<no code>"
