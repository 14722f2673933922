"""Asbis manufacturer reconciliation."""

import logging

from sqlalchemy.orm import Session

from app.constants.sync import ColumnLimits, SyncAction
from app.core.exceptions import RecordMappingError
from app.models.catalog import Manufacturer
from app.repositories.manufacturer_repository import ManufacturerRepository
from app.services.asbis.reconciler import ReconcileTally, Reconciler, apply_changes, truncate

logger = logging.getLogger(__name__)


class ManufacturerReconciler(Reconciler[str]):
    """Vendor names are both the identifier and the display name."""

    entity_name = "manufacturers"

    def __init__(self, db: Session):
        super().__init__(db)
        self.repo = ManufacturerRepository(db)

    def reconcile(self, records):
        return super().reconcile(sorted(records, key=lambda name: name or ""))

    def reconcile_record(self, record: str) -> str:
        name = (record or "").strip()
        if not name:
            raise RecordMappingError(None, "manufacturer name is empty")
        name = truncate(name, ColumnLimits.MANUFACTURER_NAME, "Manufacturer name")

        values = {
            "name": name,
            "information_name": name,
            "asbis_code": name,
        }
        existing = self.repo.get_by_vendor_id(name)
        if existing is None:
            self.repo.add(Manufacturer(asbis_id=name, **values))
            logger.info("Created Asbis manufacturer '%s'", name)
            return SyncAction.CREATED

        if apply_changes(existing, values):
            logger.info("Updated Asbis manufacturer '%s'", name)
            return SyncAction.UPDATED
        return SyncAction.SKIPPED

    def build_message(self, tally: ReconcileTally) -> str:
        message = (
            f"Manufacturers: {tally.created} created, {tally.updated} updated, "
            f"{tally.skipped} unchanged"
        )
        if tally.errors:
            message += f". Completed with {tally.errors} errors"
        return message

    def describe(self, record: str) -> str:
        return record or "<empty>"
