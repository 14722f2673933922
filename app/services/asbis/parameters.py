"""Asbis parameter (product attribute) reconciliation."""

import logging
from typing import Iterable, Set, Tuple

from sqlalchemy.orm import Session

from app.constants.sync import AsbisKeys, ColumnLimits, SyncAction
from app.core.exceptions import RecordMappingError
from app.models.catalog import Category, Parameter
from app.repositories.category_repository import CategoryRepository
from app.repositories.parameter_repository import ParameterRepository
from app.schemas.asbis import SyncResult
from app.services.asbis.reconciler import ReconcileTally, Reconciler, apply_changes, truncate

logger = logging.getLogger(__name__)

# (attribute name, values seen for it)
ParameterRecord = Tuple[str, Set[str]]


class ParameterReconciler(Reconciler[ParameterRecord]):
    """
    One local parameter per vendor attribute name, attached to the Asbis
    root category, with one option per distinct value.
    """

    entity_name = "parameters"

    def __init__(self, db: Session):
        super().__init__(db)
        self.repo = ParameterRepository(db)
        self.category_repo = CategoryRepository(db)
        self.root: Category = None
        self.options_created = 0
        self.options_updated = 0
        self._pending_options = (0, 0)

    def reconcile(self, records: Iterable[ParameterRecord]) -> SyncResult:
        self.options_created = 0
        self.options_updated = 0
        self.root = self.category_repo.get_asbis_root()
        if self.root is None:
            logger.warning("No Asbis categories found, parameters not synced")
            return SyncResult(
                success=True,
                message="No Asbis categories found. Sync categories first.",
            )
        return super().reconcile(sorted(records, key=lambda item: item[0]))

    def reconcile_record(self, record: ParameterRecord) -> str:
        key, values = record
        key = (key or "").strip()
        if not key:
            raise RecordMappingError(None, "parameter name is empty")
        key = truncate(key, ColumnLimits.PARAMETER_KEY, "Parameter key")

        action = SyncAction.SKIPPED
        parameter = self.repo.get_by_vendor_id(key)
        if parameter is None:
            parameter = self.repo.add(Parameter(
                asbis_key=key,
                category_id=self.root.id,
                name_bg=key,
                name_en=key,
                order=AsbisKeys.PARAMETER_ORDER,
            ))
            logger.info("Created Asbis parameter '%s'", key)
            action = SyncAction.CREATED
        elif apply_changes(parameter, {"name_bg": key, "name_en": key}):
            action = SyncAction.UPDATED

        created, updated = 0, 0
        for value in sorted(v for v in values if v):
            option = self.repo.get_option(parameter, value)
            if option is None:
                self.repo.add_option(parameter, value)
                created += 1
            elif option.name_en != value:
                option.name_en = value
                updated += 1

        self._pending_options = (created, updated)
        if action == SyncAction.SKIPPED and (created or updated):
            action = SyncAction.UPDATED
        return action

    def after_record(self, tally: ReconcileTally) -> None:
        created, updated = self._pending_options
        self.options_created += created
        self.options_updated += updated

    def build_message(self, tally: ReconcileTally) -> str:
        message = (
            f"Parameters: {tally.created} created, {tally.updated} updated. "
            f"Options: {self.options_created} created, {self.options_updated} updated"
        )
        if tally.errors:
            message += f". {tally.errors} errors occurred"
        return message

    def describe(self, record: ParameterRecord) -> str:
        return record[0] or "<empty>"
