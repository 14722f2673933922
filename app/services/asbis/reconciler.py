"""Shared record-by-record reconciliation loop."""

import logging
import time
from typing import Generic, Iterable, List, Optional, TypeVar

from sqlalchemy.orm import Session

from app.constants.sync import SyncAction
from app.core.exceptions import RecordMappingError
from app.schemas.asbis import SyncResult

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ReconcileTally:
    """Mutable counters collected while a batch is reconciled."""

    def __init__(self):
        self.total_processed = 0
        self.created = 0
        self.updated = 0
        self.skipped = 0
        self.errors = 0
        self.error_details: List[str] = []

    def record(self, action: str) -> None:
        if action == SyncAction.CREATED:
            self.created += 1
        elif action == SyncAction.UPDATED:
            self.updated += 1
        else:
            self.skipped += 1

    def fail(self, detail: str) -> None:
        self.errors += 1
        self.error_details.append(detail)


class Reconciler(Generic[R]):
    """
    Reconciles vendor records onto local entities one at a time.

    Subclasses implement ``reconcile_record`` returning a ``SyncAction`` and
    ``build_message``. Every record is committed on its own, so a failing
    record is rolled back without touching its predecessors.
    """

    entity_name = "records"

    def __init__(self, db: Session):
        self.db = db

    def reconcile(self, records: Iterable[R]) -> SyncResult:
        started = time.monotonic()
        tally = ReconcileTally()

        for record in records:
            tally.total_processed += 1
            try:
                action = self.reconcile_record(record)
                self.db.commit()
            except RecordMappingError as exc:
                self.db.rollback()
                logger.warning("Skipping %s record %s", self.entity_name, exc)
                tally.fail(str(exc))
                continue
            except Exception as exc:
                self.db.rollback()
                logger.warning(
                    "Error reconciling %s record %s: %s",
                    self.entity_name, self.describe(record), exc,
                    exc_info=True,
                )
                tally.fail(f"{self.describe(record)}: {exc}")
                continue
            tally.record(action)
            self.after_record(tally)

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Reconciled %s %s: created=%s updated=%s skipped=%s errors=%s (%sms)",
            tally.total_processed, self.entity_name, tally.created,
            tally.updated, tally.skipped, tally.errors, duration_ms,
        )
        return SyncResult(
            success=True,
            message=self.build_message(tally),
            total_processed=tally.total_processed,
            created=tally.created,
            updated=tally.updated,
            skipped=tally.skipped,
            errors=tally.errors,
            duration_ms=duration_ms,
            error_details=tally.error_details,
        )

    def reconcile_record(self, record: R) -> str:
        raise NotImplementedError

    def build_message(self, tally: ReconcileTally) -> str:
        return (
            f"Total: {tally.total_processed}, Created: {tally.created}, "
            f"Updated: {tally.updated}, Skipped: {tally.skipped}, "
            f"Errors: {tally.errors}"
        )

    def after_record(self, tally: ReconcileTally) -> None:
        """Hook called after every successfully reconciled record."""

    def describe(self, record: R) -> str:
        return repr(record)


def apply_changes(entity, values: dict) -> bool:
    """Set every differing attribute, returning True if anything changed."""
    changed = False
    for field, value in values.items():
        if getattr(entity, field) != value:
            setattr(entity, field, value)
            changed = True
    return changed


def truncate(value: Optional[str], limit: int, label: str) -> Optional[str]:
    """Clip a vendor value to its column width, logging when it had to."""
    if value is not None and len(value) > limit:
        logger.warning(
            "%s exceeds %s characters and was truncated: %s...",
            label, limit, value[:50],
        )
        return value[:limit]
    return value
