"""
Runs the individual Asbis sync stages and records their results.

Every stage call goes through ``run_stage`` which turns whatever happened
into a ``StageOutcome`` and appends the resulting ``SyncResult`` to the sync
log under the stage key.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants.sync import SyncStage
from app.core.config import settings
from app.core.exceptions import StageFailure, VendorUnavailable
from app.repositories.sync_log_repository import SyncLogRepository
from app.schemas.asbis import SyncResult
from app.services.asbis.categories import CategoryReconciler
from app.services.asbis.client import AsbisApiClient
from app.services.asbis.manufacturers import ManufacturerReconciler
from app.services.asbis.parameters import ParameterReconciler
from app.services.asbis.products import ProductReconciler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageSucceeded:
    stage: str
    result: SyncResult


@dataclass(frozen=True)
class StageFailed:
    stage: str
    error: StageFailure
    result: SyncResult


StageOutcome = Union[StageSucceeded, StageFailed]


class AsbisSyncOrchestrator:
    """Fetches vendor data, reconciles one entity type and logs the result."""

    def __init__(
        self,
        db: Session,
        client: AsbisApiClient,
        batch_size: Optional[int] = None,
    ):
        self.db = db
        self.client = client
        self.batch_size = batch_size or settings.asbis_product_batch_size
        self.ledger = SyncLogRepository(db)
        self._stages: Dict[str, Callable[[], SyncResult]] = {
            SyncStage.CATEGORIES: self._reconcile_categories,
            SyncStage.MANUFACTURERS: self._reconcile_manufacturers,
            SyncStage.PARAMETERS: self._reconcile_parameters,
            SyncStage.PRODUCTS: self._reconcile_products,
        }

    # ==================== Public stage operations ====================

    def sync_categories(self) -> SyncResult:
        return self.run_stage(SyncStage.CATEGORIES).result

    def sync_manufacturers(self) -> SyncResult:
        return self.run_stage(SyncStage.MANUFACTURERS).result

    def sync_parameters(self) -> SyncResult:
        return self.run_stage(SyncStage.PARAMETERS).result

    def sync_products(self) -> SyncResult:
        return self.run_stage(SyncStage.PRODUCTS).result

    def run_stage(self, stage: str) -> StageOutcome:
        """
        Run one stage and log its result.

        Args:
            stage: One of the SyncStage keys

        Returns:
            StageSucceeded, or StageFailed when the stage could not produce
            per-record results at all
        """
        reconcile = self._stages[stage]
        logger.info("=== STARTING %s ===", stage)
        started = time.monotonic()

        try:
            result = reconcile()
        except VendorUnavailable as exc:
            self.db.rollback()
            logger.error("%s aborted, vendor unavailable: %s", stage, exc)
            outcome = self._failed(stage, str(exc), started)
        except Exception as exc:
            self.db.rollback()
            logger.error("%s failed: %s", stage, exc, exc_info=True)
            outcome = self._failed(stage, str(exc), started)
        else:
            duration_ms = int((time.monotonic() - started) * 1000)
            outcome = StageSucceeded(
                stage=stage,
                result=result.model_copy(update={"duration_ms": duration_ms}),
            )

        self._log_result(stage, outcome.result)
        logger.info("=== FINISHED %s: %s ===", stage, outcome.result.message)
        return outcome

    # ==================== Internals ====================

    def _failed(self, stage: str, message: str, started: float) -> StageFailed:
        error = StageFailure(stage, message)
        duration_ms = int((time.monotonic() - started) * 1000)
        return StageFailed(
            stage=stage,
            error=error,
            result=SyncResult.failure(str(error), duration_ms),
        )

    def _log_result(self, stage: str, result: SyncResult) -> None:
        try:
            self.ledger.create_from_result(stage, result)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Could not write sync log for %s: %s", stage, exc, exc_info=True)

    def _reconcile_categories(self) -> SyncResult:
        categories = self.client.extract_categories()
        logger.info("Fetched %s Asbis categories", len(categories))
        return CategoryReconciler(self.db).reconcile(categories)

    def _reconcile_manufacturers(self) -> SyncResult:
        manufacturers = self.client.extract_manufacturers()
        logger.info("Fetched %s Asbis manufacturers", len(manufacturers))
        return ManufacturerReconciler(self.db).reconcile(manufacturers)

    def _reconcile_parameters(self) -> SyncResult:
        parameters = self.client.extract_parameters()
        logger.info("Fetched %s Asbis parameters", len(parameters))
        return ParameterReconciler(self.db).reconcile(parameters.items())

    def _reconcile_products(self) -> SyncResult:
        products = self.client.get_all_products()
        logger.info("Fetched %s Asbis products", len(products))
        return ProductReconciler(self.db, self.batch_size).reconcile(products)
