"""
Read-only views over the sync ledger, the local catalog and the vendor feed.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants.sync import AsbisKeys, IntegrityStatus, SyncLogStatus, SyncStage
from app.core.exceptions import DataIntegrityViolation, VendorUnavailable
from app.models.sync_log import SyncLog
from app.repositories import (
    CategoryRepository,
    ManufacturerRepository,
    ParameterRepository,
    ProductRepository,
    SyncLogRepository,
)
from app.schemas.asbis import (
    ApiAvailability,
    ApiInfo,
    AvailableCategory,
    AvailableManufacturer,
    DuplicateGroup,
    IntegrityReport,
    LocalCounts,
    SyncLogEntry,
    SyncResult,
    SyncStats,
    SyncStatus,
)
from app.services.asbis.categories import local_category_id
from app.services.asbis.client import AsbisApiClient

logger = logging.getLogger(__name__)

API_ERROR_MESSAGE = "Could not connect to API"
NO_ISSUES_MESSAGE = "No data integrity issues found"


def normalize_limit(limit: Optional[int]) -> int:
    """Missing or non-positive limits fall back to the default page size."""
    if limit is None or limit <= 0:
        return AsbisKeys.RECENT_LOGS_LIMIT
    return limit


def result_from_log(log: SyncLog) -> SyncResult:
    success = log.status == SyncLogStatus.SUCCESS
    return SyncResult(
        success=success,
        message=log.error_message or log.message or "Sync completed",
        total_processed=log.records_processed or 0,
        created=log.records_created or 0,
        updated=log.records_updated or 0,
        skipped=log.records_skipped or 0,
        errors=log.records_failed or 0,
        duration_ms=log.duration_ms or 0,
        error_details=list(log.error_details or []),
    )


class AsbisStatsService:
    """Status, history, statistics, discovery and integrity queries."""

    def __init__(self, db: Session, client: AsbisApiClient):
        self.db = db
        self.client = client
        self.logs = SyncLogRepository(db)
        self.categories = CategoryRepository(db)
        self.manufacturers = ManufacturerRepository(db)
        self.parameters = ParameterRepository(db)
        self.products = ProductRepository(db)

    # ==================== Ledger ====================

    def get_last_sync_result(self, stage: str) -> Optional[SyncResult]:
        log = self.logs.get_latest(stage)
        return result_from_log(log) if log else None

    def get_recent_sync_logs(self, limit: Optional[int] = None) -> List[SyncLogEntry]:
        logs = self.logs.get_recent(normalize_limit(limit))
        return [SyncLogEntry.model_validate(log) for log in logs]

    # ==================== Aggregates ====================

    def get_asbis_sync_stats(self) -> SyncStats:
        local = LocalCounts(
            total_products=self.products.count(),
            total_categories=self.categories.count(),
            total_manufacturers=self.manufacturers.count(),
            total_parameters=self.parameters.count(),
            asbis_products=self.products.count_linked(),
            asbis_categories=self.categories.count_linked(),
            asbis_manufacturers=self.manufacturers.count_linked(),
            asbis_parameters=self.parameters.count_linked(),
        )
        try:
            availability = self._availability()
        except VendorUnavailable as exc:
            logger.warning("Could not fetch Asbis API stats: %s", exc)
            return SyncStats(local=local, api_error=API_ERROR_MESSAGE)
        return SyncStats(local=local, api=availability)

    def get_asbis_sync_status(self) -> SyncStatus:
        recent = self.get_recent_sync_logs(AsbisKeys.STATUS_LOGS_LIMIT)
        last_results: Dict[str, Optional[SyncResult]] = {
            stage: self.get_last_sync_result(stage) for stage in SyncStage.ORDERED
        }
        return SyncStatus(
            enabled=self.client.enabled,
            connected=self.client.test_connection(),
            last_sync_time=recent[0].created_at if recent else None,
            stats=self.get_asbis_sync_stats(),
            last_results=last_results,
            recent_logs=recent,
        )

    def get_api_info(self) -> ApiInfo:
        connected = self.client.test_connection()
        availability = None
        if connected:
            try:
                availability = self._availability()
            except VendorUnavailable as exc:
                logger.warning("Could not fetch Asbis API data: %s", exc)
        return ApiInfo(
            enabled=self.client.enabled,
            base_url=self.client.base_url,
            connected=connected,
            cache_timeout_minutes=self.client.cache_timeout_minutes,
            last_cache_refresh=self.client.last_cache_refresh,
            availability=availability,
        )

    def _availability(self) -> ApiAvailability:
        return ApiAvailability(
            available_products=len(self.client.get_all_products()),
            available_categories=len(self.client.extract_categories()),
            available_manufacturers=len(self.client.extract_manufacturers()),
            available_parameters=len(self.client.extract_parameters()),
        )

    # ==================== Discovery ====================

    def get_available_categories(self) -> List[AvailableCategory]:
        synced_ids = self.categories.vendor_ids()
        available = []
        for category in self.client.extract_categories():
            asbis_id = local_category_id(category)
            available.append(AvailableCategory(
                asbis_id=asbis_id,
                asbis_code=category.vendor_id,
                name=category.name,
                level=category.level,
                parent=category.parent_id,
                synced=asbis_id in synced_ids,
            ))
        return available

    def get_available_manufacturers(self) -> List[AvailableManufacturer]:
        local_names = self.manufacturers.lowercase_names()
        return [
            AvailableManufacturer(
                name=name,
                asbis_code=name,
                synced=name.lower() in local_names,
            )
            for name in sorted(self.client.extract_manufacturers())
        ]

    # ==================== Integrity ====================

    def check_data_integrity(self) -> IntegrityReport:
        """
        Report duplicated vendor ids, incomplete Asbis products and products
        absent from the last fetched vendor snapshot. Never modifies data
        and never fetches.
        """
        try:
            violations = self._duplicate_violations()
            report = IntegrityReport(
                status=IntegrityStatus.OK,
                message=NO_ISSUES_MESSAGE,
                duplicates=[
                    DuplicateGroup(entity=v.entity, vendor_id=v.vendor_id, count=v.count)
                    for v in violations
                ],
                duplicate_products=sum(1 for v in violations if v.entity == "products"),
                products_without_category=self.products.count_without_category(),
                products_without_manufacturer=self.products.count_without_manufacturer(),
                products_without_price=self.products.count_without_price(),
            )
        except SQLAlchemyError as exc:
            logger.error("Error checking data integrity", exc_info=True)
            return IntegrityReport(status=IntegrityStatus.ERROR, message=str(exc))

        feed_codes = self.client.last_snapshot_codes
        if feed_codes is not None:
            missing = sorted(self.products.vendor_ids() - feed_codes)
            report = report.model_copy(update={
                "products_missing_from_feed": missing,
                "snapshot_checked": True,
            })

        issues = []
        if report.duplicates:
            issues.append(f"{len(report.duplicates)} duplicated vendor ids")
        if report.products_without_category:
            issues.append(f"{report.products_without_category} products without category")
        if report.products_without_manufacturer:
            issues.append(f"{report.products_without_manufacturer} products without manufacturer")
        if report.products_without_price:
            issues.append(f"{report.products_without_price} products without price")
        if report.products_missing_from_feed:
            issues.append(f"{len(report.products_missing_from_feed)} products missing from feed")

        if issues:
            return report.model_copy(update={
                "status": IntegrityStatus.ISSUES_FOUND,
                "message": "; ".join(issues),
            })
        return report

    def _duplicate_violations(self) -> List[DataIntegrityViolation]:
        violations = []
        for entity, repo in (
            ("categories", self.categories),
            ("manufacturers", self.manufacturers),
            ("parameters", self.parameters),
            ("products", self.products),
        ):
            for vendor_id, count in repo.find_duplicate_vendor_ids():
                violation = DataIntegrityViolation(entity, vendor_id, count)
                logger.warning("Data integrity violation: %s", violation)
                violations.append(violation)
        return violations
