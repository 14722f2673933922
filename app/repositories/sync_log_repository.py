"""
Sync log repository.

Append-only ledger of sync stage results.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.constants.sync import SyncLogStatus, SyncStage
from app.models.sync_log import SyncLog
from app.schemas.asbis import SyncResult


class SyncLogRepository:
    """Repository for sync log operations."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create_from_result(self, sync_type: str, result: SyncResult) -> SyncLog:
        """
        Persist a stage result.

        Args:
            sync_type: Stage key, e.g. ASBIS_CATEGORIES
            result: Result produced by the stage

        Returns:
            Created SyncLog record
        """
        log = SyncLog(
            sync_type=sync_type,
            status=SyncLogStatus.SUCCESS if result.success else SyncLogStatus.FAILED,
            message=result.message,
            records_processed=result.total_processed,
            records_created=result.created,
            records_updated=result.updated,
            records_skipped=result.skipped,
            records_failed=result.errors,
            error_message=None if result.success else result.message,
            error_details=list(result.error_details),
            duration_ms=result.duration_ms,
        )
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        return log

    def get_latest(self, sync_type: str) -> Optional[SyncLog]:
        """
        Get the most recent log of a stage.

        Args:
            sync_type: Stage key

        Returns:
            SyncLog or None if the stage never ran
        """
        return self.db.query(SyncLog).filter(
            SyncLog.sync_type == sync_type
        ).order_by(SyncLog.created_at.desc(), SyncLog.id.desc()).first()

    def get_recent(self, limit: int) -> List[SyncLog]:
        """
        Get Asbis sync logs, newest first.

        Args:
            limit: Maximum number of records to return

        Returns:
            List of SyncLog records
        """
        return self.db.query(SyncLog).filter(
            SyncLog.sync_type.like(f"{SyncStage.PREFIX}%")
        ).order_by(
            SyncLog.created_at.desc(), SyncLog.id.desc()
        ).limit(limit).all()
