"""
Append-only ledger of sync stage outcomes.
"""
from sqlalchemy import Column, DateTime, Integer, JSON, String, Text

from app.db.base import Base, utc_now


class SyncLog(Base):
    """One row per stage invocation, tagged with its stage key."""
    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, index=True)
    sync_type = Column(String(50), index=True, nullable=False)  # ASBIS_CATEGORIES, ...
    status = Column(String(20), nullable=False)  # SUCCESS / FAILED
    message = Column(Text, nullable=True)
    records_processed = Column(Integer, default=0)
    records_created = Column(Integer, default=0)
    records_updated = Column(Integer, default=0)
    records_skipped = Column(Integer, default=0)
    records_failed = Column(Integer, default=0)
    error_message = Column(Text, nullable=True)
    error_details = Column(JSON, default=list)  # ordered per-record failures
    duration_ms = Column(Integer, default=0)
    created_at = Column(DateTime, default=utc_now, index=True)
