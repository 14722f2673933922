"""Declarative base shared by every model."""
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp used as the column default for audit fields."""
    return datetime.now(timezone.utc)
