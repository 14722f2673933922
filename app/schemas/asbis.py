"""
Schemas for the Asbis synchronization engine.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# ==================== Vendor side ====================

class VendorProduct(BaseModel):
    """One <Product> element of the Asbis ProductList.xml feed"""
    product_code: Optional[str] = Field(None, description="Vendor identifier (ProductCode)")
    vendor: Optional[str] = Field(None, description="Manufacturer name")
    product_type: Optional[str] = Field(None, description="Second-level category")
    product_category: Optional[str] = Field(None, description="First-level category")
    description: Optional[str] = None
    image: Optional[str] = None
    product_card: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)

    class Config:
        frozen = True


class VendorCategory(BaseModel):
    """Category derived from ProductCategory / ProductType pairs"""
    vendor_id: str = Field(..., description="'<category>' or '<category>|<type>'")
    name: str
    level: int = Field(..., ge=1, le=2)
    parent_id: Optional[str] = None
    full_path: str

    class Config:
        frozen = True


class CategoryStatistics(BaseModel):
    total: int = 0
    level1: int = 0
    level2: int = 0
    breakdown: Dict[str, int] = Field(default_factory=dict)


# ==================== Sync results ====================

class SyncResult(BaseModel):
    """Outcome of one sync stage invocation"""
    success: bool
    message: str
    total_processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    duration_ms: int = 0
    error_details: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @classmethod
    def failure(cls, message: str, duration_ms: int = 0) -> "SyncResult":
        return cls(
            success=False,
            message=message,
            errors=1,
            duration_ms=duration_ms,
            error_details=[message],
        )


class SyncLogEntry(BaseModel):
    """Persisted sync log row"""
    id: int
    sync_type: str
    status: str
    message: Optional[str] = None
    records_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    records_failed: int = 0
    error_message: Optional[str] = None
    error_details: List[str] = Field(default_factory=list)
    duration_ms: int = 0
    created_at: Optional[datetime] = None

    @field_validator("error_details", mode="before")
    @classmethod
    def empty_details(cls, v):
        """Rows written before details were recorded hold NULL"""
        return v or []

    class Config:
        from_attributes = True


class FullSyncResponse(BaseModel):
    success: bool
    message: str
    results: Dict[str, SyncResult]
    total_duration_ms: int


# ==================== Stats & discovery ====================

class LocalCounts(BaseModel):
    total_products: int = 0
    total_categories: int = 0
    total_manufacturers: int = 0
    total_parameters: int = 0
    asbis_products: int = 0
    asbis_categories: int = 0
    asbis_manufacturers: int = 0
    asbis_parameters: int = 0


class ApiAvailability(BaseModel):
    available_products: int = 0
    available_categories: int = 0
    available_manufacturers: int = 0
    available_parameters: int = 0


class SyncStats(BaseModel):
    local: LocalCounts
    api: Optional[ApiAvailability] = None
    api_error: Optional[str] = None


class SyncStatus(BaseModel):
    enabled: bool
    connected: bool
    last_sync_time: Optional[datetime] = None
    stats: SyncStats
    last_results: Dict[str, Optional[SyncResult]] = Field(default_factory=dict)
    recent_logs: List[SyncLogEntry] = Field(default_factory=list)


class ApiInfo(BaseModel):
    enabled: bool
    base_url: str
    connected: bool
    cache_timeout_minutes: int
    last_cache_refresh: Optional[datetime] = None
    availability: Optional[ApiAvailability] = None


class AvailableCategory(BaseModel):
    asbis_id: str = Field(..., description="Local vendor key, main:/sub: prefixed")
    asbis_code: str = Field(..., description="Vendor category id")
    name: str
    level: int
    parent: Optional[str] = None
    synced: bool = False


class AvailableManufacturer(BaseModel):
    name: str
    asbis_code: str
    synced: bool = False


class DuplicateGroup(BaseModel):
    entity: str
    vendor_id: str
    count: int


class IntegrityReport(BaseModel):
    status: str
    message: str
    duplicates: List[DuplicateGroup] = Field(default_factory=list)
    duplicate_products: int = 0
    products_without_category: int = 0
    products_without_manufacturer: int = 0
    products_without_price: int = 0
    products_missing_from_feed: List[str] = Field(default_factory=list)
    snapshot_checked: bool = False
