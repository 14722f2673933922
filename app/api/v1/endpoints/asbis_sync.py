"""
Asbis synchronization endpoints for operators.

Every endpoint answers HTTP 200; failures are reported with ``success: false``
in the body so clients always get a parseable response.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.asbis import (
    AsbisApiClient,
    AsbisStatsService,
    AsbisSyncOrchestrator,
    FullSyncCoordinator,
    get_asbis_client,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync/asbis", tags=["Asbis Sync"])


def get_orchestrator(
    db: Session = Depends(get_db),
    client: AsbisApiClient = Depends(get_asbis_client)
) -> AsbisSyncOrchestrator:
    return AsbisSyncOrchestrator(db, client)


def get_stats_service(
    db: Session = Depends(get_db),
    client: AsbisApiClient = Depends(get_asbis_client)
) -> AsbisStatsService:
    return AsbisStatsService(db, client)


def _failure(message: str, exc: Exception) -> Dict[str, Any]:
    logger.error(f"{message}: {exc}", exc_info=True)
    return {"success": False, "message": message, "error": str(exc)}


# ==================== Status & history ====================

@router.get("/status")
def get_sync_status(stats: AsbisStatsService = Depends(get_stats_service)):
    """Aggregate sync status: reachability, counts, last result per stage."""
    try:
        status = stats.get_asbis_sync_status()
        return {"success": True, **status.model_dump(mode="json")}
    except Exception as e:
        return _failure("Error getting Asbis sync status", e)


@router.get("/statistics")
def get_sync_statistics(stats: AsbisStatsService = Depends(get_stats_service)):
    try:
        result = stats.get_asbis_sync_stats()
        return {"success": True, **result.model_dump(mode="json")}
    except Exception as e:
        return _failure("Error getting Asbis statistics", e)


@router.get("/api-info")
def get_api_info(stats: AsbisStatsService = Depends(get_stats_service)):
    try:
        info = stats.get_api_info()
        return {"success": True, **info.model_dump(mode="json")}
    except Exception as e:
        return _failure("Error getting Asbis API info", e)


@router.get("/logs")
def get_sync_logs(
    limit: Optional[int] = Query(None, description="Number of logs to return, default 20"),
    stats: AsbisStatsService = Depends(get_stats_service)
):
    """Recent Asbis sync logs, newest first."""
    try:
        logs = stats.get_recent_sync_logs(limit)
        return {
            "success": True,
            "count": len(logs),
            "logs": [log.model_dump(mode="json") for log in logs],
        }
    except Exception as e:
        return _failure("Error getting Asbis sync logs", e)


@router.get("/integrity-check")
def check_data_integrity(stats: AsbisStatsService = Depends(get_stats_service)):
    try:
        report = stats.check_data_integrity()
        return {"success": True, **report.model_dump(mode="json")}
    except Exception as e:
        return _failure("Error checking data integrity", e)


# ==================== Vendor discovery ====================

@router.get("/available-categories")
def get_available_categories(stats: AsbisStatsService = Depends(get_stats_service)):
    try:
        categories = stats.get_available_categories()
        return {
            "success": True,
            "count": len(categories),
            "synced": sum(1 for c in categories if c.synced),
            "categories": [c.model_dump() for c in categories],
        }
    except Exception as e:
        return _failure("Error getting available Asbis categories", e)


@router.get("/available-manufacturers")
def get_available_manufacturers(stats: AsbisStatsService = Depends(get_stats_service)):
    try:
        manufacturers = stats.get_available_manufacturers()
        return {
            "success": True,
            "count": len(manufacturers),
            "synced": sum(1 for m in manufacturers if m.synced),
            "manufacturers": [m.model_dump() for m in manufacturers],
        }
    except Exception as e:
        return _failure("Error getting available Asbis manufacturers", e)


@router.get("/test-connection")
def test_connection(client: AsbisApiClient = Depends(get_asbis_client)):
    """Reachability check plus catalog counts."""
    try:
        if not client.test_connection():
            return {
                "success": False,
                "message": "Failed to connect to Asbis API",
            }
        products = client.get_all_products()
        return {
            "success": True,
            "message": "Successfully connected to Asbis API",
            "product_count": len(products),
            "category_statistics": client.get_category_statistics().model_dump(),
            "manufacturer_count": len(client.extract_manufacturers()),
        }
    except Exception as e:
        return _failure("Error testing Asbis connection", e)


@router.get("/raw-xml")
def get_raw_xml(client: AsbisApiClient = Depends(get_asbis_client)):
    """Unparsed vendor payload, for diagnostics."""
    try:
        raw_xml = client.get_raw_product_list_xml()
        return {"success": True, "length": len(raw_xml), "xml": raw_xml}
    except Exception as e:
        return _failure("Error fetching raw Asbis XML", e)


# ==================== Sync operations ====================

@router.post("/categories")
def sync_categories(orchestrator: AsbisSyncOrchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.sync_categories().model_dump()
    except Exception as e:
        return _failure("Error during Asbis categories sync", e)


@router.post("/manufacturers")
def sync_manufacturers(orchestrator: AsbisSyncOrchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.sync_manufacturers().model_dump()
    except Exception as e:
        return _failure("Error during Asbis manufacturers sync", e)


@router.post("/parameters")
def sync_parameters(orchestrator: AsbisSyncOrchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.sync_parameters().model_dump()
    except Exception as e:
        return _failure("Error during Asbis parameters sync", e)


@router.post("/products")
def sync_products(orchestrator: AsbisSyncOrchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.sync_products().model_dump()
    except Exception as e:
        return _failure("Error during Asbis products sync", e)


@router.post("/full")
def full_sync(orchestrator: AsbisSyncOrchestrator = Depends(get_orchestrator)):
    """Clear the cache and run all four stages in order."""
    try:
        return FullSyncCoordinator(orchestrator).run_full_sync().model_dump()
    except Exception as e:
        return _failure("Error during full Asbis sync", e)


@router.post("/clear-cache")
def clear_cache(client: AsbisApiClient = Depends(get_asbis_client)):
    try:
        client.clear_cache()
        return {"success": True, "message": "Asbis API cache cleared successfully"}
    except Exception as e:
        return _failure("Error clearing Asbis API cache", e)
