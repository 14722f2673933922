"""Asbis vendor synchronization package."""

from app.services.asbis.cache import TTLCache

from app.services.asbis.client import (
    AsbisApiClient,
    ProductListSnapshot,
    category_vendor_id,
    get_asbis_client
)

from app.services.asbis.categories import CategoryReconciler
from app.services.asbis.manufacturers import ManufacturerReconciler
from app.services.asbis.parameters import ParameterReconciler
from app.services.asbis.products import ProductReconciler

from app.services.asbis.orchestrator import (
    AsbisSyncOrchestrator,
    StageFailed,
    StageOutcome,
    StageSucceeded
)

from app.services.asbis.full_sync import FullSyncCoordinator
from app.services.asbis.stats import AsbisStatsService

__all__ = [
    # Client
    'TTLCache',
    'AsbisApiClient',
    'ProductListSnapshot',
    'category_vendor_id',
    'get_asbis_client',
    # Reconcilers
    'CategoryReconciler',
    'ManufacturerReconciler',
    'ParameterReconciler',
    'ProductReconciler',
    # Orchestration
    'AsbisSyncOrchestrator',
    'StageFailed',
    'StageOutcome',
    'StageSucceeded',
    'FullSyncCoordinator',
    # Stats
    'AsbisStatsService',
]
