"""
Repository layer for database operations.

This package provides specialized repositories for the catalog entities the
Asbis sync reconciles, plus the sync ledger:
- CategoryRepository: Category lookups and slug bookkeeping
- ManufacturerRepository: Manufacturer lookups
- ParameterRepository: Parameter and option lookups
- ProductRepository: Product lookups and integrity counts
- SyncLogRepository: Sync stage results

All catalog repositories inherit from BaseCatalogRepository for vendor-key operations.
"""
from app.repositories.base_catalog_repository import BaseCatalogRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.manufacturer_repository import ManufacturerRepository
from app.repositories.parameter_repository import ParameterRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.sync_log_repository import SyncLogRepository

__all__ = [
    'BaseCatalogRepository',
    'CategoryRepository',
    'ManufacturerRepository',
    'ParameterRepository',
    'ProductRepository',
    'SyncLogRepository',
]
