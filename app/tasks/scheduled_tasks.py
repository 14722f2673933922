"""
Scheduled Celery tasks for automatic Asbis synchronization.
"""
import logging
from typing import Any, Dict

import redis
from celery import Task
from redis.lock import Lock as RedisLock

from app.celery_app import celery_app
from app.core.config import settings
from app.core.exceptions import VendorUnavailable
from app.db.session import SessionLocal
from app.services.asbis import (
    AsbisSyncOrchestrator,
    FullSyncCoordinator,
    get_asbis_client,
)

logger = logging.getLogger(__name__)

FULL_SYNC_LOCK_KEY = "asbis_sync:full"

# Redis client for the full-sync lock
redis_client = redis.Redis.from_url(settings.celery_broker_url, decode_responses=True)


class DatabaseTask(Task):
    """Base task with database session management."""
    _db = None

    @property
    def db(self):
        if self._db is None:
            self._db = SessionLocal()
        return self._db

    def after_return(self, *args, **kwargs):
        if self._db is not None:
            self._db.close()
            self._db = None


def run_locked_full_sync(db, client, lock_client=None) -> Dict[str, Any]:
    """
    Run a full sync while holding the Redis lock, so two workers never sync
    the same catalog at once. Without a reachable Redis the sync runs
    unlocked.
    """
    lock_client = lock_client or redis_client
    lock = RedisLock(
        lock_client,
        FULL_SYNC_LOCK_KEY,
        timeout=settings.asbis_full_sync_lock_timeout,
        blocking_timeout=10,
    )
    acquired = False
    try:
        acquired = lock.acquire(blocking=True)
        if not acquired:
            logger.warning("Another Asbis full sync holds the lock, skipping")
            return {"success": False, "skipped": True, "message": "Full sync already running"}
    except redis.RedisError as e:
        logger.warning(f"Could not acquire Asbis full sync lock: {e}. Running unlocked.")

    try:
        # The fresh snapshot doubles as the connection test and feeds every stage
        client.clear_cache()
        try:
            client.get_all_products()
        except VendorUnavailable as e:
            logger.error(f"Asbis connection test failed, scheduled full sync aborted: {e}")
            return {"success": False, "message": "Asbis API connection test failed"}

        coordinator = FullSyncCoordinator(AsbisSyncOrchestrator(db, client))
        response = coordinator.run_full_sync(clear_cache=False)
        return response.model_dump()
    finally:
        if acquired:
            try:
                lock.release()
            except redis.RedisError as e:
                logger.warning(f"Error releasing Asbis full sync lock: {e}")


@celery_app.task(
    bind=True,
    base=DatabaseTask,
    name="app.tasks.scheduled_tasks.scheduled_asbis_full_sync"
)
def scheduled_asbis_full_sync(self) -> Dict[str, Any]:
    """
    Nightly full Asbis sync (configured in celery_app.py beat_schedule).

    Returns:
        Dict with the full-sync response
    """
    logger.info("Starting scheduled Asbis full sync")
    result = run_locked_full_sync(self.db, get_asbis_client())
    logger.info(f"Scheduled Asbis full sync finished: {result.get('message')}")
    return result


@celery_app.task(
    bind=True,
    base=DatabaseTask,
    name="app.tasks.scheduled_tasks.scheduled_asbis_products_sync"
)
def scheduled_asbis_products_sync(self) -> Dict[str, Any]:
    """
    Products-only Asbis sync. Categories, manufacturers and parameters are
    expected to be in place from the nightly full sync.

    Returns:
        Dict with the products stage result
    """
    logger.info("Starting scheduled Asbis products sync")
    client = get_asbis_client()
    client.clear_cache()
    result = AsbisSyncOrchestrator(self.db, client).sync_products()
    logger.info(f"Scheduled Asbis products sync finished: {result.message}")
    return result.model_dump()


@celery_app.task(name="app.tasks.scheduled_tasks.cleanup_asbis_cache")
def cleanup_asbis_cache() -> Dict[str, Any]:
    """Drop expired Asbis API cache entries held by this worker."""
    removed = get_asbis_client().evict_expired()
    return {"success": True, "evicted": removed}
