"""
Celery application configuration for the Asbis catalog sync service.
"""
from celery import Celery
from celery.schedules import crontab
from app.core.config import settings

# Create Celery instance
celery_app = Celery(
    "asbis_catalog_sync",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "app.tasks.scheduled_tasks",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone=settings.celery_timezone,
    enable_utc=True,

    # Task execution
    task_track_started=True,
    task_time_limit=2 * 60 * 60,  # full syncs walk the whole catalog
    task_soft_time_limit=110 * 60,

    # One sync at a time per worker process
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,

    # Task acknowledgment
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    result_expires=7200,

    task_routes={
        'app.tasks.scheduled_tasks.*': {
            'queue': 'scheduler_queue',
        },
    },

    broker_connection_retry_on_startup=True,
)

celery_app.conf.beat_schedule = {
    'asbis-full-sync-nightly': {
        'task': 'app.tasks.scheduled_tasks.scheduled_asbis_full_sync',
        'schedule': crontab(hour=settings.asbis_full_sync_hour, minute=0),
    },
    'asbis-products-sync': {
        'task': 'app.tasks.scheduled_tasks.scheduled_asbis_products_sync',
        'schedule': float(settings.asbis_products_sync_interval),
    },
    'asbis-cache-cleanup': {
        'task': 'app.tasks.scheduled_tasks.cleanup_asbis_cache',
        'schedule': float(settings.asbis_cache_cleanup_interval),
    },
}

if __name__ == '__main__':
    celery_app.start()
