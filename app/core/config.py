from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./asbis_sync.db"
    cors_origins: List[str] = [
        "http://localhost",
        "http://localhost:3000",
    ]

    # Asbis product API
    asbis_enabled: bool = True
    asbis_base_url: str = "https://services.it4profit.com/product/bg/714"
    asbis_username: str = ""
    asbis_password: str = ""
    asbis_request_timeout: int = 60
    asbis_cache_ttl_seconds: int = 300
    asbis_product_batch_size: int = 50

    # Celery / scheduling
    celery_broker_url: str = "redis://redis:6379/0"
    celery_result_backend: str = "redis://redis:6379/1"
    celery_timezone: str = "UTC"
    asbis_full_sync_hour: int = 3
    asbis_products_sync_interval: int = 6 * 60 * 60
    asbis_cache_cleanup_interval: int = 60 * 60
    asbis_full_sync_lock_timeout: int = 2 * 60 * 60

    class Config:
        env_file = ".env"


settings = Settings()
