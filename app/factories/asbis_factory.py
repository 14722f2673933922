"""Factory for creating Asbis API clients."""

from typing import Any, Dict

from app.core.config import settings
from app.services.asbis.client import AsbisApiClient


class AsbisClientFactory:
    """Factory class for creating Asbis API clients."""

    @staticmethod
    def from_settings() -> AsbisApiClient:
        """
        Create an Asbis API client from the application settings.

        Returns:
            AsbisApiClient: client configured from ASBIS_* environment values
        """
        return AsbisApiClient(
            base_url=settings.asbis_base_url,
            username=settings.asbis_username,
            password=settings.asbis_password,
            enabled=settings.asbis_enabled,
            timeout=settings.asbis_request_timeout,
            cache_ttl_seconds=settings.asbis_cache_ttl_seconds,
        )

    @staticmethod
    def from_config(config: Dict[str, Any]) -> AsbisApiClient:
        """
        Create an Asbis API client from a configuration dictionary.

        Args:
            config: Dictionary with keys 'base_url', 'username', 'password'
                and optionally 'enabled', 'timeout', 'cache_ttl_seconds'

        Returns:
            AsbisApiClient: Configured client
        """
        return AsbisApiClient(
            base_url=config.get("base_url", settings.asbis_base_url),
            username=config["username"],
            password=config["password"],
            enabled=config.get("enabled", True),
            timeout=config.get("timeout", settings.asbis_request_timeout),
            cache_ttl_seconds=config.get(
                "cache_ttl_seconds", settings.asbis_cache_ttl_seconds
            ),
        )
