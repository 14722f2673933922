"""Asbis product API client."""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, NamedTuple, Optional, Set

import requests

from app.constants.sync import AsbisKeys
from app.core.exceptions import VendorUnavailable
from app.schemas.asbis import CategoryStatistics, VendorCategory, VendorProduct
from app.services.asbis.cache import TTLCache
from app.services.asbis.parser import parse_product_list

logger = logging.getLogger(__name__)

PRODUCT_LIST_ENDPOINT = "ProductList.xml"
PRODUCT_LIST_CACHE_KEY = "all_products"


class ProductListSnapshot(NamedTuple):
    """Raw payload and its parsed products, cached together."""
    raw_xml: str
    products: List[VendorProduct]
    fetched_at: datetime


class AsbisApiClient:
    """
    Reads the Asbis ProductList.xml feed and derives the category,
    manufacturer and parameter listings from it.

    One network fetch populates a snapshot that is served from the cache
    until the TTL runs out or ``clear_cache`` is called, so all stages of a
    full sync see the same vendor data.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        enabled: bool = True,
        timeout: float = 60,
        cache_ttl_seconds: float = 300,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self.enabled = enabled
        self.timeout = timeout
        self._session = session or requests.Session()
        if clock is not None:
            self.cache = TTLCache(cache_ttl_seconds, clock=clock)
        else:
            self.cache = TTLCache(cache_ttl_seconds)
        self.last_cache_refresh: Optional[datetime] = None
        # Product codes of the most recent fetch; outlives cache expiry and clears
        self.last_snapshot_codes: Optional[Set[str]] = None

    @property
    def cache_timeout_minutes(self) -> int:
        return int(self.cache.ttl_seconds // 60)

    # ==================== Transport ====================

    def _fetch_product_list(self) -> str:
        """Perform the HTTP call. Every failure surfaces as VendorUnavailable."""
        if not self.enabled:
            raise VendorUnavailable("Asbis API is disabled")

        url = f"{self.base_url}/{PRODUCT_LIST_ENDPOINT}"
        params = {"USERNAME": self.username, "PASSWORD": self.password}
        logger.info("Fetching Asbis product list from %s", url)
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.error("Asbis request timed out after %ss: %s", self.timeout, exc)
            raise VendorUnavailable(f"Request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            logger.error("Asbis request failed: %s", exc)
            raise VendorUnavailable(f"Request failed: {exc}") from exc

        if not response.ok:
            logger.error(
                "Asbis GET error on %s: %s - %s",
                PRODUCT_LIST_ENDPOINT, response.status_code, response.text[:500],
            )
            raise VendorUnavailable(
                f"Asbis API error ({response.status_code})",
                status_code=response.status_code,
            )
        return response.text

    def _snapshot(self) -> ProductListSnapshot:
        snapshot = self.cache.get(PRODUCT_LIST_CACHE_KEY)
        if snapshot is not None:
            logger.debug("Returning cached Asbis product list")
            return snapshot

        raw_xml = self._fetch_product_list()
        products = parse_product_list(raw_xml)
        snapshot = ProductListSnapshot(raw_xml, products, datetime.now(timezone.utc))
        self.cache.put(PRODUCT_LIST_CACHE_KEY, snapshot)
        self.last_cache_refresh = snapshot.fetched_at
        self.last_snapshot_codes = {p.product_code for p in products if p.product_code}
        logger.info("Cached %s Asbis products", len(products))
        return snapshot

    # ==================== Public API ====================

    def test_connection(self) -> bool:
        """
        Reachability check. Always goes to the network and leaves the cache
        untouched. Returns False instead of raising.
        """
        if not self.enabled:
            logger.warning("Asbis API is disabled")
            return False
        try:
            raw_xml = self._fetch_product_list()
        except VendorUnavailable as exc:
            logger.error("Asbis connection test failed: %s", exc)
            return False
        return bool(raw_xml) and "<ProductCatalog" in raw_xml

    def get_raw_product_list_xml(self) -> str:
        """Current vendor payload, fetched fresh for diagnostics."""
        return self._fetch_product_list()

    def get_all_products(self) -> List[VendorProduct]:
        return self._snapshot().products

    def extract_categories(self) -> List[VendorCategory]:
        """
        Build the two-level category tree. ProductCategory values become
        level-1 categories, ProductType values level-2 children of them.
        """
        categories: Dict[str, VendorCategory] = {}
        for product in self.get_all_products():
            main = product.product_category
            if not main:
                continue
            if main not in categories:
                categories[main] = VendorCategory(
                    vendor_id=main, name=main, level=1, full_path=main,
                )
            sub = product.product_type
            if not sub:
                continue
            sub_id = category_vendor_id(main, sub)
            if sub_id not in categories:
                categories[sub_id] = VendorCategory(
                    vendor_id=sub_id,
                    name=sub,
                    level=2,
                    parent_id=main,
                    full_path=f"{main}{AsbisKeys.CATEGORY_PATH_SEPARATOR}{sub}",
                )
        return list(categories.values())

    def extract_manufacturers(self) -> Set[str]:
        return {
            product.vendor for product in self.get_all_products()
            if product.vendor
        }

    def extract_parameters(self) -> Dict[str, Set[str]]:
        """Attribute name -> set of values seen across the catalog."""
        parameters: Dict[str, Set[str]] = {}
        for product in self.get_all_products():
            for name, value in product.attributes.items():
                parameters.setdefault(name, set()).add(value)
        return parameters

    def get_category_statistics(self) -> CategoryStatistics:
        categories = self.extract_categories()
        level1 = sum(1 for category in categories if category.level == 1)
        level2 = len(categories) - level1
        return CategoryStatistics(
            total=len(categories),
            level1=level1,
            level2=level2,
            breakdown={
                "product_categories": level1,
                "product_types": level2,
            },
        )

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Asbis API cache cleared")

    def evict_expired(self) -> int:
        removed = self.cache.evict_expired()
        if removed:
            logger.info("Evicted %s expired Asbis cache entries", removed)
        return removed


def category_vendor_id(category: str, product_type: Optional[str] = None) -> str:
    """Vendor id of a category: '<category>' or '<category>|<type>'."""
    if product_type:
        return f"{category}{AsbisKeys.CATEGORY_ID_SEPARATOR}{product_type}"
    return category


_client: Optional[AsbisApiClient] = None


def get_asbis_client() -> AsbisApiClient:
    """
    Dependency returning the process-wide client, so the cache is shared by
    every request and task in this process.
    """
    global _client
    if _client is None:
        from app.factories.asbis_factory import AsbisClientFactory
        _client = AsbisClientFactory.from_settings()
    return _client
