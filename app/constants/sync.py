"""Constants for sync operations."""


class SyncStage:
    """Stage keys under which sync results are logged."""
    CATEGORIES = "ASBIS_CATEGORIES"
    MANUFACTURERS = "ASBIS_MANUFACTURERS"
    PARAMETERS = "ASBIS_PARAMETERS"
    PRODUCTS = "ASBIS_PRODUCTS"

    # Full-sync execution order; each stage resolves keys created by earlier ones
    ORDERED = (CATEGORIES, MANUFACTURERS, PARAMETERS, PRODUCTS)

    # Keys used in the full-sync response body
    RESULT_KEYS = {
        CATEGORIES: "categories",
        MANUFACTURERS: "manufacturers",
        PARAMETERS: "parameters",
        PRODUCTS: "products",
    }

    PREFIX = "ASBIS"


class SyncLogStatus:
    """Sync log status constants."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class SyncAction:
    """Per-record reconciliation outcomes."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ERROR = "error"


class IntegrityStatus:
    """Data integrity report status constants."""
    OK = "OK"
    ISSUES_FOUND = "ISSUES_FOUND"
    ERROR = "ERROR"


class ProductStatus:
    """Product availability constants."""
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class AsbisKeys:
    """Prefixes and defaults for vendor identifiers stored locally."""
    MAIN_CATEGORY_PREFIX = "main:"
    SUB_CATEGORY_PREFIX = "sub:"
    CATEGORY_PATH_SEPARATOR = " / "
    CATEGORY_ID_SEPARATOR = "|"
    SLUG_SUFFIX = "-asbis"
    PARAMETER_ORDER = 50
    RECENT_LOGS_LIMIT = 20
    STATUS_LOGS_LIMIT = 10


class ColumnLimits:
    """Column widths enforced before writing vendor data."""
    CATEGORY_ID = 500
    MANUFACTURER_NAME = 255
    PRODUCT_MODEL = 500
    PARAMETER_KEY = 500
