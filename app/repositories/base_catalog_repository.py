"""
Base repository for catalog entities reconciled against the vendor.

Provides the lookups every reconciler needs (by vendor key, counts,
duplicate detection) once, keyed on the column named by ``vendor_key``.
"""
from typing import Generic, List, Optional, Set, Tuple, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.catalog import Category, Manufacturer, Parameter, Product

T = TypeVar('T', Category, Manufacturer, Parameter, Product)


class BaseCatalogRepository(Generic[T]):
    """
    Base repository providing vendor-key operations for catalog models.

    Subclasses must define:
        - model_class: The SQLAlchemy model class
        - vendor_key: Name of the column holding the vendor identifier

    Example:
        class ManufacturerRepository(BaseCatalogRepository[Manufacturer]):
            model_class = Manufacturer
            vendor_key = "asbis_id"
    """

    model_class: Type[T] = None  # Must be set by subclass
    vendor_key: str = "asbis_id"

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        if self.model_class is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define model_class attribute"
            )

    @property
    def _key_column(self):
        return getattr(self.model_class, self.vendor_key)

    def get_by_vendor_id(self, vendor_id: Optional[str]) -> Optional[T]:
        """
        Get the entity linked to a vendor identifier.

        Args:
            vendor_id: Vendor identifier; None never matches

        Returns:
            Oldest matching entity or None if not found
        """
        if vendor_id is None:
            return None
        return self.db.query(self.model_class).filter(
            self._key_column == vendor_id
        ).order_by(self.model_class.id).first()

    def get(self, entity_id: int) -> Optional[T]:
        return self.db.query(self.model_class).filter(
            self.model_class.id == entity_id
        ).first()

    def add(self, entity: T) -> T:
        """Stage a new entity in the session and assign its primary key."""
        self.db.add(entity)
        self.db.flush()
        return entity

    def count(self) -> int:
        return self.db.query(self.model_class).count()

    def count_linked(self) -> int:
        """Number of entities carrying a vendor identifier."""
        return self.db.query(self.model_class).filter(
            self._key_column.isnot(None)
        ).count()

    def vendor_ids(self) -> Set[str]:
        rows = self.db.query(self._key_column).filter(
            self._key_column.isnot(None)
        ).all()
        return {row[0] for row in rows}

    def list_linked(self) -> List[T]:
        return self.db.query(self.model_class).filter(
            self._key_column.isnot(None)
        ).order_by(self.model_class.id).all()

    def find_duplicate_vendor_ids(self) -> List[Tuple[str, int]]:
        """
        Find vendor identifiers shared by more than one entity.

        Returns:
            List of (vendor_id, count) tuples ordered by vendor_id
        """
        rows = self.db.query(
            self._key_column, func.count(self.model_class.id)
        ).filter(
            self._key_column.isnot(None)
        ).group_by(
            self._key_column
        ).having(
            func.count(self.model_class.id) > 1
        ).order_by(self._key_column).all()
        return [(vendor_id, count) for vendor_id, count in rows]
