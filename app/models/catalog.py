"""
Catalog models touched by the Asbis synchronization.

Each entity carries a nullable vendor key (``asbis_id`` / ``asbis_key``) used as
the reconciliation key. The key is not unique at the database
level: duplicates are reported by the integrity check instead of rejected.
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, utc_now


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    asbis_id = Column(String(500), index=True, nullable=True)
    asbis_code = Column(String(500), nullable=True)
    category_path = Column(String(1000), nullable=True)
    name_bg = Column(String(255), nullable=False)
    name_en = Column(String(255), nullable=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    show = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    parent = relationship("Category", remote_side=[id], backref="children")

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id = Column(Integer, primary_key=True, index=True)
    asbis_id = Column(String(255), index=True, nullable=True)
    asbis_code = Column(String(255), nullable=True)
    name = Column(String(255), index=True, nullable=False)
    information_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class Parameter(Base):
    __tablename__ = "parameters"

    id = Column(Integer, primary_key=True, index=True)
    asbis_key = Column(String(500), index=True, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    name_bg = Column(String(500), nullable=False)
    name_en = Column(String(500), nullable=True)
    order = Column(Integer, default=0)

    category = relationship("Category")
    options = relationship(
        "ParameterOption",
        back_populates="parameter",
        order_by="ParameterOption.order",
        cascade="all, delete-orphan",
    )

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class ParameterOption(Base):
    __tablename__ = "parameter_options"

    id = Column(Integer, primary_key=True, index=True)
    parameter_id = Column(Integer, ForeignKey("parameters.id"), nullable=False, index=True)
    name_bg = Column(Text, nullable=False)
    name_en = Column(Text, nullable=True)
    order = Column(Integer, default=0)

    parameter = relationship("Parameter", back_populates="options")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(255), index=True, nullable=True)
    asbis_id = Column(String(255), index=True, nullable=True)
    asbis_code = Column(String(255), nullable=True)
    asbis_part_number = Column(String(255), nullable=True)
    reference_number = Column(String(255), nullable=True)
    name_bg = Column(Text, nullable=True)
    name_en = Column(Text, nullable=True)
    model = Column(String(500), nullable=True)
    status = Column(String(50), nullable=True)
    show = Column(Boolean, default=True)
    primary_image_url = Column(String(1000), nullable=True)
    additional_images = Column(JSON, default=list)

    # Curated locally, never written by the sync
    price_client = Column(Numeric(12, 2), nullable=True)
    discount = Column(Numeric(5, 2), nullable=True)

    manufacturer_id = Column(Integer, ForeignKey("manufacturers.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    manufacturer = relationship("Manufacturer")
    category = relationship("Category")
    product_parameters = relationship(
        "ProductParameter",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class ProductParameter(Base):
    __tablename__ = "product_parameters"
    __table_args__ = (
        UniqueConstraint("product_id", "parameter_id", name="uq_product_parameter"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    parameter_id = Column(Integer, ForeignKey("parameters.id"), nullable=False)
    option_id = Column(Integer, ForeignKey("parameter_options.id"), nullable=False)

    product = relationship("Product", back_populates="product_parameters")
    parameter = relationship("Parameter")
    option = relationship("ParameterOption")
