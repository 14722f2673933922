"""
Shared fixtures: an in-memory database, a fake Asbis HTTP session serving a
small product feed, and a TestClient wired to both.
"""
import copy
from xml.sax.saxutils import escape, quoteattr

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.services.asbis import AsbisApiClient, AsbisSyncOrchestrator, get_asbis_client

BASE_URL = "https://asbis.test/product/bg/714"

SAMPLE_PRODUCTS = [
    {
        "code": "NB-001",
        "vendor": "Lenovo",
        "category": "Notebooks",
        "type": "Business",
        "description": "Lenovo ThinkPad E14",
        "image": "https://img.test/nb-001.jpg",
        "images": ["https://img.test/nb-001-1.jpg", "https://img.test/nb-001-2.jpg"],
        "attributes": {"RAM": "16GB", "CPU": "Intel Core i5"},
    },
    {
        "code": "NB-002",
        "vendor": "HP",
        "category": "Notebooks",
        "type": "Gaming",
        "description": "HP Victus 15",
        "image": "https://img.test/nb-002.jpg",
        "images": [],
        "attributes": {"RAM": "32GB"},
    },
    {
        "code": "MN-001",
        "vendor": "Dell",
        "category": "Monitors",
        "type": None,
        "description": "Dell P2723QE",
        "image": None,
        "images": [],
        "attributes": {"Size": "27in"},
    },
]


def build_feed(products):
    """Render product dicts as an Asbis ProductList.xml document."""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', "<ProductCatalog>"]
    for product in products:
        parts.append("<Product>")
        for tag, key in (
            ("ProductCode", "code"),
            ("Vendor", "vendor"),
            ("ProductType", "type"),
            ("ProductCategory", "category"),
            ("ProductDescription", "description"),
            ("Image", "image"),
        ):
            if product.get(key) is not None:
                parts.append(f"<{tag}>{escape(product[key])}</{tag}>")
        if product.get("attributes"):
            parts.append("<AttrList>")
            for name, value in product["attributes"].items():
                parts.append(f"<element Name={quoteattr(name)} Value={quoteattr(value)} />")
            parts.append("</AttrList>")
        if product.get("images"):
            parts.append("<Images>")
            parts.extend(f"<Image>{escape(url)}</Image>" for url in product["images"])
            parts.append("</Images>")
        parts.append("</Product>")
    parts.append("</ProductCatalog>")
    return "\n".join(parts)


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400


class FakeVendorSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, text, status_code=200, error=None):
        self.text = text
        self.status_code = status_code
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text, self.status_code)


@pytest.fixture
def sample_products():
    return copy.deepcopy(SAMPLE_PRODUCTS)


@pytest.fixture
def feed_builder():
    return build_feed


@pytest.fixture
def vendor_session(sample_products):
    return FakeVendorSession(build_feed(sample_products))


@pytest.fixture
def asbis_client(vendor_session):
    return AsbisApiClient(
        base_url=BASE_URL,
        username="user",
        password="secret",
        timeout=5,
        session=vendor_session,
    )


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def orchestrator(db, asbis_client):
    return AsbisSyncOrchestrator(db, asbis_client, batch_size=2)


@pytest.fixture
def client(db, asbis_client):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asbis_client] = lambda: asbis_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
