import requests

from app.constants.sync import IntegrityStatus, SyncStage
from app.models.catalog import Category, Manufacturer, Product
from app.schemas.asbis import SyncResult
from app.repositories import SyncLogRepository
from app.services.asbis import AsbisApiClient, AsbisStatsService, FullSyncCoordinator
from app.services.asbis.stats import normalize_limit
from tests.conftest import BASE_URL


def stats_for(db, client):
    return AsbisStatsService(db, client)


def write_logs(db, count, stage=SyncStage.PRODUCTS):
    repo = SyncLogRepository(db)
    for index in range(count):
        repo.create_from_result(stage, SyncResult(success=True, message=f"run {index}"))


class TestLedger:
    def test_normalize_limit(self):
        assert normalize_limit(None) == 20
        assert normalize_limit(0) == 20
        assert normalize_limit(-5) == 20
        assert normalize_limit(7) == 7

    def test_recent_logs_default_to_twenty_newest_first(self, db, asbis_client):
        write_logs(db, 25)

        logs = stats_for(db, asbis_client).get_recent_sync_logs()

        assert len(logs) == 20
        assert logs[0].message == "run 24"

    def test_recent_logs_honour_limit(self, db, asbis_client):
        write_logs(db, 5)

        assert len(stats_for(db, asbis_client).get_recent_sync_logs(3)) == 3

    def test_last_sync_result_per_stage(self, db, asbis_client):
        repo = SyncLogRepository(db)
        repo.create_from_result(SyncStage.CATEGORIES, SyncResult(success=True, message="first"))
        repo.create_from_result(
            SyncStage.CATEGORIES,
            SyncResult(success=True, message="second", created=2, error_details=["a", "b"]),
        )
        service = stats_for(db, asbis_client)

        last = service.get_last_sync_result(SyncStage.CATEGORIES)

        assert last.message == "second"
        assert last.created == 2
        assert last.error_details == ["a", "b"]
        assert service.get_last_sync_result(SyncStage.PRODUCTS) is None

    def test_failed_log_reports_error_message(self, db, asbis_client):
        SyncLogRepository(db).create_from_result(
            SyncStage.PRODUCTS, SyncResult.failure("ASBIS_PRODUCTS failed: timeout")
        )

        last = stats_for(db, asbis_client).get_last_sync_result(SyncStage.PRODUCTS)

        assert last.success is False
        assert last.message == "ASBIS_PRODUCTS failed: timeout"

    def test_multiline_error_details_round_trip(self, db, asbis_client):
        details = [
            "P-1: (sqlite3.IntegrityError) NOT NULL constraint failed\n[SQL: INSERT INTO products]",
            "P-2: category 'sub:Phones:Android' is not synced",
        ]
        SyncLogRepository(db).create_from_result(
            SyncStage.PRODUCTS,
            SyncResult(success=True, message="done", errors=2, error_details=details),
        )
        service = stats_for(db, asbis_client)

        last = service.get_last_sync_result(SyncStage.PRODUCTS)

        assert last.errors == 2
        assert last.error_details == details
        assert service.get_recent_sync_logs()[0].error_details == details

    def test_log_without_details_reads_as_empty_list(self, db, asbis_client):
        SyncLogRepository(db).create_from_result(
            SyncStage.CATEGORIES, SyncResult(success=True, message="ok")
        )

        entry = stats_for(db, asbis_client).get_recent_sync_logs()[0]

        assert entry.error_details == []


class TestAggregates:
    def test_stats_count_local_and_vendor_entities(self, db, orchestrator, asbis_client):
        db.add(Manufacturer(name="Local brand"))
        db.commit()
        FullSyncCoordinator(orchestrator).run_full_sync()

        stats = stats_for(db, asbis_client).get_asbis_sync_stats()

        assert stats.local.total_manufacturers == 4
        assert stats.local.asbis_manufacturers == 3
        assert stats.local.asbis_categories == 4
        assert stats.local.asbis_products == 3
        assert stats.api.available_products == 3
        assert stats.api.available_categories == 4
        assert stats.api.available_parameters == 3
        assert stats.api_error is None

    def test_stats_survive_vendor_outage(self, db, asbis_client, vendor_session):
        vendor_session.error = requests.ConnectionError("down")

        stats = stats_for(db, asbis_client).get_asbis_sync_stats()

        assert stats.api is None
        assert stats.api_error == "Could not connect to API"

    def test_status_includes_last_results(self, db, orchestrator, asbis_client):
        orchestrator.sync_categories()

        status = stats_for(db, asbis_client).get_asbis_sync_status()

        assert status.enabled is True
        assert status.connected is True
        assert status.last_sync_time is not None
        assert status.last_results[SyncStage.CATEGORIES].created == 4
        assert status.last_results[SyncStage.PRODUCTS] is None
        assert len(status.recent_logs) == 1

    def test_api_info(self, db, asbis_client):
        info = stats_for(db, asbis_client).get_api_info()

        assert info.connected is True
        assert info.base_url == asbis_client.base_url
        assert info.cache_timeout_minutes == 5
        assert info.last_cache_refresh is not None
        assert info.availability.available_manufacturers == 3


class TestDiscovery:
    def test_available_categories_flag_synced(self, db, asbis_client):
        db.add(Category(asbis_id="main:Notebooks", name_bg="Notebooks", slug="notebooks"))
        db.commit()

        categories = stats_for(db, asbis_client).get_available_categories()

        synced = {c.asbis_id: c.synced for c in categories}
        assert synced == {
            "main:Notebooks": True,
            "sub:Notebooks:Business": False,
            "sub:Notebooks:Gaming": False,
            "main:Monitors": False,
        }
        assert categories[1].asbis_code == "Notebooks|Business"
        assert categories[1].parent == "Notebooks"

    def test_available_manufacturers_match_case_insensitively(self, db, asbis_client):
        db.add(Manufacturer(name="LENOVO"))
        db.commit()

        manufacturers = stats_for(db, asbis_client).get_available_manufacturers()

        assert [m.name for m in manufacturers] == ["Dell", "HP", "Lenovo"]
        assert [m.synced for m in manufacturers] == [False, False, True]


class TestIntegrity:
    def test_clean_database(self, db, asbis_client):
        report = stats_for(db, asbis_client).check_data_integrity()

        assert report.status == IntegrityStatus.OK
        assert report.message == "No data integrity issues found"
        assert report.snapshot_checked is False

    def test_reports_duplicates_without_merging(self, db, asbis_client):
        db.add_all([
            Product(asbis_id="NB-001", category_id=1, manufacturer_id=1, price_client=10),
            Product(asbis_id="NB-001", category_id=1, manufacturer_id=1, price_client=10),
        ])
        db.commit()

        report = stats_for(db, asbis_client).check_data_integrity()

        assert report.status == IntegrityStatus.ISSUES_FOUND
        assert report.duplicate_products == 1
        assert report.duplicates[0].vendor_id == "NB-001"
        assert report.duplicates[0].count == 2
        assert "1 duplicated vendor ids" in report.message
        assert db.query(Product).count() == 2

    def test_incomplete_products_are_counted(self, db, asbis_client):
        db.add_all([
            Product(asbis_id="X-1"),
            Product(sku="LOCAL-ONLY"),
        ])
        db.commit()

        report = stats_for(db, asbis_client).check_data_integrity()

        assert report.products_without_category == 1
        assert report.products_without_manufacturer == 1
        assert report.products_without_price == 1
        assert report.message == (
            "1 products without category; 1 products without manufacturer; "
            "1 products without price"
        )

    def test_products_missing_from_fetched_feed(self, db, asbis_client, vendor_session):
        db.add(Product(asbis_id="GONE-1", category_id=1, manufacturer_id=1, price_client=5))
        db.commit()
        asbis_client.get_all_products()

        report = stats_for(db, asbis_client).check_data_integrity()

        assert report.snapshot_checked is True
        assert report.products_missing_from_feed == ["GONE-1"]
        assert len(vendor_session.calls) == 1

    def test_missing_products_reported_after_cache_expiry(self, db, vendor_session):
        now = [0.0]
        client = AsbisApiClient(
            base_url=BASE_URL, username="user", password="secret",
            session=vendor_session, cache_ttl_seconds=300, clock=lambda: now[0],
        )
        db.add(Product(asbis_id="GONE-1", category_id=1, manufacturer_id=1, price_client=5))
        db.commit()
        client.get_all_products()
        now[0] = 301.0

        report = stats_for(db, client).check_data_integrity()

        assert report.snapshot_checked is True
        assert report.products_missing_from_feed == ["GONE-1"]
        assert len(vendor_session.calls) == 1

    def test_unpriced_synced_products_are_flagged(self, db, orchestrator, asbis_client):
        FullSyncCoordinator(orchestrator).run_full_sync()

        report = stats_for(db, asbis_client).check_data_integrity()

        assert report.status == IntegrityStatus.ISSUES_FOUND
        assert report.products_without_price == 3
        assert report.products_without_category == 0
        assert report.products_missing_from_feed == []
