import requests

from app.constants.sync import SyncLogStatus, SyncStage
from app.core.exceptions import StageFailure
from app.models.catalog import Product
from app.models.sync_log import SyncLog
from app.services.asbis import FullSyncCoordinator, StageFailed, StageSucceeded


class TestStages:
    def test_stage_result_is_logged(self, db, orchestrator):
        result = orchestrator.sync_categories()

        assert result.success is True
        assert result.created == 4
        log = db.query(SyncLog).one()
        assert log.sync_type == SyncStage.CATEGORIES
        assert log.status == SyncLogStatus.SUCCESS
        assert log.records_processed == 4
        assert log.records_created == 4
        assert log.message == result.message

    def test_run_stage_returns_tagged_outcome(self, orchestrator):
        outcome = orchestrator.run_stage(SyncStage.MANUFACTURERS)

        assert isinstance(outcome, StageSucceeded)
        assert outcome.stage == SyncStage.MANUFACTURERS
        assert outcome.result.created == 3

    def test_vendor_outage_becomes_failed_stage(self, db, orchestrator, vendor_session):
        vendor_session.error = requests.ConnectionError("connection refused")

        outcome = orchestrator.run_stage(SyncStage.PRODUCTS)

        assert isinstance(outcome, StageFailed)
        assert isinstance(outcome.error, StageFailure)
        assert outcome.result.success is False
        assert outcome.result.errors == 1
        assert outcome.result.message.startswith("ASBIS_PRODUCTS failed:")
        log = db.query(SyncLog).one()
        assert log.status == SyncLogStatus.FAILED
        assert log.error_message == outcome.result.message

    def test_unexpected_error_becomes_failed_stage(self, orchestrator, monkeypatch):
        def explode():
            raise RuntimeError("boom")

        monkeypatch.setattr(orchestrator.client, "extract_parameters", explode)

        result = orchestrator.sync_parameters()

        assert result.success is False
        assert result.message == "ASBIS_PARAMETERS failed: boom"

    def test_record_errors_keep_stage_successful(self, db, orchestrator):
        # products before categories: nothing resolves
        result = orchestrator.sync_products()

        assert result.success is True
        assert result.total_processed == 3
        assert result.errors == 3
        assert db.query(SyncLog).one().status == SyncLogStatus.SUCCESS


class TestFullSync:
    def test_runs_all_stages_in_order(self, db, orchestrator, vendor_session):
        response = FullSyncCoordinator(orchestrator).run_full_sync()

        assert response.success is True
        assert response.message == "Full Asbis synchronization completed successfully"
        assert list(response.results) == ["categories", "manufacturers", "parameters", "products"]
        assert response.results["categories"].created == 4
        assert response.results["manufacturers"].created == 3
        assert response.results["parameters"].created == 3
        assert response.results["products"].created == 3
        assert response.results["products"].errors == 0

        logged = [log.sync_type for log in db.query(SyncLog).order_by(SyncLog.id)]
        assert logged == list(SyncStage.ORDERED)

    def test_one_vendor_fetch_per_full_sync(self, orchestrator, vendor_session):
        orchestrator.client.get_all_products()

        FullSyncCoordinator(orchestrator).run_full_sync()

        # cache cleared up front, then a single fetch feeds every stage
        assert len(vendor_session.calls) == 2

    def test_stages_share_one_snapshot_when_vendor_changes_mid_run(
        self, db, orchestrator, vendor_session, feed_builder, monkeypatch
    ):
        reconcile_categories = orchestrator._stages[SyncStage.CATEGORIES]

        def categories_then_vendor_change():
            result = reconcile_categories()
            vendor_session.text = feed_builder([{
                "code": "NEW-1",
                "vendor": "Asus",
                "category": "Tablets",
                "description": "Asus tablet",
            }])
            return result

        monkeypatch.setitem(
            orchestrator._stages, SyncStage.CATEGORIES, categories_then_vendor_change
        )

        response = FullSyncCoordinator(orchestrator).run_full_sync()

        assert response.success is True
        assert response.results["manufacturers"].created == 3
        assert response.results["products"].created == 3
        assert response.results["products"].errors == 0
        codes = {product.asbis_id for product in db.query(Product)}
        assert codes == {"NB-001", "NB-002", "MN-001"}
        assert len(vendor_session.calls) == 1

    def test_second_full_sync_is_idempotent(self, orchestrator):
        FullSyncCoordinator(orchestrator).run_full_sync()

        response = FullSyncCoordinator(orchestrator).run_full_sync()

        for result in response.results.values():
            assert result.created == 0
            assert result.updated == 0
            assert result.skipped == result.total_processed

    def test_failed_stage_does_not_stop_later_stages(self, orchestrator, monkeypatch):
        def explode():
            raise RuntimeError("manufacturer feed broken")

        monkeypatch.setattr(orchestrator.client, "extract_manufacturers", explode)

        response = FullSyncCoordinator(orchestrator).run_full_sync()

        assert response.success is False
        assert response.message == "Full Asbis synchronization completed with some errors"
        assert response.results["manufacturers"].success is False
        assert response.results["categories"].success is True
        assert response.results["parameters"].created == 3
        products = response.results["products"]
        assert products.success is True
        assert products.created == 0
        assert products.errors == 3

    def test_vendor_outage_fails_every_stage(self, orchestrator, vendor_session):
        vendor_session.status_code = 503

        response = FullSyncCoordinator(orchestrator).run_full_sync()

        assert response.success is False
        assert all(not result.success for result in response.results.values())
