"""Full Asbis synchronization: every stage, in dependency order."""

import logging
import time
from typing import Dict

from app.constants.sync import SyncStage
from app.schemas.asbis import FullSyncResponse, SyncResult
from app.services.asbis.orchestrator import AsbisSyncOrchestrator, StageFailed

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Full Asbis synchronization completed successfully"
PARTIAL_MESSAGE = "Full Asbis synchronization completed with some errors"


class FullSyncCoordinator:
    """
    Clears the vendor cache and runs categories, manufacturers, parameters
    and products in that order. Products resolve the keys written by the
    three earlier stages, so the order is fixed. A failed stage does not stop
    the ones after it.
    """

    def __init__(self, orchestrator: AsbisSyncOrchestrator):
        self.orchestrator = orchestrator

    def run_full_sync(self, clear_cache: bool = True) -> FullSyncResponse:
        """
        Args:
            clear_cache: Drop the cached snapshot first. Callers that have
                just fetched a fresh snapshot pass False to reuse it.
        """
        logger.info("=== STARTING full Asbis synchronization ===")
        started = time.monotonic()

        if clear_cache:
            self.orchestrator.client.clear_cache()

        results: Dict[str, SyncResult] = {}
        failed_stages = []
        for stage in SyncStage.ORDERED:
            outcome = self.orchestrator.run_stage(stage)
            results[SyncStage.RESULT_KEYS[stage]] = outcome.result
            if isinstance(outcome, StageFailed) or not outcome.result.success:
                failed_stages.append(stage)

        total_duration_ms = int((time.monotonic() - started) * 1000)
        success = not failed_stages
        if success:
            logger.info("=== Full Asbis synchronization finished in %sms ===", total_duration_ms)
        else:
            logger.warning(
                "=== Full Asbis synchronization finished with failed stages %s in %sms ===",
                ", ".join(failed_stages), total_duration_ms,
            )

        return FullSyncResponse(
            success=success,
            message=SUCCESS_MESSAGE if success else PARTIAL_MESSAGE,
            results=results,
            total_duration_ms=total_duration_ms,
        )
