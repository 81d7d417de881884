"""Arr queue refresh job - pulls current download queues from the remote services."""
import logging
from datetime import datetime, timezone

from upkeep.services.maintenance_protocol import MaintenanceServices


logger = logging.getLogger(__name__)


def make_arr_queue_refresh_job(services: MaintenanceServices):
    """Bind the queue refresh job to the maintenance services."""

    def arr_queue_refresh_job():
        logger.debug("Starting arr queue refresh job...")
        start_time = datetime.now(timezone.utc)

        try:
            services.refresh_arr_queues()
        except Exception as e:
            logger.error("Arr queue refresh job failed: %s", e)
            raise

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.debug("Arr queue refresh completed in %.2fs", duration)

    return arr_queue_refresh_job
