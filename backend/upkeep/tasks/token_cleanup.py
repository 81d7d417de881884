"""Token cleanup job - removes expired tokens."""
import logging
from datetime import datetime, timezone

from upkeep.services.maintenance_protocol import MaintenanceServices


logger = logging.getLogger(__name__)


def make_token_cleanup_job(services: MaintenanceServices):
    """Bind the token cleanup job to the maintenance services."""

    def token_cleanup_job():
        """
        Clean up expired tokens.

        Errors are logged and re-raised so the scheduler counts the failed run.
        """
        logger.debug("Starting token cleanup job...")
        start_time = datetime.now(timezone.utc)

        try:
            removed = services.cleanup_tokens()
        except Exception as e:
            logger.error("Token cleanup job failed: %s", str(e))
            raise

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        if removed:
            logger.info(
                "Token cleanup completed: %d tokens removed in %.2f seconds",
                removed, duration
            )
        else:
            logger.debug("Token cleanup completed in %.2f seconds", duration)

    return token_cleanup_job
