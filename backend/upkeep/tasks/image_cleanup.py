"""Image cleanup job - deletes cached images that are no longer referenced."""
import logging
from datetime import datetime, timezone

from upkeep.services.maintenance_protocol import MaintenanceServices


logger = logging.getLogger(__name__)


def make_image_cleanup_job(services: MaintenanceServices):
    """Bind the image cleanup job to the maintenance services."""

    def image_cleanup_job():
        """
        Remove cached images with no remaining references.

        Runs daily by default; this can take a while on large libraries,
        which only delays this job's own next run.
        """
        logger.info("Starting image cleanup job...")
        start_time = datetime.now(timezone.utc)

        try:
            removed = services.cleanup_images()
        except Exception as e:
            logger.error("Image cleanup job failed: %s", e)
            raise

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(
            "Image cleanup completed: %d images removed in %.2f seconds",
            removed or 0, duration
        )

    return image_cleanup_job
