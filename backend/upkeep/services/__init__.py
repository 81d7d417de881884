"""External services the scheduled tasks run against."""
from upkeep.services.maintenance_protocol import MaintenanceServices

__all__ = ["MaintenanceServices"]
