"""Protocol for the maintenance work the scheduled tasks delegate to."""
from typing import Optional, Protocol


class MaintenanceServices(Protocol):
    """Contract for the subsystems the built-in tasks operate on.

    The host application supplies one object implementing these methods,
    bound to its own storage and queue handles. The scheduler only decides
    when each method runs.
    """

    def cleanup_tokens(self) -> Optional[int]:
        """Remove expired tokens.

        Returns:
            Number of tokens removed, or None if not counted
        """
        ...

    def refresh_arr_queues(self) -> None:
        """Refresh the cached download queues from the remote services."""
        ...

    def cleanup_images(self) -> Optional[int]:
        """Delete cached images nothing references any more.

        Returns:
            Number of images removed, or None if not counted
        """
        ...
