"""Runtime status labels for instances.

A process supervisor reports transitions here; nothing is persisted, so every
instance reads as stopped after a manager restart.
"""
import logging
import threading
from typing import Dict, Optional

from .models import ServerStatus

logger = logging.getLogger(__name__)


class StatusTracker:
    """Thread-safe map of instance id to its last reported status."""

    def __init__(self):
        self._lock = threading.Lock()
        self._statuses: Dict[str, ServerStatus] = {}

    def get(self, instance_id: str) -> ServerStatus:
        with self._lock:
            return self._statuses.get(instance_id, ServerStatus.STOPPED)

    def set(self, instance_id: str, status: ServerStatus) -> None:
        with self._lock:
            previous = self._statuses.get(instance_id, ServerStatus.STOPPED)
            if status == ServerStatus.STOPPED:
                self._statuses.pop(instance_id, None)
            else:
                self._statuses[instance_id] = status
        if previous != status:
            logger.debug(f"Instance {instance_id}: {previous.value} -> {status.value}")

    def forget(self, instance_id: str) -> None:
        with self._lock:
            self._statuses.pop(instance_id, None)

    def active(self) -> Dict[str, ServerStatus]:
        """Instances whose status is anything other than stopped."""
        with self._lock:
            return dict(self._statuses)

    def reset(self) -> None:
        with self._lock:
            self._statuses.clear()


# Lazy singleton pattern
_tracker_instance: Optional[StatusTracker] = None


def get_status_tracker() -> StatusTracker:
    """Get the process-wide status tracker (lazy initialization)."""
    global _tracker_instance
    if _tracker_instance is None:
        _tracker_instance = StatusTracker()
    return _tracker_instance


def reset_status_tracker() -> None:
    """Reset the global tracker. Useful for testing."""
    global _tracker_instance
    _tracker_instance = None
