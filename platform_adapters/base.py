from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import psutil


class PlatformAdapter(ABC):
    """Abstract base class for platform-specific lookups."""

    name: str = "unknown"

    @abstractmethod
    def user_data_dir(self, app_name: str) -> Path:
        """Return user data directory."""
        raise NotImplementedError

    def system_info(self) -> Dict[str, Any]:
        """Return memory figures used to size instance allocations."""
        mem = psutil.virtual_memory()
        return {
            "platform": self.name,
            "cpu_count": psutil.cpu_count(),
            "memory_total_mb": mem.total // (1024 * 1024),
            "memory_available_mb": mem.available // (1024 * 1024),
        }
