"""Per-OS lookups for where MCI keeps its data and how much memory the host has."""
from typing import Dict, Optional, Type

from .base import PlatformAdapter
from .windows_adapter import WindowsAdapter
from .linux_adapter import LinuxAdapter
from .macos_adapter import MacOSAdapter
from mci_core.platform import get_os_name

ADAPTERS: Dict[str, Type[PlatformAdapter]] = {
    "windows": WindowsAdapter,
    "linux": LinuxAdapter,
    "macos": MacOSAdapter,
}

_adapter: Optional[PlatformAdapter] = None


def get_adapter() -> PlatformAdapter:
    """Adapter for the running OS, created on first use.

    Raises:
        NotImplementedError: If the OS has no adapter.
    """
    global _adapter
    if _adapter is None:
        os_name = get_os_name()
        adapter_cls = ADAPTERS.get(os_name)
        if adapter_cls is None:
            raise NotImplementedError(f"OS '{os_name}' is not supported")
        _adapter = adapter_cls()
    return _adapter


def reset_adapter() -> None:
    global _adapter
    _adapter = None


__all__ = [
    "ADAPTERS",
    "PlatformAdapter",
    "WindowsAdapter",
    "LinuxAdapter",
    "MacOSAdapter",
    "get_adapter",
    "reset_adapter",
]
