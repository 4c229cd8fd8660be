"""Platform detection utilities.

Kept free of imports from other MCI modules so that platform_adapters can
depend on it without a cycle.
"""
import platform


def get_os_name() -> str:
    """Return normalized OS name: 'windows', 'linux', or 'macos'."""
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    return system
