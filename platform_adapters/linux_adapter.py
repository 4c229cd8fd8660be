import os
from pathlib import Path

from .base import PlatformAdapter


class LinuxAdapter(PlatformAdapter):
    name = "linux"

    def user_data_dir(self, app_name: str) -> Path:
        xdg = os.environ.get("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
        return base / app_name
