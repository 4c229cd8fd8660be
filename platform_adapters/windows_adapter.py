import os
from pathlib import Path

from .base import PlatformAdapter


class WindowsAdapter(PlatformAdapter):
    name = "windows"

    def user_data_dir(self, app_name: str) -> Path:
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / app_name
        return Path.home() / "AppData" / "Roaming" / app_name
