from pathlib import Path

from .base import PlatformAdapter


class MacOSAdapter(PlatformAdapter):
    name = "macos"

    def user_data_dir(self, app_name: str) -> Path:
        return Path.home() / "Library/Application Support" / app_name
